from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = [
    "ChallengeAnswerRequest",
    "ChallengeGradePayload",
    "ChallengeQuestionPayload",
    "DailyChallengePayload",
    "PushFoldAnalysisPayload",
    "PushFoldRequest",
    "PushFoldResultPayload",
    "RangeStatsPayload",
    "RangeSummaryPayload",
    "RangeTablePayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PushFoldRequest(_APIModel):
    hand: str | None = None
    hero_cards: list[str] | None = Field(default=None, alias="heroCards")
    hero_stack_bb: float = Field(..., alias="heroStackBB", gt=0)
    villain_stacks_bb: list[float] | None = Field(default=None, alias="villainStacksBB")
    hero_position: str = Field(..., alias="heroPosition")
    num_players: int = Field(default=2, alias="numPlayers")
    training_mode: Literal["push", "call"] = Field(default="push", alias="trainingMode")
    opponent_type: str = Field(default="nash", alias="opponentType")
    icm_mode: Literal["chip_ev", "bubble", "asymmetric"] = Field(default="chip_ev", alias="icmMode")
    payouts: list[float] = Field(default_factory=list)
    action: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key in ("heroPosition", "hero_position", "opponentType", "opponent_type"):
            value = cleaned.get(key)
            if isinstance(value, str):
                cleaned[key] = value.strip().lower()
        return cleaned

    @model_validator(mode="after")
    def _check(self) -> PushFoldRequest:
        if self.hand is None and not self.hero_cards:
            raise ValueError("Provide either hand or heroCards")
        if self.villain_stacks_bb is None:
            self.villain_stacks_bb = [self.hero_stack_bb] * (self.num_players - 1)
        return self


class PushFoldAnalysisPayload(_APIModel):
    ev_push: float | None = Field(default=None, alias="evPush")
    ev_call: float | None = Field(default=None, alias="evCall")
    ev_fold: float = Field(..., alias="evFold")
    ev_diff: float = Field(..., alias="evDiff")
    icm_value: float = Field(..., alias="icmValue")
    is_marginal: bool = Field(..., alias="isMarginal")
    marginal_explanation: str | None = Field(default=None, alias="marginalExplanation")


class PushFoldResultPayload(_APIModel):
    hand: str
    correct_action: str = Field(..., alias="correctAction")
    in_range: bool = Field(..., alias="inRange")
    range_size: int = Field(..., alias="rangeSize")
    baseline_range_size: int = Field(..., alias="baselineRangeSize")
    hand_range: list[str] = Field(..., alias="range")
    analysis: PushFoldAnalysisPayload
    is_correct: bool | None = Field(default=None, alias="isCorrect")


class ChallengeQuestionPayload(_APIModel):
    index: int
    hero_cards: list[str] = Field(..., alias="heroCards")
    hand_class: str = Field(..., alias="handClass")
    hero_position: str = Field(..., alias="heroPosition")
    villain_position: str = Field(..., alias="villainPosition")
    scenario: str
    seed: int
    strategy: list[dict[str, Any]] | None = None


class DailyChallengePayload(_APIModel):
    date: str
    seed: int
    questions: list[ChallengeQuestionPayload]


class ChallengeAnswerRequest(_APIModel):
    date: str | None = None
    index: int = Field(..., ge=0)
    action: str


class ChallengeGradePayload(_APIModel):
    index: int
    level: int
    label: str
    action: str
    frequency: float
    best_action: str | None = Field(default=None, alias="bestAction")


class RangeStatsPayload(_APIModel):
    range_percent: float = Field(..., alias="rangePercent")
    combos: float
    avg_equity: float = Field(..., alias="avgEquity")


class RangeSummaryPayload(_APIModel):
    total_hands: int = Field(..., alias="totalHands")
    playable_hands: int = Field(..., alias="playableHands")
    raise_pct: float = Field(..., alias="raisePct")
    call_pct: float = Field(..., alias="callPct")
    fold_pct: float = Field(..., alias="foldPct")
    allin_pct: float = Field(..., alias="allinPct")
    avg_ev: float = Field(..., alias="avgEV")


class RangeTablePayload(_APIModel):
    scenario: str
    key: str
    depth: int | None = None
    stats: RangeStatsPayload
    summary: RangeSummaryPayload
    matrix: list[list[float]]
