from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...core.scenario import ScenarioType

__all__ = [
    "ActionFrequencyPayload",
    "AnalyzedActionPayload",
    "HandActionPayload",
    "HandAnalysisRequest",
    "HandAnalysisResponse",
    "HandHistoryPayload",
    "HandSummaryPayload",
    "PlayerPayload",
    "RecommendationPayload",
    "SpotAnalysisPayload",
    "SpotAnalysisResponse",
    "SpotRequest",
    "StrategyActionPayload",
]

Street = Literal["preflop", "flop", "turn", "river"]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def _card_token(value: object) -> object:
    # {"rank": "A", "suit": "s"} objects are accepted alongside "As" strings.
    if isinstance(value, dict) and "rank" in value and "suit" in value:
        return f"{value['rank']}{value['suit']}"
    return value


class SpotRequest(_APIModel):
    hero_hand: list[str] = Field(..., alias="heroHand")
    board: list[str] = Field(default_factory=list)
    hero_position: str = Field(..., alias="heroPosition")
    villain_position: str | None = Field(default=None, alias="villainPosition")
    street: Street = "preflop"
    pot_size: float = Field(default=6.0, alias="potSize", gt=0)
    stack_size: float = Field(default=100.0, alias="stackSize", gt=0)
    scenario: ScenarioType = ScenarioType.RFI

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key in ("heroHand", "hero_hand", "board"):
            value = cleaned.get(key)
            if isinstance(value, list):
                cleaned[key] = [_card_token(item) for item in value]
        for key in ("heroPosition", "hero_position", "villainPosition", "villain_position"):
            value = cleaned.get(key)
            if isinstance(value, str):
                cleaned[key] = value.strip().upper() or None
        return cleaned

    @model_validator(mode="after")
    def _check_hand(self) -> SpotRequest:
        if len(self.hero_hand) != 2:
            raise ValueError("heroHand needs exactly two cards")
        return self


class ActionFrequencyPayload(_APIModel):
    action: str
    frequency: float
    ev: float


class SpotAnalysisPayload(_APIModel):
    actions: list[ActionFrequencyPayload]
    equity: float
    pot_odds: float = Field(..., alias="potOdds")
    spr: float
    villain_range: float = Field(..., alias="villainRange")
    combos: float
    avg_equity: float = Field(..., alias="avgEquity")
    hand_strength: str = Field(..., alias="handStrength")
    gto_source: Literal["database", "heuristic"] = Field(..., alias="gtoSource")
    board_texture: str | None = Field(default=None, alias="boardTexture")
    villain_range_matrix: list[list[float]] | None = Field(default=None, alias="villainRangeMatrix")


class SpotAnalysisResponse(_APIModel):
    success: bool = True
    analysis: SpotAnalysisPayload


class PlayerPayload(_APIModel):
    name: str
    position: str
    stack: float | None = None
    is_hero: bool = Field(default=False, alias="isHero")

    @model_validator(mode="after")
    def _upper_position(self) -> PlayerPayload:
        self.position = self.position.strip().upper()
        return self


class HandActionPayload(_APIModel):
    player: str
    action: str
    amount: float | None = None


class HandHistoryPayload(_APIModel):
    hero_name: str = Field(..., alias="heroName")
    hero_cards: list[str] = Field(..., alias="heroCards")
    players: list[PlayerPayload]
    preflop: list[HandActionPayload] = Field(default_factory=list)
    flop: list[HandActionPayload] = Field(default_factory=list)
    turn: list[HandActionPayload] = Field(default_factory=list)
    river: list[HandActionPayload] = Field(default_factory=list)
    board: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _coerce_cards(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key in ("heroCards", "hero_cards", "board"):
            value = cleaned.get(key)
            if isinstance(value, list):
                cleaned[key] = [_card_token(item) for item in value]
        return cleaned

    @model_validator(mode="after")
    def _check(self) -> HandHistoryPayload:
        if len(self.hero_cards) != 2:
            raise ValueError("heroCards needs exactly two cards")
        if not self.players:
            raise ValueError("players must not be empty")
        return self

    def street_actions(self) -> list[tuple[Street, list[HandActionPayload]]]:
        return [("preflop", self.preflop), ("flop", self.flop), ("turn", self.turn), ("river", self.river)]


class HandAnalysisRequest(_APIModel):
    hand_history: HandHistoryPayload = Field(..., alias="handHistory")


class RecommendationPayload(_APIModel):
    action: str
    frequency: float
    ev_difference: float = Field(..., alias="evDifference")


class StrategyActionPayload(_APIModel):
    action: str
    frequency: float
    ev: float
    size: float | None = None


class AnalyzedActionPayload(_APIModel):
    street: Street
    player: str
    action: str
    amount: float | None = None
    is_hero: bool = Field(..., alias="isHero")
    scenario: ScenarioType | None = None
    villain_position: str | None = Field(default=None, alias="villainPosition")
    gto_strategy: list[StrategyActionPayload] | None = Field(default=None, alias="gtoStrategy")
    gto_recommendation: str | None = Field(default=None, alias="gtoRecommendation")
    gto_source: Literal["database", "heuristic"] | None = Field(default=None, alias="gtoSource")
    accuracy: float | None = None
    ev_loss_bb: float | None = Field(default=None, alias="evLossBB")
    severity: str | None = None
    severity_label: str | None = Field(default=None, alias="severityLabel")
    analysis: str | None = None
    recommendations: list[RecommendationPayload] | None = None
    board_texture: str | None = Field(default=None, alias="boardTexture")


class HandSummaryPayload(_APIModel):
    total_ev_loss_bb: float = Field(..., alias="totalEvLossBB")
    average_ev_loss_bb: float = Field(..., alias="averageEvLossBB")
    hero_action_count: int = Field(..., alias="heroActionCount")
    scored_actions: int = Field(..., alias="scoredActions")
    perfect_actions: int = Field(..., alias="perfectActions")
    good_actions: int = Field(..., alias="goodActions")
    inaccuracies: int
    mistakes: int
    blunders: int
    overall_rating: str = Field(..., alias="overallRating")


class HandAnalysisResponse(_APIModel):
    success: bool = True
    hand: HandHistoryPayload
    analyzed_actions: list[AnalyzedActionPayload] = Field(..., alias="analyzedActions")
    summary: HandSummaryPayload
