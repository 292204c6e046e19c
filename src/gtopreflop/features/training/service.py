from __future__ import annotations

import datetime as dt
import logging

from ...challenge.generator import ChallengeQuestion, DailyChallengeGenerator, daily_seed, grade_answer
from ...config import EngineConfig
from ...core.hands import canonical_hand, parse_cards
from ...core.scenario import ScenarioType
from ...data.range_loader import DEEP_DEPTH, RangeRepository, RangeResolver, get_repository
from ...data.range_stats import play_matrix, range_stats, summarize
from ...pushfold.resolver import NashPushFoldResolver, PushFoldScenario
from ..concurrency import run_blocking
from .schemas import (
    ChallengeAnswerRequest,
    ChallengeGradePayload,
    ChallengeQuestionPayload,
    DailyChallengePayload,
    PushFoldAnalysisPayload,
    PushFoldRequest,
    PushFoldResultPayload,
    RangeStatsPayload,
    RangeSummaryPayload,
    RangeTablePayload,
)

__all__ = ["TrainingService", "parse_challenge_date"]

logger = logging.getLogger(__name__)


def parse_challenge_date(raw: str | None, *, today: dt.date | None = None) -> dt.date:
    if not raw:
        return today or dt.date.today()
    try:
        return dt.date.fromisoformat(raw)
    except ValueError:
        raise ValueError(f"Invalid challenge date {raw!r}; expected YYYY-MM-DD") from None


def _question_payload(index: int, question: ChallengeQuestion, *, reveal: bool) -> ChallengeQuestionPayload:
    strategy = None
    if reveal:
        strategy = [
            {"action": entry.action, "frequency": entry.frequency, "ev": entry.ev}
            for entry in question.strategy.actions
        ]
    return ChallengeQuestionPayload(
        index=index,
        hero_cards=[str(card) for card in question.hero_cards],
        hand_class=question.hand_class,
        hero_position=question.hero_position,
        villain_position=question.villain_position,
        scenario=question.scenario.value,
        seed=question.seed,
        strategy=strategy,
    )


class TrainingService:
    """Push/fold evaluation, daily challenges and range table summaries."""

    def __init__(
        self,
        repository: RangeRepository,
        *,
        pushfold: NashPushFoldResolver | None = None,
        depth_split_bb: float = 100.0,
    ) -> None:
        self.repository = repository
        self.resolver = RangeResolver(repository, depth_split_bb)
        self.pushfold = pushfold or NashPushFoldResolver()
        self.challenges = DailyChallengeGenerator(self.resolver)

    @classmethod
    def from_config(cls, config: EngineConfig | None = None) -> TrainingService:
        cfg = config or EngineConfig.from_env()
        return cls(
            get_repository(cfg.ranges_path),
            pushfold=NashPushFoldResolver(config=cfg),
            depth_split_bb=cfg.depth_split_bb,
        )

    # ------------------------------------------------------------------ push/fold
    def evaluate_pushfold(self, request: PushFoldRequest) -> PushFoldResultPayload:
        if request.hero_cards:
            first, second = parse_cards(request.hero_cards)
            hand = canonical_hand(first, second)
        else:
            hand = request.hand or ""
        scenario = PushFoldScenario(
            hand=hand,
            hero_stack_bb=request.hero_stack_bb,
            villain_stacks_bb=tuple(request.villain_stacks_bb or ()),
            hero_position=request.hero_position,
            num_players=request.num_players,
            training_mode=request.training_mode,
            opponent_type=request.opponent_type,
            icm_mode=request.icm_mode,
            payouts=tuple(request.payouts),
        )
        result = self.pushfold.evaluate(scenario)
        analysis = result.analysis
        return PushFoldResultPayload(
            hand=hand,
            correct_action=result.correct_action,
            in_range=result.in_range,
            range_size=len(result.adjusted_range),
            baseline_range_size=len(result.baseline_range),
            hand_range=list(result.adjusted_range),
            analysis=PushFoldAnalysisPayload(
                ev_push=analysis.ev_push if analysis.mode == "push" else None,
                ev_call=analysis.ev_call if analysis.mode == "call" else None,
                ev_fold=analysis.ev_fold,
                ev_diff=analysis.ev_diff,
                icm_value=analysis.icm_value,
                is_marginal=analysis.is_marginal,
                marginal_explanation=analysis.marginal_explanation,
            ),
            is_correct=result.is_correct(request.action) if request.action else None,
        )

    async def evaluate_pushfold_async(self, request: PushFoldRequest) -> PushFoldResultPayload:
        return await run_blocking(self.evaluate_pushfold, request)

    # ------------------------------------------------------------------ challenge
    def daily_challenge(self, day: dt.date, *, reveal: bool = False) -> DailyChallengePayload:
        questions = self.challenges.for_date(day)
        return DailyChallengePayload(
            date=day.isoformat(),
            seed=daily_seed(day),
            questions=[_question_payload(idx, question, reveal=reveal) for idx, question in enumerate(questions)],
        )

    async def daily_challenge_async(self, day: dt.date, *, reveal: bool = False) -> DailyChallengePayload:
        return await run_blocking(self.daily_challenge, day, reveal=reveal)

    def grade_challenge(self, request: ChallengeAnswerRequest) -> ChallengeGradePayload:
        day = parse_challenge_date(request.date)
        questions = self.challenges.for_date(day)
        if request.index >= len(questions):
            raise KeyError(f"Challenge {day.isoformat()} has no question {request.index}")
        graded = grade_answer(questions[request.index], request.action)
        return ChallengeGradePayload(
            index=request.index,
            level=graded.level,
            label=graded.label,
            action=graded.action,
            frequency=graded.frequency,
            best_action=graded.best_action,
        )

    async def grade_challenge_async(self, request: ChallengeAnswerRequest) -> ChallengeGradePayload:
        return await run_blocking(self.grade_challenge, request)

    # ------------------------------------------------------------------ ranges
    def range_table(self, scenario: str, key: str, depth: int | None = None) -> RangeTablePayload:
        try:
            scenario_type = ScenarioType(scenario.lower())
        except ValueError:
            raise ValueError(f"Unknown scenario {scenario!r}") from None
        table_key = "_vs_".join(part.strip().upper() for part in key.lower().split("_vs_"))
        table = self.repository.table(scenario_type, table_key, depth if depth is not None else DEEP_DEPTH)
        if table is None:
            logger.debug("Range table miss: %s %s depth=%s", scenario_type.value, table_key, depth)
            raise KeyError(f"No {scenario_type.value} range table for {table_key}")
        stats = range_stats(table.lookup)
        summary = summarize(table.lookup)
        return RangeTablePayload(
            scenario=table.scenario.value,
            key=table.key,
            depth=table.depth,
            stats=RangeStatsPayload(
                range_percent=stats.range_percent,
                combos=stats.combos,
                avg_equity=stats.avg_equity,
            ),
            summary=RangeSummaryPayload(
                total_hands=summary.total_hands,
                playable_hands=summary.playable_hands,
                raise_pct=summary.raise_pct,
                call_pct=summary.call_pct,
                fold_pct=summary.fold_pct,
                allin_pct=summary.allin_pct,
                avg_ev=summary.avg_ev,
            ),
            matrix=play_matrix(table.lookup).round(4).tolist(),
        )
