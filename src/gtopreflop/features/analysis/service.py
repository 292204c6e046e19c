from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from ...config import EngineConfig
from ...core.actions import action_kind
from ...core.board import BoardTextureClassifier, RankSuitTextureClassifier
from ...core.hands import Card, canonical_hand, parse_board, parse_cards
from ...core.heuristic import HeuristicModel
from ...core.models import GTOStrategy
from ...core.scenario import ActionRecord, DecisionPoint, ScenarioType, classify_scenario
from ...core.scoring import DeviationScorer, EVAnalysis
from ...core.session import SessionAggregator
from ...core.severity import DEFAULT_RATING_BANDS, RatingBands
from ...data.range_loader import RangeResolver, RangeTable, get_repository
from ...data.range_stats import play_matrix, range_stats
from ..concurrency import run_blocking
from .schemas import (
    ActionFrequencyPayload,
    AnalyzedActionPayload,
    HandActionPayload,
    HandAnalysisResponse,
    HandHistoryPayload,
    HandSummaryPayload,
    RecommendationPayload,
    SpotAnalysisPayload,
    SpotRequest,
    StrategyActionPayload,
)

__all__ = ["AnalysisService", "hand_strength_label", "pot_odds"]

logger = logging.getLogger(__name__)

# Typical opening range widths (% of hands) when no table covers the villain.
POSITION_RANGE_PERCENT: Final[dict[str, float]] = {
    "UTG": 12,
    "UTG1": 14,
    "UTG2": 15,
    "LJ": 17,
    "HJ": 20,
    "CO": 27,
    "BTN": 40,
    "SB": 35,
    "BB": 100,
}
_DEFAULT_RANGE_PERCENT = 20.0
_COMBOS_PER_PERCENT = 12.69
_FALLBACK_COMBOS = 248.0
_FALLBACK_AVG_EQUITY = 54.2

BLINDS_BB = 1.5
_POT_ACTIONS = frozenset({"call", "raise", "allin"})
_DEFAULT_STACK_BB = 100.0
_DEFAULT_HERO_POSITION = "BTN"
_DEFAULT_OPENER_VILLAIN = "BB"
_BOARD_SIZE = {"flop": 3, "turn": 4, "river": 5}

_STRENGTH_LABELS: Final[tuple[tuple[float, str], ...]] = (
    (70.0, "Premium"),
    (55.0, "Strong"),
    (45.0, "Playable"),
    (35.0, "Marginal"),
)


def pot_odds(pot_bb: float) -> float:
    """Percent equity needed to call a half-pot bet."""

    return round(1 / (1 + pot_bb / 2) * 100, 1)


def hand_strength_label(equity: float) -> str:
    for floor, label in _STRENGTH_LABELS:
        if equity >= floor:
            return label
    return "Weak"


@dataclass(frozen=True)
class _VillainRange:
    percent: float
    combos: float
    avg_equity: float
    matrix: list[list[float]] | None


class AnalysisService:
    """Single-spot and hand-history analysis over the range tables.

    Spots the tables do not cover are answered by :class:`HeuristicModel`
    and tagged ``heuristic``.  Board texture is best effort: a classifier
    failure is logged and the field left out.
    """

    def __init__(
        self,
        resolver: RangeResolver,
        *,
        scorer: DeviationScorer | None = None,
        heuristic: HeuristicModel | None = None,
        texture: BoardTextureClassifier | None = None,
        rating_bands: RatingBands = DEFAULT_RATING_BANDS,
    ) -> None:
        self.resolver = resolver
        self.heuristic = heuristic or HeuristicModel()
        self.scorer = scorer or DeviationScorer(heuristic=self.heuristic)
        self.texture = texture or RankSuitTextureClassifier()
        self.rating_bands = rating_bands

    @classmethod
    def from_config(cls, config: EngineConfig | None = None) -> AnalysisService:
        cfg = config or EngineConfig.from_env()
        return cls(RangeResolver(get_repository(cfg.ranges_path), cfg.depth_split_bb))

    # ------------------------------------------------------------------ spots
    def analyze_spot(self, request: SpotRequest) -> SpotAnalysisPayload:
        cards = parse_cards(request.hero_hand)
        first, second = cards
        hand = canonical_hand(first, second)

        strategy: GTOStrategy | None = None
        if request.street == "preflop":
            strategy = self.resolver.resolve(
                request.scenario,
                request.hero_position,
                request.villain_position,
                hand,
                request.stack_size,
            )
        villain = self._villain_range(request.villain_position, request.stack_size)

        if strategy is not None and strategy.actions:
            equity = round(strategy.equity, 1)
            payload = SpotAnalysisPayload(
                actions=self._action_frequencies(strategy),
                equity=equity,
                pot_odds=pot_odds(request.pot_size),
                spr=round(request.stack_size / request.pot_size, 1),
                villain_range=villain.percent,
                combos=villain.combos,
                avg_equity=villain.avg_equity,
                hand_strength=hand_strength_label(equity),
                gto_source="database",
            )
        else:
            result = self.heuristic.evaluate(
                (first, second),
                request.hero_position,
                request.villain_position,
                request.pot_size,
                request.stack_size,
            )
            equity = round(result.equity * 100, 1)
            percent = POSITION_RANGE_PERCENT.get(request.villain_position or "", _DEFAULT_RANGE_PERCENT)
            payload = SpotAnalysisPayload(
                actions=self._action_frequencies(result.strategy),
                equity=equity,
                pot_odds=pot_odds(request.pot_size),
                spr=round(request.stack_size / request.pot_size, 1),
                villain_range=percent,
                combos=round(percent * _COMBOS_PER_PERCENT),
                avg_equity=villain.avg_equity,
                hand_strength=hand_strength_label(equity),
                gto_source="heuristic",
            )

        payload.villain_range_matrix = villain.matrix
        if request.street != "preflop":
            payload.board_texture = self.board_texture(parse_board(request.board))
        return payload

    async def analyze_spot_async(self, request: SpotRequest) -> SpotAnalysisPayload:
        return await run_blocking(self.analyze_spot, request)

    def board_texture(self, board: Sequence[Card]) -> str | None:
        if len(board) < 3:
            return None
        try:
            return self.texture.classify(board)
        except Exception:
            logger.warning("Board texture classification failed for %s", " ".join(map(str, board)), exc_info=True)
            return None

    def _villain_range(self, villain_position: str | None, stack_bb: float) -> _VillainRange:
        table: RangeTable | None = None
        if villain_position:
            table = self.resolver.repository.table(
                ScenarioType.RFI, villain_position, self.resolver.depth_for(stack_bb)
            )
        if table is None:
            return _VillainRange(
                percent=POSITION_RANGE_PERCENT.get(villain_position or "", _DEFAULT_RANGE_PERCENT),
                combos=_FALLBACK_COMBOS,
                avg_equity=_FALLBACK_AVG_EQUITY,
                matrix=None,
            )
        stats = range_stats(table.lookup)
        return _VillainRange(
            percent=stats.range_percent,
            combos=stats.combos,
            avg_equity=stats.avg_equity,
            matrix=play_matrix(table.lookup).round(4).tolist(),
        )

    @staticmethod
    def _action_frequencies(strategy: GTOStrategy) -> list[ActionFrequencyPayload]:
        listed = [
            ActionFrequencyPayload(action=entry.action, frequency=round(strategy.fraction(entry), 4), ev=round(entry.ev, 2))
            for entry in strategy.actions
            if entry.frequency > 0
        ]
        return sorted(listed, key=lambda item: item.frequency, reverse=True)

    # ------------------------------------------------------------------ hands
    def analyze_hand(self, history: HandHistoryPayload) -> HandAnalysisResponse:
        first, second = parse_cards(history.hero_cards)
        hero_cards = (first, second)
        hand = canonical_hand(first, second)
        board = tuple(parse_board(history.board))
        positions = {player.name: player.position for player in history.players}
        hero = next((player for player in history.players if player.is_hero), None)
        if hero is None:
            hero = next((player for player in history.players if player.name == history.hero_name), None)
        hero_position = hero.position if hero is not None and hero.position else _DEFAULT_HERO_POSITION
        stack_bb = hero.stack if hero is not None and hero.stack else _DEFAULT_STACK_BB
        preflop = [ActionRecord(item.player, item.action, item.amount) for item in history.preflop]

        aggregator = SessionAggregator(rating_bands=self.rating_bands)
        analyzed: list[AnalyzedActionPayload] = []
        hero_actions = 0
        for street, actions in history.street_actions():
            for index, item in enumerate(actions):
                is_hero = item.player == history.hero_name
                payload = AnalyzedActionPayload(
                    street=street,
                    player=item.player,
                    action=item.action,
                    amount=item.amount,
                    is_hero=is_hero,
                )
                analyzed.append(payload)
                if not is_hero:
                    continue
                hero_actions += 1
                if street != "preflop":
                    visible = board[: _BOARD_SIZE[street]]
                    payload.board_texture = self.board_texture(visible)
                    continue

                classified = classify_scenario(preflop, index, positions)
                villain = classified.villain_position or _DEFAULT_OPENER_VILLAIN
                decision = DecisionPoint(
                    street=street,
                    hero_hand=hero_cards,
                    board=(),
                    hero_position=hero_position,
                    villain_position=villain,
                    pot_size_bb=self._pot_before(history, street, index),
                    effective_stack_bb=stack_bb,
                    facing_bet_bb=(history.preflop[index - 1].amount or 0.0) if index > 0 else 0.0,
                    action_history=tuple(preflop[:index]),
                )
                strategy = self.resolver.resolve(classified.scenario, hero_position, villain, hand, stack_bb)
                analysis = self.scorer.score(item.action, strategy, decision)
                aggregator.add(analysis)
                self._fill(payload, analysis, classified.scenario, villain)

        stats = aggregator.stats()
        summary = HandSummaryPayload(
            total_ev_loss_bb=stats.total_ev_loss_bb,
            average_ev_loss_bb=stats.average_ev_loss_bb,
            hero_action_count=hero_actions,
            scored_actions=stats.decisions,
            perfect_actions=stats.perfect_count,
            good_actions=stats.good_count,
            inaccuracies=stats.inaccuracy_count,
            mistakes=stats.mistake_count,
            blunders=stats.blunder_count,
            overall_rating=stats.overall_rating,
        )
        logger.debug("Analyzed hand for %s", history.hero_name, extra={"hero_actions": hero_actions})
        return HandAnalysisResponse(hand=history, analyzed_actions=analyzed, summary=summary)

    async def analyze_hand_async(self, history: HandHistoryPayload) -> HandAnalysisResponse:
        return await run_blocking(self.analyze_hand, history)

    @staticmethod
    def _pot_before(history: HandHistoryPayload, street: str, index: int) -> float:
        pot = BLINDS_BB
        for name, actions in history.street_actions():
            window: list[HandActionPayload] = actions[:index] if name == street else actions
            pot += sum(
                item.amount
                for item in window
                if item.amount and action_kind(item.action) in _POT_ACTIONS
            )
            if name == street:
                break
        return pot

    @staticmethod
    def _fill(payload: AnalyzedActionPayload, analysis: EVAnalysis, scenario: ScenarioType, villain: str) -> None:
        payload.scenario = scenario
        payload.villain_position = villain
        payload.gto_source = analysis.source
        payload.gto_strategy = [
            StrategyActionPayload(action=entry.action, frequency=entry.frequency, ev=entry.ev, size=entry.size)
            for entry in analysis.strategy.actions
        ]
        payload.gto_recommendation = analysis.gto_recommendation
        payload.accuracy = analysis.action_frequency
        payload.ev_loss_bb = analysis.ev_loss_bb
        payload.severity = analysis.severity.value
        payload.severity_label = analysis.severity.label
        payload.analysis = analysis.analysis
        payload.recommendations = [
            RecommendationPayload(action=rec.action, frequency=rec.frequency, ev_difference=rec.ev_difference)
            for rec in analysis.recommendations
        ]
