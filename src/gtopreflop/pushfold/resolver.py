from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from ..config import EngineConfig, feature_enabled
from ..core.hands import TOTAL_CLASSES, hand_strength, is_hand_class, strength_order
from .icm import ApproximateICM, ICMModel
from .nash import NashRangeTable, PushFoldMode
from .opponents import HandOrdering, MatrixOrdering, StrengthOrdering, opponent_model

__all__ = [
    "BLINDS_BB",
    "ICMMode",
    "NashPushFoldResolver",
    "PushFoldEVAnalysis",
    "PushFoldResult",
    "PushFoldScenario",
    "call_ev",
    "push_ev",
]

logger = logging.getLogger(__name__)

ICMMode = Literal["chip_ev", "bubble", "asymmetric"]

BLINDS_BB = 1.5
MARGINAL_DISTANCE = 0.15
PUSHFOLD_POSITIONS = ("btn", "sb", "bb")
ICM_MODES: tuple[ICMMode, ...] = ("chip_ev", "bubble", "asymmetric")
STRENGTH_ORDER_FLAG = "pushfold.strength_order"


@dataclass(frozen=True)
class PushFoldScenario:
    hand: str
    hero_stack_bb: float
    villain_stacks_bb: tuple[float, ...]
    hero_position: str
    num_players: int = 2
    training_mode: PushFoldMode = "push"
    opponent_type: str = "nash"
    icm_mode: ICMMode = "chip_ev"
    payouts: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if not is_hand_class(self.hand):
            raise ValueError(f"Unknown hand class: {self.hand!r}")
        if self.num_players not in (2, 3):
            raise ValueError("num_players must be 2 or 3")
        if self.hero_position not in PUSHFOLD_POSITIONS:
            raise ValueError(f"hero_position must be one of {PUSHFOLD_POSITIONS}")
        if self.training_mode not in ("push", "call"):
            raise ValueError("training_mode must be 'push' or 'call'")
        if self.icm_mode not in ICM_MODES:
            raise ValueError(f"icm_mode must be one of {ICM_MODES}")
        if self.hero_stack_bb <= 0:
            raise ValueError("hero_stack_bb must be positive")
        if len(self.villain_stacks_bb) != self.num_players - 1:
            raise ValueError("villain_stacks_bb needs one stack per opponent")
        if any(stack <= 0 for stack in self.villain_stacks_bb):
            raise ValueError("villain stacks must be positive")
        if any(payout < 0 for payout in self.payouts):
            raise ValueError("payouts cannot be negative")
        opponent_model(self.opponent_type)

    @property
    def shover_position(self) -> str:
        """Seat that moves all-in against a calling hero."""

        return "sb" if self.num_players == 2 else "btn"


@dataclass(frozen=True)
class PushFoldEVAnalysis:
    mode: PushFoldMode
    ev_action: float
    ev_diff: float
    icm_value: float
    is_marginal: bool
    marginal_explanation: str | None = None
    ev_fold: float = 0.0

    @property
    def ev_push(self) -> float:
        return self.ev_action if self.mode == "push" else self.ev_fold

    @property
    def ev_call(self) -> float:
        return self.ev_action if self.mode == "call" else self.ev_fold


@dataclass(frozen=True)
class PushFoldResult:
    scenario: PushFoldScenario
    correct_action: str
    baseline_range: tuple[str, ...]
    adjusted_range: tuple[str, ...]
    analysis: PushFoldEVAnalysis
    villain_push_range: tuple[str, ...] = field(default=())

    @property
    def in_range(self) -> bool:
        return self.scenario.hand in self.adjusted_range

    def is_correct(self, action: str) -> bool:
        chosen = action.strip().lower()
        if chosen in ("shove", "allin", "all-in"):
            chosen = "push"
        return chosen == self.correct_action


def push_ev(strength: int, stack_bb: float, range_size: int) -> float:
    call_freq = min(0.8, max(0.15, range_size / TOTAL_CLASSES * 1.5))
    showdown = strength / 100 * 0.8 + 0.1
    return (1 - call_freq) * BLINDS_BB + call_freq * (showdown * (stack_bb + BLINDS_BB) - (1 - showdown) * stack_bb)


def call_ev(strength: int, stack_bb: float, villain_range_size: int) -> float:
    equity = strength / 100 * 0.9 if villain_range_size > 0 else 0.5
    return equity * (stack_bb * 2 + BLINDS_BB) - (1 - equity) * stack_bb


def _marginal_explanation(hand: str, in_range: bool, ev_diff: float) -> str:
    if in_range:
        if ev_diff < 0.5:
            return (
                f"{hand} sits at the edge of the range. It is +EV but only slightly better "
                f"than folding ({ev_diff:+.2f}BB); consider folding against tighter opponents."
            )
        return f"{hand} is in range but close to the boundary; adjust against tighter opponents."
    if abs(ev_diff) < 0.3:
        return f"{hand} is not in range but very close to the boundary; it can become +EV against looser opponents."
    return f"{hand} is just outside the range. Keep studying close push/fold decisions."


class NashPushFoldResolver:
    """Resolve short-stack push/call spots against approximate Nash ranges.

    Ranges come from :class:`NashRangeTable`, get reshaped by the scenario's
    opponent model and then drive a closed-form EV estimate.  ``ordering``
    and ``icm`` may be swapped for more rigorous strategies; when no ordering
    is given the ``pushfold.strength_order`` feature flag picks one per call.
    """

    def __init__(
        self,
        table: NashRangeTable | None = None,
        *,
        icm: ICMModel | None = None,
        ordering: HandOrdering | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.config = config
        self.table = table or NashRangeTable(config.nash_table_path if config is not None else None)
        self.icm = icm or ApproximateICM()
        self._ordering = ordering

    @property
    def ordering(self) -> HandOrdering:
        if self._ordering is not None:
            return self._ordering
        if feature_enabled(STRENGTH_ORDER_FLAG, self.config):
            return StrengthOrdering()
        return MatrixOrdering()

    def baseline_range(self, scenario: PushFoldScenario) -> list[str]:
        if scenario.training_mode == "call":
            return self.table.call_range(scenario.hero_stack_bb, scenario.hero_position, scenario.num_players)
        return self.table.push_range(scenario.hero_stack_bb, scenario.hero_position, scenario.num_players)

    def adjusted_range(self, scenario: PushFoldScenario, baseline: Sequence[str] | None = None) -> list[str]:
        base = self.baseline_range(scenario) if baseline is None else baseline
        return opponent_model(scenario.opponent_type).adjust(base, self.ordering)

    def evaluate(self, scenario: PushFoldScenario) -> PushFoldResult:
        baseline = self.baseline_range(scenario)
        adjusted = self.adjusted_range(scenario, baseline)
        in_range = scenario.hand in adjusted
        strength = hand_strength(scenario.hand)

        villain_range: list[str] = []
        if scenario.training_mode == "call":
            villain_range = self.table.push_range(
                scenario.hero_stack_bb, scenario.shover_position, scenario.num_players
            )
            ev_action = call_ev(strength, scenario.hero_stack_bb, len(villain_range))
            correct = "call" if in_range else "fold"
        else:
            ev_action = push_ev(strength, scenario.hero_stack_bb, len(adjusted))
            correct = "push" if in_range else "fold"

        ev_diff = ev_action
        rank = strength_order().index(scenario.hand)
        size = len(adjusted)
        marginal = size > 0 and abs(rank - size) / TOTAL_CLASSES < MARGINAL_DISTANCE
        analysis = PushFoldEVAnalysis(
            mode=scenario.training_mode,
            ev_action=round(ev_action, 4),
            ev_diff=round(ev_diff, 4),
            icm_value=round(
                self.icm.value(scenario.hero_stack_bb, scenario.villain_stacks_bb, scenario.payouts), 2
            ),
            is_marginal=marginal,
            marginal_explanation=_marginal_explanation(scenario.hand, in_range, ev_diff) if marginal else None,
        )
        logger.debug(
            "push/fold %s %s %.1fbb -> %s",
            scenario.training_mode,
            scenario.hand,
            scenario.hero_stack_bb,
            correct,
            extra={"range_size": size, "opponent": scenario.opponent_type},
        )
        return PushFoldResult(
            scenario=scenario,
            correct_action=correct,
            baseline_range=tuple(baseline),
            adjusted_range=tuple(adjusted),
            analysis=analysis,
            villain_push_range=tuple(villain_range),
        )
