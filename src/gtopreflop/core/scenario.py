from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from .actions import AGGRESSIVE_ACTIONS, action_kind
from .hands import Card

__all__ = [
    "AGGRESSIVE_ACTIONS",
    "DEFAULT_VILLAIN",
    "ActionRecord",
    "DecisionPoint",
    "ScenarioResult",
    "ScenarioType",
    "classify_scenario",
]

DEFAULT_VILLAIN = "BTN"


class ScenarioType(str, Enum):
    RFI = "rfi"
    VS_RFI = "vs_rfi"
    VS_3BET = "vs_3bet"


@dataclass(frozen=True)
class ActionRecord:
    player: str
    action: str
    amount: float | None = None

    @property
    def is_aggressive(self) -> bool:
        return action_kind(self.action) in AGGRESSIVE_ACTIONS


@dataclass(frozen=True)
class ScenarioResult:
    scenario: ScenarioType
    villain_position: str | None


@dataclass(frozen=True)
class DecisionPoint:
    street: str
    hero_hand: tuple[Card, Card]
    board: tuple[Card, ...]
    hero_position: str
    villain_position: str | None
    pot_size_bb: float
    effective_stack_bb: float
    facing_bet_bb: float
    action_history: tuple[ActionRecord, ...]


def classify_scenario(
    actions: Sequence[ActionRecord],
    decision_index: int,
    positions: Mapping[str, str],
) -> ScenarioResult:
    """Classify the spot faced at ``actions[decision_index]``.

    No prior raise is an open (RFI), one is facing a raise, two or more is
    facing a re-raise. Bets and all-ins count as raises. The villain is
    whoever raised last before the decision; when that player has no known
    seat the villain falls back to ``BTN``.
    """

    prior = actions[:decision_index]
    raises = sum(1 for record in prior if record.is_aggressive)
    if raises == 0:
        return ScenarioResult(ScenarioType.RFI, None)
    scenario = ScenarioType.VS_RFI if raises == 1 else ScenarioType.VS_3BET
    return ScenarioResult(scenario, _last_raiser_position(prior, positions))


def _last_raiser_position(prior: Sequence[ActionRecord], positions: Mapping[str, str]) -> str:
    for record in reversed(prior):
        if record.is_aggressive:
            return positions.get(record.player) or DEFAULT_VILLAIN
    return DEFAULT_VILLAIN
