"""Opponent-model range adjustments.

These are deliberate approximations: a tight opponent keeps a prefix of the
baseline range and a loose one appends hands outside it, in whatever order a
:class:`HandOrdering` supplies.  Matrix order is the long-standing default;
strength order is the more principled alternative.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from ..core.hands import all_hand_classes, strength_order

__all__ = [
    "OPPONENT_MODELS",
    "Extended",
    "HandOrdering",
    "MatrixOrdering",
    "OpponentModel",
    "StrengthOrdering",
    "Trimmed",
    "Unchanged",
    "opponent_model",
]


class HandOrdering(Protocol):
    name: str

    def hands(self) -> Sequence[str]: ...


class MatrixOrdering:
    name = "matrix"

    def hands(self) -> Sequence[str]:
        return all_hand_classes()


class StrengthOrdering:
    name = "strength"

    def hands(self) -> Sequence[str]:
        return strength_order()


class OpponentModel(Protocol):
    name: str

    def adjust(self, hand_range: Sequence[str], ordering: HandOrdering) -> list[str]: ...


@dataclass(frozen=True)
class Unchanged:
    name: str = "nash"

    def adjust(self, hand_range: Sequence[str], ordering: HandOrdering) -> list[str]:
        return list(hand_range)


@dataclass(frozen=True)
class Trimmed:
    """Keep the first ``fraction`` of the range in its native order."""

    name: str
    fraction: float

    def adjust(self, hand_range: Sequence[str], ordering: HandOrdering) -> list[str]:
        return list(hand_range[: math.floor(len(hand_range) * self.fraction)])


@dataclass(frozen=True)
class Extended:
    """Append ``fraction * len(range)`` outside hands taken in *ordering*."""

    name: str
    fraction: float

    def adjust(self, hand_range: Sequence[str], ordering: HandOrdering) -> list[str]:
        present = set(hand_range)
        extra = [hand for hand in ordering.hands() if hand not in present]
        return [*hand_range, *extra[: math.floor(len(hand_range) * self.fraction)]]


OPPONENT_MODELS: dict[str, OpponentModel] = {
    "nash": Unchanged(),
    "tight": Trimmed(name="tight", fraction=0.7),
    "loose": Extended(name="loose", fraction=0.3),
    "fish": Extended(name="fish", fraction=0.5),
}


def opponent_model(name: str) -> OpponentModel:
    try:
        return OPPONENT_MODELS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown opponent type: {name!r}") from None
