"""Closed-form ICM approximations for short-handed push/fold spots.

Neither model is the recursive Malmuth-Harville calculation; both are cheap
stand-ins behind :class:`ICMModel` so a full implementation can replace them.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

__all__ = [
    "DEFAULT_PRIZE_POOL",
    "ApproximateICM",
    "ChipShareICM",
    "ICMModel",
    "ThreeHandedICM",
    "chip_share",
    "prize_pool",
]

DEFAULT_PRIZE_POOL = 1000.0
_FALLBACK_PAYOUT_SHARES = (0.5, 0.3, 0.2)


class ICMModel(Protocol):
    name: str

    def value(self, hero_stack: float, villain_stacks: Sequence[float], payouts: Sequence[float]) -> float: ...


def chip_share(hero_stack: float, villain_stacks: Sequence[float]) -> float:
    total = hero_stack + sum(villain_stacks)
    if total <= 0:
        raise ValueError("Total chips must be positive")
    return hero_stack / total


def prize_pool(payouts: Sequence[float]) -> float:
    return sum(payouts) or DEFAULT_PRIZE_POOL


class ChipShareICM:
    """Heads-up: equity is the chip share of the prize pool."""

    name = "chip_share"

    def value(self, hero_stack: float, villain_stacks: Sequence[float], payouts: Sequence[float]) -> float:
        return chip_share(hero_stack, villain_stacks) * prize_pool(payouts)


class ThreeHandedICM:
    """``p1 = share``, ``p2 = (1 - share) * 0.4``, ``p3`` takes what is left.

    Missing payouts default to 50/30/20% of the prize pool.
    """

    name = "three_handed"

    def value(self, hero_stack: float, villain_stacks: Sequence[float], payouts: Sequence[float]) -> float:
        share = chip_share(hero_stack, villain_stacks)
        pool = prize_pool(payouts)
        p1 = share
        p2 = (1 - share) * 0.4
        p3 = max(0.0, 1 - p1 - p2)
        places = [
            payouts[idx] if idx < len(payouts) and payouts[idx] else pool * fallback
            for idx, fallback in enumerate(_FALLBACK_PAYOUT_SHARES)
        ]
        return p1 * places[0] + p2 * places[1] + p3 * places[2]


class ApproximateICM:
    """Chip share with one villain, the three-handed form otherwise."""

    name = "approximate"

    def __init__(self) -> None:
        self._heads_up = ChipShareICM()
        self._multiway = ThreeHandedICM()

    def value(self, hero_stack: float, villain_stacks: Sequence[float], payouts: Sequence[float]) -> float:
        model: ICMModel = self._heads_up if len(villain_stacks) == 1 else self._multiway
        return model.value(hero_stack, villain_stacks, payouts)
