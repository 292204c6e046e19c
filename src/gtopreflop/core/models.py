from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

__all__ = ["StrategyAction", "GTOStrategy", "StrategySource"]

StrategySource = Literal["database", "heuristic"]


@dataclass(frozen=True)
class StrategyAction:
    action: str
    frequency: float
    ev: float
    size: float | None = None


@dataclass(frozen=True)
class GTOStrategy:
    """Mixed strategy for one hand class.

    ``scale`` is what the frequencies of a well-formed entry add up to: 100
    for the bundled range tables, 1.0 for heuristic strategies.
    """

    hand: str
    actions: tuple[StrategyAction, ...]
    scale: float = 100.0
    source: StrategySource = "database"

    def action(self, name: str) -> StrategyAction | None:
        return next((entry for entry in self.actions if entry.action == name), None)

    def frequency_of(self, name: str) -> float:
        entry = self.action(name)
        return entry.frequency if entry is not None else 0.0

    @property
    def total_frequency(self) -> float:
        return sum(entry.frequency for entry in self.actions)

    def fraction(self, entry: StrategyAction) -> float:
        return entry.frequency / self.scale if self.scale else 0.0

    @property
    def play_fraction(self) -> float:
        """Share of the time the hand continues instead of folding."""

        return max(0.0, min(1.0, 1.0 - self.frequency_of("fold") / self.scale))

    @property
    def equity(self) -> float:
        """Rough 0-100 equity proxy from the frequency-weighted EV."""

        weighted_ev = sum(self.fraction(entry) * entry.ev for entry in self.actions)
        return max(0.0, min(100.0, 50.0 + weighted_ev * 5.0))

    def dominant(self) -> StrategyAction | None:
        if not self.actions:
            return None
        return max(self.actions, key=lambda entry: entry.frequency)
