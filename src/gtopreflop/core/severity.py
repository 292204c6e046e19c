"""Severity and rating bands for EV-loss scoring.

Both band sets are ordered step functions over an EV loss in big blinds.
The defaults mirror the thresholds the trainer has shipped with; callers
inject their own through :class:`SeverityBands` / :class:`RatingBands`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "DEFAULT_RATING_BANDS",
    "DEFAULT_SEVERITY_BANDS",
    "RatingBands",
    "Severity",
    "SeverityBands",
]


class Severity(str, Enum):
    PERFECT = "perfect"
    GOOD = "good"
    INACCURACY = "inaccuracy"
    MISTAKE = "mistake"
    BLUNDER = "blunder"

    @property
    def label(self) -> str:
        return self.value.capitalize()


_ORDER: tuple[Severity, ...] = tuple(Severity)


@dataclass(frozen=True)
class SeverityBands:
    """Upper EV-loss bounds (inclusive) for every severity but the last."""

    perfect: float = 0.0
    good: float = 0.1
    inaccuracy: float = 0.5
    mistake: float = 1.5

    def __post_init__(self) -> None:
        edges = (self.perfect, self.good, self.inaccuracy, self.mistake)
        if any(later < earlier for earlier, later in zip(edges, edges[1:])):
            raise ValueError(f"Severity thresholds must be non-decreasing: {edges}")

    def classify(self, ev_loss_bb: float) -> Severity:
        edges = (self.perfect, self.good, self.inaccuracy, self.mistake)
        for severity, upper in zip(_ORDER, edges):
            if ev_loss_bb <= upper:
                return severity
        return Severity.BLUNDER


@dataclass(frozen=True)
class RatingBands:
    """Ordered ``(upper bound, label)`` pairs plus a label past the last bound."""

    bands: Sequence[tuple[float, str]] = field(
        default=(
            (0.1, "GTO Master"),
            (0.5, "Excellent"),
            (2.0, "Good"),
            (5.0, "Needs Improvement"),
        )
    )
    floor_label: str = "Keep Practicing"

    def __post_init__(self) -> None:
        bounds = [upper for upper, _ in self.bands]
        if bounds != sorted(bounds):
            raise ValueError(f"Rating bands must be sorted by bound: {bounds}")

    def rate(self, average_ev_loss_bb: float) -> str:
        for upper, label in self.bands:
            if average_ev_loss_bb <= upper:
                return label
        return self.floor_label


DEFAULT_SEVERITY_BANDS = SeverityBands()
DEFAULT_RATING_BANDS = RatingBands()
