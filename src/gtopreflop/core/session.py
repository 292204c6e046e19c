from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .scoring import EVAnalysis
from .severity import DEFAULT_RATING_BANDS, RatingBands, Severity

__all__ = ["SessionAggregator", "SessionStats", "summarize_analyses"]


@dataclass(frozen=True)
class SessionStats:
    total_ev_loss_bb: float
    average_ev_loss_bb: float
    decisions: int
    perfect_count: int
    good_count: int
    inaccuracy_count: int
    mistake_count: int
    blunder_count: int
    overall_rating: str


@dataclass
class SessionAggregator:
    """Running EV-loss statistics for one session.

    Not thread-safe; a session is expected to be fed by a single caller in
    the order its decisions were scored.
    """

    rating_bands: RatingBands = DEFAULT_RATING_BANDS
    total_ev_loss_bb: float = 0.0
    decisions: int = 0
    counts: dict[Severity, int] = field(default_factory=lambda: {severity: 0 for severity in Severity})

    def add(self, analysis: EVAnalysis) -> None:
        self.counts[analysis.severity] += 1
        self.total_ev_loss_bb += analysis.ev_loss_bb
        self.decisions += 1

    def extend(self, analyses: Iterable[EVAnalysis]) -> None:
        for analysis in analyses:
            self.add(analysis)

    @property
    def average_ev_loss_bb(self) -> float:
        if self.decisions == 0:
            return 0.0
        return self.total_ev_loss_bb / self.decisions

    def stats(self) -> SessionStats:
        average = self.average_ev_loss_bb
        return SessionStats(
            total_ev_loss_bb=round(self.total_ev_loss_bb, 2),
            average_ev_loss_bb=round(average, 2),
            decisions=self.decisions,
            perfect_count=self.counts[Severity.PERFECT],
            good_count=self.counts[Severity.GOOD],
            inaccuracy_count=self.counts[Severity.INACCURACY],
            mistake_count=self.counts[Severity.MISTAKE],
            blunder_count=self.counts[Severity.BLUNDER],
            overall_rating=self.rating_bands.rate(average),
        )


def summarize_analyses(analyses: Iterable[EVAnalysis], rating_bands: RatingBands = DEFAULT_RATING_BANDS) -> SessionStats:
    aggregator = SessionAggregator(rating_bands=rating_bands)
    aggregator.extend(analyses)
    return aggregator.stats()
