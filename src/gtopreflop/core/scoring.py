from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from .actions import ACTION_LABELS, normalize_action
from .heuristic import HeuristicModel
from .models import GTOStrategy, StrategyAction, StrategySource
from .scenario import DecisionPoint
from .severity import DEFAULT_SEVERITY_BANDS, Severity, SeverityBands

__all__ = [
    "ACTION_LABELS",
    "DeviationScorer",
    "EVAnalysis",
    "Recommendation",
    "normalize_action",
]

logger = logging.getLogger(__name__)

# Observed action -> table action to use when the table has no entry of its own.
_STAND_INS: Final[dict[str, str]] = {"check": "fold", "allin": "raise", "raise": "allin"}
_FOLD_LIKE: Final[frozenset[str]] = frozenset({"fold", "check"})


@dataclass(frozen=True)
class Recommendation:
    action: str
    frequency: float
    ev_difference: float


@dataclass(frozen=True)
class EVAnalysis:
    """Deviation of one observed action from the resolved strategy.

    Frequencies are percentages regardless of the strategy's scale.
    """

    action: str
    action_frequency: float
    ev_loss_bb: float
    severity: Severity
    recommendations: tuple[Recommendation, ...]
    analysis: str
    source: StrategySource
    strategy: GTOStrategy

    @property
    def gto_recommendation(self) -> str | None:
        return self.recommendations[0].action if self.recommendations else None


class DeviationScorer:
    """Score observed actions against GTO strategies.

    The EV loss is the gap between the best listed EV and the EV of the
    action taken. Fold is the EV-0 baseline, so an unlisted fold (or check)
    is worth 0; any other unlisted action is charged the worst listed EV.
    Spots without a strategy are scored against
    :class:`HeuristicModel` and tagged ``heuristic``.
    """

    def __init__(self, bands: SeverityBands = DEFAULT_SEVERITY_BANDS, heuristic: HeuristicModel | None = None) -> None:
        self.bands = bands
        self.heuristic = heuristic or HeuristicModel()

    def score(self, observed: str, strategy: GTOStrategy | None, decision: DecisionPoint) -> EVAnalysis:
        action = normalize_action(observed)
        if strategy is None or not strategy.actions:
            logger.debug("No table strategy for %s at %s; using heuristic model", decision.hero_position, decision.street)
            strategy = self.heuristic.evaluate(
                decision.hero_hand,
                decision.hero_position,
                decision.villain_position,
                decision.pot_size_bb,
                decision.effective_stack_bb,
            ).strategy
        return self._score(action, strategy)

    def _score(self, action: str, strategy: GTOStrategy) -> EVAnalysis:
        best_ev = max(entry.ev for entry in strategy.actions)
        matched = self._match(action, strategy)
        observed_ev = matched.ev if matched is not None else self._unlisted_ev(action, strategy)
        ev_loss = round(max(0.0, best_ev - observed_ev), 2)
        frequency = self._percent(matched, strategy) if matched is not None else 0.0
        severity = self.bands.classify(ev_loss)

        recommendations = tuple(
            Recommendation(
                action=entry.action,
                frequency=self._percent(entry, strategy),
                ev_difference=round(entry.ev - observed_ev, 2),
            )
            for entry in sorted(strategy.actions, key=lambda e: e.frequency, reverse=True)
            if entry.frequency > 0
        )
        return EVAnalysis(
            action=action,
            action_frequency=frequency,
            ev_loss_bb=ev_loss,
            severity=severity,
            recommendations=recommendations,
            analysis=_analysis_text(action, frequency, severity, recommendations),
            source=strategy.source,
            strategy=strategy,
        )

    @staticmethod
    def _match(action: str, strategy: GTOStrategy) -> StrategyAction | None:
        entry = strategy.action(action)
        if entry is None and action in _STAND_INS:
            entry = strategy.action(_STAND_INS[action])
        return entry

    @staticmethod
    def _unlisted_ev(action: str, strategy: GTOStrategy) -> float:
        if action in _FOLD_LIKE:
            return 0.0
        return min(entry.ev for entry in strategy.actions)

    @staticmethod
    def _percent(entry: StrategyAction, strategy: GTOStrategy) -> float:
        return round(strategy.fraction(entry) * 100, 2)


def _analysis_text(
    action: str,
    frequency: float,
    severity: Severity,
    recommendations: tuple[Recommendation, ...],
) -> str:
    label = ACTION_LABELS[action]
    top = recommendations[0] if recommendations else None
    if severity is Severity.PERFECT:
        return f"Perfect! {label} has {frequency:.0f}% frequency in GTO strategy, optimal choice."
    if severity is Severity.GOOD:
        return f"Good choice. {label} has {frequency:.0f}% frequency, within GTO range."
    if severity is Severity.INACCURACY:
        if top is not None and top.action != action:
            return (
                f"Marginal choice. {label} has only {frequency:.0f}% frequency. "
                f"Consider {ACTION_LABELS.get(top.action, top.action)} ({top.frequency:.0f}%)."
            )
        return f"Marginal choice. {label} has {frequency:.0f}% frequency, room for improvement."
    if severity is Severity.MISTAKE:
        if top is not None:
            return (
                f"Significant deviation. {label} has only {frequency:.0f}% frequency. "
                f"GTO suggests {ACTION_LABELS.get(top.action, top.action)} ({top.frequency:.0f}%)."
            )
        return f"Significant GTO deviation. {label} has {frequency:.0f}% frequency, needs improvement."
    if top is not None:
        return (
            f"Blunder! {label} not in GTO strategy ({frequency:.0f}%). "
            f"Should {ACTION_LABELS.get(top.action, top.action)} ({top.frequency:.0f}%)."
        )
    return f"Blunder! {label} completely deviates from GTO strategy."
