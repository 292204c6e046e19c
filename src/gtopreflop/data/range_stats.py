"""13x13 range matrices and summary statistics for range tables."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..core.hands import TOTAL_COMBOS, combo_count, matrix_position
from .range_loader import HandLookup

__all__ = [
    "COMBO_WEIGHTS",
    "RangeStats",
    "RangeSummary",
    "play_matrix",
    "range_stats",
    "summarize",
]


def _combo_weights() -> np.ndarray:
    weights = np.full((13, 13), 12.0)
    weights[np.triu_indices(13, k=1)] = 4.0
    np.fill_diagonal(weights, 6.0)
    return weights


COMBO_WEIGHTS = _combo_weights()


@dataclass(frozen=True)
class RangeStats:
    range_percent: float
    combos: float
    avg_equity: float


@dataclass(frozen=True)
class RangeSummary:
    total_hands: int
    playable_hands: int
    raise_pct: float
    call_pct: float
    fold_pct: float
    allin_pct: float
    avg_ev: float


def play_matrix(lookup: HandLookup) -> np.ndarray:
    """Fraction of the time each hand continues (anything but fold)."""

    matrix = np.zeros((13, 13))
    for strategy in lookup:
        row, col = matrix_position(strategy.hand)
        matrix[row, col] = strategy.play_fraction
    return matrix


def _equity_matrix(lookup: HandLookup) -> np.ndarray:
    matrix = np.zeros((13, 13))
    for strategy in lookup:
        row, col = matrix_position(strategy.hand)
        matrix[row, col] = strategy.equity
    return matrix


def range_stats(lookup: HandLookup) -> RangeStats:
    """Share of all 1326 combos the table plays, and their mean equity proxy."""

    weighted = play_matrix(lookup) * COMBO_WEIGHTS
    combos = float(weighted.sum())
    if combos <= 0:
        return RangeStats(range_percent=0.0, combos=0.0, avg_equity=0.0)
    avg_equity = float((weighted * _equity_matrix(lookup)).sum() / combos)
    return RangeStats(
        range_percent=round(combos / TOTAL_COMBOS * 100, 1),
        combos=round(combos),
        avg_equity=round(avg_equity, 1),
    )


def summarize(lookup: HandLookup) -> RangeSummary:
    """Combo-weighted action mix of a table, as percentages."""

    totals = {"raise": 0.0, "call": 0.0, "fold": 0.0, "allin": 0.0}
    total_hands = playable = 0
    total_combos = total_ev = 0.0
    for strategy in lookup:
        combos = combo_count(strategy.hand)
        total_hands += 1
        total_combos += combos
        if strategy.play_fraction > 0:
            playable += 1
        for entry in strategy.actions:
            share = strategy.fraction(entry) * combos
            if entry.action in totals:
                totals[entry.action] += share
            total_ev += entry.ev * share
    if total_combos <= 0:
        return RangeSummary(0, 0, 0.0, 0.0, 0.0, 0.0, 0.0)
    pct = {action: value / total_combos * 100 for action, value in totals.items()}
    return RangeSummary(
        total_hands=total_hands,
        playable_hands=playable,
        raise_pct=round(pct["raise"], 2),
        call_pct=round(pct["call"], 2),
        fold_pct=round(pct["fold"], 2),
        allin_pct=round(pct["allin"], 2),
        avg_ev=round(total_ev / total_combos, 4),
    )
