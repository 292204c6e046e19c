from __future__ import annotations

import pytest

from gtopreflop.core.hands import parse_cards
from gtopreflop.core.heuristic import HeuristicModel, position_value


def _evaluate(cards: tuple[str, str], hero: str, villain: str | None):
    first, second = parse_cards(cards)
    return HeuristicModel().evaluate((first, second), hero, villain, 6.0, 100.0)


def test_position_values() -> None:
    assert position_value("utg") == 0
    assert position_value("BTN") == 6
    assert position_value(None) == 3
    assert position_value("XYZ") == 3


def test_premium_pair_in_position_always_raises() -> None:
    result = _evaluate(("As", "Ad"), "BTN", "BB")
    assert result.equity == pytest.approx(0.81)
    strategy = result.strategy
    assert strategy.source == "heuristic"
    assert strategy.scale == 1.0
    assert [entry.action for entry in strategy.actions] == ["raise"]
    assert strategy.frequency_of("raise") == pytest.approx(1.0)
    assert strategy.actions[0].ev > 0


def test_weak_hand_out_of_position_mostly_folds() -> None:
    result = _evaluate(("7h", "2d"), "UTG", "BTN")
    strategy = result.strategy
    dominant = strategy.dominant()
    assert dominant is not None and dominant.action == "fold"
    assert strategy.total_frequency == pytest.approx(1.0, abs=0.011)
    assert strategy.action("fold").ev == 0.0
    assert 0.15 <= result.equity <= 0.85


def test_frequencies_are_sorted_and_rounded() -> None:
    result = _evaluate(("9h", "8h"), "CO", "BTN")
    freqs = [entry.frequency for entry in result.strategy.actions]
    assert freqs == sorted(freqs, reverse=True)
    assert all(round(freq, 2) == freq for freq in freqs)
    assert all(freq > 0 for freq in freqs)


def test_base_equity_is_clamped() -> None:
    first, second = parse_cards(("As", "Ad"))
    assert HeuristicModel.base_equity(first, second) <= 0.85
    low, high = parse_cards(("2c", "3d"))
    assert HeuristicModel.base_equity(low, high) >= 0.20
