from __future__ import annotations

import pytest

from gtopreflop.core.board import RankSuitTextureClassifier
from gtopreflop.core.hands import parse_cards


def _classify(*tokens: str) -> str:
    return RankSuitTextureClassifier().classify(parse_cards(tokens))


@pytest.mark.parametrize(
    ("board", "expected"),
    [
        (("As", "Ks", "2s"), "monotone"),
        (("Ah", "Ad", "7c"), "paired"),
        (("9h", "8d", "7c"), "connected"),
        (("Kh", "7h", "2c"), "wet"),
        (("Ah", "9d", "3c"), "ace_high"),
        (("Kh", "Qd", "8c"), "high"),
        (("2h", "5d", "9c"), "low"),
        (("Kh", "8d", "3c"), "dry"),
    ],
)
def test_texture_tags(board: tuple[str, ...], expected: str) -> None:
    assert _classify(*board) == expected


def test_monotone_wins_over_connected() -> None:
    assert _classify("9s", "8s", "7s") == "monotone"


def test_turn_and_river_boards() -> None:
    assert _classify("Kh", "8d", "3c", "3s") == "paired"
    assert _classify("Kh", "8d", "3c", "Js", "2h") == "wet"


def test_needs_three_to_five_cards() -> None:
    with pytest.raises(ValueError):
        _classify("As", "Kd")
    with pytest.raises(ValueError):
        _classify("As", "Kd", "Qh", "Jc", "9s", "2d")
