from __future__ import annotations

import itertools

import pytest

from gtopreflop.core.hands import (
    TOTAL_CLASSES,
    all_hand_classes,
    canonical_hand,
    combo_count,
    fresh_deck,
    hand_strength,
    matrix_position,
    parse_board,
    parse_card,
    parse_cards,
    push_fold_order,
    strength_order,
)


def test_every_combo_maps_to_one_of_169_classes() -> None:
    deck = fresh_deck()
    assert len(deck) == 52

    seen: dict[str, int] = {}
    for first, second in itertools.combinations(deck, 2):
        hand = canonical_hand(first, second)
        assert hand == canonical_hand(second, first)
        seen[hand] = seen.get(hand, 0) + 1

    assert len(seen) == TOTAL_CLASSES
    assert set(seen) == set(all_hand_classes())
    for hand, count in seen.items():
        assert count == combo_count(hand)


def test_class_shapes() -> None:
    hands = all_hand_classes()
    pairs = [hand for hand in hands if len(hand) == 2]
    suited = [hand for hand in hands if hand.endswith("s")]
    offsuit = [hand for hand in hands if hand.endswith("o")]
    assert (len(pairs), len(suited), len(offsuit)) == (13, 78, 78)


def test_canonical_hand_examples() -> None:
    assert canonical_hand(parse_card("Kd"), parse_card("As")) == "AKo"
    assert canonical_hand(parse_card("5h"), parse_card("Ah")) == "A5s"
    assert canonical_hand(parse_card("Tc"), parse_card("Td")) == "TT"


def test_parse_card_is_case_tolerant_and_strict_on_shape() -> None:
    card = parse_card("td")
    assert (card.rank, card.suit) == ("T", "d")
    for bad in ("", "A", "Asd", "1s", "Ax"):
        with pytest.raises(ValueError):
            parse_card(bad)


def test_parse_cards_rejects_duplicates() -> None:
    with pytest.raises(ValueError):
        parse_cards(["As", "As"])


def test_parse_board_drops_bad_tokens() -> None:
    board = parse_board(["Ah", "zz", "Kd", "Ah", "2c"])
    assert [str(card) for card in board] == ["Ah", "Kd", "2c"]


def test_orderings() -> None:
    matrix = all_hand_classes()
    assert matrix[:3] == ("AA", "AKs", "AQs")
    assert matrix[13] == "AKo"
    assert matrix[-1] == "22"
    assert matrix_position("AKo") == (1, 0)
    assert matrix_position("AKs") == (0, 1)

    order = push_fold_order()
    assert order[:4] == ("AA", "AKs", "AKo", "AQs")
    assert len(order) == TOTAL_CLASSES
    assert set(order) == set(matrix)

    with pytest.raises(ValueError):
        matrix_position("AAs")


def test_hand_strength_anchors() -> None:
    assert hand_strength("AA") == 100
    assert hand_strength("22") == 52
    assert hand_strength("AKs") == 95
    assert hand_strength("AKo") == 91
    assert hand_strength("72o") == 40
    assert all(0 <= hand_strength(hand) <= 100 for hand in all_hand_classes())


def test_strength_order_is_descending() -> None:
    order = strength_order()
    assert order[0] == "AA"
    strengths = [hand_strength(hand) for hand in order]
    assert strengths == sorted(strengths, reverse=True)
