"""Card parsing and the 169 canonical starting-hand classes.

Hand classes use the usual shorthand: ``"AA"`` for pairs, ``"AKs"`` for
suited and ``"AKo"`` for offsuit hands, always high rank first.  Two
orderings of the full class list are used across the engine:

* matrix order: the 13x13 grid read row by row (``A`` down to ``2``), with
  suited hands above the diagonal and offsuit hands below it;
* push/fold order: for each high rank, the pair first, then every lower
  rank as suited followed by offsuit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

__all__ = [
    "RANKS",
    "SUITS",
    "MATRIX_RANKS",
    "TOTAL_CLASSES",
    "TOTAL_COMBOS",
    "Card",
    "all_hand_classes",
    "canonical_hand",
    "combo_count",
    "fresh_deck",
    "hand_strength",
    "is_hand_class",
    "matrix_position",
    "parse_board",
    "parse_card",
    "parse_cards",
    "push_fold_order",
    "strength_order",
]

logger = logging.getLogger(__name__)

RANKS = "23456789TJQKA"
SUITS = "hdcs"  # hearts, diamonds, clubs, spades
MATRIX_RANKS = RANKS[::-1]
TOTAL_COMBOS = 1326
TOTAL_CLASSES = 169


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    @property
    def value(self) -> int:
        """Rank value with deuce = 2 and ace = 14."""

        return RANKS.index(self.rank) + 2


def parse_card(token: str) -> Card:
    """Parse a two character token such as ``"As"`` or ``"td"``."""

    raw = (token or "").strip()
    if len(raw) != 2:
        raise ValueError(f"Invalid card token: {token!r}")
    rank, suit = raw[0].upper(), raw[1].lower()
    if rank not in RANKS or suit not in SUITS:
        raise ValueError(f"Invalid card token: {token!r}")
    return Card(rank=rank, suit=suit)


def parse_cards(tokens: Iterable[str]) -> list[Card]:
    cards = [parse_card(token) for token in tokens]
    if len(set(cards)) != len(cards):
        raise ValueError("Duplicate cards: " + " ".join(str(card) for card in cards))
    return cards


def parse_board(tokens: Iterable[str]) -> list[Card]:
    """Lenient board parser: malformed or repeated tokens are dropped."""

    cards: list[Card] = []
    for token in tokens:
        try:
            card = parse_card(token)
        except ValueError:
            logger.debug("Dropping malformed board token %r", token)
            continue
        if card in cards:
            logger.debug("Dropping repeated board card %s", card)
            continue
        cards.append(card)
    return cards


def fresh_deck() -> list[Card]:
    return [Card(rank=rank, suit=suit) for rank in MATRIX_RANKS for suit in SUITS]


def canonical_hand(first: Card, second: Card) -> str:
    """Map two cards to their canonical hand class."""

    if first.rank == second.rank:
        return first.rank + second.rank
    high, low = (first, second) if first.value > second.value else (second, first)
    return f"{high.rank}{low.rank}{'s' if first.suit == second.suit else 'o'}"


@lru_cache(maxsize=1)
def all_hand_classes() -> tuple[str, ...]:
    """All 169 classes in 13x13 matrix order."""

    hands: list[str] = []
    for row, row_rank in enumerate(MATRIX_RANKS):
        for col, col_rank in enumerate(MATRIX_RANKS):
            if row == col:
                hands.append(row_rank + col_rank)
            elif row < col:
                hands.append(f"{row_rank}{col_rank}s")
            else:
                hands.append(f"{col_rank}{row_rank}o")
    return tuple(hands)


@lru_cache(maxsize=1)
def push_fold_order() -> tuple[str, ...]:
    hands: list[str] = []
    for i, high in enumerate(MATRIX_RANKS):
        for low in MATRIX_RANKS[i:]:
            if high == low:
                hands.append(high + low)
            else:
                hands.append(f"{high}{low}s")
                hands.append(f"{high}{low}o")
    return tuple(hands)


@lru_cache(maxsize=1)
def _matrix_index() -> dict[str, tuple[int, int]]:
    return {hand: divmod(idx, 13) for idx, hand in enumerate(all_hand_classes())}


def is_hand_class(hand: str) -> bool:
    return hand in _matrix_index()


def matrix_position(hand: str) -> tuple[int, int]:
    """Return the ``(row, col)`` cell of *hand* in the 13x13 grid."""

    try:
        return _matrix_index()[hand]
    except KeyError:
        raise ValueError(f"Unknown hand class: {hand!r}") from None


def combo_count(hand: str) -> int:
    if len(hand) == 2:
        return 6
    return 4 if hand.endswith("s") else 12


def hand_strength(hand: str) -> int:
    """Heuristic 0-100 strength score used by the push/fold model.

    Pairs run from 100 (AA) down to 52 (22).  Unpaired hands start from
    their two ranks and earn small bonuses for suitedness, connectedness and
    two broadway cards.
    """

    r1 = MATRIX_RANKS.index(hand[0])
    r2 = MATRIX_RANKS.index(hand[1])
    if r1 == r2:
        return 100 - r1 * 4
    strength = 85 - r1 * 3 - r2 * 2
    if hand.endswith("s"):
        strength += 4
    gap = r2 - r1
    if gap == 1:
        strength += 3
    elif gap == 2:
        strength += 2
    elif gap == 3:
        strength += 1
    if r1 <= 4 and r2 <= 4:
        strength += 5
    return max(0, min(100, strength))


@lru_cache(maxsize=1)
def strength_order() -> tuple[str, ...]:
    """Matrix-ordered classes stably sorted by descending strength."""

    return tuple(sorted(all_hand_classes(), key=hand_strength, reverse=True))

