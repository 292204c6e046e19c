from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import Literal, Protocol

from .hands import RANKS, Card

__all__ = ["BoardTextureClassifier", "RankSuitTextureClassifier", "TextureTag"]

TextureTag = Literal["dry", "wet", "monotone", "paired", "connected", "ace_high", "high", "low"]


class BoardTextureClassifier(Protocol):
    """Classifies a 3-5 card board into a texture tag.

    Implementations may raise; callers treat any failure as an unknown
    texture.
    """

    def classify(self, cards: Sequence[Card]) -> TextureTag: ...


class RankSuitTextureClassifier:
    """Texture from suit and rank distribution alone.

    Checks run in priority order: monotone, paired, connected (spread of at
    most four ranks), wet (two of a suit), ace high, high (average rank J
    or better), low (average rank 7 or worse), otherwise dry.
    """

    def classify(self, cards: Sequence[Card]) -> TextureTag:
        if not 3 <= len(cards) <= 5:
            raise ValueError(f"Board texture needs 3-5 cards, got {len(cards)}")
        suits = Counter(card.suit for card in cards)
        ranks = [RANKS.index(card.rank) for card in cards]

        if max(suits.values()) >= 3:
            return "monotone"
        if max(Counter(ranks).values()) >= 2:
            return "paired"
        if max(ranks) - min(ranks) <= 4:
            return "connected"
        if max(suits.values()) >= 2:
            return "wet"
        if max(ranks) == len(RANKS) - 1:
            return "ace_high"
        average = sum(ranks) / len(ranks)
        if average >= 9:
            return "high"
        if average <= 5:
            return "low"
        return "dry"
