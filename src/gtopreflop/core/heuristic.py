"""Fallback preflop model used when no range table covers a spot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .hands import Card, canonical_hand
from .models import GTOStrategy, StrategyAction

__all__ = ["POSITION_VALUES", "HeuristicModel", "HeuristicResult", "position_value"]

POSITION_VALUES: Final[dict[str, int]] = {
    "BTN": 6,
    "CO": 5,
    "HJ": 4,
    "LJ": 3,
    "UTG2": 2,
    "UTG1": 1,
    "UTG": 0,
    "SB": 2,
    "BB": 3,
}
_UNKNOWN_POSITION_VALUE = 3

_PREMIUM_PAIRS = frozenset({"AA", "KK", "QQ", "JJ", "TT"})
_STRONG_PAIRS = frozenset({"99", "88", "77", "66"})
_SMALL_PAIRS = frozenset({"55", "44", "33", "22"})
_BROADWAY_SUITED = frozenset({"AKs", "AQs", "AJs", "ATs", "KQs", "KJs", "QJs", "JTs"})
_BROADWAY_OFFSUIT = frozenset({"AKo", "AQo", "AJo", "KQo"})
_SUITED_CONNECTORS = frozenset({"T9s", "98s", "87s", "76s", "65s", "54s"})
_SUITED_ACES = frozenset({"A9s", "A8s", "A7s", "A6s", "A5s", "A4s", "A3s", "A2s"})

# (raise, call, fold) before the positional adjustment.
_CATEGORY_MIX: Final[tuple[tuple[frozenset[str], tuple[float, float, float]], ...]] = (
    (_PREMIUM_PAIRS, (1.0, 0.0, 0.0)),
    (_STRONG_PAIRS | _BROADWAY_SUITED, (0.85, 0.15, 0.0)),
    (_BROADWAY_OFFSUIT, (0.70, 0.25, 0.05)),
    (_SMALL_PAIRS | _SUITED_ACES, (0.40, 0.45, 0.15)),
    (_SUITED_CONNECTORS, (0.35, 0.40, 0.25)),
)
_EQUITY_MIX: Final[tuple[tuple[float, tuple[float, float, float]], ...]] = (
    (0.55, (0.60, 0.30, 0.10)),
    (0.45, (0.35, 0.40, 0.25)),
    (0.35, (0.15, 0.35, 0.50)),
)
_WEAK_MIX: Final = (0.05, 0.20, 0.75)


def position_value(position: str | None) -> int:
    if position is None:
        return _UNKNOWN_POSITION_VALUE
    return POSITION_VALUES.get(position.upper(), _UNKNOWN_POSITION_VALUE)


@dataclass(frozen=True)
class HeuristicResult:
    strategy: GTOStrategy
    equity: float


class HeuristicModel:
    """Rank/suit/position rules standing in for a solved strategy.

    Frequencies are on a 0-1 scale and rounded to two decimals; EVs are in
    big blinds with fold as the zero baseline.
    """

    @staticmethod
    def base_equity(first: Card, second: Card) -> float:
        r1, r2 = first.value, second.value
        if r1 == r2:
            equity = 0.50 + (r1 / 14) * 0.25
        else:
            high, low = max(r1, r2), min(r1, r2)
            gap = high - low
            equity = 0.30 + (high / 14) * 0.15 + (low / 14) * 0.10
            if first.suit == second.suit:
                equity += 0.04
            if gap <= 1:
                equity += 0.03
            elif gap <= 3:
                equity += 0.01
            if high >= 10 and low >= 10:
                equity += 0.05
            if high == 14:
                equity += 0.05
        return min(0.85, max(0.20, equity))

    @staticmethod
    def action_mix(hand: str, equity: float, in_position: bool) -> tuple[float, float, float]:
        mix = next((freqs for hands, freqs in _CATEGORY_MIX if hand in hands), None)
        if mix is None:
            mix = next((freqs for floor, freqs in _EQUITY_MIX if equity >= floor), _WEAK_MIX)
        raise_freq, call_freq, fold_freq = mix
        if in_position:
            raise_freq *= 1.15
            fold_freq *= 0.85
        else:
            raise_freq *= 0.90
            fold_freq *= 1.10
        total = raise_freq + call_freq + fold_freq
        raise_freq = round(raise_freq / total, 2)
        call_freq = round(call_freq / total, 2)
        fold_freq = max(0.0, round(1 - raise_freq - call_freq, 2))
        return raise_freq, call_freq, fold_freq

    @staticmethod
    def raise_ev(equity: float, pot_bb: float, stack_bb: float) -> float:
        bet = min(pot_bb * 0.75, stack_bb * 0.3)
        return equity * (pot_bb + bet) - (1 - equity) * bet

    @staticmethod
    def call_ev(equity: float, pot_bb: float) -> float:
        call = pot_bb * 0.3
        return equity * (pot_bb + call) - (1 - equity) * call

    def evaluate(
        self,
        cards: tuple[Card, Card],
        hero_position: str,
        villain_position: str | None,
        pot_bb: float,
        stack_bb: float,
    ) -> HeuristicResult:
        first, second = cards
        hand = canonical_hand(first, second)
        advantage = position_value(hero_position) - position_value(villain_position)
        equity = min(0.85, max(0.15, self.base_equity(first, second) + advantage * 0.02))
        raise_freq, call_freq, fold_freq = self.action_mix(hand, equity, advantage > 0)

        actions = [
            StrategyAction("raise", raise_freq, round(self.raise_ev(equity, pot_bb, stack_bb), 2) if raise_freq > 0 else 0.0),
            StrategyAction("call", call_freq, round(self.call_ev(equity, pot_bb), 2) if call_freq > 0 else 0.0),
            StrategyAction("fold", fold_freq, 0.0),
        ]
        listed = sorted((entry for entry in actions if entry.frequency > 0), key=lambda e: e.frequency, reverse=True)
        strategy = GTOStrategy(hand=hand, actions=tuple(listed), scale=1.0, source="heuristic")
        return HeuristicResult(strategy=strategy, equity=equity)
