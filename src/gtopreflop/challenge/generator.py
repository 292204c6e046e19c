"""Reproducible daily challenges.

Every consumer of a given day must see the same questions, so the PRNG is a
fixed 31-bit linear congruential generator evaluated with exact integers
rather than :mod:`random`, whose stream is an implementation detail.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from ..core.hands import Card, canonical_hand, fresh_deck
from ..core.models import GTOStrategy
from ..core.scenario import ScenarioType
from ..core.scoring import normalize_action
from ..data.range_loader import DEEP_DEPTH, RangeResolver

__all__ = [
    "ChallengePlan",
    "ChallengeQuestion",
    "DailyChallengeGenerator",
    "GradedAnswer",
    "SeededRandom",
    "daily_seed",
    "grade_answer",
    "seven_day_plan",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MODULUS_MASK = 0x7FFFFFFF
_MULTIPLIER = 1103515245
_INCREMENT = 12345

RFI_POSITIONS = ("UTG", "HJ", "CO", "BTN", "SB")
THREE_BET_SPOTS = (("BTN", "BB"), ("CO", "BTN"), ("HJ", "CO"))
MAX_ATTEMPTS = 20
QUESTIONS_PER_DAY = 10
SEVEN_DAY_QUESTIONS = (10, 12, 15, 18, 20, 22, 25)


class SeededRandom:
    """``seed' = (seed * 1103515245 + 12345) & 0x7fffffff``; yields ``seed' / 0x7fffffff``."""

    def __init__(self, seed: int) -> None:
        self.state = seed & _MODULUS_MASK

    def random(self) -> float:
        self.state = (self.state * _MULTIPLIER + _INCREMENT) & _MODULUS_MASK
        return self.state / _MODULUS_MASK

    def index(self, length: int) -> int:
        # random() can return exactly 1.0
        return min(int(self.random() * length), length - 1)

    def choice(self, items: Sequence[T]) -> T:
        return items[self.index(len(items))]

    def shuffle(self, items: list[T]) -> None:
        for i in range(len(items) - 1, 0, -1):
            j = self.index(i + 1)
            items[i], items[j] = items[j], items[i]


def daily_seed(day: dt.date) -> int:
    return day.year * 10000 + day.month * 100 + day.day


@dataclass(frozen=True)
class ChallengePlan:
    seed: int
    questions: int = QUESTIONS_PER_DAY
    rfi_chance: float = 0.35
    vs_rfi_chance: float = 0.35


def seven_day_plan(start: dt.date, day: int) -> ChallengePlan:
    """Plan for *day* (1-7) of a week-long challenge; later days favour 3-bet spots."""

    if not 1 <= day <= len(SEVEN_DAY_QUESTIONS):
        raise ValueError(f"day must be between 1 and {len(SEVEN_DAY_QUESTIONS)}")
    date = start + dt.timedelta(days=day - 1)
    rfi = max(0.2, 0.4 - day * 0.03)
    return ChallengePlan(
        seed=daily_seed(date) + day * 100,
        questions=SEVEN_DAY_QUESTIONS[day - 1],
        rfi_chance=rfi,
        vs_rfi_chance=1 - rfi - min(0.4, 0.2 + day * 0.03),
    )


@dataclass(frozen=True)
class ChallengeQuestion:
    hero_cards: tuple[Card, Card]
    hand_class: str
    hero_position: str
    villain_position: str
    scenario: ScenarioType
    strategy: GTOStrategy
    seed: int


@dataclass(frozen=True)
class GradedAnswer:
    level: int
    label: str
    action: str
    frequency: float
    best_action: str | None


_GRADES: tuple[tuple[float, int, str], ...] = (
    (80.0, 5, "Perfect"),
    (50.0, 4, "Good"),
    (20.0, 3, "Minor error"),
    (5.0, 2, "Error"),
)


def grade_answer(question: ChallengeQuestion, action: str) -> GradedAnswer:
    """Rate *action* by how often the strategy takes it."""

    normalized = normalize_action(action)
    strategy = question.strategy
    entry = strategy.action(normalized)
    frequency = round(strategy.fraction(entry) * 100, 2) if entry is not None else 0.0
    best = strategy.dominant()
    for floor, level, label in _GRADES:
        if frequency >= floor:
            break
    else:
        level, label = 1, "Severe error"
    return GradedAnswer(
        level=level,
        label=label,
        action=normalized,
        frequency=frequency,
        best_action=best.action if best is not None else None,
    )


class DailyChallengeGenerator:
    def __init__(self, resolver: RangeResolver, stack_bb: float = float(DEEP_DEPTH)) -> None:
        self.resolver = resolver
        self.stack_bb = stack_bb

    def for_date(self, day: dt.date) -> list[ChallengeQuestion]:
        return self.generate(ChallengePlan(seed=daily_seed(day)))

    def generate(self, plan: ChallengePlan) -> list[ChallengeQuestion]:
        questions: list[ChallengeQuestion] = []
        for offset in range(plan.questions):
            question = self._question(plan, plan.seed + offset)
            if question is None:
                logger.debug("Dropping challenge item %d: no strategy after %d attempts", offset, MAX_ATTEMPTS)
                continue
            questions.append(question)
        return questions

    def _question(self, plan: ChallengePlan, seed: int) -> ChallengeQuestion | None:
        rng = SeededRandom(seed)
        cards = self._draw(rng)
        roll = rng.random()
        if roll < plan.rfi_chance:
            scenario = ScenarioType.RFI
        elif roll < plan.rfi_chance + plan.vs_rfi_chance:
            scenario = ScenarioType.VS_RFI
        else:
            scenario = ScenarioType.VS_3BET

        for _ in range(MAX_ATTEMPTS):
            hero, villain = self._seats(scenario, rng)
            hand = canonical_hand(*cards)
            strategy = self.resolver.resolve(scenario, hero, villain, hand, self.stack_bb)
            if strategy is not None and strategy.actions:
                return ChallengeQuestion(
                    hero_cards=cards,
                    hand_class=hand,
                    hero_position=hero,
                    villain_position=villain,
                    scenario=scenario,
                    strategy=strategy,
                    seed=seed,
                )
            cards = self._draw(rng)
        return None

    @staticmethod
    def _draw(rng: SeededRandom) -> tuple[Card, Card]:
        deck = fresh_deck()
        rng.shuffle(deck)
        return deck[0], deck[1]

    @staticmethod
    def _seats(scenario: ScenarioType, rng: SeededRandom) -> tuple[str, str]:
        if scenario is ScenarioType.RFI:
            return rng.choice(RFI_POSITIONS), "BB"
        if scenario is ScenarioType.VS_RFI:
            return "BB", rng.choice(RFI_POSITIONS)
        return rng.choice(THREE_BET_SPOTS)
