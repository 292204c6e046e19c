"""Push/fold practice rounds and per-session progress tracking."""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from ..core.hands import Card, canonical_hand, fresh_deck
from .nash import PushFoldMode
from .resolver import ICMMode, NashPushFoldResolver, PushFoldResult, PushFoldScenario

__all__ = [
    "DIFFICULTY_LEVELS",
    "STACK_PRESETS",
    "DifficultyLevel",
    "DrillResult",
    "DrillRound",
    "DrillTracker",
    "PushFoldDrill",
    "Weakness",
    "stack_band",
]

DifficultyLevel = Literal["beginner", "intermediate", "advanced", "expert"]

STACK_PRESETS: tuple[int, ...] = (3, 5, 8, 10, 12, 15, 20)
BUBBLE_PAYOUTS: tuple[float, ...] = (500.0, 300.0, 200.0)
WINNER_TAKES_ALL: tuple[float, ...] = (1000.0,)
ASYMMETRIC_MULTIPLIERS: tuple[float, ...] = (0.3, 0.5, 1.5, 2.0, 3.0)
MIN_VILLAIN_STACK_BB = 3
WEAKNESS_MIN_RESULTS = 5
WEAKNESS_LIMIT = 5


@dataclass(frozen=True)
class DifficultySettings:
    stack_range: tuple[int, int]
    include_icm: bool
    include_bubble: bool
    include_call: bool

    def stacks(self) -> tuple[int, ...]:
        low, high = self.stack_range
        return tuple(stack for stack in STACK_PRESETS if low <= stack <= high)

    def icm_modes(self) -> tuple[ICMMode, ...]:
        modes: list[ICMMode] = ["chip_ev"]
        if self.include_icm:
            modes.append("asymmetric")
        if self.include_bubble:
            modes.append("bubble")
        return tuple(modes)


DIFFICULTY_LEVELS: dict[str, DifficultySettings] = {
    "beginner": DifficultySettings((5, 10), include_icm=False, include_bubble=False, include_call=False),
    "intermediate": DifficultySettings((3, 15), include_icm=True, include_bubble=False, include_call=True),
    "advanced": DifficultySettings((3, 20), include_icm=True, include_bubble=True, include_call=True),
    "expert": DifficultySettings((3, 20), include_icm=True, include_bubble=True, include_call=True),
}


def stack_band(stack_bb: float) -> str:
    if stack_bb <= 5:
        return "1-5BB"
    if stack_bb <= 10:
        return "6-10BB"
    if stack_bb <= 15:
        return "11-15BB"
    return "16-20BB"


@dataclass(frozen=True)
class DrillRound:
    cards: tuple[Card, Card]
    result: PushFoldResult

    @property
    def scenario(self) -> PushFoldScenario:
        return self.result.scenario


class PushFoldDrill:
    """Deal practice spots for :class:`NashPushFoldResolver`.

    Any argument left as ``None`` is drawn at random, constrained by the
    difficulty level when one is given.  Pass ``seed`` (or an ``rng``) for a
    reproducible sequence of rounds.
    """

    def __init__(
        self,
        resolver: NashPushFoldResolver | None = None,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.resolver = resolver or NashPushFoldResolver()
        self.rng = rng or random.Random(seed)

    def deal(
        self,
        *,
        num_players: int = 2,
        stack_bb: float | None = None,
        position: str | None = None,
        training_mode: PushFoldMode | None = None,
        opponent_type: str = "nash",
        icm_mode: ICMMode | None = None,
        difficulty: DifficultyLevel | None = None,
        payout_percentages: Sequence[float] | None = None,
        prize_pool: float | None = None,
    ) -> DrillRound:
        settings = DIFFICULTY_LEVELS.get(difficulty) if difficulty is not None else None
        if difficulty is not None and settings is None:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")

        deck = fresh_deck()
        self.rng.shuffle(deck)
        cards = (deck[0], deck[1])

        if stack_bb is None:
            stack_bb = float(self.rng.choice(settings.stacks() if settings else STACK_PRESETS))
        if training_mode is None:
            allow_call = settings.include_call if settings else True
            training_mode = self.rng.choice(("push", "call")) if allow_call else "push"
        if icm_mode is None:
            icm_mode = self.rng.choice(settings.icm_modes()) if settings else "chip_ev"

        hero_position = self._position(num_players, training_mode, position)
        villains = self._villain_stacks(num_players, stack_bb, icm_mode)
        payouts = self._payouts(icm_mode, payout_percentages, prize_pool)

        scenario = PushFoldScenario(
            hand=canonical_hand(*cards),
            hero_stack_bb=stack_bb,
            villain_stacks_bb=villains,
            hero_position=hero_position,
            num_players=num_players,
            training_mode=training_mode,
            opponent_type=opponent_type,
            icm_mode=icm_mode,
            payouts=payouts,
        )
        return DrillRound(cards=cards, result=self.resolver.evaluate(scenario))

    def _position(self, num_players: int, mode: PushFoldMode, requested: str | None) -> str:
        if mode == "call":
            if num_players == 2:
                return "bb"
            if requested is None:
                return self.rng.choice(("bb", "sb"))
            # The button is the shover in three-handed call spots.
            return "bb" if requested == "btn" else requested
        if requested is not None:
            return requested
        return self.rng.choice(("sb", "bb") if num_players == 2 else ("btn", "sb", "bb"))

    def _villain_stacks(self, num_players: int, hero: float, icm_mode: ICMMode) -> tuple[float, ...]:
        heads_up = num_players == 2
        if icm_mode == "bubble":
            raw = [hero * 2] if heads_up else [hero * 2, hero * 0.5]
        elif icm_mode == "asymmetric":
            raw = [hero * self.rng.choice(ASYMMETRIC_MULTIPLIERS) for _ in range(num_players - 1)]
        elif heads_up:
            raw = [hero + self.rng.randint(-5, 4)]
        else:
            raw = [hero + self.rng.randint(-4, 3) for _ in range(2)]
        return tuple(float(max(MIN_VILLAIN_STACK_BB, round(stack))) for stack in raw)

    @staticmethod
    def _payouts(
        icm_mode: ICMMode,
        percentages: Sequence[float] | None,
        prize_pool: float | None,
    ) -> tuple[float, ...]:
        if percentages and prize_pool and prize_pool > 0:
            return tuple(pct / 100 * prize_pool for pct in percentages)
        return BUBBLE_PAYOUTS if icm_mode == "bubble" else WINNER_TAKES_ALL


@dataclass(frozen=True)
class DrillResult:
    scenario: PushFoldScenario
    action: str
    correct: bool
    time_ms: float | None = None


@dataclass(frozen=True)
class Weakness:
    position: str
    stack_band: str
    training_mode: str
    errors: int
    total: int

    @property
    def accuracy(self) -> float:
        return (self.total - self.errors) / self.total * 100


@dataclass
class DrillTracker:
    """Accuracy, streaks and weak spots over one practice session."""

    results: list[DrillResult] = field(default_factory=list)
    current_streak: int = 0
    best_streak: int = 0
    bubble_streak: int = 0
    call_streak: int = 0

    def record(self, drill_round: DrillRound, action: str, time_ms: float | None = None) -> DrillResult:
        correct = drill_round.result.is_correct(action)
        result = DrillResult(drill_round.scenario, action, correct, time_ms)
        self.results.append(result)
        if correct:
            self.current_streak += 1
            self.best_streak = max(self.best_streak, self.current_streak)
            self.bubble_streak = self.bubble_streak + 1 if result.scenario.icm_mode == "bubble" else 0
            self.call_streak = self.call_streak + 1 if result.scenario.training_mode == "call" else 0
        else:
            self.current_streak = 0
            self.bubble_streak = 0
            self.call_streak = 0
        return result

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def correct(self) -> int:
        return sum(1 for result in self.results if result.correct)

    @property
    def accuracy(self) -> float:
        return self.correct / self.total * 100 if self.results else 0.0

    def mistakes(self) -> list[DrillResult]:
        return [result for result in self.results if not result.correct]

    def weaknesses(self) -> list[Weakness]:
        if len(self.results) < WEAKNESS_MIN_RESULTS:
            return []
        groups: dict[tuple[str, str, str], list[int]] = {}
        for result in self.results:
            scenario = result.scenario
            key = (scenario.hero_position, stack_band(scenario.hero_stack_bb), scenario.training_mode)
            tally = groups.setdefault(key, [0, 0])
            tally[1] += 1
            if not result.correct:
                tally[0] += 1
        found = [
            Weakness(position, band, mode, errors, total)
            for (position, band, mode), (errors, total) in groups.items()
            if errors > 0
        ]
        found.sort(key=lambda weakness: weakness.accuracy)
        return found[:WEAKNESS_LIMIT]
