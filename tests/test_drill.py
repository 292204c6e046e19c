from __future__ import annotations

import pytest

from gtopreflop.core.hands import canonical_hand, parse_cards
from gtopreflop.pushfold import DrillTracker, NashPushFoldResolver, PushFoldDrill, PushFoldScenario
from gtopreflop.pushfold.drill import DIFFICULTY_LEVELS, DrillRound, stack_band


def _round(resolver: NashPushFoldResolver, cards: tuple[str, str], hand: str, **overrides) -> DrillRound:
    stack = overrides.pop("hero_stack_bb", 10.0)
    position = overrides.pop("hero_position", "sb")
    scenario = PushFoldScenario(hand=hand, hero_stack_bb=stack, villain_stacks_bb=(stack,), hero_position=position, **overrides)
    first, second = parse_cards(cards)
    return DrillRound(cards=(first, second), result=resolver.evaluate(scenario))


def test_seeded_drills_repeat() -> None:
    resolver = NashPushFoldResolver()
    first = PushFoldDrill(resolver, seed=7)
    second = PushFoldDrill(resolver, seed=7)
    for _ in range(5):
        a, b = first.deal(), second.deal()
        assert a.cards == b.cards
        assert a.scenario == b.scenario
        assert a.result.correct_action == b.result.correct_action


def test_dealt_hand_matches_cards() -> None:
    drill_round = PushFoldDrill(seed=3).deal()
    assert drill_round.cards[0] != drill_round.cards[1]
    assert drill_round.scenario.hand == canonical_hand(*drill_round.cards)
    assert len(drill_round.scenario.villain_stacks_bb) == 1


def test_beginner_spots_are_short_chip_ev_pushes() -> None:
    drill = PushFoldDrill(seed=11)
    allowed = DIFFICULTY_LEVELS["beginner"].stacks()
    assert allowed == (5, 8, 10)
    for _ in range(20):
        scenario = drill.deal(difficulty="beginner").scenario
        assert scenario.hero_stack_bb in allowed
        assert scenario.training_mode == "push"
        assert scenario.icm_mode == "chip_ev"


def test_unknown_difficulty() -> None:
    with pytest.raises(ValueError):
        PushFoldDrill(seed=1).deal(difficulty="legendary")  # type: ignore[arg-type]


def test_bubble_stacks_and_payouts() -> None:
    drill = PushFoldDrill(seed=5)
    scenario = drill.deal(num_players=3, stack_bb=10, icm_mode="bubble", training_mode="push", position="btn").scenario
    assert scenario.villain_stacks_bb == (20.0, 5.0)
    assert scenario.payouts == (500.0, 300.0, 200.0)
    assert scenario.hero_position == "btn"

    heads_up = drill.deal(stack_bb=10, icm_mode="bubble", training_mode="push", position="sb").scenario
    assert heads_up.villain_stacks_bb == (20.0,)


def test_chip_ev_villain_stacks_stay_near_hero() -> None:
    drill = PushFoldDrill(seed=9)
    for _ in range(20):
        scenario = drill.deal(num_players=3, stack_bb=5, icm_mode="chip_ev").scenario
        assert len(scenario.villain_stacks_bb) == 2
        assert all(3 <= stack <= 8 for stack in scenario.villain_stacks_bb)
        assert scenario.payouts == (1000.0,)


def test_custom_payouts() -> None:
    scenario = PushFoldDrill(seed=2).deal(
        stack_bb=10, icm_mode="chip_ev", payout_percentages=[50, 30, 20], prize_pool=200
    ).scenario
    assert scenario.payouts == pytest.approx((100.0, 60.0, 40.0))


def test_call_spots_never_seat_hero_on_the_shove() -> None:
    drill = PushFoldDrill(seed=4)
    assert drill.deal(training_mode="call", position="sb").scenario.hero_position == "bb"
    assert drill.deal(num_players=3, training_mode="call", position="btn").scenario.hero_position == "bb"
    assert drill.deal(num_players=3, training_mode="call", position="sb").scenario.hero_position == "sb"


def test_stack_bands() -> None:
    assert [stack_band(stack) for stack in (3, 5, 8, 10, 12, 15, 20)] == [
        "1-5BB",
        "1-5BB",
        "6-10BB",
        "6-10BB",
        "11-15BB",
        "11-15BB",
        "16-20BB",
    ]


def test_tracker_streaks() -> None:
    resolver = NashPushFoldResolver()
    aces = _round(resolver, ("As", "Ad"), "AA")
    bubble_aces = _round(resolver, ("Ah", "Ac"), "AA", icm_mode="bubble")
    tracker = DrillTracker()

    tracker.record(aces, "push")
    tracker.record(bubble_aces, "shove")
    tracker.record(bubble_aces, "push")
    assert tracker.current_streak == 3
    assert tracker.bubble_streak == 2
    assert tracker.best_streak == 3

    tracker.record(aces, "fold")
    assert tracker.current_streak == 0
    assert tracker.bubble_streak == 0
    assert tracker.best_streak == 3
    assert tracker.total == 4
    assert tracker.correct == 3
    assert tracker.accuracy == pytest.approx(75.0)
    assert len(tracker.mistakes()) == 1


def test_tracker_weaknesses() -> None:
    resolver = NashPushFoldResolver()
    push_aces = _round(resolver, ("As", "Ad"), "AA")
    call_aces = _round(resolver, ("Ks", "Kd"), "KK", hero_position="bb", training_mode="call", hero_stack_bb=8.0)
    tracker = DrillTracker()

    for action in ("fold", "fold", "push"):
        tracker.record(push_aces, action)
    tracker.record(call_aces, "fold")
    assert tracker.weaknesses() == []

    tracker.record(call_aces, "call")
    tracker.record(call_aces, "call")
    weaknesses = tracker.weaknesses()
    assert [(w.position, w.training_mode) for w in weaknesses] == [("sb", "push"), ("bb", "call")]
    assert weaknesses[0].stack_band == "6-10BB"
    assert weaknesses[0].errors == 2 and weaknesses[0].total == 3
    assert weaknesses[0].accuracy == pytest.approx(100 / 3)
