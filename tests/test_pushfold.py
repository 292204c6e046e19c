from __future__ import annotations

import json
from pathlib import Path

import pytest

from gtopreflop.config import override_features
from gtopreflop.core.hands import TOTAL_CLASSES, all_hand_classes, hand_strength, push_fold_order, strength_order
from gtopreflop.pushfold import NashPushFoldResolver, NashRangeTable, PushFoldScenario
from gtopreflop.pushfold.opponents import MatrixOrdering, StrengthOrdering, opponent_model
from gtopreflop.pushfold.resolver import call_ev, push_ev


def _scenario(hand: str = "AA", stack: float = 10.0, **overrides) -> PushFoldScenario:
    players = overrides.get("num_players", 2)
    values = {
        "hand": hand,
        "hero_stack_bb": stack,
        "villain_stacks_bb": (stack,) * (players - 1),
        "hero_position": "sb",
    }
    values.update(overrides)
    return PushFoldScenario(**values)


def test_push_range_follows_strength_threshold() -> None:
    table = NashRangeTable()
    hands = table.push_range(10, "sb", 2)
    assert table.min_strength("push", 10, "sb", 2) == 40
    assert all(hand_strength(hand) >= 40 for hand in hands)
    outside = set(all_hand_classes()) - set(hands)
    assert all(hand_strength(hand) < 40 for hand in outside)
    # native push/fold order is preserved
    order = push_fold_order()
    assert hands == sorted(hands, key=order.index)


def test_push_ranges_narrow_as_stacks_grow() -> None:
    table = NashRangeTable()
    assert len(table.push_range(3, "sb", 2)) == TOTAL_CLASSES
    previous = set(all_hand_classes())
    for stack in (3, 5, 8, 12, 15, 20, 40):
        current = set(table.push_range(stack, "sb", 2))
        assert current <= previous
        previous = current


def test_unknown_spot_uses_default_threshold() -> None:
    table = NashRangeTable()
    assert table.min_strength("push", 10, "bb", 3) == 55
    assert table.min_strength("call", 10, "sb", 3) == 70
    assert table.min_strength("call", 8, "BB", 2) == 55


def test_invalid_nash_tables_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "nash.json"
    path.write_text(json.dumps({"spots": []}), encoding="utf-8")
    with pytest.raises(ValueError):
        NashRangeTable(path)

    path.write_text(
        json.dumps(
            {
                "defaults": {"push": 50, "call": 60},
                "spots": [
                    {
                        "mode": "push",
                        "players": 2,
                        "position": "sb",
                        "buckets": [{"max_stack_bb": 10, "min_strength": 40}, {"max_stack_bb": 5, "min_strength": 20}],
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    with pytest.raises(ValueError):
        NashRangeTable(path)


def test_ev_formulas() -> None:
    assert push_ev(100, 10, TOTAL_CLASSES) == pytest.approx(7.78)
    assert push_ev(50, 10, 0) == pytest.approx(1.3875)
    assert call_ev(100, 10, 20) == pytest.approx(18.35)
    assert call_ev(30, 10, 0) == pytest.approx(5.75)


def test_opponent_models_reshape_range_size() -> None:
    resolver = NashPushFoldResolver()
    sizes = {}
    for opponent in ("tight", "nash", "loose", "fish"):
        sizes[opponent] = len(resolver.adjusted_range(_scenario(stack=20, opponent_type=opponent)))
    baseline = sizes["nash"]
    assert sizes["tight"] == int(baseline * 0.7)
    assert sizes["loose"] == baseline + int(baseline * 0.3)
    assert sizes["tight"] <= sizes["nash"] <= sizes["loose"] <= sizes["fish"]


def test_unknown_opponent_is_rejected() -> None:
    with pytest.raises(ValueError):
        opponent_model("maniac")
    with pytest.raises(ValueError):
        _scenario(opponent_type="maniac")


def test_scenario_validation() -> None:
    with pytest.raises(ValueError):
        _scenario(hand="AXs")
    with pytest.raises(ValueError):
        _scenario(num_players=4)
    with pytest.raises(ValueError):
        _scenario(villain_stacks_bb=(10.0, 10.0))
    with pytest.raises(ValueError):
        _scenario(hero_position="co")
    with pytest.raises(ValueError):
        _scenario(stack=0)
    with pytest.raises(ValueError):
        _scenario(icm_mode="satellite")


def test_premium_push() -> None:
    result = NashPushFoldResolver().evaluate(_scenario("AA", 10))
    assert result.correct_action == "push"
    assert result.in_range
    assert result.is_correct("shove")
    assert result.is_correct("All-In")
    assert not result.is_correct("fold")

    analysis = result.analysis
    assert analysis.mode == "push"
    assert analysis.ev_push == analysis.ev_action
    assert analysis.ev_call == 0.0
    assert analysis.ev_action == pytest.approx(push_ev(100, 10, len(result.adjusted_range)), abs=1e-4)
    assert analysis.ev_diff == analysis.ev_action
    assert analysis.icm_value == pytest.approx(500.0)
    assert not analysis.is_marginal
    assert analysis.marginal_explanation is None


def test_trash_folds() -> None:
    result = NashPushFoldResolver().evaluate(_scenario("32o", 10))
    assert result.correct_action == "fold"
    assert not result.in_range
    assert result.is_correct("fold")


def test_range_edge_is_marginal() -> None:
    resolver = NashPushFoldResolver(ordering=MatrixOrdering())
    probe = resolver.evaluate(_scenario("AA", 20, num_players=3, hero_position="btn"))
    in_range = set(probe.adjusted_range)
    edge = [hand for hand in strength_order() if hand in in_range][-1]

    result = resolver.evaluate(_scenario(edge, 20, num_players=3, hero_position="btn"))
    assert result.correct_action == "push"
    assert result.analysis.is_marginal
    assert result.analysis.marginal_explanation is not None
    assert result.analysis.marginal_explanation.startswith(edge)


def test_call_mode_uses_shover_range() -> None:
    resolver = NashPushFoldResolver()
    scenario = _scenario("AA", 8, hero_position="bb", training_mode="call")
    assert scenario.shover_position == "sb"
    result = resolver.evaluate(scenario)
    assert result.correct_action == "call"
    assert result.villain_push_range == tuple(resolver.table.push_range(8, "sb", 2))
    assert result.analysis.ev_call == pytest.approx(14.95)
    assert result.analysis.ev_push == 0.0
    assert result.is_correct("call")


def test_three_handed_shover_is_the_button() -> None:
    scenario = _scenario("AKs", 10, num_players=3, hero_position="bb", training_mode="call")
    assert scenario.shover_position == "btn"


def test_strength_order_flag_changes_extension_order() -> None:
    resolver = NashPushFoldResolver()
    scenario = _scenario(stack=20, opponent_type="loose")
    baseline = resolver.baseline_range(scenario)

    assert isinstance(resolver.ordering, MatrixOrdering)
    with override_features(enable={"pushfold.strength_order"}):
        assert isinstance(resolver.ordering, StrengthOrdering)
        extended = resolver.adjusted_range(scenario)

    extras = extended[len(baseline):]
    outside = [hand for hand in all_hand_classes() if hand not in set(extended)]
    assert extras
    assert min(hand_strength(hand) for hand in extras) >= max(hand_strength(hand) for hand in outside)


def test_explicit_ordering_wins_over_flag() -> None:
    resolver = NashPushFoldResolver(ordering=MatrixOrdering())
    with override_features(enable={"pushfold.strength_order"}):
        assert isinstance(resolver.ordering, MatrixOrdering)
