from __future__ import annotations

from gtopreflop.core.scenario import ActionRecord, ScenarioType, classify_scenario

POSITIONS = {"Hero": "BB", "Alice": "CO", "Bob": "BTN", "Carol": "SB"}


def test_no_raise_is_an_open() -> None:
    actions = [ActionRecord("Alice", "fold"), ActionRecord("Bob", "fold"), ActionRecord("Hero", "raise", 2.5)]
    result = classify_scenario(actions, 2, POSITIONS)
    assert result.scenario is ScenarioType.RFI
    assert result.villain_position is None


def test_single_raise_is_facing_an_open() -> None:
    actions = [ActionRecord("Alice", "fold"), ActionRecord("Bob", "raise", 2.5), ActionRecord("Hero", "call", 2.5)]
    result = classify_scenario(actions, 2, POSITIONS)
    assert result.scenario is ScenarioType.VS_RFI
    assert result.villain_position == "BTN"


def test_two_raises_is_facing_a_reraise_from_the_last_aggressor() -> None:
    actions = [
        ActionRecord("Alice", "raise", 2.5),
        ActionRecord("Bob", "Raise", 8.0),
        ActionRecord("Carol", "fold"),
        ActionRecord("Hero", "fold"),
    ]
    result = classify_scenario(actions, 3, POSITIONS)
    assert result.scenario is ScenarioType.VS_3BET
    assert result.villain_position == "BTN"


def test_bets_count_and_later_actions_are_ignored() -> None:
    actions = [ActionRecord("Alice", "bet", 2.5), ActionRecord("Hero", "call"), ActionRecord("Bob", "raise", 9.0)]
    result = classify_scenario(actions, 1, POSITIONS)
    assert result.scenario is ScenarioType.VS_RFI
    assert result.villain_position == "CO"


def test_unknown_raiser_defaults_to_button() -> None:
    actions = [ActionRecord("Stranger", "raise", 3.0), ActionRecord("Hero", "call")]
    result = classify_scenario(actions, 1, POSITIONS)
    assert result.villain_position == "BTN"


def test_raise_spellings_and_all_ins_count_as_raises() -> None:
    for spelling in ("raises", "bets", "Bet", "all-in", "shove", "goes all-in"):
        actions = [ActionRecord("Alice", spelling, 2.5), ActionRecord("Hero", "calls")]
        result = classify_scenario(actions, 1, POSITIONS)
        assert result.scenario is ScenarioType.VS_RFI, spelling
        assert result.villain_position == "CO"


def test_open_then_shove_is_facing_a_reraise() -> None:
    actions = [ActionRecord("Alice", "raises", 2.5), ActionRecord("Bob", "push", 100.0), ActionRecord("Hero", "fold")]
    result = classify_scenario(actions, 2, POSITIONS)
    assert result.scenario is ScenarioType.VS_3BET
    assert result.villain_position == "BTN"


def test_unrecognised_tokens_are_passive() -> None:
    actions = [ActionRecord("Alice", "posts", 1.0), ActionRecord("Hero", "raise", 2.5)]
    assert classify_scenario(actions, 1, POSITIONS).scenario is ScenarioType.RFI
