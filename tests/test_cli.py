from __future__ import annotations

import pytest

from gtopreflop.cli import main


def test_spot_command_prints_strategy(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--no-color", "spot", "As", "Ad", "--position", "UTG", "--stack", "200"])
    out = capsys.readouterr().out
    assert "raise" in out
    assert "database" in out


def test_pushfold_command_resolves_hand(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--no-color", "pushfold", "--hand", "AA", "--stack", "10"])
    out = capsys.readouterr().out
    assert "push" in out
    assert "AA" in out


def test_pushfold_command_deals_seeded_spot(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--no-color", "pushfold", "--seed", "3", "--difficulty", "beginner"])
    first = capsys.readouterr().out
    main(["--no-color", "pushfold", "--seed", "3", "--difficulty", "beginner"])
    assert capsys.readouterr().out == first


def test_daily_command(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--no-color", "daily", "--date", "2024-01-15", "--reveal"])
    out = capsys.readouterr().out
    assert "Daily challenge 2024-01-15" in out


def test_daily_command_week_plan(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--no-color", "daily", "--date", "2024-01-15", "--week-day", "3", "--reveal"])
    out = capsys.readouterr().out
    assert "week day 3" in out


def test_bad_input_exits_with_message() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--no-color", "spot", "As", "As", "--position", "BTN"])
    assert "error" in str(excinfo.value)
    with pytest.raises(SystemExit):
        main(["--no-color", "daily", "--date", "yesterday"])


def test_pushfold_rounds_tracks_answers_until_quit(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    answers = iter(["push", "maybe", "fold", "q"])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(answers))
    main(["--no-color", "pushfold", "--rounds", "3", "--seed", "5", "--difficulty", "beginner"])
    out = capsys.readouterr().out
    assert "Spot 1/3" in out and "Spot 3/3" in out
    assert "Invalid input" in out
    assert "Drill summary" in out
    assert "/2 correct" in out
    assert "Accuracy" in out


def test_pushfold_rounds_rejects_a_fixed_hand() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--no-color", "pushfold", "--rounds", "2", "--hand", "AA"])
    assert "--rounds" in str(excinfo.value)
    with pytest.raises(SystemExit):
        main(["--no-color", "pushfold", "--rounds", "0"])
