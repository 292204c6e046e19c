from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from gtopreflop.config import EngineConfig
from gtopreflop.web.app import create_app


def _client() -> TestClient:
    return TestClient(create_app(EngineConfig()))


def _hand(**overrides: Any) -> dict[str, Any]:
    history: dict[str, Any] = {
        "heroName": "Hero",
        "heroCards": ["Kh", {"rank": "9", "suit": "d"}],
        "players": [
            {"name": "Hero", "position": "bb", "stack": 100, "isHero": True},
            {"name": "Villain", "position": "BTN", "stack": 100},
        ],
        "preflop": [
            {"player": "Villain", "action": "raise", "amount": 2.5},
            {"player": "Hero", "action": "call", "amount": 2.5},
        ],
        "flop": [{"player": "Hero", "action": "check"}, {"player": "Villain", "action": "bet", "amount": 3}],
        "board": ["Kd", "7d", "2c"],
    }
    history.update(overrides)
    return {"handHistory": history}


def test_healthz() -> None:
    response = _client().get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_spot_from_range_table() -> None:
    response = _client().post(
        "/api/v1/analyze",
        json={"heroHand": ["As", "Ad"], "heroPosition": "utg", "stackSize": 200, "potSize": 1.5},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    analysis = data["analysis"]
    assert analysis["gtoSource"] == "database"
    assert analysis["actions"] == [{"action": "raise", "frequency": 1.0, "ev": 2.45}]
    assert analysis["equity"] == pytest.approx(62.2, abs=0.1)
    assert analysis["handStrength"] == "Strong"
    assert analysis["spr"] == 133.3
    assert "villainRangeMatrix" not in analysis
    assert "boardTexture" not in analysis


def test_spot_without_table_falls_back_to_heuristic() -> None:
    response = _client().post(
        "/api/v1/analyze",
        json={"heroHand": ["Ah", "Jd"], "heroPosition": "CO", "villainPosition": "btn", "stackSize": 100},
    )
    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert analysis["gtoSource"] == "heuristic"
    assert analysis["villainRange"] == 40
    assert analysis["combos"] == 508
    matrix = analysis["villainRangeMatrix"]
    assert len(matrix) == 13 and all(len(row) == 13 for row in matrix)
    total = sum(item["frequency"] for item in analysis["actions"])
    assert abs(total - 1.0) < 0.02


def test_postflop_spot_reports_texture() -> None:
    response = _client().post(
        "/api/v1/analyze",
        json={
            "heroHand": ["Ah", "Jd"],
            "heroPosition": "BTN",
            "villainPosition": "BB",
            "street": "flop",
            "board": ["Kh", "7h", "2c"],
        },
    )
    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert analysis["boardTexture"] == "wet"
    assert analysis["gtoSource"] == "heuristic"


def test_spot_rejects_bad_input() -> None:
    client = _client()
    for body in (
        {"heroHand": ["As"], "heroPosition": "BTN"},
        {"heroHand": ["As", "As"], "heroPosition": "BTN"},
        {"heroHand": ["As", "Zz"], "heroPosition": "BTN"},
        {"heroHand": ["As", "Kd"], "heroPosition": "BTN", "potSize": 0},
        {"heroHand": ["As", "Kd"], "heroPosition": "BTN", "scenario": "squeeze"},
    ):
        response = client.post("/api/v1/analyze", json=body)
        assert response.status_code == 400, body
        assert "detail" in response.json()


def test_hand_analysis_scores_preflop_and_annotates_postflop() -> None:
    response = _client().post("/api/v1/analyze/hand", json=_hand())
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True

    actions = data["analyzedActions"]
    assert len(actions) == 4
    assert actions[0]["isHero"] is False
    assert "evLossBB" not in actions[0]

    call = actions[1]
    assert call["scenario"] == "vs_rfi"
    assert call["villainPosition"] == "BTN"
    assert call["gtoSource"] == "database"
    assert call["gtoRecommendation"] == "call"
    assert call["evLossBB"] == 0.0
    assert call["severity"] == "perfect"
    assert call["severityLabel"] == "Perfect"
    assert call["accuracy"] == 90.0

    check = actions[2]
    assert check["street"] == "flop"
    assert check["boardTexture"] == "wet"
    assert "evLossBB" not in check

    summary = data["summary"]
    assert summary["heroActionCount"] == 2
    assert summary["scoredActions"] == 1
    assert summary["perfectActions"] == 1
    assert summary["totalEvLossBB"] == 0.0
    assert summary["overallRating"] == "GTO Master"


def test_hand_analysis_scores_a_fold_as_a_leak() -> None:
    body = _hand(
        preflop=[
            {"player": "Villain", "action": "raise", "amount": 2.5},
            {"player": "Hero", "action": "fold"},
        ],
        flop=[],
    )
    data = _client().post("/api/v1/analyze/hand", json=body).json()
    fold = data["analyzedActions"][1]
    assert fold["severity"] == "inaccuracy"
    assert fold["evLossBB"] == 0.15
    assert data["summary"]["inaccuracies"] == 1
    assert data["summary"]["overallRating"] == "Excellent"


def test_hand_analysis_errors_use_failure_envelope() -> None:
    client = _client()

    missing_players = client.post("/api/v1/analyze/hand", json=_hand(players=[]))
    assert missing_players.status_code == 400
    assert missing_players.json()["success"] is False

    bad_action = _hand(preflop=[{"player": "Hero", "action": "limp"}])
    response = client.post("/api/v1/analyze/hand", json=bad_action)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Unknown action: 'limp'"}


def test_hand_analysis_charges_folding_aces_from_utg() -> None:
    body = _hand(
        heroCards=["As", "Ad"],
        players=[
            {"name": "Hero", "position": "UTG", "stack": 100, "isHero": True},
            {"name": "Villain", "position": "BB", "stack": 100},
        ],
        preflop=[{"player": "Hero", "action": "fold"}],
        flop=[],
        board=[],
    )
    data = _client().post("/api/v1/analyze/hand", json=body).json()
    fold = data["analyzedActions"][0]
    assert fold["scenario"] == "rfi"
    assert fold["gtoRecommendation"] == "raise"
    assert fold["evLossBB"] > 0
    assert fold["severity"] != "perfect"
    assert data["summary"]["overallRating"] != "GTO Master"


def test_hand_analysis_reads_raise_spellings() -> None:
    body = _hand(
        preflop=[
            {"player": "Villain", "action": "raises", "amount": 2.5},
            {"player": "Hero", "action": "calls", "amount": 2.5},
        ],
        flop=[],
    )
    call = _client().post("/api/v1/analyze/hand", json=body).json()["analyzedActions"][1]
    assert call["scenario"] == "vs_rfi"
    assert call["villainPosition"] == "BTN"
    assert call["gtoRecommendation"] == "call"
