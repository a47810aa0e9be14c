"""Tests for the FastAPI endpoints in api.py."""

import pathlib
import sys

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from api import app
from config import settings

client = TestClient(app)


def _request(**overrides):
    body = {
        "held_card_ids": ["citi-double-cash"],
        "spending": [{"category_id": 1, "annual_spend_cents": 100000}],
    }
    body.update(overrides)
    return body


class TestReferenceEndpoints:
    """Tests for GET /cards and GET /categories."""

    def test_cards(self):
        response = client.get("/cards")
        assert response.status_code == 200
        ids = [card["id"] for card in response.json()]
        assert "citi-double-cash" in ids

    def test_categories(self):
        response = client.get("/categories")
        assert response.status_code == 200
        slugs = {cat["slug"] for cat in response.json()}
        assert {"dining", "over-5k"} <= slugs


class TestReturnsEndpoint:
    """Tests for POST /returns."""

    def test_returns_camel_case(self):
        response = client.post("/returns", json=_request())
        assert response.status_code == 200
        data = response.json()
        assert data["totalSpend"] == pytest.approx(1000)
        assert data["totalValue"] == pytest.approx(20)
        [category] = data["categoryBreakdown"]
        assert category["returnOnSpend"] == pytest.approx(2)
        assert category["allocations"][0]["cardId"] == "citi-double-cash"

    def test_marginal_values_included(self):
        data = client.post("/returns", json=_request()).json()
        [card] = data["cardBreakdown"]
        assert card["marginalValue"] == pytest.approx(20)
        assert card["replacementValue"] == 0

    def test_marginal_values_skipped(self):
        data = client.post("/returns", json=_request(include_marginal_values=False)).json()
        assert data["cardBreakdown"][0]["marginalValue"] is None

    def test_recommendations(self):
        data = client.post("/returns", json=_request()).json()
        recommendations = data["recommendations"]
        assert 0 < len(recommendations) <= 3
        improvements = [rec["improvement"] for rec in recommendations]
        assert improvements == sorted(improvements, reverse=True)
        recommended = {rec["card"]["id"] for rec in recommendations}
        assert "citi-double-cash" not in recommended
        assert "chase-ink-premier" not in recommended

    def test_recommended_card_keys_are_camel_case(self):
        data = client.post("/returns", json=_request()).json()
        card = data["recommendations"][0]["card"]
        assert "annualFee" in card
        assert "defaultEarnRate" in card
        assert "annual_fee" not in card

    def test_recommendations_skipped(self):
        data = client.post("/returns", json=_request(include_recommendations=False)).json()
        assert data["recommendations"] == []

    def test_unknown_card_is_404(self):
        response = client.post("/returns", json=_request(held_card_ids=["no-such-card"]))
        assert response.status_code == 404

    def test_unknown_category_is_422(self):
        response = client.post(
            "/returns",
            json=_request(spending=[{"category_id": 999, "annual_spend_cents": 100}]),
        )
        assert response.status_code == 422

    def test_negative_spend_is_422(self):
        response = client.post(
            "/returns",
            json=_request(spending=[{"category_id": 1, "annual_spend_cents": -100}]),
        )
        assert response.status_code == 422

    def test_joint_strategy(self):
        pytest.importorskip("pulp")
        data = client.post("/returns", json=_request(strategy="joint")).json()
        assert data["totalValue"] == pytest.approx(20)


class TestScenarioEndpoint:
    """Tests for GET /scenario/returns."""

    def test_sample_scenario(self, monkeypatch):
        sample = pathlib.Path(__file__).resolve().parents[1] / "data" / "scenarios" / "sample.json"
        monkeypatch.setattr(settings, "scenario_file", str(sample))
        data = client.get("/scenario/returns").json()
        assert {card["cardId"] for card in data["cardBreakdown"]} == {
            "chase-sapphire-preferred",
            "chase-freedom-flex",
            "citi-double-cash",
            "usbank-cash-plus",
        }

    def test_missing_scenario_file(self, monkeypatch, tmp_path):
        monkeypatch.setattr(settings, "scenario_file", str(tmp_path / "missing.json"))
        assert client.get("/scenario/returns").status_code == 404
