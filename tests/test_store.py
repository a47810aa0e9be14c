"""Tests for scenario loading in store.py."""

import json
import pathlib
import sys

import pytest
from pydantic import ValidationError

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
from returns import calculate_portfolio_returns
from store import (
    Scenario,
    ScenarioStore,
    UnknownCardError,
    UnknownCategoryError,
    build_calculator_input,
)

SAMPLE = pathlib.Path(__file__).resolve().parents[1] / "data" / "scenarios" / "sample.json"


def _write(tmp_path, data):
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestScenario:
    """Tests for Scenario validation."""

    def test_negative_spend_rejected(self):
        with pytest.raises(ValidationError):
            Scenario(held_card_ids=[], spending=[{"category_id": 1, "annual_spend_cents": -5}])

    def test_unknown_goal_rejected(self):
        with pytest.raises(ValidationError):
            Scenario(held_card_ids=[], earnings_goal="everything")


class TestBuildCalculatorInput:
    """Tests for build_calculator_input."""

    def test_unknown_card(self):
        with pytest.raises(UnknownCardError):
            build_calculator_input(Scenario(held_card_ids=["no-such-card"]))

    def test_unknown_category(self):
        scenario = Scenario(
            held_card_ids=["citi-double-cash"],
            spending=[{"category_id": 999, "annual_spend_cents": 100}],
        )
        with pytest.raises(UnknownCategoryError):
            build_calculator_input(scenario)

    def test_duplicate_held_cards_collapsed(self):
        calc_input = build_calculator_input(
            Scenario(held_card_ids=["citi-double-cash", "citi-double-cash"])
        )
        assert [card.id for card in calc_input.cards] == ["citi-double-cash"]

    def test_rules_and_bonuses_from_held_cards_only(self):
        calc_input = build_calculator_input(Scenario(held_card_ids=["chase-freedom-flex"]))
        assert {rule.card_id for rule in calc_input.earning_rules} == {"chase-freedom-flex"}
        assert [bonus.id for bonus in calc_input.category_bonuses] == ["cff-rotating"]

    def test_secondary_currency_enabled_by_held_primary(self):
        alone = build_calculator_input(Scenario(held_card_ids=["chase-freedom-flex"]))
        paired = build_calculator_input(
            Scenario(held_card_ids=["chase-freedom-flex", "chase-sapphire-preferred"])
        )
        assert alone.enabled_secondary_cards == set()
        assert paired.enabled_secondary_cards == {"chase-freedom-flex"}

    def test_perks_default_then_override(self):
        calc_input = build_calculator_input(
            Scenario(held_card_ids=["amex-gold", "chase-sapphire-preferred"], perks_values={"amex-gold": 100})
        )
        assert calc_input.perks_values == {"amex-gold": 100, "chase-sapphire-preferred": 50}

    def test_template_values(self):
        standard = build_calculator_input(Scenario(held_card_ids=["amex-gold"]))
        conservative = build_calculator_input(
            Scenario(held_card_ids=["amex-gold"], selected_template_id="conservative")
        )
        assert standard.default_currency_values["amex-mr"] == 1.6
        assert conservative.default_currency_values["amex-mr"] == 1.2

    def test_default_point_value_passed_through(self):
        calc_input = build_calculator_input(
            Scenario(held_card_ids=["amex-gold"]), default_point_value_cents=0.8
        )
        assert calc_input.default_point_value_cents == 0.8


class TestScenarioStore:
    """Tests for ScenarioStore."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ScenarioStore(str(tmp_path / "missing.json")).load()

    def test_load(self, tmp_path):
        path = _write(tmp_path, {
            "held_card_ids": ["citi-double-cash"],
            "spending": [{"category_id": 1, "annual_spend_cents": 100000}],
        })
        scenario = ScenarioStore(str(path)).load()
        assert scenario.held_card_ids == ["citi-double-cash"]
        assert scenario.spending[0].annual_spend_cents == 100000

    def test_load_input_runs_end_to_end(self, tmp_path):
        path = _write(tmp_path, {
            "held_card_ids": ["citi-double-cash"],
            "spending": [{"category_id": 1, "annual_spend_cents": 100000}],
        })
        returns = calculate_portfolio_returns(ScenarioStore(str(path)).load_input())
        assert returns.total_value == pytest.approx(20)

    def test_sample_scenario(self):
        calc_input = ScenarioStore(str(SAMPLE)).load_input()
        returns = calculate_portfolio_returns(calc_input)

        assert len(calc_input.cards) == 4
        rent = next(a for a in returns.category_breakdown if a.category_slug == "rent")
        assert rent.allocated_spend == pytest.approx(24000)
        for allocation in returns.category_breakdown:
            assert allocation.allocated_spend == pytest.approx(allocation.total_spend)

    def test_excluded_category_needs_user_set(self):
        def rent_row(is_user_set):
            return {"category_id": 15, "annual_spend_cents": 120000, "is_user_set": is_user_set}

        ignored = build_calculator_input(
            Scenario(held_card_ids=["citi-double-cash"], spending=[rent_row(False)])
        )
        counted = build_calculator_input(
            Scenario(held_card_ids=["citi-double-cash"], spending=[rent_row(True)])
        )
        assert calculate_portfolio_returns(ignored).total_spend == 0
        assert calculate_portfolio_returns(counted).total_spend == pytest.approx(1200)
