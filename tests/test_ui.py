"""Tests for ui.py helper functions."""

import pathlib
import sys

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

pd = pytest.importorskip("pandas")
pytest.importorskip("streamlit")
pytest.importorskip("plotly")

from models import CalculatorInput, CardInput, CategoryBonusInput, CategorySpending, CurrencyInput
from returns import calculate_portfolio_returns
from store import build_calculator_input
from ui import (
    ALLOCATION_COLUMNS,
    allocations_frame,
    build_scenario,
    cards_frame,
    generate_priority_guide,
)

CASH = CurrencyInput("cash", "Cash Back", "USD", "cash_back", cash_out_value_cents=1.0)


def _card(card_id, default_rate):
    return CardInput(
        id=card_id,
        name=card_id.title(),
        issuer_id="bank",
        annual_fee=0,
        default_earn_rate=default_rate,
        primary_currency_id=CASH.id,
        primary_currency=CASH,
    )


def _returns(dining_dollars=1000, grocery_dollars=0):
    card = _card("rotating", 1)
    bonus = CategoryBonusInput(
        "q", "rotating", "single_category", 5, category_ids=[1], cap_amount=500, cap_period="year",
    )
    spending = [CategorySpending(1, "Dining", "dining", dining_dollars * 100)]
    if grocery_dollars:
        spending.append(CategorySpending(2, "Grocery", "grocery", grocery_dollars * 100))
    calc_input = CalculatorInput(
        cards=[card, _card("flat", 2)], spending=spending, category_bonuses=[bonus]
    )
    return calculate_portfolio_returns(calc_input)


class TestAllocationsFrame:
    """Tests for allocations_frame function."""

    def test_one_row_per_entry(self):
        df = allocations_frame(_returns())
        assert list(df.columns) == ALLOCATION_COLUMNS
        assert df["Amount"].sum() == pytest.approx(1000)
        assert set(df["Card"]) == {"Rotating"}

    def test_empty_returns(self):
        calc_input = CalculatorInput(cards=[_card("flat", 2)], spending=[])
        df = allocations_frame(calculate_portfolio_returns(calc_input))
        assert df.empty
        assert list(df.columns) == ALLOCATION_COLUMNS


class TestCardsFrame:
    """Tests for cards_frame function."""

    def test_every_card_listed(self):
        df = cards_frame(_returns(grocery_dollars=500))
        assert list(df["Card"]) == ["Rotating", "Flat"]
        assert df["Spend"].sum() == pytest.approx(1500)


class TestGeneratePriorityGuide:
    """Tests for generate_priority_guide function."""

    def test_empty_df(self):
        """Test generate_priority_guide with empty DataFrame."""
        assert generate_priority_guide(pd.DataFrame(), "$") == ""

    def test_single_rate_per_category(self):
        """Test generate_priority_guide when each category uses one rate."""
        df = pd.DataFrame(
            {
                "Card": ["Card A", "Card B"],
                "Category": ["Dining", "Grocery"],
                "Amount": [100.0, 200.0],
                "Rate": [2.0, 3.0],
            }
        )
        assert "single card" in generate_priority_guide(df, "$")

    def test_split_category_lists_order(self):
        """Test generate_priority_guide when a category is split across rates."""
        result = generate_priority_guide(allocations_frame(_returns()), "$")
        assert "**Dining:**" in result
        assert "1. Use **Rotating** at 5" in result
        assert "2. Use **Rotating** at 1" in result
        assert "$ 500.00" in result


class TestBuildScenario:
    """Tests for build_scenario function."""

    def test_sidebar_amounts_are_user_set(self):
        scenario = build_scenario({15: 1_200_000, 1: 100_000, 2: 0}, ["citi-double-cash"], "maximize")
        assert [item.category_id for item in scenario.spending] == [15, 1]
        assert all(item.is_user_set for item in scenario.spending)

    def test_rent_entered_in_sidebar_is_allocated(self):
        scenario = build_scenario({15: 1_200_000, 1: 100_000}, ["citi-double-cash"], "maximize")
        returns = calculate_portfolio_returns(build_calculator_input(scenario))

        assert returns.total_spend == pytest.approx(13000)
        assert "rent" in {a.category_slug for a in returns.category_breakdown}
