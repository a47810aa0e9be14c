"""Tests for models.py dataclasses."""

import pathlib
import sys

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
from models import (
    AllocationEntry,
    CalculatorInput,
    Category,
    CategoryAllocation,
    CategorySpending,
    InvalidInputError,
    RateOption,
    is_cashback_currency,
)


def _entry(spend, earned_value):
    return AllocationEntry(
        card_id="c",
        card_name="Card",
        currency_type="cash_back",
        currency_name="Cash",
        spend=spend,
        rate=2,
        earned=earned_value,
        earned_value=earned_value,
        is_cashback=True,
    )


class TestCategory:
    """Tests for Category dataclass."""

    def test_category_creation(self):
        """Test creating a Category instance."""
        cat = Category(id=1, name="Dining", slug="dining")
        assert cat.parent_category_id is None
        assert cat.excluded_by_default is False

    def test_category_is_frozen(self):
        """Test that Category is immutable."""
        cat = Category(id=1, name="Dining", slug="dining")
        with pytest.raises(AttributeError):
            cat.name = "Restaurants"


class TestCategorySpending:
    """Tests for CategorySpending dataclass."""

    def test_total_includes_large_purchases(self):
        row = CategorySpending(1, "Dining", "dining", 50000, large_purchase_spend_cents=600000)
        assert row.total_spend_cents == 650000

    def test_negative_spend_rejected(self):
        with pytest.raises(InvalidInputError):
            CategorySpending(1, "Dining", "dining", -1)

    def test_negative_large_purchase_rejected(self):
        with pytest.raises(InvalidInputError):
            CategorySpending(1, "Dining", "dining", 0, large_purchase_spend_cents=-100)


class TestCalculatorInput:
    """Tests for CalculatorInput validation."""

    def test_unknown_goal_rejected(self):
        with pytest.raises(InvalidInputError):
            CalculatorInput(cards=[], spending=[], earnings_goal="everything")

    def test_invalid_input_is_value_error(self):
        assert issubclass(InvalidInputError, ValueError)

    def test_defaults(self):
        calc_input = CalculatorInput(cards=[], spending=[])
        assert calc_input.earnings_goal == "maximize"
        assert calc_input.default_point_value_cents == 1.0


class TestRateOption:
    """Tests for RateOption."""

    def test_uncapped_by_default(self):
        assert not RateOption(rate=2).is_capped

    def test_capped(self):
        assert RateOption(rate=5, annual_cap=6000).is_capped


class TestCategoryAllocation:
    """Tests for CategoryAllocation derived values."""

    def test_return_on_spend_is_percent(self):
        allocation = CategoryAllocation(1, "Dining", "dining", total_spend=1000.0)
        allocation.allocations.append(_entry(1000.0, 20.0))
        assert allocation.return_on_spend == pytest.approx(2.0)
        assert allocation.allocated_spend == pytest.approx(1000.0)

    def test_return_on_spend_zero_when_no_spend(self):
        allocation = CategoryAllocation(1, "Dining", "dining", total_spend=0.0)
        assert allocation.return_on_spend == 0.0


@pytest.mark.parametrize(
    "currency_type,expected",
    [("cash_back", True), ("crypto", True), ("cash", True), ("points", False), (None, False)],
)
def test_is_cashback_currency(currency_type, expected):
    assert is_cashback_currency(currency_type) is expected
