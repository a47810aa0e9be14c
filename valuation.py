"""
Currency valuation: which currency a card earns, what a point is worth under
the user's earnings goal, and how multiplier programs scale earnings.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from models import (
    CASH_ONLY,
    POINTS_CURRENCY_TYPES,
    POINTS_ONLY,
    CalculatorInput,
    CardInput,
    CurrencyInfo,
    CurrencyInput,
    PointValueTemplate,
    is_cashback_currency,
)

logger = logging.getLogger(__name__)

CASH_FACE_VALUE_CENTS = 100.0


def enabled_secondary_cards(cards: Iterable[CardInput]) -> Set[str]:
    """Cards whose secondary currency counts.

    A secondary currency only counts when another held card (or the card
    itself) earns it as its primary currency.
    """
    cards = list(cards)
    primary_ids = {card.primary_currency_id for card in cards}
    return {
        card.id
        for card in cards
        if card.secondary_currency_id and card.secondary_currency_id in primary_ids
    }


def select_template(
    templates: List[PointValueTemplate], selected_template_id: Optional[str] = None
) -> Optional[PointValueTemplate]:
    """The user's template, else the default one, else the first."""
    if selected_template_id is not None:
        chosen = next((t for t in templates if t.id == selected_template_id), None)
        if chosen is not None:
            return chosen
    return next((t for t in templates if t.is_default), templates[0] if templates else None)


def resolve_default_currency_values(
    currencies: Iterable[CurrencyInput],
    template: Optional[PointValueTemplate] = None,
) -> Dict[str, float]:
    """Template value when present, otherwise the currency's base value."""
    template_values = template.values if template else {}
    values: Dict[str, float] = {}
    for currency in currencies:
        if currency.id in template_values:
            values[currency.id] = float(template_values[currency.id])
        elif currency.base_value_cents:
            values[currency.id] = float(currency.base_value_cents)
    return values


def resolve_cash_out_values(currencies: Iterable[CurrencyInput]) -> Dict[str, float]:
    return {
        currency.id: float(currency.cash_out_value_cents)
        for currency in currencies
        if currency.cash_out_value_cents
    }


class CurrencyValuer:
    """Values a card's earnings for one calculation."""

    def __init__(self, calc_input: CalculatorInput):
        self.calc_input = calc_input
        self._cache: Dict[str, CurrencyInfo] = {}

    def point_value_cents(self, currency_id: str) -> float:
        """User override, then template/base default, then the configured fallback."""
        user_value = self.calc_input.user_currency_values.get(currency_id)
        if user_value is not None:
            return float(user_value)
        default_value = self.calc_input.default_currency_values.get(currency_id)
        if default_value is not None:
            return float(default_value)
        return self.calc_input.default_point_value_cents

    def _resolve(self, card: CardInput) -> CurrencyInfo:
        use_secondary = (
            card.id in self.calc_input.enabled_secondary_cards
            and card.secondary_currency is not None
            and card.secondary_currency_id is not None
        )
        if use_secondary:
            currency, currency_id = card.secondary_currency, card.secondary_currency_id
        else:
            currency, currency_id = card.primary_currency, card.primary_currency_id
        currency_type = currency.currency_type if currency else "other"
        currency_name = currency.name if currency else "Unknown"
        is_cashback = is_cashback_currency(currency_type)

        goal = self.calc_input.earnings_goal
        excluded = False
        if goal == CASH_ONLY:
            if is_cashback:
                value_cents = CASH_FACE_VALUE_CENTS
            else:
                cash_out = self.calc_input.cash_out_values.get(currency_id)
                value_cents = float(cash_out) if cash_out else 0.0
                excluded = not cash_out
        elif goal == POINTS_ONLY:
            excluded = currency_type not in POINTS_CURRENCY_TYPES
            value_cents = 0.0 if excluded else self.point_value_cents(currency_id)
        else:
            value_cents = self.point_value_cents(currency_id)

        if excluded:
            logger.debug("Card %s excluded under goal %s", card.id, goal)
        return CurrencyInfo(
            currency_id=currency_id,
            currency_type=currency_type,
            currency_name=currency_name,
            value_cents=value_cents,
            is_cashback=is_cashback,
            excluded=excluded,
        )

    def currency_for(self, card: CardInput) -> CurrencyInfo:
        if card.id not in self._cache:
            self._cache[card.id] = self._resolve(card)
        return self._cache[card.id]

    def multiplier_for(self, card: CardInput) -> float:
        """Product of every opted-in program covering the card or its currency."""
        currency_id = self.currency_for(card).currency_id
        multiplier = 1.0
        for program in self.calc_input.multiplier_programs:
            if (
                card.id in program.applicable_card_ids
                or currency_id in program.applicable_currency_ids
            ):
                multiplier *= float(program.multiplier)
        return multiplier

    def debit_pay_percent(self, card: CardInput) -> float:
        """Flat cash bonus percent; cash does not count under the points-only goal."""
        if self.calc_input.earnings_goal == POINTS_ONLY:
            return 0.0
        return float(self.calc_input.debit_pay_values.get(card.id, 0.0) or 0.0)

    def earned_per_dollar(self, card: CardInput, rate: float) -> float:
        """Units earned per dollar before multipliers (cash rates are percents)."""
        if self.currency_for(card).is_cashback:
            return rate / 100
        return rate

    def earned(self, card: CardInput, spend: float, rate: float) -> float:
        """Points or cash earned on ``spend``, multipliers applied."""
        return spend * self.earned_per_dollar(card, rate) * self.multiplier_for(card)

    def dollar_value(self, card: CardInput, earned: float) -> float:
        info = self.currency_for(card)
        if info.excluded:
            return 0.0
        if info.is_cashback:
            return earned
        return earned * info.value_cents / 100

    def value_per_dollar(self, card: CardInput, rate: float) -> float:
        """Dollar value of one dollar of spend at ``rate``, debit pay excluded."""
        return self.dollar_value(card, self.earned(card, 1.0, rate))
