"""
This module provides the catalog entries for Citi cards.
"""
# pylint: disable=duplicate-code

from catalog.reference import categories, currencies
from models import CardInput, CatalogEntry, CategoryBonusInput, EarningRuleInput

custom_cash_categories = [
    categories["dining"],
    categories["grocery"],
    categories["gas"],
    categories["transit"],
    categories["streaming"],
    categories["drugstore"],
    categories["home_improvement"],
]


def get_custom_cash_card() -> CatalogEntry:
    """Return the Citi Custom Cash catalog entry.

    5% on whichever eligible category the user spends most in, up to $500
    of spend per month.
    """
    card = CardInput(
        id="citi-custom-cash",
        name="Citi Custom Cash",
        issuer_id="citi",
        annual_fee=0,
        default_earn_rate=1,
        primary_currency_id=currencies["cash"].id,
        primary_currency=currencies["cash"],
        secondary_currency_id=currencies["thankyou"].id,
        secondary_currency=currencies["thankyou"],
    )
    bonuses = [
        CategoryBonusInput(
            id="ccc-top",
            card_id=card.id,
            cap_type="top_category",
            elevated_rate=5,
            category_ids=[cat.id for cat in custom_cash_categories],
            cap_amount=500,
            cap_period="month",
        )
    ]
    return CatalogEntry(card=card, category_bonuses=bonuses)


def get_double_cash_card() -> CatalogEntry:
    """Return the Citi Double Cash catalog entry (2% on everything)."""
    card = CardInput(
        id="citi-double-cash",
        name="Citi Double Cash",
        issuer_id="citi",
        annual_fee=0,
        default_earn_rate=2,
        primary_currency_id=currencies["cash"].id,
        primary_currency=currencies["cash"],
        secondary_currency_id=currencies["thankyou"].id,
        secondary_currency=currencies["thankyou"],
    )
    return CatalogEntry(card=card)


def get_aadvantage_platinum_card() -> CatalogEntry:
    """Return the Citi AAdvantage Platinum Select catalog entry."""
    card = CardInput(
        id="citi-aadvantage-platinum",
        name="Citi AAdvantage Platinum Select",
        issuer_id="citi",
        annual_fee=99,
        default_earn_rate=1,
        primary_currency_id=currencies["aadvantage"].id,
        primary_currency=currencies["aadvantage"],
        default_perks_value=60,
    )
    rules = [
        EarningRuleInput(id="aa-dining", card_id=card.id, category_id=categories["dining"].id, rate=2),
        EarningRuleInput(id="aa-gas", card_id=card.id, category_id=categories["gas"].id, rate=2),
        EarningRuleInput(
            id="aa-american",
            card_id=card.id,
            category_id=categories["flights"].id,
            rate=2,
            booking_method="brand",
            brand_name="American Airlines",
        ),
    ]
    return CatalogEntry(card=card, earning_rules=rules)
