"""
This module provides the catalog entries for American Express cards.
"""
# pylint: disable=duplicate-code

from catalog.reference import categories, currencies
from models import CardInput, CatalogEntry, CategoryBonusInput, EarningRuleInput


def get_gold_card() -> CatalogEntry:
    """Return the Amex Gold catalog entry."""
    card = CardInput(
        id="amex-gold",
        name="American Express Gold",
        issuer_id="amex",
        annual_fee=325,
        default_earn_rate=1,
        primary_currency_id=currencies["membership_rewards"].id,
        primary_currency=currencies["membership_rewards"],
        default_perks_value=240,
    )
    rules = [
        EarningRuleInput(
            id="gold-dining",
            card_id=card.id,
            category_id=categories["dining"].id,
            rate=4,
            has_cap=True,
            cap_amount=50000,
            cap_period="year",
            cap_unit="spend",
            post_cap_rate=1,
        ),
        EarningRuleInput(
            id="gold-grocery",
            card_id=card.id,
            category_id=categories["grocery"].id,
            rate=4,
            has_cap=True,
            cap_amount=25000,
            cap_period="year",
            cap_unit="spend",
            post_cap_rate=1,
        ),
        EarningRuleInput(id="gold-flights", card_id=card.id, category_id=categories["flights"].id, rate=3),
    ]
    return CatalogEntry(card=card, earning_rules=rules)


def get_blue_cash_preferred_card() -> CatalogEntry:
    """Return the Amex Blue Cash Preferred catalog entry."""
    card = CardInput(
        id="amex-blue-cash-preferred",
        name="Blue Cash Preferred",
        issuer_id="amex",
        annual_fee=95,
        default_earn_rate=1,
        primary_currency_id=currencies["cash"].id,
        primary_currency=currencies["cash"],
    )
    rules = [
        EarningRuleInput(
            id="bcp-grocery",
            card_id=card.id,
            category_id=categories["grocery"].id,
            rate=6,
            has_cap=True,
            cap_amount=6000,
            cap_period="year",
            cap_unit="spend",
            post_cap_rate=1,
        ),
        EarningRuleInput(id="bcp-streaming", card_id=card.id, category_id=categories["streaming"].id, rate=6),
        EarningRuleInput(id="bcp-gas", card_id=card.id, category_id=categories["gas"].id, rate=3),
        EarningRuleInput(id="bcp-transit", card_id=card.id, category_id=categories["transit"].id, rate=3),
    ]
    return CatalogEntry(card=card, earning_rules=rules)


def get_hilton_honors_card() -> CatalogEntry:
    """Return the Hilton Honors Amex catalog entry.

    The 7x hotel rate only applies to stays booked with Hilton.
    """
    card = CardInput(
        id="amex-hilton-honors",
        name="Hilton Honors American Express",
        issuer_id="amex",
        annual_fee=0,
        default_earn_rate=3,
        primary_currency_id=currencies["hilton"].id,
        primary_currency=currencies["hilton"],
    )
    rules = [
        EarningRuleInput(
            id="hh-hilton",
            card_id=card.id,
            category_id=categories["hotels"].id,
            rate=7,
            booking_method="brand",
            brand_name="Hilton",
        ),
        EarningRuleInput(id="hh-dining", card_id=card.id, category_id=categories["dining"].id, rate=5),
        EarningRuleInput(id="hh-grocery", card_id=card.id, category_id=categories["grocery"].id, rate=5),
        EarningRuleInput(id="hh-gas", card_id=card.id, category_id=categories["gas"].id, rate=5),
    ]
    return CatalogEntry(card=card, earning_rules=rules)


def get_blue_business_plus_card() -> CatalogEntry:
    """Return the Blue Business Plus catalog entry: 2x on everything up to $50k a year."""
    card = CardInput(
        id="amex-blue-business-plus",
        name="Blue Business Plus",
        issuer_id="amex",
        annual_fee=0,
        default_earn_rate=1,
        primary_currency_id=currencies["membership_rewards"].id,
        primary_currency=currencies["membership_rewards"],
        exclude_from_recommendations=True,
    )
    bonuses = [
        CategoryBonusInput(
            id="bbp-everything",
            card_id=card.id,
            cap_type="all_categories",
            elevated_rate=2,
            cap_amount=50000,
            cap_period="year",
            post_cap_rate=1,
        )
    ]
    return CatalogEntry(card=card, category_bonuses=bonuses)
