"""
This module provides the catalog entries for Chase cards.
"""
# pylint: disable=duplicate-code

from catalog.reference import categories, currencies
from models import CardInput, CatalogEntry, CategoryBonusInput, EarningRuleInput


def get_sapphire_preferred_card() -> CatalogEntry:
    """Return the Chase Sapphire Preferred catalog entry.

    Returns:
        CatalogEntry: Ultimate Rewards card with dining/streaming and travel
                      rules, including the higher rate for portal bookings.
    """
    card = CardInput(
        id="chase-sapphire-preferred",
        name="Chase Sapphire Preferred",
        issuer_id="chase",
        annual_fee=95,
        default_earn_rate=1,
        primary_currency_id=currencies["ultimate_rewards"].id,
        primary_currency=currencies["ultimate_rewards"],
        default_perks_value=50,
    )
    rules = [
        EarningRuleInput(id="csp-dining", card_id=card.id, category_id=categories["dining"].id, rate=3),
        EarningRuleInput(
            id="csp-streaming", card_id=card.id, category_id=categories["streaming"].id, rate=3
        ),
        EarningRuleInput(id="csp-travel", card_id=card.id, category_id=categories["travel"].id, rate=2),
        EarningRuleInput(
            id="csp-travel-portal",
            card_id=card.id,
            category_id=categories["travel"].id,
            rate=5,
            booking_method="portal",
        ),
    ]
    return CatalogEntry(card=card, earning_rules=rules)


def get_freedom_flex_card() -> CatalogEntry:
    """Return the Chase Freedom Flex catalog entry.

    Earns cash back, or Ultimate Rewards when another card earns them.
    """
    card = CardInput(
        id="chase-freedom-flex",
        name="Chase Freedom Flex",
        issuer_id="chase",
        annual_fee=0,
        default_earn_rate=1,
        primary_currency_id=currencies["cash"].id,
        primary_currency=currencies["cash"],
        secondary_currency_id=currencies["ultimate_rewards"].id,
        secondary_currency=currencies["ultimate_rewards"],
    )
    rules = [
        EarningRuleInput(id="cff-dining", card_id=card.id, category_id=categories["dining"].id, rate=3),
        EarningRuleInput(
            id="cff-drugstore", card_id=card.id, category_id=categories["drugstore"].id, rate=3
        ),
        EarningRuleInput(
            id="cff-travel-portal",
            card_id=card.id,
            category_id=categories["travel"].id,
            rate=5,
            booking_method="portal",
        ),
    ]
    bonuses = [
        CategoryBonusInput(
            id="cff-rotating",
            card_id=card.id,
            cap_type="combined_categories",
            elevated_rate=5,
            category_ids=[categories["grocery"].id, categories["gas"].id],
            cap_amount=1500,
            cap_period="quarter",
        )
    ]
    return CatalogEntry(card=card, earning_rules=rules, category_bonuses=bonuses)


def get_ink_premier_card() -> CatalogEntry:
    """Return the Chase Ink Business Premier catalog entry (business only)."""
    card = CardInput(
        id="chase-ink-premier",
        name="Chase Ink Business Premier",
        issuer_id="chase",
        annual_fee=195,
        default_earn_rate=2,
        primary_currency_id=currencies["cash"].id,
        primary_currency=currencies["cash"],
        exclude_from_recommendations=True,
    )
    rules = [
        EarningRuleInput(
            id="cip-over-5k", card_id=card.id, category_id=categories["over_5k"].id, rate=2.5
        ),
    ]
    return CatalogEntry(card=card, earning_rules=rules)
