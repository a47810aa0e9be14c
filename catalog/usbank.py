"""
This module provides the catalog entries for U.S. Bank cards.
"""

from catalog.reference import categories, currencies
from models import CardInput, CatalogEntry, CategoryBonusInput, EarningRuleInput


def get_cash_plus_card() -> CatalogEntry:
    """Return the U.S. Bank Cash+ catalog entry.

    The 5% category is chosen by the user each quarter and capped at $100 of
    cash back per quarter.
    """
    card = CardInput(
        id="usbank-cash-plus",
        name="U.S. Bank Cash+",
        issuer_id="usbank",
        annual_fee=0,
        default_earn_rate=1,
        primary_currency_id=currencies["cash"].id,
        primary_currency=currencies["cash"],
    )
    rules = [
        EarningRuleInput(id="ucp-grocery", card_id=card.id, category_id=categories["grocery"].id, rate=2),
        EarningRuleInput(id="ucp-gas", card_id=card.id, category_id=categories["gas"].id, rate=2),
    ]
    bonuses = [
        CategoryBonusInput(
            id="ucp-selected",
            card_id=card.id,
            cap_type="selected_category",
            elevated_rate=5,
            category_ids=[
                categories["streaming"].id,
                categories["home_improvement"].id,
                categories["transit"].id,
                categories["drugstore"].id,
            ],
            cap_amount=100,
            cap_period="quarter",
            cap_unit="rewards",
        )
    ]
    return CatalogEntry(card=card, earning_rules=rules, category_bonuses=bonuses)
