"""
The card catalog: every card the optimizer can hold or recommend.
"""

from typing import Dict, List

from catalog.amex import (
    get_blue_business_plus_card,
    get_blue_cash_preferred_card,
    get_gold_card,
    get_hilton_honors_card,
)
from catalog.chase import (
    get_freedom_flex_card,
    get_ink_premier_card,
    get_sapphire_preferred_card,
)
from catalog.citi import (
    get_aadvantage_platinum_card,
    get_custom_cash_card,
    get_double_cash_card,
)
from catalog.usbank import get_cash_plus_card
from models import CatalogEntry


def get_catalog() -> List[CatalogEntry]:
    """Return every catalog card with its earning rules and bonuses."""
    return [
        get_sapphire_preferred_card(),
        get_freedom_flex_card(),
        get_ink_premier_card(),
        get_gold_card(),
        get_blue_cash_preferred_card(),
        get_hilton_honors_card(),
        get_blue_business_plus_card(),
        get_custom_cash_card(),
        get_double_cash_card(),
        get_aadvantage_platinum_card(),
        get_cash_plus_card(),
    ]


def catalog_by_id() -> Dict[str, CatalogEntry]:
    return {entry.card.id: entry for entry in get_catalog()}
