"""Tests for the card catalog modules."""

import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from catalog import catalog_by_id, get_catalog
from catalog.amex import get_blue_business_plus_card, get_gold_card
from catalog.chase import get_freedom_flex_card, get_sapphire_preferred_card
from catalog.citi import get_custom_cash_card
from catalog.reference import LARGE_PURCHASE_CATEGORY_ID, categories, currencies
from catalog.usbank import get_cash_plus_card
from models import CatalogEntry
from rules import annualize_cap

CATEGORY_IDS = {cat.id for cat in categories.values()}


class TestCatalog:
    """Tests for the catalog as a whole."""

    def test_entries_are_catalog_entries(self):
        assert all(isinstance(entry, CatalogEntry) for entry in get_catalog())

    def test_card_ids_unique(self):
        ids = [entry.card.id for entry in get_catalog()]
        assert len(ids) == len(set(ids))
        assert set(catalog_by_id()) == set(ids)

    def test_rules_belong_to_their_card(self):
        for entry in get_catalog():
            assert all(rule.card_id == entry.card.id for rule in entry.earning_rules)
            assert all(bonus.card_id == entry.card.id for bonus in entry.category_bonuses)

    def test_rules_reference_known_categories(self):
        for entry in get_catalog():
            for rule in entry.earning_rules:
                assert rule.category_id in CATEGORY_IDS
            for bonus in entry.category_bonuses:
                assert set(bonus.category_ids) <= CATEGORY_IDS

    def test_currencies_resolved(self):
        known = {currency.id for currency in currencies.values()}
        for entry in get_catalog():
            card = entry.card
            assert card.primary_currency is not None
            assert card.primary_currency.id == card.primary_currency_id
            assert card.primary_currency_id in known
            if card.secondary_currency_id:
                assert card.secondary_currency.id == card.secondary_currency_id

    def test_fees_and_rates_non_negative(self):
        for entry in get_catalog():
            assert entry.card.annual_fee >= 0
            assert entry.card.default_earn_rate >= 0
            assert entry.card.default_perks_value >= 0

    def test_business_cards_not_recommended(self):
        catalog = catalog_by_id()
        assert catalog["chase-ink-premier"].card.exclude_from_recommendations
        assert catalog["amex-blue-business-plus"].card.exclude_from_recommendations


class TestReferenceData:
    """Tests for categories and currencies."""

    def test_large_purchase_category_excluded_by_default(self):
        over_5k = categories["over_5k"]
        assert over_5k.id == LARGE_PURCHASE_CATEGORY_ID
        assert over_5k.excluded_by_default

    def test_travel_subcategories(self):
        for key in ("flights", "hotels", "rental_car"):
            assert categories[key].parent_category_id == categories["travel"].id

    def test_slugs_unique(self):
        slugs = [cat.slug for cat in categories.values()]
        assert len(slugs) == len(set(slugs))


class TestCards:
    """Tests for individual card entries."""

    def test_sapphire_preferred_portal_rule(self):
        entry = get_sapphire_preferred_card()
        portal = [rule for rule in entry.earning_rules if rule.booking_method == "portal"]
        assert [rule.rate for rule in portal] == [5]

    def test_freedom_flex_combined_bonus(self):
        entry = get_freedom_flex_card()
        [bonus] = entry.category_bonuses
        assert bonus.cap_type == "combined_categories"
        assert annualize_cap(bonus.cap_amount, bonus.cap_period) == 6000
        assert entry.card.secondary_currency_id == currencies["ultimate_rewards"].id

    def test_gold_caps_have_post_cap_rate(self):
        capped = [rule for rule in get_gold_card().earning_rules if rule.has_cap]
        assert capped
        assert all(rule.post_cap_rate == 1 for rule in capped)

    def test_custom_cash_top_category(self):
        [bonus] = get_custom_cash_card().category_bonuses
        assert bonus.cap_type == "top_category"
        assert annualize_cap(bonus.cap_amount, bonus.cap_period) == 6000

    def test_cash_plus_rewards_cap(self):
        [bonus] = get_cash_plus_card().category_bonuses
        assert bonus.cap_type == "selected_category"
        assert bonus.cap_unit == "rewards"

    def test_blue_business_plus_all_categories_bonus(self):
        [bonus] = get_blue_business_plus_card().category_bonuses
        assert bonus.cap_type == "all_categories"
        assert bonus.post_cap_rate == 1
