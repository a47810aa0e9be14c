"""
Rule and cap resolution: turns earning rules and category bonuses into the
rate options each card has for each spending category.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from models import (
    CAP_UNIT_REWARDS,
    CAP_UNIT_SPEND,
    CalculatorInput,
    CardInput,
    Category,
    CategoryBonusInput,
    CategorySpending,
    EarningRuleInput,
    RateOption,
    TravelPreference,
)

logger = logging.getLogger(__name__)

INF = float("inf")

CAP_PERIODS_PER_YEAR = {
    "month": 12,
    "quarter": 4,
    "year": 1,
    "cardmember_year": 1,
    "lifetime": 1,
}

TOP_N_CAP_TYPES = {
    "top_category": slice(0, 1),
    "top_two_categories": slice(0, 2),
    "top_three_categories": slice(0, 3),
    "second_top_category": slice(1, 2),
}

SHARED_CAP_TYPES = ("combined_categories", "all_categories")


def annualize_cap(amount: Optional[float], period: Optional[str]) -> float:
    """Convert a per-period cap to an annual one. Unknown periods are uncapped."""
    if amount is None:
        return INF
    per_year = CAP_PERIODS_PER_YEAR.get(period or "none")
    if per_year is None:
        return INF
    return float(amount) * per_year


class CategoryTree:
    """Parent lookups over the reference categories and the spending rows."""

    def __init__(
        self,
        categories: Iterable[Category] = (),
        spending: Iterable[CategorySpending] = (),
    ):
        self._parents: Dict[int, Optional[int]] = {}
        self._slugs: Dict[int, str] = {}
        for cat in categories:
            self._parents[cat.id] = cat.parent_category_id
            self._slugs[cat.id] = cat.slug
        for row in spending:
            if row.parent_category_id is not None or row.category_id not in self._parents:
                self._parents[row.category_id] = row.parent_category_id
            self._slugs.setdefault(row.category_id, row.category_slug)

    def parent(self, category_id: int) -> Optional[int]:
        return self._parents.get(category_id)

    def slug(self, category_id: int) -> Optional[str]:
        return self._slugs.get(category_id)

    def ancestors(self, category_id: int) -> List[int]:
        """Parent, grandparent, ... nearest first."""
        chain: List[int] = []
        seen = {category_id}
        current = self.parent(category_id)
        while current is not None and current not in seen:
            chain.append(current)
            seen.add(current)
            current = self.parent(current)
        return chain


def find_travel_preference(
    category_id: int,
    tree: CategoryTree,
    preferences: Iterable[TravelPreference],
) -> Optional[TravelPreference]:
    """The preference for the category's slug, falling back to its ancestors."""
    by_slug = {pref.category_slug: pref for pref in preferences}
    for cat_id in [category_id, *tree.ancestors(category_id)]:
        pref = by_slug.get(tree.slug(cat_id) or "")
        if pref is not None:
            return pref
    return None


def rule_matches_preference(
    rule: EarningRuleInput,
    preference: Optional[TravelPreference],
    card: CardInput,
) -> bool:
    """Booking-method decision table.

    | preference       | applicable rules                                 |
    |------------------|--------------------------------------------------|
    | none / direct    | booking_method == "any"                          |
    | brand            | "any", or "brand" with the preferred brand name  |
    | portal           | "any", or "portal" when the card's issuer runs   |
    |                  | the preferred portal                             |
    """
    if rule.booking_method == "any":
        return True
    if preference is None:
        return False
    if preference.preference_type == "brand":
        return rule.booking_method == "brand" and rule.brand_name == preference.brand_name
    if preference.preference_type == "portal":
        return (
            rule.booking_method == "portal"
            and card.issuer_id == preference.portal_issuer_id
        )
    return False


def selected_category(
    bonus: CategoryBonusInput, user_selections: Dict[str, int]
) -> Optional[int]:
    """The user's pick for a selected-category bonus, or None when inactive."""
    selected = user_selections.get(bonus.id)
    if selected is None or selected not in bonus.category_ids:
        return None
    return selected


def top_categories(
    bonus: CategoryBonusInput, spend_by_category: Dict[int, int]
) -> List[int]:
    """Categories qualifying for a top-N bonus, ranked by the user's spend."""
    window = TOP_N_CAP_TYPES.get(bonus.cap_type)
    if window is None:
        return []
    ranked = sorted(
        bonus.category_ids,
        key=lambda cat_id: spend_by_category.get(cat_id, 0),
        reverse=True,
    )
    return ranked[window]


def bonus_target_categories(
    bonus: CategoryBonusInput,
    spending: List[CategorySpending],
    user_selections: Dict[str, int],
) -> List[int]:
    """Categories a category bonus applies to for this user."""
    if bonus.cap_type in ("single_category", "combined_categories"):
        return list(bonus.category_ids)
    if bonus.cap_type == "selected_category":
        chosen = selected_category(bonus, user_selections)
        return [chosen] if chosen is not None else []
    if bonus.cap_type in TOP_N_CAP_TYPES:
        spend_by_category = {s.category_id: s.total_spend_cents for s in spending}
        return top_categories(bonus, spend_by_category)
    if bonus.cap_type == "all_categories":
        return [s.category_id for s in spending if not s.excluded_by_default]
    logger.warning("Ignoring bonus %s with unknown cap type %r", bonus.id, bonus.cap_type)
    return []


def _rule_option(rule: EarningRuleInput) -> RateOption:
    annual_cap = annualize_cap(rule.cap_amount, rule.cap_period) if rule.has_cap else INF
    return RateOption(
        rate=float(rule.rate),
        annual_cap=annual_cap,
        cap_unit=rule.cap_unit or CAP_UNIT_SPEND,
        post_cap_rate=None if rule.post_cap_rate is None else float(rule.post_cap_rate),
        cap_key=f"{rule.card_id}:rule:{rule.id}",
        source="rule",
    )


def _bonus_option(bonus: CategoryBonusInput, category_id: int) -> RateOption:
    cap_key = f"{bonus.card_id}:bonus:{bonus.id}"
    if bonus.cap_type not in SHARED_CAP_TYPES:
        cap_key = f"{cap_key}:{category_id}"
    return RateOption(
        rate=float(bonus.elevated_rate),
        annual_cap=annualize_cap(bonus.cap_amount, bonus.cap_period),
        cap_unit=CAP_UNIT_REWARDS if bonus.cap_unit == CAP_UNIT_REWARDS else CAP_UNIT_SPEND,
        post_cap_rate=None if bonus.post_cap_rate is None else float(bonus.post_cap_rate),
        cap_key=cap_key,
        source="bonus",
    )


def default_option(card: CardInput) -> RateOption:
    return RateOption(
        rate=float(card.default_earn_rate),
        cap_key=f"{card.id}:default",
        source="default",
    )


class RuleResolver:
    """Resolves candidate rate options per (card, category)."""

    def __init__(self, calc_input: CalculatorInput):
        self.calc_input = calc_input
        self.tree = CategoryTree(calc_input.categories, calc_input.spending)
        self._rules_by_card: Dict[str, List[EarningRuleInput]] = {}
        for rule in calc_input.earning_rules:
            self._rules_by_card.setdefault(rule.card_id, []).append(rule)
        self._bonus_options = self._build_bonus_options()

    def _build_bonus_options(self) -> Dict[Tuple[str, int], List[RateOption]]:
        options: Dict[Tuple[str, int], List[RateOption]] = {}
        for bonus in self.calc_input.category_bonuses:
            targets = bonus_target_categories(
                bonus, self.calc_input.spending, self.calc_input.user_selections
            )
            if not targets:
                logger.debug("Bonus %s is inactive for this user", bonus.id)
            for category_id in targets:
                options.setdefault((bonus.card_id, category_id), []).append(
                    _bonus_option(bonus, category_id)
                )
        return options

    def _applicable_rules(
        self, card: CardInput, category_id: int, preference: Optional[TravelPreference]
    ) -> List[EarningRuleInput]:
        rules = self._rules_by_card.get(card.id, [])
        for cat_id in [category_id, *self.tree.ancestors(category_id)]:
            matching = [
                rule
                for rule in rules
                if rule.category_id == cat_id
                and rule_matches_preference(rule, preference, card)
            ]
            if matching:
                return matching
        return []

    def options_for(self, card: CardInput, category_id: int) -> List[RateOption]:
        """All rate options for the card on a category, highest nominal rate first.

        The default rate is always present as an uncapped fallback.
        """
        preference = find_travel_preference(
            category_id, self.tree, self.calc_input.travel_preferences
        )
        options = [
            _rule_option(rule)
            for rule in self._applicable_rules(card, category_id, preference)
        ]
        options.extend(self._bonus_options.get((card.id, category_id), []))
        options.append(default_option(card))
        options.sort(key=lambda opt: opt.rate, reverse=True)
        return options

    def large_purchase_options_for(self, card: CardInput, category_id: int) -> List[RateOption]:
        """Options for the >$5k portion: the category's plus the large-purchase category's."""
        options = self.options_for(card, category_id)
        lp_category = self.calc_input.large_purchase_category_id
        if lp_category is None or lp_category == category_id:
            return options
        extra = [
            opt for opt in self.options_for(card, lp_category) if opt.source != "default"
        ]
        seen = {opt.cap_key for opt in options}
        options.extend(opt for opt in extra if opt.cap_key not in seen)
        options.sort(key=lambda opt: opt.rate, reverse=True)
        return options
