"""
Scenario files: a user's held cards, spending and preferences as JSON,
turned into a calculator input against the card catalog.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from catalog import catalog_by_id
from catalog.reference import (
    LARGE_PURCHASE_CATEGORY_ID,
    categories,
    currencies,
    valuation_templates,
)
from models import (
    DEFAULT_POINT_VALUE_CENTS,
    CalculatorInput,
    CatalogEntry,
    CategorySpending,
    MultiplierProgram,
    TravelPreference,
)
from valuation import (
    enabled_secondary_cards,
    resolve_cash_out_values,
    resolve_default_currency_values,
    select_template,
)

logger = logging.getLogger(__name__)


class UnknownCardError(KeyError):
    """A held card id that is not in the catalog."""


class UnknownCategoryError(KeyError):
    """A spending category id that is not in the reference data."""


class SpendingItem(BaseModel):
    category_id: int
    annual_spend_cents: int = Field(ge=0)
    large_purchase_spend_cents: int = Field(default=0, ge=0)
    is_user_set: bool = False


class TravelPreferenceItem(BaseModel):
    category_slug: str
    preference_type: Literal["direct", "brand", "portal"]
    brand_name: Optional[str] = None
    portal_issuer_id: Optional[str] = None


class MultiplierProgramItem(BaseModel):
    program_id: str
    multiplier: float = Field(gt=0)
    applicable_currency_ids: List[str] = Field(default_factory=list)
    applicable_card_ids: List[str] = Field(default_factory=list)


class Scenario(BaseModel):
    held_card_ids: List[str]
    spending: List[SpendingItem] = Field(default_factory=list)
    user_currency_values: Dict[str, float] = Field(default_factory=dict)
    perks_values: Dict[str, float] = Field(default_factory=dict)
    debit_pay_values: Dict[str, float] = Field(default_factory=dict)
    user_selections: Dict[str, int] = Field(default_factory=dict)
    travel_preferences: List[TravelPreferenceItem] = Field(default_factory=list)
    multiplier_programs: List[MultiplierProgramItem] = Field(default_factory=list)
    selected_template_id: Optional[str] = None
    earnings_goal: Literal["maximize", "cash_only", "points_only"] = "maximize"


def _spending_rows(items: List[SpendingItem]) -> List[CategorySpending]:
    by_id = {cat.id: cat for cat in categories.values()}
    rows = []
    for item in items:
        category = by_id.get(item.category_id)
        if category is None:
            raise UnknownCategoryError(item.category_id)
        rows.append(
            CategorySpending(
                category_id=category.id,
                category_name=category.name,
                category_slug=category.slug,
                annual_spend_cents=item.annual_spend_cents,
                large_purchase_spend_cents=item.large_purchase_spend_cents,
                excluded_by_default=category.excluded_by_default,
                parent_category_id=category.parent_category_id,
                is_user_set=item.is_user_set,
            )
        )
    return rows


def build_calculator_input(
    scenario: Scenario,
    catalog: Optional[Dict[str, CatalogEntry]] = None,
    default_point_value_cents: float = DEFAULT_POINT_VALUE_CENTS,
) -> CalculatorInput:
    """Snapshot of everything the calculator needs for this scenario."""
    catalog = catalog if catalog is not None else catalog_by_id()
    missing = [card_id for card_id in scenario.held_card_ids if card_id not in catalog]
    if missing:
        raise UnknownCardError(", ".join(missing))

    held = [catalog[card_id] for card_id in dict.fromkeys(scenario.held_card_ids)]
    cards = [entry.card for entry in held]
    template = select_template(valuation_templates, scenario.selected_template_id)
    perks_values = {card.id: card.default_perks_value for card in cards}
    perks_values.update(scenario.perks_values)

    return CalculatorInput(
        cards=cards,
        spending=_spending_rows(scenario.spending),
        earning_rules=[rule for entry in held for rule in entry.earning_rules],
        category_bonuses=[bonus for entry in held for bonus in entry.category_bonuses],
        user_currency_values=dict(scenario.user_currency_values),
        default_currency_values=resolve_default_currency_values(currencies.values(), template),
        cash_out_values=resolve_cash_out_values(currencies.values()),
        perks_values=perks_values,
        debit_pay_values=dict(scenario.debit_pay_values),
        multiplier_programs=[
            MultiplierProgram(
                program_id=item.program_id,
                multiplier=item.multiplier,
                applicable_currency_ids=tuple(item.applicable_currency_ids),
                applicable_card_ids=tuple(item.applicable_card_ids),
            )
            for item in scenario.multiplier_programs
        ],
        user_selections=dict(scenario.user_selections),
        travel_preferences=[
            TravelPreference(**pref.model_dump()) for pref in scenario.travel_preferences
        ],
        enabled_secondary_cards=enabled_secondary_cards(cards),
        earnings_goal=scenario.earnings_goal,
        categories=list(categories.values()),
        large_purchase_category_id=LARGE_PURCHASE_CATEGORY_ID,
        default_point_value_cents=default_point_value_cents,
    )


class ScenarioStore:
    def __init__(self, scenario_file: str):
        self.scenario_file = Path(scenario_file)

    def load(self) -> Scenario:
        if not self.scenario_file.exists():
            raise FileNotFoundError(f"Scenario file not found: {self.scenario_file}")

        with self.scenario_file.open("r", encoding="utf-8") as fh:
            data = json.load(fh)

        scenario = Scenario.model_validate(data)
        logger.info(
            "Loaded scenario with %d cards and %d spending categories from %s",
            len(scenario.held_card_ids),
            len(scenario.spending),
            self.scenario_file,
        )
        return scenario

    def load_input(self, default_point_value_cents: float = DEFAULT_POINT_VALUE_CENTS) -> CalculatorInput:
        return build_calculator_input(
            self.load(), default_point_value_cents=default_point_value_cents
        )
