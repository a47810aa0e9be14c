"""
Marginal value of held cards and recommendations for cards to add.

Both re-run the full calculation on a modified copy of the input: one card
removed, or one catalog card added. The re-runs share no state.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from models import (
    GREEDY,
    CalculatorInput,
    CardRecommendation,
    CatalogEntry,
    MarginalValue,
    PortfolioReturns,
)
from returns import calculate_portfolio_returns
from valuation import enabled_secondary_cards

logger = logging.getLogger(__name__)

DEFAULT_RECOMMENDATION_LIMIT = 3


def without_card(calc_input: CalculatorInput, card_id: str) -> CalculatorInput:
    """A copy of the input with one card removed."""
    cards = [card for card in calc_input.cards if card.id != card_id]
    return replace(
        calc_input,
        cards=cards,
        earning_rules=[r for r in calc_input.earning_rules if r.card_id != card_id],
        category_bonuses=[b for b in calc_input.category_bonuses if b.card_id != card_id],
        enabled_secondary_cards=enabled_secondary_cards(cards),
    )


def with_card(calc_input: CalculatorInput, entry: CatalogEntry) -> CalculatorInput:
    """A copy of the input with a catalog card added at its default perks value."""
    cards = [*calc_input.cards, entry.card]
    perks_values = dict(calc_input.perks_values)
    perks_values[entry.card.id] = entry.card.default_perks_value
    return replace(
        calc_input,
        cards=cards,
        earning_rules=[*calc_input.earning_rules, *entry.earning_rules],
        category_bonuses=[*calc_input.category_bonuses, *entry.category_bonuses],
        perks_values=perks_values,
        enabled_secondary_cards=enabled_secondary_cards(cards),
    )


def calculate_marginal_values(
    calc_input: CalculatorInput,
    current: PortfolioReturns,
    strategy: str = GREEDY,
) -> Dict[str, MarginalValue]:
    """Marginal and replacement value for every held card.

    replacement = value the other cards earn without this card
                  - value they earn with it
    marginal    = card value - replacement - net fee
    """
    results: Dict[str, MarginalValue] = {}
    for card in current.card_breakdown:
        if len(calc_input.cards) == 1:
            results[card.card_id] = MarginalValue(
                marginal_value=card.total_earned_value - card.net_fee,
                replacement_value=0.0,
            )
            continue

        reduced = calculate_portfolio_returns(without_card(calc_input, card.card_id), strategy)
        others_value = current.total_value - card.total_earned_value
        replacement_value = reduced.total_value - others_value
        results[card.card_id] = MarginalValue(
            marginal_value=card.total_earned_value - replacement_value - card.net_fee,
            replacement_value=replacement_value,
        )
        logger.debug(
            "Card %s: marginal %.2f, replacement %.2f",
            card.card_id,
            results[card.card_id].marginal_value,
            replacement_value,
        )
    return results


def apply_marginal_values(
    current: PortfolioReturns, marginal_values: Dict[str, MarginalValue]
) -> PortfolioReturns:
    """Merge marginal values into the card breakdown, in place."""
    for card in current.card_breakdown:
        value = marginal_values.get(card.card_id)
        if value is not None:
            card.marginal_value = value.marginal_value
            card.replacement_value = value.replacement_value
    return current


def calculate_card_recommendations(
    calc_input: CalculatorInput,
    current: PortfolioReturns,
    catalog: Iterable[CatalogEntry],
    limit: Optional[int] = DEFAULT_RECOMMENDATION_LIMIT,
    strategy: str = GREEDY,
) -> List[CardRecommendation]:
    """Catalog cards that would raise net value the most, best first."""
    if current.total_spend <= 0:
        return []

    held = {card.id for card in calc_input.cards}
    recommendations: List[CardRecommendation] = []
    for entry in catalog:
        if entry.card.id in held or entry.card.exclude_from_recommendations:
            continue
        expanded = calculate_portfolio_returns(with_card(calc_input, entry), strategy)
        improvement = expanded.net_value_earned - current.net_value_earned
        if improvement <= 0:
            continue
        recommendations.append(
            CardRecommendation(
                card=entry.card,
                improvement=improvement,
                default_perks_value=entry.card.default_perks_value,
            )
        )

    recommendations.sort(key=lambda rec: (-rec.improvement, rec.card.name))
    logger.info("Found %d cards that improve the portfolio", len(recommendations))
    return recommendations if limit is None else recommendations[:limit]
