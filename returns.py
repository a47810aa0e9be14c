"""
Portfolio returns: resolves rates, allocates spend and aggregates the result
into per-category, per-card and per-currency breakdowns.
"""

import logging
from typing import Dict, List

from allocator import GreedyAllocator
from models import (
    ALLOCATION_STRATEGIES,
    GREEDY,
    JOINT,
    AllocationEntry,
    CalculatorInput,
    CardCategoryBreakdown,
    CardEarnings,
    CategoryAllocation,
    CurrencyEarningsBreakdown,
    InvalidInputError,
    PortfolioReturns,
)
from optimizer import JointOptimizer
from rules import RuleResolver
from valuation import CurrencyValuer

logger = logging.getLogger(__name__)


def _init_card_earnings(calc_input: CalculatorInput, valuer: CurrencyValuer) -> Dict[str, CardEarnings]:
    earnings: Dict[str, CardEarnings] = {}
    for card in calc_input.cards:
        info = valuer.currency_for(card)
        perks = float(calc_input.perks_values.get(card.id, 0.0) or 0.0)
        earnings[card.id] = CardEarnings(
            card_id=card.id,
            card_name=card.name,
            currency_type=info.currency_type,
            currency_name=info.currency_name,
            is_cashback=info.is_cashback,
            annual_fee=card.annual_fee,
            perks_value=perks,
            net_fee=card.annual_fee - perks,
        )
    return earnings


def _record(card: CardEarnings, allocation: CategoryAllocation, entry: AllocationEntry) -> None:
    card.total_spend += entry.spend
    card.total_earned += entry.earned
    card.total_earned_value += entry.earned_value
    card.debit_pay_value += entry.debit_pay_value

    breakdown = next(
        (b for b in card.category_breakdown if b.category_id == allocation.category_id),
        None,
    )
    if breakdown is None:
        breakdown = CardCategoryBreakdown(
            category_id=allocation.category_id, category_name=allocation.category_name
        )
        card.category_breakdown.append(breakdown)

    # Spend-weighted average rate across slices of the same category.
    weighted = breakdown.spend * breakdown.rate + entry.spend * entry.rate
    breakdown.spend += entry.spend
    breakdown.rate = weighted / breakdown.spend if breakdown.spend > 0 else 0.0
    breakdown.earned += entry.earned
    breakdown.earned_value += entry.earned_value


def _currency_breakdown(
    allocations: List[CategoryAllocation], valuer: CurrencyValuer, calc_input: CalculatorInput
) -> List[CurrencyEarningsBreakdown]:
    cards = {card.id: card for card in calc_input.cards}
    totals: Dict[str, CurrencyEarningsBreakdown] = {}
    for allocation in allocations:
        for entry in allocation.allocations:
            info = valuer.currency_for(cards[entry.card_id])
            row = totals.get(info.currency_id)
            if row is None:
                row = CurrencyEarningsBreakdown(
                    currency_id=info.currency_id,
                    currency_name=info.currency_name,
                    currency_type=info.currency_type,
                    points_earned=0.0,
                    points_value=0.0,
                )
                totals[info.currency_id] = row
            row.points_earned += entry.earned
            row.points_value += entry.earned_value - entry.debit_pay_value
    return sorted(totals.values(), key=lambda r: r.points_value, reverse=True)


def aggregate_returns(
    calc_input: CalculatorInput,
    allocations: List[CategoryAllocation],
    valuer: CurrencyValuer,
) -> PortfolioReturns:
    """Roll category allocations up into portfolio totals."""
    card_earnings = _init_card_earnings(calc_input, valuer)
    for allocation in allocations:
        for entry in allocation.allocations:
            _record(card_earnings[entry.card_id], allocation, entry)

    total_spend = cashback_spend = cashback_earned = 0.0
    points_spend = points_earned = total_points_value = 0.0
    debit_pay_earned = net_annual_fees = 0.0
    for card in card_earnings.values():
        total_spend += card.total_spend
        net_annual_fees += card.net_fee
        debit_pay_earned += card.debit_pay_value
        if card.is_cashback:
            cashback_spend += card.total_spend
            cashback_earned += card.total_earned_value - card.debit_pay_value
        else:
            points_spend += card.total_spend
            points_earned += card.total_earned
            total_points_value += card.total_earned_value - card.debit_pay_value

    total_value = cashback_earned + total_points_value + debit_pay_earned
    net_value_earned = total_value - net_annual_fees
    return PortfolioReturns(
        total_spend=total_spend,
        cashback_spend=cashback_spend,
        cashback_earned=cashback_earned,
        avg_cashback_rate=cashback_earned / cashback_spend * 100 if cashback_spend > 0 else 0.0,
        points_spend=points_spend,
        points_earned=points_earned,
        avg_points_rate=points_earned / points_spend if points_spend > 0 else 0.0,
        total_points_value=total_points_value,
        avg_point_value=total_points_value / points_earned * 100 if points_earned > 0 else 0.0,
        debit_pay_earned=debit_pay_earned,
        currency_breakdown=_currency_breakdown(allocations, valuer, calc_input),
        total_value=total_value,
        net_annual_fees=net_annual_fees,
        net_value_earned=net_value_earned,
        net_return_rate=net_value_earned / total_spend * 100 if total_spend > 0 else 0.0,
        category_breakdown=allocations,
        card_breakdown=list(card_earnings.values()),
    )


def calculate_portfolio_returns(
    calc_input: CalculatorInput, strategy: str = GREEDY
) -> PortfolioReturns:
    """Optimal allocation of the user's spending across their cards."""
    if strategy not in ALLOCATION_STRATEGIES:
        raise InvalidInputError(f"Unknown allocation strategy: {strategy!r}")

    resolver = RuleResolver(calc_input)
    valuer = CurrencyValuer(calc_input)
    if strategy == JOINT:
        allocations = JointOptimizer(calc_input, resolver, valuer).allocate()
    else:
        allocations = GreedyAllocator(calc_input, resolver, valuer).allocate()

    returns = aggregate_returns(calc_input, allocations, valuer)
    logger.info(
        "Allocated $%.2f across %d cards (%s, %s): value $%.2f, net return %.2f%%",
        returns.total_spend,
        len(calc_input.cards),
        strategy,
        calc_input.earnings_goal,
        returns.total_value,
        returns.net_return_rate,
    )
    return returns
