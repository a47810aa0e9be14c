"""
Greedy category spend allocator.

Each category's spend goes to the single card with the highest blended
value, given what is left of every cap. Cap consumption is shared across
categories through a ledger keyed by cap key, so a combined bonus cap is
drawn down by every category it covers.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from models import (
    CAP_UNIT_REWARDS,
    AllocationEntry,
    CalculatorInput,
    CardInput,
    CategoryAllocation,
    CategorySpending,
    RateOption,
)
from rules import RuleResolver, default_option
from valuation import CurrencyValuer

logger = logging.getLogger(__name__)

INF = float("inf")
EPSILON = 1e-9


def countable_spending(spending: List[CategorySpending]) -> List[CategorySpending]:
    """Categories that take part in allocation.

    Excluded-by-default categories only count once the user has set them.
    """
    return [
        row
        for row in spending
        if row.total_spend_cents > 0 and (not row.excluded_by_default or row.is_user_set)
    ]


class CapLedger:
    """Running cap consumption, in each cap's own unit."""

    def __init__(self, used: Optional[Dict[str, float]] = None):
        self._used: Dict[str, float] = dict(used or {})

    def used(self, cap_key: str) -> float:
        return self._used.get(cap_key, 0.0)

    def remaining(self, option: RateOption) -> float:
        return max(option.annual_cap - self.used(option.cap_key), 0.0)

    def consume(self, cap_key: str, amount: float) -> None:
        self._used[cap_key] = self.used(cap_key) + amount

    def copy(self) -> "CapLedger":
        return CapLedger(self._used)


def cap_consumption(
    option: RateOption, card: CardInput, spend: float, valuer: CurrencyValuer
) -> float:
    """How much of the option's cap ``spend`` uses up."""
    if option.cap_unit == CAP_UNIT_REWARDS:
        return spend * valuer.earned_per_dollar(card, option.rate)
    return spend


def spend_headroom(
    option: RateOption, card: CardInput, remaining_cap: float, valuer: CurrencyValuer
) -> float:
    """Spend dollars that fit in ``remaining_cap``."""
    if not option.is_capped:
        return INF
    if option.cap_unit == CAP_UNIT_REWARDS:
        per_dollar = valuer.earned_per_dollar(card, option.rate)
        return remaining_cap / per_dollar if per_dollar > 0 else INF
    return remaining_cap


@dataclass
class Segment:
    """A slice of a category's spend at one rate on one card."""

    option: RateOption
    rate: float
    spend: float
    source: str
    consumes_cap: bool


@dataclass
class CardPlan:
    card: CardInput
    value: float
    segments: List[Segment]


def plan_card(
    card: CardInput,
    options: List[RateOption],
    spend: float,
    ledger: CapLedger,
    valuer: CurrencyValuer,
) -> CardPlan:
    """Best blended placement of ``spend`` on one card.

    Capped options are filled in order of value while they beat the best
    uncapped rate; whatever is left earns the best uncapped rate, which
    includes the post-cap rate of any option whose cap ran out.
    """
    pool: List[Tuple[float, str, RateOption]] = []
    capped: List[Tuple[RateOption, float]] = []
    for option in options:
        if not option.is_capped:
            pool.append((option.rate, option.source, option))
            continue
        headroom = spend_headroom(option, card, ledger.remaining(option), valuer)
        if headroom > EPSILON:
            capped.append((option, headroom))
        elif option.post_cap_rate is not None:
            pool.append((option.post_cap_rate, "post_cap", option))
    if not pool:
        pool.append((float(card.default_earn_rate), "default", default_option(card)))

    def best_uncapped() -> Tuple[float, str, RateOption]:
        return max(pool, key=lambda item: valuer.value_per_dollar(card, item[0]))

    capped.sort(key=lambda item: valuer.value_per_dollar(card, item[0].rate), reverse=True)
    segments: List[Segment] = []
    remaining = spend
    for option, headroom in capped:
        if remaining <= EPSILON:
            break
        fallback_rate = best_uncapped()[0]
        if valuer.value_per_dollar(card, option.rate) <= valuer.value_per_dollar(card, fallback_rate):
            break
        take = min(remaining, headroom)
        segments.append(Segment(option, option.rate, take, option.source, True))
        remaining -= take
        if take >= headroom - EPSILON and option.post_cap_rate is not None:
            pool.append((option.post_cap_rate, "post_cap", option))

    if remaining > EPSILON:
        rate, source, option = best_uncapped()
        segments.append(Segment(option, rate, remaining, source, False))

    debit_rate = valuer.debit_pay_percent(card) / 100
    value = sum(
        valuer.value_per_dollar(card, seg.rate) * seg.spend + seg.spend * debit_rate
        for seg in segments
    )
    return CardPlan(card=card, value=value, segments=segments)


def build_entry(
    card: CardInput,
    rate: float,
    spend: float,
    source: str,
    valuer: CurrencyValuer,
    is_large_purchase: bool = False,
) -> AllocationEntry:
    """Allocation entry for ``spend`` at ``rate``, debit pay included in its value."""
    info = valuer.currency_for(card)
    earned = valuer.earned(card, spend, rate)
    debit_pay_value = spend * valuer.debit_pay_percent(card) / 100
    return AllocationEntry(
        card_id=card.id,
        card_name=card.name,
        currency_type=info.currency_type,
        currency_name=info.currency_name,
        spend=spend,
        rate=rate,
        earned=earned,
        earned_value=valuer.dollar_value(card, earned) + debit_pay_value,
        is_cashback=info.is_cashback,
        source=source,
        is_large_purchase=is_large_purchase,
        debit_pay_value=debit_pay_value,
    )


class GreedyAllocator:
    """Per-category greedy allocation, winner takes the whole category."""

    def __init__(
        self,
        calc_input: CalculatorInput,
        resolver: Optional[RuleResolver] = None,
        valuer: Optional[CurrencyValuer] = None,
    ):
        self.calc_input = calc_input
        self.resolver = resolver or RuleResolver(calc_input)
        self.valuer = valuer or CurrencyValuer(calc_input)
        self.ledger = CapLedger()

    def _eligible_cards(self) -> List[CardInput]:
        return [
            card
            for card in self.calc_input.cards
            if not self.valuer.currency_for(card).excluded
        ]

    def _place(
        self, row: CategorySpending, spend: float, is_large_purchase: bool
    ) -> List[AllocationEntry]:
        plans = []
        for card in self._eligible_cards():
            if is_large_purchase:
                options = self.resolver.large_purchase_options_for(card, row.category_id)
            else:
                options = self.resolver.options_for(card, row.category_id)
            plans.append(plan_card(card, options, spend, self.ledger, self.valuer))
        if not plans:
            return []

        best = plans[0]
        for plan in plans[1:]:
            if plan.value > best.value + EPSILON:
                best = plan
        logger.debug(
            "Category %s%s -> %s (value %.2f)",
            row.category_slug,
            " (>$5k)" if is_large_purchase else "",
            best.card.id,
            best.value,
        )

        entries = []
        for seg in best.segments:
            if seg.consumes_cap:
                self.ledger.consume(
                    seg.option.cap_key,
                    cap_consumption(seg.option, best.card, seg.spend, self.valuer),
                )
            entries.append(
                build_entry(
                    best.card, seg.rate, seg.spend, seg.source, self.valuer, is_large_purchase
                )
            )
        return entries

    def allocate_category(self, row: CategorySpending) -> CategoryAllocation:
        regular = row.annual_spend_cents / 100
        large = row.large_purchase_spend_cents / 100
        allocation = CategoryAllocation(
            category_id=row.category_id,
            category_name=row.category_name,
            category_slug=row.category_slug,
            total_spend=regular + large,
            large_purchase_spend=large,
        )
        for spend, is_large in ((regular, False), (large, True)):
            if spend <= 0:
                continue
            entries = self._place(row, spend, is_large)
            if not entries:
                allocation.unallocated_spend += spend
            allocation.allocations.extend(entries)
        return allocation

    def allocate(self) -> List[CategoryAllocation]:
        return [self.allocate_category(row) for row in countable_spending(self.calc_input.spending)]
