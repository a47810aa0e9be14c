"""
Joint allocation across all categories as a mixed-integer program.

Unlike the greedy allocator, the solver sees every category at once, so a
cap shared by several categories goes to the categories where it is worth
the most, and a category may be split across cards.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from pulp import (  # type: ignore
    PULP_CBC_CMD,
    LpBinary,
    LpMaximize,
    LpProblem,
    LpStatusOptimal,
    LpVariable,
    lpSum,
)

from allocator import (
    GreedyAllocator,
    build_entry,
    cap_consumption,
    countable_spending,
)
from models import (
    CalculatorInput,
    CardInput,
    CategoryAllocation,
    CategorySpending,
    RateOption,
)
from rules import RuleResolver
from valuation import CurrencyValuer

logger = logging.getLogger(__name__)

MIN_REPORTED_SPEND = 0.005  # half a cent


@dataclass
class SpendVariable:
    """An LP variable for spend at one rate in one category slice."""

    var: LpVariable
    row: CategorySpending
    is_large_purchase: bool
    card: CardInput
    option: RateOption
    rate: float
    source: str
    consumes_cap: bool


def _slices(row: CategorySpending) -> List[Tuple[float, bool]]:
    slices = [(row.annual_spend_cents / 100, False), (row.large_purchase_spend_cents / 100, True)]
    return [(spend, is_large) for spend, is_large in slices if spend > 0]


def settle_slice(amounts: List[float], spend: float) -> List[float]:
    """Drops solver dust below half a cent and hands the remainder to the
    largest amount, so the settled amounts sum to the slice spend."""
    settled = [amount if amount >= MIN_REPORTED_SPEND else 0.0 for amount in amounts]
    if not settled:
        return settled
    largest = max(range(len(settled)), key=settled.__getitem__)
    settled[largest] = spend - (sum(settled) - settled[largest])
    return settled


class JointOptimizer:
    """Builds and solves the allocation program for one calculation."""

    def __init__(
        self,
        calc_input: CalculatorInput,
        resolver: Optional[RuleResolver] = None,
        valuer: Optional[CurrencyValuer] = None,
    ):
        self.calc_input = calc_input
        self.resolver = resolver or RuleResolver(calc_input)
        self.valuer = valuer or CurrencyValuer(calc_input)
        self.rows = countable_spending(calc_input.spending)
        self.cards = [c for c in calc_input.cards if not self.valuer.currency_for(c).excluded]
        self.variables: List[SpendVariable] = []
        self.slice_vars: Dict[Tuple[int, bool], List[SpendVariable]] = {}

    def _new_var(self, row, is_large, card, option, rate, source, consumes_cap):
        var = LpVariable(f"Spend_{len(self.variables)}", lowBound=0)
        spend_var = SpendVariable(var, row, is_large, card, option, rate, source, consumes_cap)
        self.variables.append(spend_var)
        self.slice_vars.setdefault((row.category_id, is_large), []).append(spend_var)
        return spend_var

    def _create_variables(self) -> None:
        for row in self.rows:
            for _, is_large in _slices(row):
                for card in self.cards:
                    if is_large:
                        options = self.resolver.large_purchase_options_for(card, row.category_id)
                    else:
                        options = self.resolver.options_for(card, row.category_id)
                    for option in options:
                        if not option.is_capped:
                            self._new_var(row, is_large, card, option, option.rate, option.source, False)
                            continue
                        self._new_var(row, is_large, card, option, option.rate, option.source, True)
                        if option.post_cap_rate is not None:
                            self._new_var(
                                row, is_large, card, option, option.post_cap_rate, "post_cap", False
                            )

    def _add_spend_constraints(self, prob: LpProblem) -> None:
        for row in self.rows:
            for spend, is_large in _slices(row):
                slice_vars = self.slice_vars.get((row.category_id, is_large), [])
                if slice_vars:
                    prob += (
                        lpSum(v.var for v in slice_vars) == spend,
                        f"Spend_Total_{row.category_id}_{int(is_large)}",
                    )

    def _add_cap_constraints(self, prob: LpProblem, big_m: float) -> None:
        by_key: Dict[str, List[SpendVariable]] = {}
        for spend_var in self.variables:
            if spend_var.option.is_capped:
                by_key.setdefault(spend_var.option.cap_key, []).append(spend_var)

        for index, (cap_key, key_vars) in enumerate(by_key.items()):
            option = key_vars[0].option
            consumed = lpSum(
                v.var * cap_consumption(v.option, v.card, 1.0, self.valuer)
                for v in key_vars
                if v.consumes_cap
            )
            prob += consumed <= option.annual_cap, f"Cap_{index}"

            post_cap_vars = [v.var for v in key_vars if not v.consumes_cap]
            if post_cap_vars:
                # Post-cap spend is only allowed once the cap is used up.
                exhausted = LpVariable(f"CapExhausted_{index}", cat=LpBinary)
                prob += lpSum(post_cap_vars) <= big_m * exhausted, f"PostCapGate_{index}"
                prob += consumed >= option.annual_cap * exhausted, f"CapFull_{index}"
            logger.debug("Cap %s shared by %d variables", cap_key, len(key_vars))

    def _objective(self):
        terms = []
        for v in self.variables:
            per_dollar = self.valuer.value_per_dollar(v.card, v.rate)
            per_dollar += self.valuer.debit_pay_percent(v.card) / 100
            terms.append(v.var * per_dollar)
        return lpSum(terms)

    def build(self) -> LpProblem:
        prob = LpProblem("Portfolio_Rewards_Allocation", LpMaximize)
        self._create_variables()
        prob += self._objective(), "Total_Annual_Value"
        self._add_spend_constraints(prob)
        big_m = sum(row.total_spend_cents for row in self.rows) / 100 + 1
        self._add_cap_constraints(prob, big_m)
        return prob

    def _collect(self) -> List[CategoryAllocation]:
        results = []
        for row in self.rows:
            allocation = CategoryAllocation(
                category_id=row.category_id,
                category_name=row.category_name,
                category_slug=row.category_slug,
                total_spend=row.total_spend_cents / 100,
                large_purchase_spend=row.large_purchase_spend_cents / 100,
            )
            for spend, is_large in _slices(row):
                slice_vars = self.slice_vars.get((row.category_id, is_large), [])
                if not slice_vars:
                    allocation.unallocated_spend += spend
                    continue
                amounts = settle_slice([v.var.varValue or 0.0 for v in slice_vars], spend)
                for v, amount in zip(slice_vars, amounts):
                    if amount <= 0:
                        continue
                    allocation.allocations.append(
                        build_entry(v.card, v.rate, amount, v.source, self.valuer, is_large)
                    )
            results.append(allocation)
        return results

    def allocate(self) -> List[CategoryAllocation]:
        prob = self.build()
        if not self.variables:
            return self._collect()
        prob.solve(PULP_CBC_CMD(msg=False))
        if prob.status != LpStatusOptimal:
            logger.warning(
                "Joint allocation did not solve (status %s); using greedy allocation",
                prob.status,
            )
            return GreedyAllocator(self.calc_input, self.resolver, self.valuer).allocate()
        return self._collect()


def solve_optimization(calc_input: CalculatorInput) -> List[CategoryAllocation]:
    """Top-level function to solve the joint allocation problem."""
    return JointOptimizer(calc_input).allocate()
