"""
This module handles the user interface components of the Streamlit application,
including the sidebar setup, results display, and chart generation.
"""

from typing import Dict, List, Tuple

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from catalog.reference import categories
from models import (
    ALLOCATION_STRATEGIES,
    EARNINGS_GOALS,
    CardRecommendation,
    CatalogEntry,
    PortfolioReturns,
)
from store import Scenario, SpendingItem

DEFAULT_ANNUAL_SPENDING = {
    "dining": 6000,
    "grocery": 9000,
    "gas": 2400,
    "flights": 3000,
    "hotels": 2000,
    "streaming": 360,
    "online_retail": 2500,
    "everything_else": 12000,
}

ALLOCATION_COLUMNS = ["Category", "Card", "Amount", "Rate", "Earned", "Value", "Source", "Large Purchase"]


def _setup_spending_inputs(currency_symbol: str) -> Dict[int, int]:
    """Creates the spending inputs and returns annual spend in cents by category id."""
    st.header(f"Annual Spending ({currency_symbol})")
    annual_spending = {}
    for key, cat in categories.items():
        amount = st.number_input(
            label=cat.name,
            min_value=0,
            max_value=1_000_000,
            value=DEFAULT_ANNUAL_SPENDING.get(key, 0),
            step=100,
            key=f"spend_{cat.slug}",
        )
        annual_spending[cat.id] = int(amount * 100)
    return annual_spending


def _setup_card_selection(catalog: List[CatalogEntry]) -> List[str]:
    """Creates and returns the card selection checkboxes."""
    st.subheader("Cards in Wallet")
    selected_card_ids = []
    for entry in catalog:
        if st.checkbox(entry.card.name, value=False, key=f"card_{entry.card.id}"):
            selected_card_ids.append(entry.card.id)
    if not selected_card_ids:
        st.warning("Select at least one card.")
    return selected_card_ids


def setup_sidebar(
    currency_symbol: str,
    catalog: List[CatalogEntry],
    default_goal: str = EARNINGS_GOALS[0],
    default_strategy: str = ALLOCATION_STRATEGIES[0],
) -> Tuple[Dict[int, int], List[str], str, str, bool]:
    """Sets up the sidebar with spending inputs, card selection and options."""
    with st.sidebar:
        annual_spending = _setup_spending_inputs(currency_symbol)
        st.markdown("---")
        selected_card_ids = _setup_card_selection(catalog)
        st.markdown("---")
        earnings_goal = st.selectbox(
            "Earnings Goal", EARNINGS_GOALS, index=EARNINGS_GOALS.index(default_goal)
        )
        strategy = st.selectbox(
            "Allocation", ALLOCATION_STRATEGIES, index=ALLOCATION_STRATEGIES.index(default_strategy)
        )
        total_spend = sum(annual_spending.values()) / 100
        st.metric(label="Total Annual Spend", value=f"{currency_symbol} {total_spend:,.0f}")
        st.markdown("---")
        calculate_button = st.button("Calculate Returns")

    return annual_spending, selected_card_ids, earnings_goal, strategy, calculate_button


def build_scenario(
    annual_spending: Dict[int, int], selected_card_ids: List[str], earnings_goal: str
) -> Scenario:
    """Scenario from the sidebar inputs.

    Every amount typed into the sidebar counts as user set, so categories
    that are excluded by default (rent, large purchases) are included.
    """
    return Scenario(
        held_card_ids=selected_card_ids,
        spending=[
            SpendingItem(category_id=category_id, annual_spend_cents=cents, is_user_set=True)
            for category_id, cents in annual_spending.items()
            if cents > 0
        ],
        earnings_goal=earnings_goal,
    )


def allocations_frame(returns: PortfolioReturns) -> pd.DataFrame:
    """One row per allocation entry."""
    rows = [
        {
            "Category": allocation.category_name,
            "Card": entry.card_name,
            "Amount": entry.spend,
            "Rate": entry.rate,
            "Earned": entry.earned,
            "Value": entry.earned_value,
            "Source": entry.source,
            "Large Purchase": entry.is_large_purchase,
        }
        for allocation in returns.category_breakdown
        for entry in allocation.allocations
    ]
    return pd.DataFrame(rows, columns=ALLOCATION_COLUMNS)


def cards_frame(returns: PortfolioReturns) -> pd.DataFrame:
    """Per-card totals, including marginal value when it has been calculated."""
    return pd.DataFrame(
        [
            {
                "Card": card.card_name,
                "Currency": card.currency_name,
                "Spend": card.total_spend,
                "Value": card.total_earned_value,
                "Net Fee": card.net_fee,
                "Marginal Value": card.marginal_value,
            }
            for card in returns.card_breakdown
        ],
        columns=["Card", "Currency", "Spend", "Value", "Net Fee", "Marginal Value"],
    )


def generate_priority_guide(df: pd.DataFrame, currency_symbol: str) -> str:
    """Generates a markdown guide for categories split across cards or rates."""
    if df.empty:
        return ""

    guide = ["### Spending Priorities", "Use cards in this order within each category:"]
    has_priorities = False
    for category, group in df.groupby("Category", sort=False):
        if len(group) > 1:
            has_priorities = True
            guide.append(f"- **{category}:**")
            for i, (_, row) in enumerate(group.iterrows()):
                guide.append(
                    f"  {i+1}. Use **{row['Card']}** at {row['Rate']:g} "
                    f"for **{currency_symbol} {row['Amount']:,.2f}**."
                )
            guide.append("")

    return "\n".join(guide) if has_priorities else "Each category uses a single card at a single rate."


def display_charts(df: pd.DataFrame, currency_symbol: str):
    """Displays spending and value per card."""
    if df.empty:
        return

    st.markdown("### Visual Insights")
    per_card = df.groupby("Card")[["Amount", "Value"]].sum().reset_index()

    fig = go.Figure()
    fig.add_trace(go.Bar(name="Spending", x=per_card["Card"], y=per_card["Amount"]))
    fig.add_trace(go.Bar(name="Value Earned", x=per_card["Card"], y=per_card["Value"], yaxis="y2"))
    fig.update_layout(
        title="Annual Spending vs. Value Earned",
        barmode="group",
        yaxis={"title": f"Spending ({currency_symbol})"},
        yaxis2={"title": f"Value ({currency_symbol})", "overlaying": "y", "side": "right"},
    )
    st.plotly_chart(fig, use_container_width=True)


def _display_results_header(returns: PortfolioReturns, currency_symbol: str):
    """Displays the headline metrics."""
    col1, col2, col3 = st.columns(3)
    col1.metric(label="Total Value", value=f"{currency_symbol} {returns.total_value:,.2f}")
    col2.metric(label="Net Annual Fees", value=f"{currency_symbol} {returns.net_annual_fees:,.2f}")
    col3.metric(
        label="Net Return",
        value=f"{currency_symbol} {returns.net_value_earned:,.2f}",
        delta=f"{returns.net_return_rate:.2f}%",
    )


def _display_recommendations(recommendations: List[CardRecommendation], currency_symbol: str):
    if not recommendations:
        return
    st.markdown("### Boost Your Earnings")
    for index, rec in enumerate(recommendations, start=1):
        st.markdown(
            f"{index}. **{rec.card.name}**: +{currency_symbol} {rec.improvement:,.0f}/yr"
        )


def display_results(
    returns: PortfolioReturns,
    recommendations: List[CardRecommendation],
    currency_symbol: str,
):
    """Displays the calculation results on the main page."""
    _display_results_header(returns, currency_symbol)

    df = allocations_frame(returns)
    if df.empty:
        st.write("No spending to allocate.")
        return

    st.markdown("#### Spending Allocation")
    st.dataframe(df, use_container_width=True)
    st.markdown("#### Cards")
    st.dataframe(cards_frame(returns), use_container_width=True)

    st.markdown("---")
    display_charts(df, currency_symbol)

    st.markdown("---")
    st.markdown(generate_priority_guide(df, currency_symbol))
    _display_recommendations(recommendations, currency_symbol)
