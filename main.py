"""
Main script for the Rewards Optimizer Streamlit application.

This script sets up the user interface, handles user input, and
calls the returns calculator to allocate spending across the selected cards.
"""

import streamlit as st

from catalog import get_catalog
from config import configure_logging, settings
from marginal import (
    apply_marginal_values,
    calculate_card_recommendations,
    calculate_marginal_values,
)
from returns import calculate_portfolio_returns
from store import build_calculator_input
from ui import build_scenario, display_results, setup_sidebar

CURRENCY_SYMBOL = "$"


def main():
    """Main function to run the Streamlit application."""
    configure_logging()
    st.set_page_config(layout="wide", page_title="Rewards Optimizer 💳")

    st.title("Rewards Optimizer")
    st.markdown(
        "Enter your annual spending and the cards you hold to see how to split "
        "purchases between them and what each card is really worth."
    )
    st.markdown("---")

    catalog = get_catalog()
    annual_spending, selected_card_ids, earnings_goal, strategy, calculate_button = setup_sidebar(
        CURRENCY_SYMBOL,
        catalog,
        default_goal=settings.default_earnings_goal,
        default_strategy=settings.allocation_strategy,
    )

    if calculate_button:
        if sum(annual_spending.values()) == 0:
            st.warning("Enter some spending first.")
        elif not selected_card_ids:
            st.warning("Select at least one card.")
        else:
            scenario = build_scenario(annual_spending, selected_card_ids, earnings_goal)
            with st.spinner("Calculating returns..."):
                catalog_map = {entry.card.id: entry for entry in catalog}
                calc_input = build_calculator_input(
                    scenario,
                    catalog_map,
                    default_point_value_cents=settings.default_point_value_cents,
                )
                returns = calculate_portfolio_returns(calc_input, strategy)
                apply_marginal_values(
                    returns, calculate_marginal_values(calc_input, returns, strategy)
                )
                recommendations = calculate_card_recommendations(
                    calc_input,
                    returns,
                    catalog,
                    limit=settings.recommendation_limit,
                    strategy=strategy,
                )
            display_results(returns, recommendations, CURRENCY_SYMBOL)

    st.markdown("---")
    st.info(
        "Point values default to 1 cent unless a valuation is set for the currency.",
        icon="ℹ️",
    )


if __name__ == "__main__":
    main()
