"""
Reference data shared by the catalog cards: categories, currencies and point
valuation templates.
"""

from models import Category, CurrencyInput, PointValueTemplate

categories = {
    "dining": Category(id=1, name="Dining", slug="dining"),
    "grocery": Category(id=2, name="Grocery", slug="grocery"),
    "gas": Category(id=3, name="Gas", slug="gas"),
    "travel": Category(id=4, name="All Travel", slug="travel"),
    "flights": Category(id=5, name="Flights", slug="flights", parent_category_id=4),
    "hotels": Category(id=6, name="Hotels", slug="hotels", parent_category_id=4),
    "rental_car": Category(id=7, name="Rental Car", slug="rental-car", parent_category_id=4),
    "streaming": Category(id=8, name="Streaming", slug="streaming"),
    "drugstore": Category(id=9, name="Drugstore", slug="drugstore"),
    "online_retail": Category(id=10, name="Online Retail", slug="online-retail"),
    "transit": Category(id=11, name="Transit", slug="transit"),
    "home_improvement": Category(id=12, name="Home Improvement", slug="home-improvement"),
    "everything_else": Category(id=13, name="Everything Else", slug="everything-else"),
    "over_5k": Category(
        id=14, name="Purchases over $5k", slug="over-5k", excluded_by_default=True
    ),
    "rent": Category(id=15, name="Rent", slug="rent", excluded_by_default=True),
}

currencies = {
    "cash": CurrencyInput(
        id="usd-cash", name="Cash Back", code="USD", currency_type="cash_back",
        base_value_cents=1.0, cash_out_value_cents=1.0,
    ),
    "ultimate_rewards": CurrencyInput(
        id="chase-ur", name="Chase Ultimate Rewards", code="UR",
        currency_type="transferable_points", base_value_cents=1.5, cash_out_value_cents=1.0,
    ),
    "membership_rewards": CurrencyInput(
        id="amex-mr", name="Amex Membership Rewards", code="MR",
        currency_type="transferable_points", base_value_cents=1.6, cash_out_value_cents=0.6,
    ),
    "thankyou": CurrencyInput(
        id="citi-ty", name="Citi ThankYou Points", code="TY",
        currency_type="transferable_points", base_value_cents=1.4, cash_out_value_cents=1.0,
    ),
    "aadvantage": CurrencyInput(
        id="aa-miles", name="AAdvantage Miles", code="AA",
        currency_type="airline_miles", base_value_cents=1.3,
    ),
    "hilton": CurrencyInput(
        id="hilton-honors", name="Hilton Honors Points", code="HH",
        currency_type="hotel_points", base_value_cents=0.5,
    ),
}

valuation_templates = [
    PointValueTemplate(
        id="standard",
        name="Standard",
        is_default=True,
    ),
    PointValueTemplate(
        id="conservative",
        name="Conservative",
        values={
            "chase-ur": 1.25,
            "amex-mr": 1.2,
            "citi-ty": 1.1,
            "aa-miles": 1.1,
            "hilton-honors": 0.4,
        },
    ),
]

LARGE_PURCHASE_CATEGORY_ID = categories["over_5k"].id
