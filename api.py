from dataclasses import asdict
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic.alias_generators import to_camel

from catalog import catalog_by_id, get_catalog
from catalog.reference import categories
from config import configure_logging, settings
from marginal import (
    apply_marginal_values,
    calculate_card_recommendations,
    calculate_marginal_values,
)
from models import CardRecommendation, InvalidInputError, PortfolioReturns
from returns import calculate_portfolio_returns
from store import (
    Scenario,
    ScenarioStore,
    UnknownCardError,
    UnknownCategoryError,
    build_calculator_input,
)

app = FastAPI(title="Rewards Optimizer API")


class ReturnsRequest(Scenario):
    strategy: Optional[Literal["greedy", "joint"]] = None
    include_marginal_values: bool = True
    include_recommendations: bool = True


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_camel(key): _camelize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_camelize(item) for item in value]
    return value


def returns_to_dict(returns: PortfolioReturns) -> Dict[str, Any]:
    """Serialize returns with the camelCase field names clients expect."""
    payload = _camelize(asdict(returns))
    for category, allocation in zip(payload["categoryBreakdown"], returns.category_breakdown):
        category["returnOnSpend"] = allocation.return_on_spend
    return payload


def recommendation_to_dict(recommendation: CardRecommendation) -> Dict[str, Any]:
    return {
        "card": _camelize(asdict(recommendation.card)),
        "improvement": recommendation.improvement,
        "defaultPerksValue": recommendation.default_perks_value,
    }


def evaluate_scenario(
    scenario: Scenario,
    strategy: Optional[str] = None,
    include_marginal_values: bool = True,
    include_recommendations: bool = True,
) -> Dict[str, Any]:
    """Returns, marginal values and recommendations for one scenario."""
    strategy = strategy or settings.allocation_strategy
    catalog = catalog_by_id()
    try:
        calc_input = build_calculator_input(
            scenario,
            catalog,
            default_point_value_cents=settings.default_point_value_cents,
        )
        portfolio = calculate_portfolio_returns(calc_input, strategy)
    except UnknownCardError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown card: {exc.args[0]}") from exc
    except (UnknownCategoryError, InvalidInputError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    if include_marginal_values:
        apply_marginal_values(
            portfolio, calculate_marginal_values(calc_input, portfolio, strategy)
        )

    recommendations = []
    if include_recommendations:
        recommendations = calculate_card_recommendations(
            calc_input,
            portfolio,
            catalog.values(),
            limit=settings.recommendation_limit,
            strategy=strategy,
        )

    payload = returns_to_dict(portfolio)
    payload["recommendations"] = [recommendation_to_dict(rec) for rec in recommendations]
    return payload


@app.get("/cards")
def get_cards() -> List[Dict]:
    """Returns every card in the catalog."""
    return [asdict(entry.card) for entry in get_catalog()]


@app.get("/categories")
def get_categories() -> List[Dict]:
    """Returns a list of all spending categories."""
    return [asdict(cat) for cat in categories.values()]


@app.post("/returns")
def returns(request: ReturnsRequest) -> Dict[str, Any]:
    """
    Optimal allocation of the user's spending, with each card's marginal
    value and the best cards to add.
    """
    return evaluate_scenario(
        request,
        request.strategy,
        request.include_marginal_values,
        request.include_recommendations,
    )


@app.get("/scenario/returns")
def scenario_returns() -> Dict[str, Any]:
    """Returns for the scenario file named in the settings."""
    try:
        scenario = ScenarioStore(settings.scenario_file).load()
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return evaluate_scenario(scenario)


def run() -> None:
    import uvicorn  # pylint: disable=import-outside-toplevel

    configure_logging()
    uvicorn.run("api:app", host=settings.app_host, port=settings.app_port, reload=False)


if __name__ == "__main__":
    run()
