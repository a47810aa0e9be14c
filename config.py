import logging
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from models import DEFAULT_POINT_VALUE_CENTS, GREEDY, MAXIMIZE


class Settings(BaseSettings):
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    default_earnings_goal: Literal["maximize", "cash_only", "points_only"] = MAXIMIZE
    allocation_strategy: Literal["greedy", "joint"] = GREEDY
    recommendation_limit: int = 3
    default_point_value_cents: float = DEFAULT_POINT_VALUE_CENTS
    scenario_file: str = "data/scenarios/sample.json"

    model_config = SettingsConfigDict(
        env_prefix="REWARDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
