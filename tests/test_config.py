"""Tests for config.py settings."""

import pathlib
import sys

import pytest
from pydantic import ValidationError

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
from config import Settings


class TestSettings:
    """Tests for Settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("REWARDS_ALLOCATION_STRATEGY", raising=False)
        settings = Settings(_env_file=None)
        assert settings.allocation_strategy == "greedy"
        assert settings.recommendation_limit == 3
        assert settings.default_point_value_cents == 1.0

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("REWARDS_RECOMMENDATION_LIMIT", "5")
        monkeypatch.setenv("REWARDS_ALLOCATION_STRATEGY", "joint")
        settings = Settings(_env_file=None)
        assert settings.recommendation_limit == 5
        assert settings.allocation_strategy == "joint"

    def test_invalid_strategy(self, monkeypatch):
        monkeypatch.setenv("REWARDS_ALLOCATION_STRATEGY", "random")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
