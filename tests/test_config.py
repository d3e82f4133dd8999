"""Tests for configuration handling."""

import json
import tempfile
from pathlib import Path

import pytest

from morning_pod.ai.recommender import Priority
from morning_pod.config import BudgetConfig, Config, RecommendationConfig


class TestRecommendationConfig:
    """Tests for RecommendationConfig dataclass."""

    def test_defaults(self):
        config = RecommendationConfig()
        assert config.priority == "cost"
        assert config.max_cost is None
        assert config.limit == 3

    def test_from_dict(self):
        config = RecommendationConfig.from_dict({"priority": "quality", "max_cost": 0.5, "limit": 2})
        assert config.priority == "quality"
        assert config.max_cost == 0.5
        assert config.limit == 2


class TestBudgetConfig:
    """Tests for BudgetConfig dataclass."""

    def test_defaults(self):
        config = BudgetConfig()
        assert config.daily == 5.0
        assert config.monthly == 50.0
        assert config.per_request == 1.0
        assert config.cache_ttl_hours == 48

    def test_to_budget(self):
        budget = BudgetConfig(daily=2.0, monthly=20.0, per_request=0.5).to_budget()
        assert budget.daily == 2.0
        assert budget.monthly == 20.0
        assert budget.per_request == 0.5


class TestConfig:
    """Tests for Config dataclass."""

    def test_defaults(self):
        config = Config()
        assert config.priority == Priority.COST
        assert config.scripts_dir is None

    def test_unknown_priority_falls_back(self):
        config = Config(recommendation=RecommendationConfig(priority="vibes"))
        assert config.priority == Priority.COST

    def test_from_dict(self):
        data = {
            "recommendation": {"priority": "speed"},
            "budget": {"daily": 1.0},
            "scripts_dir": "/tmp",
        }
        config = Config.from_dict(data)
        assert config.priority == Priority.SPEED
        assert config.budget.daily == 1.0
        assert config.budget.monthly == 50.0
        assert config.scripts_dir == Path("/tmp")

    def test_to_dict(self):
        data = Config().to_dict()
        assert data["recommendation"]["priority"] == "cost"
        assert data["budget"]["cache_ttl_hours"] == 48
        assert data["scripts_dir"] is None

    def test_load_and_save(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"

            config = Config()
            config.recommendation.priority = "quality"
            config.budget.daily = 2.5
            config.save(config_path)

            loaded = Config.load(config_path)
            assert loaded.priority == Priority.QUALITY
            assert loaded.budget.daily == 2.5

    def test_load_missing_file(self):
        config = Config.load(Path("/nonexistent/config.json"))
        assert config.budget.daily == 5.0

    def test_load_malformed_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text("{not json")
        config = Config.load(config_path)
        assert config.priority == Priority.COST

    def test_load_non_utf8_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_bytes(b"\xff\xfe{}")
        config = Config.load(config_path)
        assert config.priority == Priority.COST

    def test_saved_file_is_json(self, tmp_path):
        config_path = tmp_path / "nested" / "config.json"
        Config().save(config_path)
        assert json.loads(config_path.read_text())["budget"]["monthly"] == 50.0

    def test_validate_valid_config(self):
        assert Config().validate() == []

    def test_validate_unknown_priority(self):
        config = Config(recommendation=RecommendationConfig(priority="vibes"))
        assert any("priority" in issue for issue in config.validate())

    def test_validate_limit(self):
        config = Config(recommendation=RecommendationConfig(limit=5))
        assert any("limit" in issue for issue in config.validate())

    def test_validate_negative_budget(self):
        config = Config(budget=BudgetConfig(per_request=-1))
        assert any("per_request" in issue for issue in config.validate())

    def test_validate_daily_over_monthly(self):
        config = Config(budget=BudgetConfig(daily=100, monthly=10))
        assert any("Daily" in issue for issue in config.validate())

    def test_validate_scripts_dir(self, tmp_path):
        config = Config(scripts_dir=tmp_path / "missing")
        assert any("scripts_dir" in issue for issue in config.validate())
