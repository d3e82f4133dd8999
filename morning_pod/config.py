"""Configuration management for morning-pod."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from morning_pod.ai.optimizer import DEFAULT_CACHE_TTL_HOURS, CostBudget
from morning_pod.ai.recommender import DEFAULT_LIMIT, Priority

logger = logging.getLogger(__name__)

# Default config locations
CONFIG_PATHS = [
    Path.home() / ".config" / "morning-pod" / "config.json",
    Path.home() / ".morning-pod.json",
]


@dataclass
class RecommendationConfig:
    """Defaults for model recommendations."""

    priority: str = Priority.COST.value
    max_cost: float | None = None
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecommendationConfig":
        return cls(
            priority=data.get("priority", Priority.COST.value),
            max_cost=data.get("max_cost"),
            limit=data.get("limit", DEFAULT_LIMIT),
        )


@dataclass
class BudgetConfig:
    """Spending limits for summarization, in USD."""

    daily: float = 5.0
    monthly: float = 50.0
    per_request: float = 1.0
    cache_ttl_hours: float = DEFAULT_CACHE_TTL_HOURS

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BudgetConfig":
        return cls(
            daily=data.get("daily", 5.0),
            monthly=data.get("monthly", 50.0),
            per_request=data.get("per_request", 1.0),
            cache_ttl_hours=data.get("cache_ttl_hours", DEFAULT_CACHE_TTL_HOURS),
        )

    def to_budget(self) -> CostBudget:
        return CostBudget(daily=self.daily, monthly=self.monthly, per_request=self.per_request)


@dataclass
class Config:
    """Main configuration for morning-pod."""

    recommendation: RecommendationConfig = field(default_factory=RecommendationConfig)
    budget: BudgetConfig = field(default_factory=BudgetConfig)
    scripts_dir: Path | None = None  # None means the current directory

    @property
    def priority(self) -> Priority:
        """The configured priority, falling back to cost if unknown."""
        try:
            return Priority(self.recommendation.priority)
        except ValueError:
            logger.warning(f"Unknown priority in config: {self.recommendation.priority}")
            return Priority.COST

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create config from a dictionary."""
        scripts_dir = Path(data["scripts_dir"]) if data.get("scripts_dir") else None
        return cls(
            recommendation=RecommendationConfig.from_dict(data.get("recommendation", {})),
            budget=BudgetConfig.from_dict(data.get("budget", {})),
            scripts_dir=scripts_dir,
        )

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load configuration from file or return defaults."""
        if path:
            paths_to_try = [path]
        else:
            paths_to_try = CONFIG_PATHS

        for config_path in paths_to_try:
            if config_path.exists():
                try:
                    with open(config_path, encoding="utf-8") as f:
                        data = json.load(f)
                    logger.info(f"Loaded config from {config_path}")
                    return cls.from_dict(data)
                except (ValueError, OSError, AttributeError) as e:
                    logger.warning(f"Failed to load config from {config_path}: {e}")

        logger.info("Using default configuration")
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary."""
        return {
            "recommendation": {
                "priority": self.recommendation.priority,
                "max_cost": self.recommendation.max_cost,
                "limit": self.recommendation.limit,
            },
            "budget": {
                "daily": self.budget.daily,
                "monthly": self.budget.monthly,
                "per_request": self.budget.per_request,
                "cache_ttl_hours": self.budget.cache_ttl_hours,
            },
            "scripts_dir": str(self.scripts_dir) if self.scripts_dir else None,
        }

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        save_path = path or CONFIG_PATHS[0]
        save_path.parent.mkdir(parents=True, exist_ok=True)
        with open(save_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved config to {save_path}")

    def validate(self) -> list[str]:
        """Validate the configuration and return any issues."""
        issues: list[str] = []

        if self.recommendation.priority not in {p.value for p in Priority}:
            issues.append(f"Unknown priority: {self.recommendation.priority}")

        if not 1 <= self.recommendation.limit <= DEFAULT_LIMIT:
            issues.append(f"Recommendation limit {self.recommendation.limit} should be between 1 and {DEFAULT_LIMIT}")

        if self.recommendation.max_cost is not None and self.recommendation.max_cost < 0:
            issues.append("max_cost must not be negative")

        for name in ("daily", "monthly", "per_request"):
            if getattr(self.budget, name) < 0:
                issues.append(f"Budget {name} must not be negative")

        if self.budget.daily > self.budget.monthly:
            issues.append("Daily budget exceeds monthly budget")

        if self.budget.cache_ttl_hours <= 0:
            issues.append("cache_ttl_hours must be positive")

        if self.scripts_dir is not None and not self.scripts_dir.is_dir():
            issues.append(f"scripts_dir {self.scripts_dir} is not a directory")

        return issues
