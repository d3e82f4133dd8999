"""Model recommendation based on a cost/quality/speed priority."""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

from morning_pod.ai.models import AIModel, ModelType, Quality, Speed, get_models_by_type
from morning_pod.ai.pricing import estimate_cost

logger = logging.getLogger(__name__)

# Maximum number of recommendations returned
DEFAULT_LIMIT = 3

# Points added when a model has one of these feature tags
FEATURE_BONUSES: dict[str, int] = {
    "cost-effective": 10,
    "fast": 10,
    "high-quality": 15,
}


class Priority(Enum):
    """What the caller cares about most."""

    COST = "cost"
    QUALITY = "quality"
    SPEED = "speed"


@dataclass
class RecommendationCriteria:
    """Inputs to the scorer."""

    priority: Priority
    content_length: int | None = None  # characters for TTS, tokens for summarization
    max_cost: float | None = None


@dataclass
class ModelRecommendation:
    """A scored model."""

    model: AIModel
    score: int
    estimated_cost: float
    reasons: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.model.model_id} (score {self.score}, ~${self.estimated_cost:.4f})"


def score_model(model: AIModel, criteria: RecommendationCriteria) -> ModelRecommendation:
    """Score a single model against the criteria."""
    score = 0
    reasons: list[str] = []
    cost = estimate_cost(model, criteria.content_length)

    if criteria.priority == Priority.COST:
        if model.quality == Quality.BASIC:
            score += 30
        if model.speed == Speed.FAST:
            score += 20
        max_cost = criteria.max_cost if criteria.max_cost else math.inf
        if cost < max_cost:
            score += 40
        reasons.append("Optimized for cost")
    elif criteria.priority == Priority.QUALITY:
        if model.quality == Quality.PREMIUM:
            score += 50
        elif model.quality == Quality.STANDARD:
            score += 30
        reasons.append("High quality output")
    elif criteria.priority == Priority.SPEED:
        if model.speed == Speed.FAST:
            score += 50
        elif model.speed == Speed.MEDIUM:
            score += 30
        reasons.append("Fast processing")

    for feature, bonus in FEATURE_BONUSES.items():
        if model.has_feature(feature):
            score += bonus

    return ModelRecommendation(model=model, score=score, estimated_cost=cost, reasons=reasons)


def recommend_models(
    model_type: ModelType,
    criteria: RecommendationCriteria,
    limit: int = DEFAULT_LIMIT,
) -> list[ModelRecommendation]:
    """
    Rank catalog models of a type for the given criteria.

    Args:
        model_type: Summarization or TTS
        criteria: Priority plus optional content length and cost ceiling
        limit: Maximum number of results

    Returns:
        Up to ``limit`` recommendations, highest score first. Ties keep
        catalog order.
    """
    scored = [score_model(model, criteria) for model in get_models_by_type(model_type)]
    scored.sort(key=lambda r: r.score, reverse=True)
    return scored[:limit]


class ModelRecommender:
    """Recommends models using configured defaults."""

    def __init__(
        self,
        priority: Priority = Priority.COST,
        max_cost: float | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> None:
        self.priority = priority
        self.max_cost = max_cost
        self.limit = max(1, min(limit, DEFAULT_LIMIT))

    def recommend(
        self,
        model_type: ModelType,
        content_length: int | None = None,
        priority: Priority | None = None,
    ) -> list[ModelRecommendation]:
        criteria = RecommendationCriteria(
            priority=priority or self.priority,
            content_length=content_length,
            max_cost=self.max_cost,
        )
        results = recommend_models(model_type, criteria, limit=self.limit)

        for rank, rec in enumerate(results, start=1):
            logger.debug(f"#{rank} {model_type.value}: {rec}")
        if results:
            logger.info(
                f"Recommended {results[0].model.model_id} for {model_type.value} "
                f"(priority: {criteria.priority.value})"
            )
        return results

    def best(self, model_type: ModelType, content_length: int | None = None) -> AIModel | None:
        """The top recommendation, if any."""
        results = self.recommend(model_type, content_length)
        return results[0].model if results else None
