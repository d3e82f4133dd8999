"""AI provider catalog, pricing and model recommendation."""

from morning_pod.ai.models import (
    AI_PROVIDERS,
    AIModel,
    AIProvider,
    ModelType,
    get_model,
    get_models_by_provider,
    get_models_by_type,
    get_provider,
)
from morning_pod.ai.recommender import (
    ModelRecommendation,
    ModelRecommender,
    Priority,
    RecommendationCriteria,
    recommend_models,
)

__all__ = [
    "AI_PROVIDERS",
    "AIModel",
    "AIProvider",
    "ModelType",
    "get_model",
    "get_models_by_provider",
    "get_models_by_type",
    "get_provider",
    "ModelRecommendation",
    "ModelRecommender",
    "Priority",
    "RecommendationCriteria",
    "recommend_models",
]
