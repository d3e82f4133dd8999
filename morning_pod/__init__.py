"""Morning-pod: model selection, cost tools and project scripts for the Morning Pod app."""

__version__ = "0.1.0"

from morning_pod.ai.models import AIModel, AIProvider, ModelType
from morning_pod.ai.recommender import Priority, recommend_models
from morning_pod.config import Config

__all__ = [
    "__version__",
    "AIModel",
    "AIProvider",
    "ModelType",
    "Priority",
    "recommend_models",
    "Config",
]
