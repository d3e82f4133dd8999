"""AI provider and model definitions and registry."""

from dataclasses import dataclass, field
from enum import Enum


class ModelType(Enum):
    """What a model is used for in the episode pipeline."""

    SUMMARIZATION = "summarization"
    TTS = "tts"


class ProviderType(Enum):
    """Which model types a provider offers."""

    SUMMARIZATION = "summarization"
    TTS = "tts"
    BOTH = "both"


class Quality(Enum):
    """Output quality tiers."""

    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"


class Speed(Enum):
    """Processing speed tiers."""

    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"


@dataclass(frozen=True)
class AIModel:
    """Specification for a summarization or TTS model."""

    model_id: str
    name: str
    provider: str
    model_type: ModelType
    quality: Quality
    speed: Speed
    features: tuple[str, ...] = ()
    cost_per_1k_tokens: float | None = None  # Summarization models
    cost_per_character: float | None = None  # TTS models
    context_window: int | None = None
    max_tokens: int | None = None

    def has_feature(self, feature: str) -> bool:
        return feature in self.features


@dataclass(frozen=True)
class RateLimit:
    requests_per_minute: int
    tokens_per_minute: int


@dataclass(frozen=True)
class AIProvider:
    """A named AI backend and the models it offers."""

    provider_id: str
    name: str
    provider_type: ProviderType
    models: tuple[AIModel, ...] = field(default_factory=tuple)
    api_key_required: bool = True
    rate_limit: RateLimit | None = None
    base_url: str | None = None


AI_PROVIDERS: list[AIProvider] = [
    AIProvider(
        provider_id="openai",
        name="OpenAI",
        provider_type=ProviderType.BOTH,
        rate_limit=RateLimit(requests_per_minute=500, tokens_per_minute=150000),
        models=(
            AIModel(
                model_id="gpt-4o-mini",
                name="GPT-4o Mini",
                provider="openai",
                model_type=ModelType.SUMMARIZATION,
                quality=Quality.STANDARD,
                speed=Speed.FAST,
                features=("fast", "cost-effective", "good-quality"),
                cost_per_1k_tokens=0.00015,  # $0.15 per 1M tokens
                context_window=128000,
                max_tokens=16384,
            ),
            AIModel(
                model_id="gpt-4o",
                name="GPT-4o",
                provider="openai",
                model_type=ModelType.SUMMARIZATION,
                quality=Quality.PREMIUM,
                speed=Speed.MEDIUM,
                features=("highest-quality", "advanced-reasoning", "multimodal"),
                cost_per_1k_tokens=0.005,  # $5 per 1M tokens
                context_window=128000,
                max_tokens=4096,
            ),
            AIModel(
                model_id="gpt-3.5-turbo",
                name="GPT-3.5 Turbo",
                provider="openai",
                model_type=ModelType.SUMMARIZATION,
                quality=Quality.BASIC,
                speed=Speed.FAST,
                features=("very-fast", "cheapest", "reliable"),
                cost_per_1k_tokens=0.0005,  # $0.5 per 1M tokens
                context_window=16385,
                max_tokens=4096,
            ),
            AIModel(
                model_id="tts-1",
                name="TTS-1",
                provider="openai",
                model_type=ModelType.TTS,
                quality=Quality.STANDARD,
                speed=Speed.FAST,
                features=("fast", "natural-voices", "multiple-voices"),
                cost_per_character=0.000015,  # $15 per 1M characters
            ),
            AIModel(
                model_id="tts-1-hd",
                name="TTS-1 HD",
                provider="openai",
                model_type=ModelType.TTS,
                quality=Quality.PREMIUM,
                speed=Speed.MEDIUM,
                features=("high-quality", "natural-voices", "multiple-voices"),
                cost_per_character=0.00003,  # $30 per 1M characters
            ),
        ),
    ),
    AIProvider(
        provider_id="anthropic",
        name="Anthropic",
        provider_type=ProviderType.SUMMARIZATION,
        rate_limit=RateLimit(requests_per_minute=50, tokens_per_minute=40000),
        models=(
            AIModel(
                model_id="claude-3-haiku",
                name="Claude 3 Haiku",
                provider="anthropic",
                model_type=ModelType.SUMMARIZATION,
                quality=Quality.STANDARD,
                speed=Speed.FAST,
                features=("fast", "cost-effective", "large-context"),
                cost_per_1k_tokens=0.00025,
                context_window=200000,
                max_tokens=4096,
            ),
            AIModel(
                model_id="claude-3-sonnet",
                name="Claude 3 Sonnet",
                provider="anthropic",
                model_type=ModelType.SUMMARIZATION,
                quality=Quality.PREMIUM,
                speed=Speed.MEDIUM,
                features=("high-quality", "large-context", "reasoning"),
                cost_per_1k_tokens=0.003,
                context_window=200000,
                max_tokens=4096,
            ),
        ),
    ),
    AIProvider(
        provider_id="google",
        name="Google Cloud",
        provider_type=ProviderType.BOTH,
        rate_limit=RateLimit(requests_per_minute=300, tokens_per_minute=32000),
        models=(
            AIModel(
                model_id="gemini-1.5-flash",
                name="Gemini 1.5 Flash",
                provider="google",
                model_type=ModelType.SUMMARIZATION,
                quality=Quality.STANDARD,
                speed=Speed.FAST,
                features=("very-fast", "huge-context", "multimodal"),
                cost_per_1k_tokens=0.000075,
                context_window=1000000,
                max_tokens=8192,
            ),
            AIModel(
                model_id="gemini-1.5-pro",
                name="Gemini 1.5 Pro",
                provider="google",
                model_type=ModelType.SUMMARIZATION,
                quality=Quality.PREMIUM,
                speed=Speed.MEDIUM,
                features=("high-quality", "massive-context", "multimodal"),
                cost_per_1k_tokens=0.00125,
                context_window=2000000,
                max_tokens=8192,
            ),
            AIModel(
                model_id="cloud-tts-standard",
                name="Cloud TTS Standard",
                provider="google",
                model_type=ModelType.TTS,
                quality=Quality.STANDARD,
                speed=Speed.FAST,
                features=("many-voices", "languages", "cost-effective"),
                cost_per_character=0.000004,  # $4 per 1M characters
            ),
            AIModel(
                model_id="cloud-tts-wavenet",
                name="Cloud TTS WaveNet",
                provider="google",
                model_type=ModelType.TTS,
                quality=Quality.PREMIUM,
                speed=Speed.MEDIUM,
                features=("neural-voices", "high-quality", "natural"),
                cost_per_character=0.000016,  # $16 per 1M characters
            ),
        ),
    ),
]


def get_provider(provider_id: str) -> AIProvider | None:
    """Find a provider by its id."""
    for provider in AI_PROVIDERS:
        if provider.provider_id == provider_id:
            return provider
    return None


def get_model(model_id: str) -> AIModel | None:
    """Find a model by its id across all providers."""
    for provider in AI_PROVIDERS:
        for model in provider.models:
            if model.model_id == model_id:
                return model
    return None


def get_models_by_type(model_type: ModelType) -> list[AIModel]:
    """All models of a given type, in catalog order."""
    return [
        model
        for provider in AI_PROVIDERS
        for model in provider.models
        if model.model_type == model_type
    ]


def get_models_by_provider(
    provider_id: str,
    model_type: ModelType | None = None,
) -> list[AIModel]:
    """Models offered by a provider, optionally filtered by type."""
    provider = get_provider(provider_id)
    if provider is None:
        return []

    if model_type is None:
        return list(provider.models)
    return [m for m in provider.models if m.model_type == model_type]
