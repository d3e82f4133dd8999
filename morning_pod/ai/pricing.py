"""Cost calculation for summarization and TTS models."""

from morning_pod.ai.models import AIModel, ModelType, get_model


def calculate_summarization_cost(model_id: str, input_tokens: int, output_tokens: int) -> float:
    """Cost in USD of a summarization call, or 0 if the model has no token price."""
    model = get_model(model_id)
    if model is None or not model.cost_per_1k_tokens:
        return 0.0

    total_tokens = input_tokens + output_tokens
    return (total_tokens / 1000) * model.cost_per_1k_tokens


def calculate_tts_cost(model_id: str, character_count: int) -> float:
    """Cost in USD of synthesizing ``character_count`` characters."""
    model = get_model(model_id)
    if model is None or not model.cost_per_character:
        return 0.0

    return character_count * model.cost_per_character


def estimate_cost(model: AIModel, content_length: int | None) -> float:
    """
    Estimate the cost of running content through a model.

    Args:
        model: The model to price
        content_length: Tokens for summarization models, characters for TTS

    Returns:
        Estimated cost in USD; 0 when no content length is given
    """
    if not content_length:
        return 0.0

    if model.model_type == ModelType.SUMMARIZATION and model.cost_per_1k_tokens:
        return (content_length / 1000) * model.cost_per_1k_tokens
    if model.model_type == ModelType.TTS and model.cost_per_character:
        return content_length * model.cost_per_character
    return 0.0
