"""Provider API credentials read from the environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass
class OpenAICredentials:
    api_key: str = ""
    organization: str | None = None


@dataclass
class AnthropicCredentials:
    api_key: str = ""


@dataclass
class GoogleCredentials:
    api_key: str = ""
    project_id: str | None = None


@dataclass
class ProviderCredentials:
    """Credentials for every known provider."""

    openai: OpenAICredentials = field(default_factory=OpenAICredentials)
    anthropic: AnthropicCredentials = field(default_factory=AnthropicCredentials)
    google: GoogleCredentials = field(default_factory=GoogleCredentials)

    def api_key_for(self, provider_id: str) -> str | None:
        """API key for a provider, or None if the provider is unknown."""
        creds = {
            "openai": self.openai,
            "anthropic": self.anthropic,
            "google": self.google,
        }.get(provider_id)
        return creds.api_key if creds is not None else None


def get_provider_credentials(environ: Mapping[str, str] | None = None) -> ProviderCredentials:
    """Build credentials from environment variables."""
    env = os.environ if environ is None else environ
    return ProviderCredentials(
        openai=OpenAICredentials(
            api_key=env.get("OPENAI_API_KEY", ""),
            organization=env.get("OPENAI_ORGANIZATION"),
        ),
        anthropic=AnthropicCredentials(
            api_key=env.get("ANTHROPIC_API_KEY", ""),
        ),
        google=GoogleCredentials(
            api_key=env.get("GOOGLE_AI_API_KEY", ""),
            project_id=env.get("GOOGLE_CLOUD_PROJECT_ID"),
        ),
    )


def is_provider_configured(provider_id: str, environ: Mapping[str, str] | None = None) -> bool:
    """Check whether a provider has a non-empty API key."""
    return bool(get_provider_credentials(environ).api_key_for(provider_id))
