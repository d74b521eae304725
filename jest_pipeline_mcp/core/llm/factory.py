"""Select a text-generation client once, by provider tag."""

import os

from ...constants import DEFAULT_PROVIDER, PROVIDER_API_KEY_ENV, PROVIDER_ENV
from ..errors import MissingAPIKeyError
from .base import LLMClient, LLMProvider
from .providers import AnthropicClient, OpenAIClient, QwenClient

CLIENTS: dict[LLMProvider, type[LLMClient]] = {
    LLMProvider.OPENAI: OpenAIClient,
    LLMProvider.ANTHROPIC: AnthropicClient,
    LLMProvider.QWEN: QwenClient,
}


def resolve_provider(provider: LLMProvider | str | None = None) -> LLMProvider:
    """
    Turn a provider name into an LLMProvider.

    Falls back to the LLM_PROVIDER environment variable, then to the default.

    Raises:
        ValueError: If the name is not a supported provider
    """
    if isinstance(provider, LLMProvider):
        return provider

    name = (provider or os.getenv(PROVIDER_ENV) or DEFAULT_PROVIDER).strip().lower()
    try:
        return LLMProvider(name)
    except ValueError:
        supported = ", ".join(p.value for p in LLMProvider)
        raise ValueError(f"Unsupported LLM provider: {name} (expected one of {supported})") from None


def create_llm_client(
    provider: LLMProvider | str | None = None,
    api_key: str | None = None,
    model: str | None = None,
) -> LLMClient:
    """
    Build the client for `provider`.

    Args:
        provider: Provider tag or name (default from LLM_PROVIDER)
        api_key: Explicit key; otherwise read from the provider's env var
        model: Override the provider's default model

    Raises:
        ValueError: Unknown provider
        MissingAPIKeyError: No key available
    """
    resolved = resolve_provider(provider)
    env_var = PROVIDER_API_KEY_ENV[resolved.value]

    key = api_key or os.getenv(env_var)
    if not key:
        raise MissingAPIKeyError(resolved.value, env_var)

    return CLIENTS[resolved](api_key=key, model=model)
