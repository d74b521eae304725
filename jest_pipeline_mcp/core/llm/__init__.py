"""Text-generation clients."""

from .base import LLMClient, LLMProvider, LLMResponse, TokenUsage
from .factory import create_llm_client, resolve_provider
from .providers import AnthropicClient, OpenAIClient, OpenAICompatibleClient, QwenClient

__all__ = [
    "LLMClient",
    "LLMProvider",
    "LLMResponse",
    "TokenUsage",
    "create_llm_client",
    "resolve_provider",
    "OpenAICompatibleClient",
    "OpenAIClient",
    "AnthropicClient",
    "QwenClient",
]
