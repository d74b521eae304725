"""Text-generation client interface shared by every provider."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class LLMProvider(str, Enum):
    """Supported text-generation providers."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    QWEN = "qwen"


@dataclass(frozen=True)
class TokenUsage:
    """Token accounting reported by the provider."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    def to_dict(self) -> dict:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }


@dataclass(frozen=True)
class LLMResponse:
    """Non-empty generated text plus optional metadata."""
    content: str
    model: str | None = None
    usage: TokenUsage | None = None


class LLMClient(ABC):
    """One capability: turn a prompt into text."""

    provider: LLMProvider

    @abstractmethod
    async def generate_text(self, prompt: str) -> LLMResponse:
        """
        Generate a completion for `prompt`.

        Raises:
            ProviderError: If the call fails or the response is empty/malformed
        """
