"""Concrete providers, all spoken to through the OpenAI SDK."""

import logging

from openai import AsyncOpenAI, OpenAIError

from ...constants import AI_MAX_TOKENS, AI_TEMPERATURE, PROVIDER_BASE_URLS, PROVIDER_DEFAULT_MODELS
from ..errors import ProviderError
from .base import LLMClient, LLMProvider, LLMResponse, TokenUsage

logger = logging.getLogger(__name__)


class OpenAICompatibleClient(LLMClient):
    """Chat-completions client for any OpenAI-compatible endpoint."""

    provider = LLMProvider.OPENAI

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        client: AsyncOpenAI | None = None,
    ):
        self.model = model or PROVIDER_DEFAULT_MODELS[self.provider.value]
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=PROVIDER_BASE_URLS[self.provider.value],
        )

    async def generate_text(self, prompt: str) -> LLMResponse:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=AI_TEMPERATURE,
                max_tokens=AI_MAX_TOKENS,
            )
        except OpenAIError as e:
            raise ProviderError(self.provider.value, str(e)) from e

        choices = getattr(response, "choices", None)
        if not choices or choices[0].message is None:
            raise ProviderError(self.provider.value, "Invalid response from API")

        content = (choices[0].message.content or "").strip()
        if not content:
            raise ProviderError(self.provider.value, "Empty response from API")

        logger.debug("%s returned %d characters", self.provider.value, len(content))

        return LLMResponse(
            content=content,
            model=getattr(response, "model", None) or self.model,
            usage=_usage(response),
        )


class OpenAIClient(OpenAICompatibleClient):
    """OpenAI API."""
    provider = LLMProvider.OPENAI


class AnthropicClient(OpenAICompatibleClient):
    """Anthropic through its OpenAI SDK compatibility endpoint."""
    provider = LLMProvider.ANTHROPIC


class QwenClient(OpenAICompatibleClient):
    """Qwen models served by the Hugging Face inference router."""
    provider = LLMProvider.QWEN


def _usage(response) -> TokenUsage | None:
    usage = getattr(response, "usage", None)
    if usage is None:
        return None
    return TokenUsage(
        prompt_tokens=usage.prompt_tokens,
        completion_tokens=usage.completion_tokens,
        total_tokens=usage.total_tokens,
    )
