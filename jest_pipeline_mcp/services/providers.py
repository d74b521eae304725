"""Text-generation client selection for services."""

from __future__ import annotations

from collections.abc import Callable

from ..core.errors import MissingAPIKeyError
from ..core.llm import LLMClient, create_llm_client
from .base import ErrorCode, ServiceResult

LLMFactory = Callable[..., LLMClient]


def resolve_llm(
    provider: str | None = None,
    api_key: str | None = None,
    model: str | None = None,
    factory: LLMFactory = create_llm_client,
) -> ServiceResult[LLMClient]:
    """Build an LLM client, mapping configuration problems to error codes."""

    try:
        return ServiceResult.ok(factory(provider, api_key=api_key, model=model))
    except MissingAPIKeyError as e:
        return ServiceResult.fail(
            ErrorCode.AI_UNAVAILABLE,
            str(e),
            details={"provider": e.provider, "env_var": e.env_var}
        )
    except ValueError as e:
        return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, str(e))
