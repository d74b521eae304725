"""Test healing service.

Runs a failing test file, then repairs it with the healer and returns HealingResult in ServiceResult.
"""


from __future__ import annotations

import logging

from ..constants import DEFAULT_HEALING_STRATEGY, DEFAULT_MAX_RETRIES
from ..core.errors import ProviderError
from ..core.healer import HealingConfig, HealingInput, HealingResult, HealingStrategy, TestHealer
from ..core.llm import create_llm_client
from ..core.runner import ClassifiedError, ErrorKind, ExecutionResult
from .base import ErrorCode, ServiceResult
from .execution import ExecutionService
from .providers import LLMFactory, resolve_llm
from .source_loader import SourceLoader

logger = logging.getLogger(__name__)


def errors_to_heal(result: ExecutionResult) -> tuple[ClassifiedError, ...]:
    """Errors of a failed run; a generic one when the output had none to parse."""

    if result.errors:
        return result.errors
    return (ClassifiedError(kind=ErrorKind.UNKNOWN, message=f"Test run failed with status {result.status.value}"),)


def parse_strategy(strategy: str | None) -> HealingStrategy:
    """
    Raises:
        ValueError: If the name is not a known strategy
    """
    try:
        return HealingStrategy((strategy or DEFAULT_HEALING_STRATEGY).lower())
    except ValueError:
        allowed = ", ".join(s.value for s in HealingStrategy)
        raise ValueError(f"Unknown healing strategy: {strategy} (expected one of {allowed})") from None


class HealingService:
    """Repair a failing Jest test file."""

    def __init__(
        self,
        execution: ExecutionService | None = None,
        loader: SourceLoader | None = None,
        llm_factory: LLMFactory = create_llm_client
    ):
        self._execution = execution or ExecutionService()
        self._loader = loader or SourceLoader()
        self._llm_factory = llm_factory

    async def heal(
        self,
        source_file: str | None,
        test_file: str | None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        strategy: str | None = None,
        provider: str | None = None,
        api_key: str | None = None,
        framework: str | None = None,
        timeout: float | None = None,
        project_root: str | None = None
    ) -> ServiceResult[HealingResult]:
        """Run the test file and heal it if it fails."""

        if max_retries < 1:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "'max_retries' must be at least 1"
            )
        try:
            healing_strategy = parse_strategy(strategy)
        except ValueError as e:
            return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, str(e))

        source = self._loader.load(source_file, label="source_file")
        if not source.success:
            return ServiceResult.from_error(source)
        test = self._loader.load(test_file, label="test_file")
        if not test.success:
            return ServiceResult.from_error(test)

        # Step 1: Observe the current failures
        run = await self._execution.run(
            test.data.path,
            project_root=project_root,
            framework=framework,
            timeout=timeout,
        )
        if not run.success:
            return ServiceResult.from_error(run)

        if run.data.success:
            logger.info("%s already passes, nothing to heal", test.data.path)
            return ServiceResult.ok(HealingResult(is_fixed=True, test_code=test.data.content))

        # Step 2: Heal
        llm = resolve_llm(provider, api_key, factory=self._llm_factory)
        if not llm.success:
            return ServiceResult.from_error(llm)

        healer = TestHealer(
            llm.data,
            self._execution.runner_for(test.data.path, project_root),
            HealingConfig(
                max_retries=max_retries,
                strategy=healing_strategy,
                timeout_per_attempt=timeout,
            ),
        )

        try:
            result = await healer.heal(HealingInput(
                source_code=source.data.content,
                test_file=test.data.path,
                test_code=test.data.content,
                errors=errors_to_heal(run.data),
                source_file=source.data.path,
                framework=framework,
            ))
        except ProviderError as e:
            return ServiceResult.fail(
                ErrorCode.AI_ERROR,
                f"Healing aborted: {e}",
                details={"provider": e.provider}
            )

        return ServiceResult.ok(result)
