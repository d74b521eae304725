"""
Test Healer - Repair failing tests one error at a time.

Errors are processed in the order they were first observed. For each
error the healer asks the model for a fix, overwrites the test file,
reruns the whole suite and records a HealingAttempt:

    ATTEMPTING -> FIXED     rerun passed
               -> ABORTED   conservative strategy and the rerun reported
                            an error different from the target
               -> retry     otherwise, until max_retries is used up

FIXED requires the whole suite to pass, so once one error is fixed
every later error in the list is resolved as well.
"""

import logging

from ..extractor import detect_language
from ..generator import TestArtifact, extract_code
from ..llm import LLMClient
from ..runner import ClassifiedError, ExecutionResult, JestRunner, RunOptions
from .models import HealingAttempt, HealingConfig, HealingInput, HealingResult, HealingStrategy
from .prompt import build_healing_prompt

logger = logging.getLogger(__name__)


class TestHealer:
    """Iteratively repair a failing test file."""
    __test__ = False

    def __init__(self, llm: LLMClient, runner: JestRunner, config: HealingConfig | None = None):
        self.llm = llm
        self.runner = runner
        self.config = config or HealingConfig()

    async def heal(self, healing_input: HealingInput) -> HealingResult:
        """
        Run the healing state machine.

        Returns:
            HealingResult; when not fixed, `test_code` is the last version
            written to disk and `remaining_errors` starts at the error that
            could not be fixed

        Raises:
            ProviderError: If the model call fails
        """
        artifact = TestArtifact(code=healing_input.test_code, file_path=healing_input.test_file)
        accepted_code = healing_input.test_code
        attempts: list[HealingAttempt] = []
        errors = list(healing_input.errors)
        suite_passing = False

        for index, error in enumerate(errors):
            if suite_passing:
                logger.debug("Error %d/%d resolved by an earlier fix", index + 1, len(errors))
                continue

            logger.info("Healing error %d/%d: %s", index + 1, len(errors), error.kind.value)

            fixed = await self._heal_error(healing_input, error, accepted_code, artifact, attempts)
            if not fixed:
                return HealingResult(
                    is_fixed=False,
                    test_code=artifact.code,
                    attempts=attempts,
                    remaining_errors=errors[index:],
                )

            accepted_code = artifact.code
            suite_passing = True

        return HealingResult(is_fixed=True, test_code=accepted_code, attempts=attempts)

    async def _heal_error(
        self,
        healing_input: HealingInput,
        error: ClassifiedError,
        current_code: str,
        artifact: TestArtifact,
        attempts: list[HealingAttempt],
    ) -> bool:
        """Attempt one error until FIXED, ABORTED or the budget runs out."""

        history: list[HealingAttempt] = []

        for attempt_number in range(1, self.config.max_retries + 1):
            prompt = build_healing_prompt(
                healing_input.source_code,
                current_code,
                error,
                history,
                language=detect_language(healing_input.test_file),
            )
            response = await self.llm.generate_text(prompt)
            fix = extract_code(response.content)

            artifact.write(fix)
            result = await self._rerun(healing_input)

            attempt = HealingAttempt(
                attempt_number=attempt_number,
                error=error,
                fix=fix,
                success=result.success,
                result_status=result.status,
            )
            history.append(attempt)
            attempts.append(attempt)

            if result.success:
                logger.info("Error fixed after %d attempt(s)", attempt_number)
                return True

            if self.config.strategy == HealingStrategy.CONSERVATIVE and _has_new_error(result, error):
                logger.info("Fix introduced a different error, aborting (conservative)")
                return False

        logger.info("Retry budget exhausted for %s error", error.kind.value)
        return False

    async def _rerun(self, healing_input: HealingInput) -> ExecutionResult:
        return await self.runner.run(RunOptions(
            test_file=healing_input.test_file,
            source_file=healing_input.source_file,
            framework=healing_input.framework,
            timeout=self.config.timeout_per_attempt,
        ))


def _has_new_error(result: ExecutionResult, target: ClassifiedError) -> bool:
    """True if the rerun reported any error other than the target."""
    return any(not error.is_same_as(target) for error in result.errors)
