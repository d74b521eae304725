"""Iteratively extend a passing test file until coverage minimums are met."""

import logging

from ..coverage import CoverageReport
from ..extractor import detect_language
from ..generator import TestArtifact, extract_code
from ..llm import LLMClient
from ..runner import JestRunner, RunOptions
from .models import CoverageAttempt, CoverageConfig, EnhancementInput, EnhancementResult
from .prompt import build_coverage_prompt

logger = logging.getLogger(__name__)


class CoverageEnhancer:
    """Bounded improvement loop over one test file.

    A new version is adopted only if its run passed, no metric dropped
    and at least one metric strictly improved.
    """

    def __init__(self, llm: LLMClient, runner: JestRunner):
        self.llm = llm
        self.runner = runner

    async def enhance(
        self,
        enhancement_input: EnhancementInput,
        config: CoverageConfig | None = None,
    ) -> EnhancementResult:
        """
        Run the loop and leave the best adopted code on disk.

        Raises:
            ProviderError: If the model call fails
        """
        config = config or CoverageConfig()
        artifact = TestArtifact(code=enhancement_input.test_code, file_path=enhancement_input.test_file)
        language = detect_language(enhancement_input.test_file)

        best_code = enhancement_input.test_code
        best_coverage = enhancement_input.baseline
        attempts: list[CoverageAttempt] = []
        enhanced = config.thresholds.is_met_by(best_coverage)

        while not enhanced and len(attempts) < config.max_attempts:
            attempt_number = len(attempts) + 1

            prompt = build_coverage_prompt(
                enhancement_input.target_code,
                best_code,
                best_coverage,
                attempts,
                language=language,
            )
            response = await self.llm.generate_text(prompt)
            candidate = extract_code(response.content)

            artifact.write(candidate)
            result = await self.runner.run(RunOptions(
                test_file=enhancement_input.test_file,
                collect_coverage=True,
                source_file=enhancement_input.source_file,
                framework=enhancement_input.framework,
            ))
            coverage = result.coverage or CoverageReport.empty()

            attempts.append(CoverageAttempt(
                attempt_number=attempt_number,
                coverage=coverage,
                test_code=candidate,
                success=config.thresholds.is_met_by(coverage),
                tests_passed=result.success,
            ))

            if result.success and coverage.dominates(best_coverage):
                logger.info("Attempt %d improved coverage: %s", attempt_number, coverage.metrics())
                best_code = candidate
                best_coverage = coverage
            else:
                logger.info("Attempt %d not adopted (passed=%s)", attempt_number, result.success)

            enhanced = config.thresholds.is_met_by(best_coverage)

        if artifact.code != best_code:
            artifact.write(best_code)

        return EnhancementResult(
            is_enhanced=enhanced,
            final_coverage=best_coverage,
            test_code=best_code,
            attempts=attempts,
        )
