"""
Pipeline Service - Generate, run, heal and enhance tests per method.

Orchestrates the full pipeline for every method of a source file:
1. Extract methods and the dependency bundle
2. Generate the initial test file
3. Run it
4. Heal it if it fails
5. Enhance its coverage once it passes

Methods are processed one at a time, each to completion before the
next. A provider failure aborts only the method it happened in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..constants import DEFAULT_MAX_ENHANCEMENT_ATTEMPTS, DEFAULT_MAX_RETRIES
from ..core.coverage import CoverageReport, CoverageThresholds
from ..core.enhancer import CoverageConfig, CoverageEnhancer, EnhancementInput, EnhancementResult
from ..core.errors import ProviderError
from ..core.extractor import ExtractionResult, Method
from ..core.generator import TestGenerator, resolve_test_path
from ..core.healer import HealingConfig, HealingInput, HealingResult, HealingStrategy, TestHealer
from ..core.llm import LLMClient, create_llm_client
from ..core.runner import JestRunner, RunOptions, RunStatus
from .base import ErrorCode, ServiceResult
from .coverage import build_thresholds
from .execution import ExecutionService
from .extraction import ExtractionService
from .healing import errors_to_heal, parse_strategy
from .providers import LLMFactory, resolve_llm
from .source_loader import LoadedSource, SourceLoader

logger = logging.getLogger(__name__)


@dataclass
class PipelineOptions:
    """
    Options for one pipeline invocation.

    Attributes:
        method_name: Only process methods whose name contains this (case-insensitive)
        force: Regenerate tests that already exist on disk
        provider: LLM provider name (default from LLM_PROVIDER)
        api_key: Provider API key (default from the provider's env var)
        model: Override the provider's default model
        max_retries: Healing attempts per error
        strategy: "conservative" or "aggressive"
        enhance_coverage: Run the coverage loop once tests pass
        minimum_coverage: Minimum percentage for all four metrics
        max_attempts: Coverage enhancement attempts
        framework: Jest profile used when the project has no config, and the
            framework rules (analysis step) used for generation
        context: Extra instructions passed to the model
        project_root: Project root (detected from the source file if None)
    """
    method_name: str | None = None
    force: bool = False
    provider: str | None = None
    api_key: str | None = None
    model: str | None = None
    max_retries: int = DEFAULT_MAX_RETRIES
    strategy: str | None = None
    enhance_coverage: bool = True
    minimum_coverage: float | None = None
    max_attempts: int = DEFAULT_MAX_ENHANCEMENT_ATTEMPTS
    framework: str | None = None
    context: str = ""
    project_root: str | None = None


class MethodStatus(str, Enum):
    """Final state of one processed method."""
    PASSED = "passed"
    FAILING = "failing"
    SKIPPED = "skipped"
    EXISTS = "exists"


@dataclass
class MethodOutcome:
    """What happened to one method."""
    method: str
    status: MethodStatus
    test_file: str | None = None
    execution_status: RunStatus | None = None
    healing: HealingResult | None = None
    enhancement: EnhancementResult | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "method": self.method,
            "status": self.status.value,
            "test_file": self.test_file,
            "errors": self.errors,
        }
        if self.execution_status:
            result["execution_status"] = self.execution_status.value
        if self.healing:
            result["healing"] = {
                "is_fixed": self.healing.is_fixed,
                "attempts": len(self.healing.attempts),
            }
        if self.enhancement:
            result["coverage"] = self.enhancement.final_coverage.to_dict()
            result["coverage_met"] = self.enhancement.is_enhanced
        return result


@dataclass
class PipelineResult:
    """Outcomes for every method of one source file."""
    source_file: str
    outcomes: list[MethodOutcome] = field(default_factory=list)
    message: str | None = None

    def count(self, status: MethodStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "source_file": self.source_file,
            "summary": {status.value: self.count(status) for status in MethodStatus},
            "methods": [outcome.to_dict() for outcome in self.outcomes],
            "message": self.message,
        }


@dataclass
class _Run:
    """Per-invocation collaborators shared by every method."""
    source: LoadedSource
    extraction: ExtractionResult
    llm: LLMClient | None
    runner: JestRunner
    strategy: HealingStrategy
    thresholds: CoverageThresholds


class PipelineService:
    """
    Service for the full generate → run → heal → enhance pipeline.

    This class is stateless - inject dependencies via __init__.
    """

    def __init__(
        self,
        extraction: ExtractionService | None = None,
        execution: ExecutionService | None = None,
        loader: SourceLoader | None = None,
        llm_factory: LLMFactory = create_llm_client
    ):
        self._loader = loader or SourceLoader()
        self._extraction = extraction or ExtractionService(self._loader)
        self._execution = execution or ExecutionService(loader=self._loader)
        self._llm_factory = llm_factory

    async def run(
        self,
        file_path: str | None,
        options: PipelineOptions | None = None
    ) -> ServiceResult[PipelineResult]:
        """
        Process every (matching) method of `file_path`.

        Returns:
            ServiceResult containing PipelineResult; fails only for problems
            that affect the whole invocation (unreadable or unparsable source,
            unmatched method filter, no usable provider)
        """
        options = options or PipelineOptions()

        # Step 1: Validate options
        if options.max_retries < 1 or options.max_attempts < 1:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "'max_retries' and 'max_attempts' must be at least 1"
            )
        try:
            strategy = parse_strategy(options.strategy)
            thresholds = build_thresholds(options.minimum_coverage)
        except ValueError as e:
            return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, str(e))

        # Step 2: Extract
        source = self._loader.load(file_path)
        if not source.success:
            return ServiceResult.from_error(source)

        extracted = self._extraction.extract(source.data.path, options.method_name)
        if not extracted.success:
            return ServiceResult.from_error(extracted)
        extraction = extracted.data

        result = PipelineResult(source_file=source.data.path)
        if not extraction.methods:
            result.message = "No testable methods found"
            return ServiceResult.ok(result)

        pending = [
            method for method in extraction.methods
            if options.force or not Path(resolve_test_path(source.data.path, method.name)).exists()
        ]

        llm_client = None
        if pending:
            llm = resolve_llm(options.provider, options.api_key, options.model, factory=self._llm_factory)
            if not llm.success:
                return ServiceResult.from_error(llm)
            llm_client = llm.data

        run = _Run(
            source=source.data,
            extraction=extraction,
            llm=llm_client,
            runner=self._execution.runner_for(source.data.path, options.project_root),
            strategy=strategy,
            thresholds=thresholds,
        )

        # Step 3: One method at a time
        for method in extraction.methods:
            if method not in pending:
                result.outcomes.append(MethodOutcome(
                    method=method.name,
                    status=MethodStatus.EXISTS,
                    test_file=resolve_test_path(source.data.path, method.name),
                ))
                continue

            logger.info("Processing %s", method.name)
            result.outcomes.append(await self._process(method, run, options))

        return ServiceResult.ok(result)

    async def _process(self, method: Method, run: _Run, options: PipelineOptions) -> MethodOutcome:
        """Generate, run, heal and enhance tests for one method."""

        source_path = run.source.path
        test_file = None

        try:
            artifact = await TestGenerator(run.llm).generate(
                run.extraction, method, source_path, options.context, options.framework
            )
            artifact.write()
            test_file = artifact.file_path

            execution = await run.runner.run(self._run_options(test_file, source_path, options))

            healing = None
            if not execution.success:
                healer = TestHealer(run.llm, run.runner, HealingConfig(
                    max_retries=options.max_retries,
                    strategy=run.strategy,
                ))
                healing = await healer.heal(HealingInput(
                    source_code=run.source.content,
                    test_file=test_file,
                    test_code=artifact.code,
                    errors=errors_to_heal(execution),
                    source_file=source_path,
                    framework=options.framework,
                ))

                if not healing.is_fixed:
                    return MethodOutcome(
                        method=method.name,
                        status=MethodStatus.FAILING,
                        test_file=test_file,
                        execution_status=execution.status,
                        healing=healing,
                        errors=[e.message for e in healing.remaining_errors],
                    )

                artifact.code = healing.test_code
                if options.enhance_coverage:
                    execution = await run.runner.run(self._run_options(test_file, source_path, options))
                    if not execution.success:
                        return MethodOutcome(
                            method=method.name,
                            status=MethodStatus.FAILING,
                            test_file=test_file,
                            execution_status=execution.status,
                            healing=healing,
                            errors=[e.message for e in errors_to_heal(execution)],
                        )

            enhancement = None
            if options.enhance_coverage:
                enhancement = await CoverageEnhancer(run.llm, run.runner).enhance(
                    EnhancementInput(
                        target_code=run.source.content,
                        test_file=test_file,
                        test_code=artifact.code,
                        baseline=execution.coverage or CoverageReport.empty(),
                        source_file=source_path,
                        framework=options.framework,
                    ),
                    CoverageConfig(thresholds=run.thresholds, max_attempts=options.max_attempts),
                )

        except ProviderError as e:
            logger.warning("Skipping %s: %s", method.name, e)
            return MethodOutcome(
                method=method.name,
                status=MethodStatus.SKIPPED,
                test_file=test_file,
                errors=[str(e)],
            )

        return MethodOutcome(
            method=method.name,
            status=MethodStatus.PASSED,
            test_file=test_file,
            execution_status=RunStatus.SUCCESS,
            healing=healing,
            enhancement=enhancement,
        )

    def _run_options(self, test_file: str, source_file: str, options: PipelineOptions) -> RunOptions:
        return RunOptions(
            test_file=test_file,
            collect_coverage=options.enhance_coverage,
            source_file=source_file,
            framework=options.framework,
        )
