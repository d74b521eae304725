"""Coverage enhancement service.

Measures coverage of a passing test file and extends it toward the
minimums, returning EnhancementResult in ServiceResult.
"""


from __future__ import annotations

from ..constants import DEFAULT_COVERAGE_MINIMUM, DEFAULT_MAX_ENHANCEMENT_ATTEMPTS
from ..core.coverage import CoverageReport, CoverageThresholds
from ..core.enhancer import CoverageConfig, CoverageEnhancer, EnhancementInput, EnhancementResult
from ..core.errors import ProviderError
from ..core.llm import create_llm_client
from .base import ErrorCode, ServiceResult
from .execution import ExecutionService
from .providers import LLMFactory, resolve_llm
from .source_loader import SourceLoader


def build_thresholds(
    minimum: float | None = None,
    overrides: dict[str, float] | None = None
) -> CoverageThresholds:
    """
    One minimum for all four metrics, with optional per-metric overrides.

    Raises:
        ValueError: If a value is outside 0-100 or a metric name is unknown
    """
    base = DEFAULT_COVERAGE_MINIMUM if minimum is None else float(minimum)
    values = dict.fromkeys(("statements", "branches", "functions", "lines"), base)

    for name, value in (overrides or {}).items():
        if name not in values:
            raise ValueError(f"Unknown coverage metric: {name}")
        values[name] = float(value)

    for name, value in values.items():
        if not 0 <= value <= 100:
            raise ValueError(f"Coverage minimum for {name} must be between 0 and 100")

    return CoverageThresholds(**values)


class CoverageService:
    """Raise coverage of a passing Jest test file."""

    def __init__(
        self,
        execution: ExecutionService | None = None,
        loader: SourceLoader | None = None,
        llm_factory: LLMFactory = create_llm_client
    ):
        self._execution = execution or ExecutionService()
        self._loader = loader or SourceLoader()
        self._llm_factory = llm_factory

    async def enhance(
        self,
        source_file: str | None,
        test_file: str | None,
        minimum: float | None = None,
        thresholds: dict[str, float] | None = None,
        max_attempts: int = DEFAULT_MAX_ENHANCEMENT_ATTEMPTS,
        provider: str | None = None,
        api_key: str | None = None,
        framework: str | None = None,
        project_root: str | None = None
    ) -> ServiceResult[EnhancementResult]:
        """Measure baseline coverage, then run the enhancement loop."""

        if max_attempts < 1:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "'max_attempts' must be at least 1"
            )
        try:
            coverage_thresholds = build_thresholds(minimum, thresholds)
        except ValueError as e:
            return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, str(e))

        source = self._loader.load(source_file, label="source_file")
        if not source.success:
            return ServiceResult.from_error(source)
        test = self._loader.load(test_file, label="test_file")
        if not test.success:
            return ServiceResult.from_error(test)

        # Step 1: Baseline
        run = await self._execution.run(
            test.data.path,
            project_root=project_root,
            collect_coverage=True,
            source_file=source.data.path,
            framework=framework,
        )
        if not run.success:
            return ServiceResult.from_error(run)

        if not run.data.success:
            return ServiceResult.fail(
                ErrorCode.TESTS_FAILING,
                "Tests must pass before coverage can be enhanced; heal them first",
                details={
                    "status": run.data.status.value,
                    "errors": [e.to_dict() for e in run.data.errors],
                }
            )

        baseline = run.data.coverage or CoverageReport.empty()
        config = CoverageConfig(thresholds=coverage_thresholds, max_attempts=max_attempts)

        if coverage_thresholds.is_met_by(baseline):
            return ServiceResult.ok(EnhancementResult(
                is_enhanced=True,
                final_coverage=baseline,
                test_code=test.data.content,
            ))

        # Step 2: Enhance
        llm = resolve_llm(provider, api_key, factory=self._llm_factory)
        if not llm.success:
            return ServiceResult.from_error(llm)

        enhancer = CoverageEnhancer(llm.data, self._execution.runner_for(test.data.path, project_root))

        try:
            result = await enhancer.enhance(
                EnhancementInput(
                    target_code=source.data.content,
                    test_file=test.data.path,
                    test_code=test.data.content,
                    baseline=baseline,
                    source_file=source.data.path,
                    framework=framework,
                ),
                config,
            )
        except ProviderError as e:
            return ServiceResult.fail(
                ErrorCode.AI_ERROR,
                f"Coverage enhancement aborted: {e}",
                details={"provider": e.provider}
            )

        return ServiceResult.ok(result)
