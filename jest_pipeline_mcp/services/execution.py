"""Test execution service.

Runs a Jest test file (optionally with coverage) and returns ExecutionResult in ServiceResult.
"""


from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from ..core.runner import ExecutionResult, JestRunner, RunOptions, detect_project_root
from .base import ErrorCode, ServiceResult
from .source_loader import SourceLoader

RunnerFactory = Callable[[Path], JestRunner]


class ExecutionService:
    """Execute Jest tests and return an ExecutionResult.

    Test failures are a successful service call: the ExecutionResult
    carries the status and classified errors.
    """

    def __init__(
        self,
        runner_factory: RunnerFactory = JestRunner,
        loader: SourceLoader | None = None
    ):
        self._runner_factory = runner_factory
        self._loader = loader or SourceLoader()

    def runner_for(self, test_file: str, project_root: str | None = None) -> JestRunner:
        """Runner scoped to the project containing `test_file`."""
        root = Path(project_root) if project_root else detect_project_root(test_file)
        return self._runner_factory(root)

    async def run(
        self,
        test_file: str | None,
        project_root: str | None = None,
        collect_coverage: bool = False,
        source_file: str | None = None,
        framework: str | None = None,
        timeout: float | None = None
    ) -> ServiceResult[ExecutionResult]:
        """Run one test file."""

        loaded = self._loader.load(test_file, label="test_file")
        if not loaded.success:
            return ServiceResult.from_error(loaded)

        if source_file:
            source = self._loader.load(source_file, label="source_file")
            if not source.success:
                return ServiceResult.from_error(source)
            source_file = source.data.path

        if timeout is not None and timeout <= 0:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "'timeout' must be positive"
            )

        runner = self.runner_for(loaded.data.path, project_root)
        result = await runner.run(RunOptions(
            test_file=loaded.data.path,
            collect_coverage=collect_coverage,
            source_file=source_file,
            framework=framework,
            timeout=timeout,
        ))

        return ServiceResult.ok(result)
