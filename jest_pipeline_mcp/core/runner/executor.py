"""Execute one Jest test file in a subprocess and parse results/coverage."""

import asyncio
import json
import logging
import os
import shutil
import tempfile
import time
from pathlib import Path

from ...constants import TEST_TIMEOUT_SECONDS
from ..coverage import CoverageReport, parse_coverage
from .config_finder import find_nearest_jest_config
from .default_configs import build_config
from .models import ClassifiedError, ErrorKind, ExecutionResult, RunOptions, RunStats, RunStatus
from .output_parser import JestOutputParser, OutputParser, classify_error

logger = logging.getLogger(__name__)


class JestRunner:
    """Run Jest for test files of one project and return structured results.

    Each `run()` owns one subprocess, one temp directory (synthesized
    config and coverage output), and removes that directory on every
    exit path.
    """

    def __init__(self, project_root: str | Path, parser: OutputParser | None = None):
        self.project_root = Path(project_root).resolve()
        self.parser = parser or JestOutputParser()

    async def run(self, options: RunOptions) -> ExecutionResult:
        """Run `options.test_file` and return an ExecutionResult. Never raises for test outcomes."""

        start = time.monotonic()
        test_file = self._resolve(options.test_file)
        config_path, package_root = find_nearest_jest_config(test_file.parent)
        cwd = package_root or self.project_root

        temp_dir = Path(tempfile.mkdtemp(prefix="jest-pipeline-"))
        coverage_dir = temp_dir / "coverage" if options.collect_coverage else None

        try:
            if config_path is None:
                config_path = self._write_temp_config(temp_dir, options.framework, cwd)

            cmd = self._build_command(test_file, config_path, coverage_dir, options.source_file, cwd)
            timeout = options.timeout or TEST_TIMEOUT_SECONDS

            try:
                output, returncode = await self._execute(cmd, cwd, options.env, timeout)
            except asyncio.TimeoutError:
                message = f"Test execution timed out ({timeout}s limit)"
                logger.warning("%s: %s", message, test_file)
                return _execution_error(ErrorKind.TIMEOUT, message, start)
            except OSError as e:
                message = f"Could not launch Jest: {e}"
                logger.warning(message)
                return _execution_error(classify_error(str(e)), message, start, raw_output=str(e))

            coverage = None
            if coverage_dir is not None:
                coverage = await parse_coverage(coverage_dir, options.source_file)

            return self._build_result(output, returncode, start, coverage)

        finally:
            _remove_tree(temp_dir)

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.project_root / candidate
        return candidate.resolve()

    def _write_temp_config(self, temp_dir: Path, framework: str | None, root_dir: Path) -> Path:
        """Write a framework-profile config as JSON into the run's temp dir."""

        config_path = temp_dir / "jest.config.json"
        config = build_config(framework, str(root_dir))
        config_path.write_text(json.dumps(config, indent=2), encoding="utf-8")
        logger.debug("No Jest config found, using %s profile", framework or "default")
        return config_path

    def _build_command(
        self,
        test_file: Path,
        config_path: Path | None,
        coverage_dir: Path | None,
        source_file: str | None,
        cwd: Path,
    ) -> list[str]:
        cmd = [
            "npx", "jest",
            str(test_file),
            "--no-cache",
            "--detectOpenHandles",
        ]

        if config_path is not None:
            cmd += ["--config", str(config_path)]

        if coverage_dir is not None:
            cmd += [
                "--coverage",
                "--coverageDirectory", str(coverage_dir),
                "--coverageReporters", "json",
                "--coverageReporters", "json-summary",
            ]
            if source_file:
                relative = os.path.relpath(self._resolve(source_file), cwd)
                cmd += ["--collectCoverageFrom", Path(relative).as_posix()]

        return cmd

    async def _execute(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None,
        timeout: float,
    ) -> tuple[str, int | None]:
        """Run the subprocess; return combined stdout+stderr and the exit code."""

        logger.debug("Running %s in %s", " ".join(cmd), cwd)

        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL,
            env={**os.environ, **(env or {}), "NODE_ENV": "test"},
        )
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")
        return stdout + "\n" + stderr, process.returncode

    def _build_result(
        self,
        output: str,
        returncode: int | None,
        start: float,
        coverage: CoverageReport | None,
    ) -> ExecutionResult:
        errors = self.parser.parse_errors(output)
        stats = self.parser.parse_stats(output)

        if self.parser.has_execution_error(output):
            status = RunStatus.EXECUTION_ERROR
            if not errors:
                errors = [ClassifiedError(kind=classify_error(output), message="Test suite failed to run")]
        elif stats.failed > 0:
            status = RunStatus.TEST_FAILURES
        elif returncode and stats.total == 0 and not errors:
            # Jest itself failed before running anything (bad config, missing binary)
            status = RunStatus.EXECUTION_ERROR
            message = _last_line(output)
            errors = [ClassifiedError(kind=classify_error(message), message=message)]
        else:
            status = RunStatus.SUCCESS

        logger.info(
            "Jest run finished: %s (%d passed, %d failed)",
            status.value, stats.passed, stats.failed,
        )

        return ExecutionResult(
            status=status,
            raw_output=output,
            duration=time.monotonic() - start,
            errors=tuple(errors),
            coverage=coverage,
            stats=stats,
        )


def _execution_error(
    kind: ErrorKind,
    message: str,
    start: float,
    raw_output: str = "",
) -> ExecutionResult:
    return ExecutionResult(
        status=RunStatus.EXECUTION_ERROR,
        raw_output=raw_output or message,
        duration=time.monotonic() - start,
        errors=(ClassifiedError(kind=kind, message=message),),
    )


def _last_line(output: str) -> str:
    for line in reversed(output.splitlines()):
        if line.strip():
            return line.strip()[:200]
    return "Jest exited with an error and no output"


def _remove_tree(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)


async def run_tests(project_root: str | Path, options: RunOptions) -> ExecutionResult:
    """Convenience wrapper that runs tests via a fresh JestRunner."""
    return await JestRunner(project_root).run(options)
