"""
Tests for the Jest runner.

The Jest subprocess is replaced by a fake process; config discovery,
command construction, status mapping, coverage collection and temp
directory cleanup run for real.
"""

import asyncio
import json
from pathlib import Path

import pytest

from jest_pipeline_mcp.constants import COVERAGE_DETAIL_FILE, COVERAGE_SUMMARY_FILE
from jest_pipeline_mcp.core.runner import (
    PROFILES,
    ErrorKind,
    JestRunner,
    RunOptions,
    RunStatus,
    build_config,
    detect_project_root,
    find_nearest_jest_config,
    find_package_root,
)
from jest_pipeline_mcp.core.runner import executor

PASSING_OUTPUT = "PASS src/math.add.test.ts\nTests:       2 passed, 2 total\n"

FAILING_OUTPUT = """FAIL src/math.add.test.ts
  ● add › returns the sum

    expect(received).toBe(expected)

      at Object.<anonymous> (src/math.add.test.ts:5:23)

Tests:       1 failed, 1 passed, 2 total
"""

SUITE_FAILED_OUTPUT = """FAIL src/math.add.test.ts
  ● Test suite failed to run

    SyntaxError: Unexpected token '}'

Tests:       0 total
"""


class FakeProcess:
    """Stands in for asyncio.subprocess.Process."""

    def __init__(self, stdout: str = "", stderr: str = "", returncode: int = 0, delay: float = 0):
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.delay = delay
        self.killed = False

    async def communicate(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.stdout.encode(), self.stderr.encode()

    def kill(self):
        self.killed = True

    async def wait(self):
        return self.returncode


class FakeSpawner:
    """Replacement for asyncio.create_subprocess_exec."""

    def __init__(self, process: FakeProcess | None = None, error: Exception | None = None, on_spawn=None):
        self.process = process or FakeProcess(PASSING_OUTPUT)
        self.error = error
        self.on_spawn = on_spawn
        self.cmd: list[str] = []
        self.kwargs: dict = {}

    async def __call__(self, *cmd, **kwargs):
        self.cmd = list(cmd)
        self.kwargs = kwargs
        if self.error:
            raise self.error
        if self.on_spawn:
            self.on_spawn(self.cmd)
        return self.process

    def arg_after(self, flag: str) -> str:
        return self.cmd[self.cmd.index(flag) + 1]


@pytest.fixture
def project(ts_project):
    (ts_project / "src" / "math.add.test.ts").write_text("test('x', () => {});\n", encoding="utf-8")
    return ts_project


def spawn(monkeypatch, spawner: FakeSpawner) -> FakeSpawner:
    monkeypatch.setattr(executor.asyncio, "create_subprocess_exec", spawner)
    return spawner


# =============================================================================
# Config discovery
# =============================================================================

class TestConfigFinder:
    """Locating jest configs and project roots."""

    def test_no_config(self, project):
        config, root = find_nearest_jest_config(project / "src")

        assert config is None
        assert root == project.resolve()

    def test_nearest_config_wins(self, project):
        (project / "jest.config.js").write_text("module.exports = {};", encoding="utf-8")
        (project / "src" / "jest.config.json").write_text("{}", encoding="utf-8")

        config, _ = find_nearest_jest_config(project / "src" / "math.ts")

        assert config == (project / "src" / "jest.config.json").resolve()

    def test_lookup_order_within_directory(self, project):
        (project / "jest.config.json").write_text("{}", encoding="utf-8")
        (project / "jest.config.ts").write_text("export default {};", encoding="utf-8")

        config, _ = find_nearest_jest_config(project / "src")

        assert config.name == "jest.config.ts"

    def test_walk_stops_at_package_root(self, tmp_path):
        (tmp_path / "jest.config.js").write_text("module.exports = {};", encoding="utf-8")
        package = tmp_path / "packages" / "app"
        package.mkdir(parents=True)
        (package / "package.json").write_text("{}", encoding="utf-8")

        config, root = find_nearest_jest_config(package)

        assert config is None
        assert root == package.resolve()

    def test_project_root_prefers_repository_markers(self, tmp_path):
        (tmp_path / "package.json").write_text("{}", encoding="utf-8")
        (tmp_path / ".git").mkdir()
        package = tmp_path / "packages" / "app"
        package.mkdir(parents=True)
        (package / "package.json").write_text("{}", encoding="utf-8")

        assert detect_project_root(package / "index.ts") == tmp_path.resolve()

    def test_project_root_falls_back_to_package(self, project):
        assert detect_project_root(project / "src" / "math.ts") == project.resolve()
        assert find_package_root(project / "src") == project.resolve()

    def test_package_json_jest_key(self, project):
        (project / "package.json").write_text(
            json.dumps({"name": "app", "jest": {"preset": "ts-jest"}}), encoding="utf-8"
        )

        config, root = find_nearest_jest_config(project / "src")

        assert config == (project / "package.json").resolve()
        assert root == project.resolve()

    def test_config_file_beats_package_json_key(self, project):
        (project / "package.json").write_text(json.dumps({"jest": {}}), encoding="utf-8")
        (project / "jest.config.js").write_text("module.exports = {};", encoding="utf-8")

        config, _ = find_nearest_jest_config(project / "src")

        assert config.name == "jest.config.js"

    def test_package_json_without_jest_key(self, project):
        (project / "package.json").write_text(json.dumps({"jest": "nope"}), encoding="utf-8")

        config, _ = find_nearest_jest_config(project / "src")

        assert config is None


class TestDefaultConfigs:
    """Framework profiles for synthesized configs."""

    def test_profiles(self):
        assert set(PROFILES) == {"default", "react", "nextjs", "express", "nestjs", "nodejs"}

    def test_browser_profiles_use_jsdom(self):
        assert build_config("react", "/p")["testEnvironment"] == "jsdom"
        assert build_config("express", "/p")["testEnvironment"] == "node"

    def test_unknown_framework_falls_back_to_default(self):
        assert build_config("angular", "/p") == build_config(None, "/p")

    def test_returns_fresh_copies(self):
        config = build_config("default", "/p")
        config["transform"].clear()

        assert build_config("default", "/q")["rootDir"] == "/q"
        assert build_config("default", "/q")["transform"]


# =============================================================================
# Execution
# =============================================================================

class TestJestRunner:
    """JestRunner.run with a fake subprocess."""

    @pytest.mark.asyncio
    async def test_passing_run(self, project, monkeypatch):
        spawner = spawn(monkeypatch, FakeSpawner())

        result = await JestRunner(project).run(RunOptions(test_file="src/math.add.test.ts"))

        assert result.status == RunStatus.SUCCESS
        assert result.success is True
        assert result.stats.passed == 2
        assert result.coverage is None
        assert spawner.cmd[:2] == ["npx", "jest"]
        assert spawner.cmd[2] == str((project / "src" / "math.add.test.ts").resolve())
        assert "--coverage" not in spawner.cmd

    @pytest.mark.asyncio
    async def test_environment_and_cwd(self, project, monkeypatch):
        spawner = spawn(monkeypatch, FakeSpawner())

        await JestRunner(project).run(RunOptions(
            test_file="src/math.add.test.ts",
            env={"API_URL": "http://localhost"},
        ))

        assert spawner.kwargs["env"]["NODE_ENV"] == "test"
        assert spawner.kwargs["env"]["API_URL"] == "http://localhost"
        assert spawner.kwargs["cwd"] == str(project.resolve())

    @pytest.mark.asyncio
    async def test_failing_tests(self, project, monkeypatch):
        spawn(monkeypatch, FakeSpawner(FakeProcess(FAILING_OUTPUT, returncode=1)))

        result = await JestRunner(project).run(RunOptions(test_file="src/math.add.test.ts"))

        assert result.status == RunStatus.TEST_FAILURES
        assert result.errors[0].kind == ErrorKind.ASSERTION
        assert result.stats.failed == 1

    @pytest.mark.asyncio
    async def test_suite_failed_to_run(self, project, monkeypatch):
        spawn(monkeypatch, FakeSpawner(FakeProcess(SUITE_FAILED_OUTPUT, returncode=1)))

        result = await JestRunner(project).run(RunOptions(test_file="src/math.add.test.ts"))

        assert result.status == RunStatus.EXECUTION_ERROR
        assert result.errors[0].kind == ErrorKind.SYNTAX

    @pytest.mark.asyncio
    async def test_nonzero_exit_without_tests(self, project, monkeypatch):
        process = FakeProcess("", "Error: Cannot find module 'ts-jest'", returncode=1)
        spawn(monkeypatch, FakeSpawner(process))

        result = await JestRunner(project).run(RunOptions(test_file="src/math.add.test.ts"))

        assert result.status == RunStatus.EXECUTION_ERROR
        assert result.errors[0].kind == ErrorKind.DEPENDENCY
        assert "ts-jest" in result.errors[0].message

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self, project, monkeypatch):
        process = FakeProcess(PASSING_OUTPUT, delay=5)
        spawn(monkeypatch, FakeSpawner(process))

        result = await JestRunner(project).run(RunOptions(
            test_file="src/math.add.test.ts",
            timeout=0.05,
        ))

        assert process.killed is True
        assert result.status == RunStatus.EXECUTION_ERROR
        assert result.errors[0].kind == ErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_launch_failure(self, project, monkeypatch):
        spawn(monkeypatch, FakeSpawner(error=FileNotFoundError("npx")))

        result = await JestRunner(project).run(RunOptions(test_file="src/math.add.test.ts"))

        assert result.status == RunStatus.EXECUTION_ERROR
        assert result.errors[0].message.startswith("Could not launch Jest")

    @pytest.mark.asyncio
    async def test_synthesized_config_is_removed(self, project, monkeypatch):
        seen = {}

        def capture(cmd):
            config_path = Path(cmd[cmd.index("--config") + 1])
            seen["path"] = config_path
            seen["config"] = json.loads(config_path.read_text(encoding="utf-8"))

        spawn(monkeypatch, FakeSpawner(on_spawn=capture))

        await JestRunner(project).run(RunOptions(test_file="src/math.add.test.ts", framework="react"))

        assert seen["config"]["testEnvironment"] == "jsdom"
        assert seen["config"]["rootDir"] == str(project.resolve())
        assert not seen["path"].parent.exists()

    @pytest.mark.asyncio
    async def test_existing_config_is_used(self, project, monkeypatch):
        config = project / "jest.config.js"
        config.write_text("module.exports = {};", encoding="utf-8")
        spawner = spawn(monkeypatch, FakeSpawner())

        await JestRunner(project).run(RunOptions(test_file="src/math.add.test.ts"))

        assert spawner.arg_after("--config") == str(config.resolve())

    @pytest.mark.asyncio
    async def test_package_json_config_is_used(self, project, monkeypatch):
        package_json = project / "package.json"
        package_json.write_text(json.dumps({"jest": {"preset": "ts-jest"}}), encoding="utf-8")
        spawner = spawn(monkeypatch, FakeSpawner())

        await JestRunner(project).run(RunOptions(test_file="src/math.add.test.ts", framework="react"))

        assert spawner.arg_after("--config") == str(package_json.resolve())

    @pytest.mark.asyncio
    async def test_cleanup_after_launch_failure(self, project, monkeypatch):
        created = []
        real_mkdtemp = executor.tempfile.mkdtemp

        def mkdtemp(**kwargs):
            path = real_mkdtemp(**kwargs)
            created.append(Path(path))
            return path

        monkeypatch.setattr(executor.tempfile, "mkdtemp", mkdtemp)
        spawn(monkeypatch, FakeSpawner(error=PermissionError("denied")))

        await JestRunner(project).run(RunOptions(test_file="src/math.add.test.ts"))

        assert created and not created[0].exists()

    @pytest.mark.asyncio
    async def test_coverage_is_collected_for_source(self, project, monkeypatch):
        source = str((project / "src" / "math.ts").resolve())

        def write_reports(cmd):
            coverage_dir = Path(cmd[cmd.index("--coverageDirectory") + 1])
            coverage_dir.mkdir(parents=True)
            entry = {
                name: {"total": 2, "covered": 1, "skipped": 0, "pct": 50}
                for name in ("lines", "statements", "functions", "branches")
            }
            (coverage_dir / COVERAGE_SUMMARY_FILE).write_text(
                json.dumps({"total": entry, source: entry}), encoding="utf-8"
            )
            (coverage_dir / COVERAGE_DETAIL_FILE).write_text(json.dumps({
                source: {
                    "statementMap": {"0": {"start": {"line": 2}}},
                    "fnMap": {"0": {"name": "add"}},
                    "branchMap": {},
                    "s": {"0": 0},
                    "f": {"0": 0},
                    "b": {},
                }
            }), encoding="utf-8")

        spawner = spawn(monkeypatch, FakeSpawner(on_spawn=write_reports))

        result = await JestRunner(project).run(RunOptions(
            test_file="src/math.add.test.ts",
            collect_coverage=True,
            source_file=source,
        ))

        assert spawner.arg_after("--collectCoverageFrom") == "src/math.ts"
        assert spawner.cmd.count("--coverageReporters") == 2
        assert result.coverage.statements == 50
        assert result.coverage.uncovered_functions == ("add",)
