"""Test runner module - executes Jest and classifies the outcome."""

from .config_finder import detect_project_root, find_nearest_jest_config, find_package_root
from .default_configs import PROFILES, build_config
from .executor import JestRunner, run_tests
from .models import (
    ClassifiedError,
    ErrorKind,
    ErrorLocation,
    ExecutionResult,
    RunOptions,
    RunStats,
    RunStatus,
)
from .output_parser import JestOutputParser, OutputParser, classify_error

__all__ = [
    "JestRunner",
    "run_tests",
    "RunOptions",
    "RunStatus",
    "RunStats",
    "ExecutionResult",
    "ClassifiedError",
    "ErrorKind",
    "ErrorLocation",
    "OutputParser",
    "JestOutputParser",
    "classify_error",
    "find_nearest_jest_config",
    "find_package_root",
    "detect_project_root",
    "PROFILES",
    "build_config",
]
