"""Services package.

Exposes service classes and shared result types used by the MCP handlers.
"""


from .base import (
    ErrorCode,
    ServiceError,
    ServiceResult,
)
from .coverage import CoverageService, build_thresholds
from .execution import ExecutionService
from .extraction import ExtractionService
from .healing import HealingService
from .pipeline import MethodOutcome, MethodStatus, PipelineOptions, PipelineResult, PipelineService
from .source_loader import LoadedSource, SourceLoader

__all__ = [
    # Base
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    # Source loading
    "SourceLoader",
    "LoadedSource",
    # Services
    "ExtractionService",
    "ExecutionService",
    "HealingService",
    "CoverageService",
    "build_thresholds",
    "PipelineService",
    "PipelineOptions",
    "PipelineResult",
    "MethodOutcome",
    "MethodStatus",
]
