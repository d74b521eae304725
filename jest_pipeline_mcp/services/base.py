"""
Service Layer Base - Core utilities for service operations.

This module provides:
- ServiceResult: A generic result wrapper (success/failure)
- ServiceError: Structured error information
- ErrorCode: Standard error codes

Services return existing domain models (ExtractionResult, ExecutionResult,
HealingResult, ...) wrapped in a ServiceResult; handlers never see
exceptions from the core.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

# Generic type for result data
T = TypeVar("T")


class ErrorCode(str, Enum):
    """
    Standard error codes for service operations.

    Using string enum for easy serialization.
    """
    # Input validation
    VALIDATION_ERROR = "validation_error"
    MISSING_INPUT = "missing_input"

    # File operations
    FILE_NOT_FOUND = "file_not_found"
    PERMISSION_DENIED = "permission_denied"
    FILE_TOO_LARGE = "file_too_large"
    INVALID_EXTENSION = "invalid_extension"

    # Source analysis
    PARSE_ERROR = "parse_error"
    METHOD_NOT_FOUND = "method_not_found"

    # AI operations
    AI_UNAVAILABLE = "ai_unavailable"
    AI_ERROR = "ai_error"

    # Execution
    EXECUTION_ERROR = "execution_error"
    TESTS_FAILING = "tests_failing"

    # General
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class ServiceError:
    """
    Structured error information.

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable error message
        details: Optional additional context
    """
    code: ErrorCode
    message: str
    details: dict | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Generic result wrapper for service operations.

    Either success with data, or failure with error. Never both.

    Usage:
        result = await ExecutionService().run("src/math.add.test.ts")
        if result.success:
            print(result.data.status)
        else:
            print(result.error.message)
    """
    success: bool
    data: T | None = None
    error: ServiceError | None = None

    @classmethod
    def ok(cls, data: T) -> ServiceResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data, error=None)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        details: dict | None = None
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            code: Error code for programmatic handling
            message: Human-readable error message
            details: Optional additional context
        """
        return cls(
            success=False,
            data=None,
            error=ServiceError(code=code, message=message, details=details)
        )

    @classmethod
    def from_error(cls, result: ServiceResult) -> ServiceResult[T]:
        """Re-wrap the error of another failed result."""
        return cls(success=False, data=None, error=result.error)

    def unwrap(self) -> T:
        """
        Get the data, raising if failed.

        Raises:
            ValueError: If result is a failure
        """
        if not self.success or self.data is None:
            error_msg = self.error.message if self.error else "Unknown error"
            raise ValueError(f"Cannot unwrap failed result: {error_msg}")
        return self.data
