"""
Source Loader - Read TypeScript/JavaScript source and test files.

Centralizes path validation (extension, existence, size) so every
service reports unreadable inputs with the same error codes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..constants import LANGUAGE_BY_EXTENSION, MAX_CODE_SIZE
from .base import ErrorCode, ServiceResult


@dataclass(frozen=True)
class LoadedSource:
    """
    A successfully loaded file.

    Attributes:
        content: File text
        path: Absolute path
        language: "typescript" or "javascript"
    """
    content: str
    path: str
    language: str


class SourceLoader:
    """Loads source files after validating them."""

    def __init__(self, max_size: int = MAX_CODE_SIZE):
        self._max_size = max_size

    def load(self, file_path: str | None, label: str = "file_path") -> ServiceResult[LoadedSource]:
        """
        Load a TS/JS file.

        Args:
            file_path: Path to the file
            label: Argument name used in error messages
        """
        if not file_path:
            return ServiceResult.fail(
                ErrorCode.MISSING_INPUT,
                f"'{label}' is required"
            )

        path = Path(file_path).resolve()
        language = LANGUAGE_BY_EXTENSION.get(path.suffix.lower())

        if language is None:
            return ServiceResult.fail(
                ErrorCode.INVALID_EXTENSION,
                f"Only TypeScript/JavaScript files allowed (got {path.suffix or 'no extension'})",
                details={
                    "extension": path.suffix,
                    "allowed": sorted(LANGUAGE_BY_EXTENSION),
                }
            )

        if not path.exists():
            return ServiceResult.fail(
                ErrorCode.FILE_NOT_FOUND,
                f"File not found: {file_path}"
            )

        if not path.is_file():
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                f"Path is not a file: {file_path}"
            )

        try:
            content = path.read_text(encoding="utf-8")
        except PermissionError:
            return ServiceResult.fail(
                ErrorCode.PERMISSION_DENIED,
                f"Permission denied: {file_path}"
            )
        except (OSError, UnicodeDecodeError) as e:
            return ServiceResult.fail(
                ErrorCode.INTERNAL_ERROR,
                f"Error reading file: {e}"
            )

        if len(content) > self._max_size:
            return ServiceResult.fail(
                ErrorCode.FILE_TOO_LARGE,
                f"File too large: {len(content):,} bytes (max: {self._max_size:,})",
                details={"size": len(content), "max_size": self._max_size}
            )

        return ServiceResult.ok(LoadedSource(
            content=content,
            path=str(path),
            language=language,
        ))
