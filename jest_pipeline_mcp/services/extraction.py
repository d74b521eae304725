"""Dependency extraction service.

Builds the dependency bundle for a source file and returns ExtractionResult in ServiceResult.
"""


from __future__ import annotations

import logging

from ..core.errors import FileAccessError, MethodNotFoundError, ParseFailureError
from ..core.extractor import ExtractionResult, SourceGraphExtractor, require_methods
from .base import ErrorCode, ServiceResult
from .source_loader import SourceLoader

logger = logging.getLogger(__name__)


class ExtractionService:
    """Extract test targets and local dependencies from a TS/JS file."""

    def __init__(self, loader: SourceLoader | None = None):
        self._loader = loader or SourceLoader()

    def extract(
        self,
        file_path: str | None,
        method_name: str | None = None
    ) -> ServiceResult[ExtractionResult]:
        """Extract methods and the dependency bundle for `file_path`."""

        loaded = self._loader.load(file_path)
        if not loaded.success:
            return ServiceResult.from_error(loaded)

        try:
            extraction = SourceGraphExtractor(loaded.data.path, method_name).extract()
            require_methods(extraction, method_name, loaded.data.path)
        except ParseFailureError as e:
            details = {"path": e.path}
            if e.line is not None:
                details.update(line=e.line, column=e.column)
            return ServiceResult.fail(ErrorCode.PARSE_ERROR, str(e), details=details)
        except FileAccessError as e:
            return ServiceResult.fail(
                ErrorCode.FILE_NOT_FOUND,
                str(e),
                details={"path": e.path}
            )
        except MethodNotFoundError as e:
            return ServiceResult.fail(
                ErrorCode.METHOD_NOT_FOUND,
                str(e),
                details={"method": e.method}
            )

        return ServiceResult.ok(extraction)
