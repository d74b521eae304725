"""Extractor - parse a source file and bundle its local dependencies."""

from .bundler import SourceGraphExtractor, clean_code, extract_dependencies, require_methods, resolve_import
from .parser import detect_language
from .models import ExportType, ExtractionResult, Method, SourceUnit

__all__ = [
    "SourceGraphExtractor",
    "extract_dependencies",
    "require_methods",
    "resolve_import",
    "clean_code",
    "detect_language",
    "ExtractionResult",
    "ExportType",
    "Method",
    "SourceUnit",
]
