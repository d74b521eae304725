"""Data models for source dependency extraction."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

Language = Literal["typescript", "javascript"]


class ExportType(str, Enum):
    """Export shape of a source file."""
    DEFAULT = "default"
    NAMED = "named"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Method:
    """A named, independently testable code span."""
    name: str       # "OrderService.createOrder", "add", "handler"
    code: str

    def to_dict(self) -> dict:
        return {"name": self.name, "code": self.code}


@dataclass(frozen=True)
class SourceUnit:
    """A parsed source file."""
    path: str
    text: str
    language: Language
    imports: tuple[str, ...] = ()
    export_type: ExportType = ExportType.UNKNOWN


@dataclass
class ExtractionResult:
    """Bundle produced for one entry file."""
    source_code: str
    dependencies_code: str
    input_imports: list[str]
    dependency_imports: list[str]
    methods: list[Method]
    language: Language
    export_type: ExportType
    class_import_statements: list[str] = field(default_factory=list)
    message: str | None = None

    @property
    def is_javascript(self) -> bool:
        return self.language == "javascript"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "source_code": self.source_code,
            "dependencies_code": self.dependencies_code,
            "input_imports": self.input_imports,
            "dependency_imports": self.dependency_imports,
            "methods": [m.to_dict() for m in self.methods],
            "message": self.message,
            "language": self.language,
            "export_type": self.export_type.value,
            "class_import_statements": self.class_import_statements,
        }
