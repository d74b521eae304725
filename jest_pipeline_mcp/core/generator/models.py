"""Data models for generated tests."""

from dataclasses import dataclass
from pathlib import Path

from ...constants import LANGUAGE_BY_EXTENSION


@dataclass
class TestArtifact:
    """The single current version of a test file: its code and on-disk path."""
    __test__ = False

    code: str
    file_path: str

    def write(self, code: str | None = None) -> None:
        """Replace the code (if given) and overwrite the file with it."""
        if code is not None:
            self.code = code
        path = Path(self.file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.code, encoding="utf-8")

    def to_dict(self) -> dict:
        return {"file_path": self.file_path, "code": self.code}


def resolve_test_path(source_file: str, method_name: str) -> str:
    """
    Deterministic test path next to the source file.

    `src/service.ts` + `OrderService.create` gives
    `src/service.orderservice.create.test.ts`; JavaScript sources get `.js`.
    """
    source = Path(source_file)
    base = source.name.split(".", 1)[0]
    language = LANGUAGE_BY_EXTENSION.get(source.suffix.lower(), "typescript")
    extension = "js" if language == "javascript" else "ts"
    return str(source.parent / f"{base}.{method_name.lower()}.test.{extension}")
