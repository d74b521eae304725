"""Build a self-contained dependency bundle for the methods of one source file."""

import logging
import os
import re
from collections import deque
from pathlib import Path

from ...constants import LANGUAGE_BY_EXTENSION, NO_LOCAL_DEPENDENCIES_MESSAGE, RESOLVE_EXTENSIONS
from ..errors import FileAccessError, MethodNotFoundError
from .models import ExportType, ExtractionResult, Method, SourceUnit
from .parser import (
    Declaration,
    DeclarationKind,
    ParsedSource,
    class_methods,
    detect_language,
    iter_declarations,
    parse_source,
)

logger = logging.getLogger(__name__)

# Declarations inlined from dependency files regardless of export status
ALWAYS_BUNDLED = frozenset({
    DeclarationKind.CLASS,
    DeclarationKind.FUNCTION,
    DeclarationKind.INTERFACE,
    DeclarationKind.TYPE_ALIAS,
    DeclarationKind.ENUM,
})

# Variables are inlined only when exported
EXPORTED_BUNDLED = frozenset({DeclarationKind.VARIABLE, DeclarationKind.FUNCTION_VARIABLE})

_EXPORT_PREFIX = re.compile(r"^export\s+(default\s+)?")
_BLOCK_START = re.compile(r"^(declare\s+)?(interface|(async\s+)?function\*?)\b")


class SourceGraphExtractor:
    """Extract test targets and inline local dependencies for an entry file.

    Every call to `extract()` starts from an empty visited set, so
    repeated extractions of the same file are independent.
    """

    def __init__(self, entry_file: str, method_name: str | None = None):
        self.entry_path = Path(entry_file).resolve()
        self.method_name = method_name or ""

    def extract(self) -> ExtractionResult:
        """
        Parse the entry file and build its bundle.

        Raises:
            FileAccessError: If the entry file or a dependency cannot be read
            ParseFailureError: If any visited file is not valid source
        """
        entry = _load(self.entry_path)
        declarations = iter_declarations(entry)

        unit = SourceUnit(
            path=str(self.entry_path),
            text=entry.text,
            language=detect_language(str(self.entry_path)),
            imports=tuple(_import_statements(entry, declarations)),
            export_type=determine_export_type(declarations),
        )

        methods = extract_methods(entry, declarations, self.method_name)
        dependencies_code, dependency_imports = self._collect_dependencies(entry, declarations)

        message = None
        if not dependencies_code.strip():
            message = NO_LOCAL_DEPENDENCIES_MESSAGE

        logger.info(
            "Extracted %d method(s) and %d import(s) from %s",
            len(methods), len(dependency_imports), self.entry_path.name,
        )

        return ExtractionResult(
            source_code=unit.text,
            dependencies_code=clean_code(dependencies_code),
            input_imports=list(unit.imports),
            dependency_imports=clean_imports(dependency_imports),
            methods=methods,
            language=unit.language,
            export_type=unit.export_type,
            class_import_statements=self._class_import_statements(unit, declarations),
            message=message,
        )

    def _collect_dependencies(
        self,
        entry: ParsedSource,
        declarations: list[Declaration],
    ) -> tuple[str, list[str]]:
        """Walk local imports breadth-first, inlining each file once."""

        visited: set[Path] = {self.entry_path}
        worklist: deque[tuple[Path, ParsedSource, list[Declaration]]] = deque(
            [(self.entry_path, entry, declarations)]
        )
        chunks: list[str] = []
        specifiers: list[str] = []

        while worklist:
            path, parsed, file_declarations = worklist.popleft()

            if path != self.entry_path:
                chunks.append(self._render_dependency(path, parsed, file_declarations))

            for declaration in file_declarations:
                if declaration.specifier is None:
                    continue
                specifiers.append(declaration.specifier)

                resolved = resolve_import(declaration.specifier, path.parent)
                if resolved is None or resolved in visited:
                    continue
                visited.add(resolved)

                dependency = _load(resolved)
                worklist.append((resolved, dependency, iter_declarations(dependency)))

        return "".join(chunks), specifiers

    def _render_dependency(
        self,
        path: Path,
        parsed: ParsedSource,
        declarations: list[Declaration],
    ) -> str:
        """Concatenate a dependency's declarations with provenance comments."""

        relative = Path(os.path.relpath(path, self.entry_path.parent)).as_posix()
        parts = [f"// {relative}\n"]
        emitted: set[int] = set()

        for declaration in declarations:
            bundled = declaration.kind in ALWAYS_BUNDLED or (
                declaration.kind in EXPORTED_BUNDLED and declaration.exported
            )
            # Several declarators can share one statement
            if not bundled or declaration.statement.start_byte in emitted:
                continue
            emitted.add(declaration.statement.start_byte)
            parts.append(f"// From {relative}\n{parsed.node_text(declaration.statement)}\n\n")

        return "".join(parts) + "\n"

    def _class_import_statements(
        self,
        unit: SourceUnit,
        declarations: list[Declaration],
    ) -> list[str]:
        """Build an import statement for every top-level class of the entry file."""

        module = f"./{self.entry_path.stem}"
        statements = []

        for declaration in declarations:
            if declaration.kind != DeclarationKind.CLASS or not declaration.name:
                continue
            name = declaration.name
            as_default = declaration.default_export or (
                unit.export_type == ExportType.DEFAULT and not declaration.exported
            )
            target = name if as_default else f"{{ {name} }}"
            if unit.language == "javascript":
                statements.append(f"const {target} = require('{module}');")
            else:
                statements.append(f"import {target} from '{module}';")

        return statements


def extract_methods(
    parsed: ParsedSource,
    declarations: list[Declaration],
    name_filter: str = "",
) -> list[Method]:
    """Collect class methods, function declarations and function-valued variables."""

    needle = name_filter.lower()
    methods: list[Method] = []
    anonymous = 0

    for declaration in declarations:
        if declaration.kind == DeclarationKind.CLASS:
            class_name = declaration.name
            if not class_name:
                class_name = f"AnonymousClass_{anonymous}"
                anonymous += 1
            for method_name, node in class_methods(parsed, declaration.node):
                methods.append(Method(name=f"{class_name}.{method_name}", code=parsed.node_text(node)))

        elif declaration.kind == DeclarationKind.FUNCTION and declaration.name:
            methods.append(Method(name=declaration.name, code=parsed.node_text(declaration.node)))

        elif declaration.kind == DeclarationKind.FUNCTION_VARIABLE and declaration.name:
            single = len(declaration.statement.named_children) == 1
            node = declaration.statement if single else declaration.node
            methods.append(Method(name=declaration.name, code=parsed.node_text(node)))

    if needle:
        methods = [m for m in methods if needle in m.name.lower()]
    return methods


def determine_export_type(declarations: list[Declaration]) -> ExportType:
    """Infer whether a file uses default exports, named exports, or a mix."""

    has_default = any(d.exported and d.default_export for d in declarations)
    has_named = any(d.exported and not d.default_export for d in declarations)

    if has_default and not has_named:
        return ExportType.DEFAULT
    if has_named and not has_default:
        return ExportType.NAMED
    return ExportType.UNKNOWN


def resolve_import(specifier: str, base_dir: Path) -> Path | None:
    """Resolve a relative/absolute specifier to an existing source file."""

    if not (specifier.startswith(".") or os.path.isabs(specifier)):
        return None

    if Path(specifier).suffix in LANGUAGE_BY_EXTENSION:
        candidates = [specifier]
    else:
        candidates = [specifier + extension for extension in RESOLVE_EXTENSIONS]

    for candidate in candidates:
        path = (base_dir / candidate).resolve()
        if path.is_file():
            return path

    logger.debug("Could not resolve local import %s from %s", specifier, base_dir)
    return None


def clean_code(code: str) -> str:
    """
    Strip export keywords and normalize indentation of inlined declarations.

    Brace depth is tracked per line; bodies of interfaces and functions are
    re-indented two spaces per level, other blocks keep their own layout.
    """
    cleaned: list[str] = []
    depth = 0
    reindent = False

    for raw in code.split("\n"):
        line = raw.strip()

        if depth == 0:
            line = _EXPORT_PREFIX.sub("", line)
            reindent = bool(_BLOCK_START.match(line))
            cleaned.append(line)
        elif reindent:
            level = depth - 1 if line.startswith("}") else depth
            cleaned.append("  " * max(level, 0) + line if line else "")
        else:
            cleaned.append(raw.rstrip())

        depth = max(depth + line.count("{") - line.count("}"), 0)

    return re.sub(r"\n{3,}", "\n\n", "\n".join(cleaned)).strip("\n")


def clean_imports(specifiers: list[str]) -> list[str]:
    """Deduplicate and sort import specifiers."""
    return sorted(set(specifiers))


def _import_statements(parsed: ParsedSource, declarations: list[Declaration]) -> list[str]:
    """Verbatim text of the file's import statements, in source order."""

    statements = []
    seen: set[int] = set()
    for declaration in declarations:
        if declaration.kind != DeclarationKind.IMPORT:
            continue
        if declaration.statement.start_byte in seen:
            continue
        seen.add(declaration.statement.start_byte)
        statements.append(parsed.node_text(declaration.statement).strip())
    return statements


def _load(path: Path) -> ParsedSource:
    """Read and parse one file."""

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileAccessError(str(path), str(e)) from e
    return parse_source(str(path), text)


def extract_dependencies(entry_file: str, method_name: str | None = None) -> ExtractionResult:
    """Convenience wrapper that runs a fresh SourceGraphExtractor."""
    return SourceGraphExtractor(entry_file, method_name).extract()


def require_methods(extraction: ExtractionResult, method_name: str | None, entry_file: str) -> None:
    """
    Raises:
        MethodNotFoundError: If `method_name` was given and matched no method
    """
    if method_name and not extraction.methods:
        raise MethodNotFoundError(method_name, entry_file)
