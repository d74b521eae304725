"""
Source Parser - Parse TypeScript/JavaScript with Tree-sitter.

Top-level statements are flattened into a finite set of tagged
declarations (class, function, function-valued variable, variable,
interface, type alias, enum, import, export) so the extractor can work
on plain data instead of walking the syntax tree recursively.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from ...constants import LANGUAGE_BY_EXTENSION
from ..errors import ParseFailureError

logger = logging.getLogger(__name__)

FUNCTION_VALUE_TYPES = frozenset({
    "arrow_function", "function_expression", "function", "generator_function"
})
CLASS_TYPES = frozenset({"class_declaration", "abstract_class_declaration"})
FUNCTION_TYPES = frozenset({"function_declaration", "generator_function_declaration"})
VARIABLE_TYPES = frozenset({"lexical_declaration", "variable_declaration"})


class DeclarationKind(str, Enum):
    """Kinds of top-level declarations the extractor cares about."""
    CLASS = "class"
    FUNCTION = "function"
    FUNCTION_VARIABLE = "function_variable"
    VARIABLE = "variable"
    INTERFACE = "interface"
    TYPE_ALIAS = "type_alias"
    ENUM = "enum"
    IMPORT = "import"
    EXPORT = "export"


_SIMPLE_KINDS = {
    "interface_declaration": DeclarationKind.INTERFACE,
    "type_alias_declaration": DeclarationKind.TYPE_ALIAS,
    "enum_declaration": DeclarationKind.ENUM,
}


@dataclass(frozen=True)
class Declaration:
    """
    A tagged top-level declaration.

    Attributes:
        kind: What the declaration is
        node: The declaration node itself (declarator for variables)
        statement: The enclosing top-level statement (the export wrapper if exported)
        name: Declared name, when it has one
        exported: Whether the statement exports it
        default_export: Whether it is the default export
        specifier: Module specifier for imports and re-exports
    """
    kind: DeclarationKind
    node: Node
    statement: Node
    name: str | None = None
    exported: bool = False
    default_export: bool = False
    specifier: str | None = None


@dataclass(frozen=True)
class ParsedSource:
    """A parsed file: its bytes and syntax tree."""
    path: str
    source: bytes
    tree: Tree

    @property
    def text(self) -> str:
        return self.source.decode("utf-8")

    def node_text(self, node: Node) -> str:
        """Return the verbatim source text of a node."""
        return self.source[node.start_byte:node.end_byte].decode("utf-8")


def detect_language(path: str) -> str:
    """Map a file extension to "typescript" or "javascript"."""
    return LANGUAGE_BY_EXTENSION.get(Path(path).suffix.lower(), "typescript")


@lru_cache(maxsize=None)
def _get_parser(grammar: str) -> Parser:
    """Build (once) a parser for one of the bundled grammars."""

    if grammar == "tsx":
        language = Language(tree_sitter_typescript.language_tsx())
    elif grammar == "typescript":
        language = Language(tree_sitter_typescript.language_typescript())
    else:
        language = Language(tree_sitter_javascript.language())
    logger.debug("Loaded tree-sitter grammar %s", grammar)
    return Parser(language)


def _grammar_for(path: str) -> str:
    suffix = Path(path).suffix.lower()
    if suffix == ".tsx":
        return "tsx"
    return detect_language(path)


def parse_source(path: str, text: str) -> ParsedSource:
    """
    Parse source text with the grammar matching the file extension.

    Raises:
        ParseFailureError: If the tree contains syntax errors
    """
    source = text.encode("utf-8")
    tree = _get_parser(_grammar_for(path)).parse(source)

    if tree.root_node.has_error:
        error_node = _first_error_node(tree.root_node)
        if error_node is not None:
            row, column = error_node.start_point
            raise ParseFailureError(path, line=row + 1, column=column + 1)
        raise ParseFailureError(path)

    return ParsedSource(path=path, source=source, tree=tree)


def _first_error_node(root: Node) -> Node | None:
    """Find the first ERROR or MISSING node in document order."""

    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


# =============================================================================
# Declarations
# =============================================================================

def iter_declarations(parsed: ParsedSource) -> list[Declaration]:
    """Classify every top-level statement of a parsed file."""

    declarations: list[Declaration] = []

    for statement in parsed.tree.root_node.named_children:
        if statement.type == "import_statement":
            declarations.append(Declaration(
                kind=DeclarationKind.IMPORT,
                node=statement,
                statement=statement,
                specifier=_import_source(parsed, statement),
            ))

        elif statement.type == "export_statement":
            is_default = any(child.type == "default" for child in statement.children)
            declaration = statement.child_by_field_name("declaration")
            if declaration is not None:
                declarations.extend(_classify(
                    parsed, declaration, statement,
                    exported=True, default_export=is_default,
                ))
            else:
                source = statement.child_by_field_name("source")
                declarations.append(Declaration(
                    kind=DeclarationKind.EXPORT,
                    node=statement,
                    statement=statement,
                    exported=True,
                    default_export=is_default,
                    specifier=_string_value(parsed, source) if source is not None else None,
                ))

        else:
            declarations.extend(_classify(parsed, statement, statement))

    return declarations


def _classify(
    parsed: ParsedSource,
    node: Node,
    statement: Node,
    exported: bool = False,
    default_export: bool = False,
) -> list[Declaration]:
    """Classify one declaration node (possibly wrapped by an export)."""

    if node.type in CLASS_TYPES:
        kind = DeclarationKind.CLASS
    elif node.type in FUNCTION_TYPES:
        kind = DeclarationKind.FUNCTION
    elif node.type in _SIMPLE_KINDS:
        kind = _SIMPLE_KINDS[node.type]
    elif node.type in VARIABLE_TYPES:
        return _classify_variables(parsed, node, statement, exported, default_export)
    elif node.type == "expression_statement":
        return _classify_commonjs_export(parsed, node)
    else:
        return []

    return [Declaration(
        kind=kind,
        node=node,
        statement=statement,
        name=_name_of(parsed, node),
        exported=exported,
        default_export=default_export,
    )]


def _classify_variables(
    parsed: ParsedSource,
    node: Node,
    statement: Node,
    exported: bool,
    default_export: bool,
) -> list[Declaration]:
    """Split a const/let/var statement into one declaration per declarator."""

    declarations = []

    for declarator in node.named_children:
        if declarator.type != "variable_declarator":
            continue

        name_node = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        name = parsed.node_text(name_node) if name_node is not None else None

        specifier = _require_specifier(parsed, value)
        if specifier is not None:
            kind = DeclarationKind.IMPORT
        elif (
            value is not None
            and value.type in FUNCTION_VALUE_TYPES
            and name_node is not None
            and name_node.type == "identifier"
        ):
            kind = DeclarationKind.FUNCTION_VARIABLE
        else:
            kind = DeclarationKind.VARIABLE

        declarations.append(Declaration(
            kind=kind,
            node=declarator,
            statement=statement,
            name=name,
            exported=exported,
            default_export=default_export,
            specifier=specifier,
        ))

    return declarations


def _classify_commonjs_export(parsed: ParsedSource, node: Node) -> list[Declaration]:
    """Recognize `module.exports = ...` and `exports.x = ...` assignments."""

    expression = node.named_children[0] if node.named_children else None
    if expression is None or expression.type != "assignment_expression":
        return []

    target = parsed.node_text(expression.child_by_field_name("left")).replace(" ", "")
    if target == "module.exports":
        default_export = True
    elif target.startswith("module.exports.") or target.startswith("exports."):
        default_export = False
    else:
        return []

    return [Declaration(
        kind=DeclarationKind.EXPORT,
        node=expression,
        statement=node,
        exported=True,
        default_export=default_export,
    )]


def _name_of(parsed: ParsedSource, node: Node) -> str | None:
    name_node = node.child_by_field_name("name")
    return parsed.node_text(name_node) if name_node is not None else None


def _import_source(parsed: ParsedSource, statement: Node) -> str | None:
    """Module specifier of an import statement (ES or `import x = require()`)."""

    source = statement.child_by_field_name("source")
    if source is None:
        for child in statement.named_children:
            if child.type == "import_require_clause":
                source = child.child_by_field_name("source")
                break
    return _string_value(parsed, source) if source is not None else None


def _require_specifier(parsed: ParsedSource, value: Node | None) -> str | None:
    """Return 'x' for a `require('x')` call, None otherwise."""

    if value is None or value.type != "call_expression":
        return None
    function = value.child_by_field_name("function")
    arguments = value.child_by_field_name("arguments")
    if function is None or parsed.node_text(function) != "require" or arguments is None:
        return None
    strings = [arg for arg in arguments.named_children if arg.type == "string"]
    return _string_value(parsed, strings[0]) if strings else None


def _string_value(parsed: ParsedSource, node: Node) -> str:
    """Strip the quotes from a string literal node."""
    return parsed.node_text(node)[1:-1]


# =============================================================================
# Class members
# =============================================================================

def class_methods(parsed: ParsedSource, class_node: Node) -> list[tuple[str, Node]]:
    """Return (method name, node) pairs for the methods of a class."""

    body = class_node.child_by_field_name("body")
    if body is None:
        return []

    methods = []
    for member in body.named_children:
        if member.type != "method_definition":
            continue
        name_node = member.child_by_field_name("name")
        if name_node is not None:
            methods.append((parsed.node_text(name_node), member))
    return methods
