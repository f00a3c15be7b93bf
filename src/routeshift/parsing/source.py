"""Tree-sitter backed source model for JavaScript and TypeScript files.

Every analyzer works on a :class:`SourceUnit`: the file text, its tree-sitter
tree and a handful of lazily computed views (imports, exports, top-level
functions and variables, JSX attributes). The analyzers only depend on those
views, so any parser that can produce them is substitutable through
:class:`BaseTreeProvider`.
"""

import fnmatch
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import ClassVar

from tree_sitter import Language, Node, Parser, Query, QueryCursor, Tree

from routeshift.core.models import DeclarationKind
from routeshift.errors import SourceNotFoundError, SourceParseError
from routeshift.utils.logging import get_logger

logger = get_logger(__name__)


class ScriptKind(str, Enum):
    """Source dialect, selected from the file extension."""

    TS = "ts"
    TSX = "tsx"
    JS = "js"
    JSX = "jsx"


EXTENSION_TO_KIND: dict[str, ScriptKind] = {
    ".ts": ScriptKind.TS,
    ".tsx": ScriptKind.TSX,
    ".js": ScriptKind.JS,
    ".jsx": ScriptKind.JSX,
    ".mjs": ScriptKind.JS,
    ".cjs": ScriptKind.JS,
}

# Extensions picked up when walking a directory
SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")

# Default patterns to exclude from directory walks
DEFAULT_EXCLUDE_PATTERNS = [
    "node_modules",
    ".git",
    ".next",
]

_FUNCTION_TYPES = ("function_declaration", "generator_function_declaration")
_VARIABLE_TYPES = ("lexical_declaration", "variable_declaration")
_CLASS_TYPES = ("class_declaration", "abstract_class_declaration")

_JSX_ATTRIBUTE_QUERY = """
(jsx_attribute (property_identifier) @attribute_name)
"""


def kind_for_filename(filename: str | Path) -> ScriptKind:
    """Return the script kind for a file name, defaulting to TypeScript."""
    return EXTENSION_TO_KIND.get(Path(filename).suffix.lower(), ScriptKind.TS)


class BaseTreeProvider(ABC):
    """Produces syntax trees for source text."""

    @abstractmethod
    def language(self, kind: ScriptKind) -> Language:
        """Return the grammar used for a script kind."""
        ...

    @abstractmethod
    def parse(self, text: str, kind: ScriptKind) -> Tree:
        """Parse source text into a tree."""
        ...

    @abstractmethod
    def query(self, kind: ScriptKind, pattern: str) -> Query:
        """Return a compiled query for a script kind."""
        ...


class TreeSitterProvider(BaseTreeProvider):
    """Tree provider backed by the tree-sitter TypeScript/JavaScript grammars."""

    def __init__(self) -> None:
        """Initialize with empty grammar and parser caches."""
        self._languages: dict[ScriptKind, Language] = {}
        self._parsers: dict[ScriptKind, Parser] = {}
        self._queries: dict[tuple[ScriptKind, str], Query] = {}

    def language(self, kind: ScriptKind) -> Language:
        """Load (once) and return the grammar for a script kind."""
        if kind not in self._languages:
            if kind == ScriptKind.TS:
                import tree_sitter_typescript

                self._languages[kind] = Language(tree_sitter_typescript.language_typescript())
            elif kind == ScriptKind.TSX:
                import tree_sitter_typescript

                self._languages[kind] = Language(tree_sitter_typescript.language_tsx())
            else:
                import tree_sitter_javascript

                # The JavaScript grammar covers JSX as well
                self._languages[kind] = Language(tree_sitter_javascript.language())
        return self._languages[kind]

    def parse(self, text: str, kind: ScriptKind) -> Tree:
        """Parse source text with the parser for its script kind."""
        parser = self._parsers.get(kind)
        if parser is None:
            parser = Parser(self.language(kind))
            self._parsers[kind] = parser
        return parser.parse(text.encode("utf-8"))

    def query(self, kind: ScriptKind, pattern: str) -> Query:
        """Compile (once per kind) and return a query."""
        key = (kind, pattern)
        if key not in self._queries:
            self._queries[key] = Query(self.language(kind), pattern)
        return self._queries[key]


_provider: BaseTreeProvider | None = None


def get_tree_provider() -> BaseTreeProvider:
    """Return the process-wide tree provider."""
    global _provider
    if _provider is None:
        _provider = TreeSitterProvider()
    return _provider


@dataclass
class NamedImport:
    """One ``{ name as alias }`` binding of an import declaration."""

    name: str
    alias: str | None
    name_node: Node

    @property
    def local_name(self) -> str:
        return self.alias or self.name


@dataclass
class ImportDeclaration:
    """An ES module import statement."""

    specifier: str
    line: int
    node: Node
    source_node: Node
    default_name: str | None = None
    namespace_name: str | None = None
    named: list[NamedImport] = field(default_factory=list)
    is_type_only: bool = False


@dataclass
class ExportedDeclaration:
    """A named (non-default) export of a module."""

    name: str
    kind: DeclarationKind
    line: int


@dataclass
class FunctionDeclaration:
    """A top-level ``function`` declaration."""

    name: str
    line: int
    node: Node
    is_exported: bool = False
    is_default_export: bool = False
    body_text: str = ""

    @property
    def parameters(self) -> list[Node]:
        params = self.node.child_by_field_name("parameters")
        if params is None:
            return []
        return [p for p in params.named_children if p.type != "comment"]


@dataclass
class VariableDeclaration:
    """A single declarator of a top-level ``const``/``let``/``var`` statement."""

    name: str
    line: int
    statement_line: int
    node: Node
    is_exported: bool = False
    initializer: Node | None = None
    initializer_text: str = ""


@dataclass
class JsxAttribute:
    """Name and position of a JSX attribute."""

    name: str
    line: int
    column: int


class SourceUnit:
    """One parsed source file.

    Views over the tree are computed on first access and cached; the unit
    itself is never mutated after parsing.
    """

    directive_marker: ClassVar[str] = "use client"

    def __init__(
        self,
        path: str,
        text: str,
        tree: Tree,
        kind: ScriptKind,
        provider: BaseTreeProvider | None = None,
    ) -> None:
        self.path = path
        self.text = text
        self.tree = tree
        self.kind = kind
        self.provider = provider or get_tree_provider()
        self._source = text.encode("utf-8")

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def source_bytes(self) -> bytes:
        return self._source

    def node_text(self, node: Node | None) -> str:
        """Return the source text covered by a node."""
        if node is None:
            return ""
        return self._source[node.start_byte:node.end_byte].decode("utf-8")

    @staticmethod
    def line_of(node: Node) -> int:
        """Return the 1-based line a node starts on."""
        return node.start_point[0] + 1

    @cached_property
    def statements(self) -> list[Node]:
        """Top-level statements in source order, comments excluded."""
        return [
            child
            for child in self.root.named_children
            if child.type not in ("comment", "hash_bang_line")
        ]

    @cached_property
    def imports(self) -> list[ImportDeclaration]:
        """Import declarations in source order."""
        imports: list[ImportDeclaration] = []

        for stmt in self.statements:
            if stmt.type != "import_statement":
                continue

            source_node = stmt.child_by_field_name("source")
            if source_node is None:
                # import x = require("...") has no module specifier field
                continue

            decl = ImportDeclaration(
                specifier=_string_value(self.node_text(source_node)),
                line=self.line_of(stmt),
                node=stmt,
                source_node=source_node,
                is_type_only=any(child.type == "type" for child in stmt.children),
            )

            clause = next((c for c in stmt.named_children if c.type == "import_clause"), None)
            if clause is not None:
                for part in clause.named_children:
                    if part.type == "identifier":
                        decl.default_name = self.node_text(part)
                    elif part.type == "namespace_import":
                        ident = next(
                            (c for c in part.named_children if c.type == "identifier"), None
                        )
                        decl.namespace_name = self.node_text(ident) if ident else None
                    elif part.type == "named_imports":
                        for spec in part.named_children:
                            if spec.type != "import_specifier":
                                continue
                            name_node = spec.child_by_field_name("name")
                            alias_node = spec.child_by_field_name("alias")
                            if name_node is None:
                                continue
                            decl.named.append(
                                NamedImport(
                                    name=_string_value(self.node_text(name_node)),
                                    alias=self.node_text(alias_node) if alias_node else None,
                                    name_node=name_node,
                                )
                            )

            imports.append(decl)

        return imports

    @cached_property
    def functions(self) -> list[FunctionDeclaration]:
        """Named top-level function declarations, exported or not."""
        functions: list[FunctionDeclaration] = []

        for stmt in self.statements:
            decl_node, export_node = _unwrap_export(stmt)
            if decl_node is None or decl_node.type not in _FUNCTION_TYPES:
                continue

            name_node = decl_node.child_by_field_name("name")
            if name_node is None:
                continue

            body = decl_node.child_by_field_name("body")
            body_text = self.node_text(body)
            if body_text.startswith("{") and body_text.endswith("}"):
                body_text = body_text[1:-1]

            functions.append(
                FunctionDeclaration(
                    name=self.node_text(name_node),
                    line=self.line_of(stmt),
                    node=decl_node,
                    is_exported=export_node is not None,
                    is_default_export=_is_default_export(export_node),
                    body_text=body_text.strip(),
                )
            )

        return functions

    @cached_property
    def variables(self) -> list[VariableDeclaration]:
        """Declarators of top-level variable statements."""
        variables: list[VariableDeclaration] = []

        for stmt in self.statements:
            decl_node, export_node = _unwrap_export(stmt)
            if decl_node is None or decl_node.type not in _VARIABLE_TYPES:
                continue

            for declarator in decl_node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node is None or name_node.type != "identifier":
                    continue
                value = declarator.child_by_field_name("value")
                variables.append(
                    VariableDeclaration(
                        name=self.node_text(name_node),
                        line=self.line_of(declarator),
                        statement_line=self.line_of(stmt),
                        node=declarator,
                        is_exported=export_node is not None,
                        initializer=value,
                        initializer_text=self.node_text(value),
                    )
                )

        return variables

    def get_function(self, name: str) -> FunctionDeclaration | None:
        return next((fn for fn in self.functions if fn.name == name), None)

    def get_variable(self, name: str) -> VariableDeclaration | None:
        return next((var for var in self.variables if var.name == name), None)

    @cached_property
    def interfaces(self) -> dict[str, Node]:
        """Top-level interface declarations by name."""
        return self._named_declarations("interface_declaration")

    @cached_property
    def type_aliases(self) -> dict[str, Node]:
        """Top-level type alias declarations by name."""
        return self._named_declarations("type_alias_declaration")

    def _named_declarations(self, node_type: str) -> dict[str, Node]:
        found: dict[str, Node] = {}
        for stmt in self.statements:
            decl_node, _ = _unwrap_export(stmt)
            if decl_node is None or decl_node.type != node_type:
                continue
            name_node = decl_node.child_by_field_name("name")
            if name_node is not None:
                found.setdefault(self.node_text(name_node), decl_node)
        return found

    @cached_property
    def exported_declarations(self) -> list[ExportedDeclaration]:
        """Named exports of the module; the default export is not included."""
        exports: dict[str, ExportedDeclaration] = {}
        local = self._local_declarations()

        for stmt in self.statements:
            if stmt.type != "export_statement" or _is_default_export(stmt):
                continue

            declaration = stmt.child_by_field_name("declaration")
            if declaration is not None:
                for name, kind, line in self._declared_names(declaration, stmt):
                    exports.setdefault(name, ExportedDeclaration(name, kind, line))
                continue

            clause = next((c for c in stmt.named_children if c.type == "export_clause"), None)
            if clause is None:
                # export * from "./x" names nothing itself
                continue

            is_reexport = stmt.child_by_field_name("source") is not None
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                name_node = spec.child_by_field_name("name")
                alias_node = spec.child_by_field_name("alias")
                if name_node is None:
                    continue
                local_name = _string_value(self.node_text(name_node))
                exported = _string_value(self.node_text(alias_node)) if alias_node else local_name
                if exported == "default":
                    continue

                if not is_reexport and local_name in local:
                    kind, line = local[local_name]
                else:
                    kind, line = DeclarationKind.UNKNOWN, self.line_of(stmt)
                exports.setdefault(exported, ExportedDeclaration(exported, kind, line))

        return list(exports.values())

    def _local_declarations(self) -> dict[str, tuple[DeclarationKind, int]]:
        local: dict[str, tuple[DeclarationKind, int]] = {}
        for stmt in self.statements:
            decl_node, _ = _unwrap_export(stmt)
            if decl_node is None:
                continue
            for name, kind, line in self._declared_names(decl_node, stmt):
                local.setdefault(name, (kind, line))
        return local

    def _declared_names(
        self, declaration: Node, stmt: Node
    ) -> list[tuple[str, DeclarationKind, int]]:
        """Names introduced by a declaration node, with kind and line."""
        if declaration.type in _VARIABLE_TYPES:
            names = []
            for declarator in declaration.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node is not None and name_node.type == "identifier":
                    names.append(
                        (self.node_text(name_node), DeclarationKind.VARIABLE, self.line_of(declarator))
                    )
            return names

        if declaration.type in _FUNCTION_TYPES or declaration.type == "function_signature":
            kind = DeclarationKind.FUNCTION
        elif declaration.type in _CLASS_TYPES:
            kind = DeclarationKind.CLASS
        elif declaration.type == "interface_declaration":
            kind = DeclarationKind.INTERFACE
        elif declaration.type == "type_alias_declaration":
            kind = DeclarationKind.TYPE
        elif declaration.type in ("enum_declaration", "internal_module", "module"):
            kind = DeclarationKind.UNKNOWN
        else:
            return []

        name_node = declaration.child_by_field_name("name")
        if name_node is None:
            return []
        return [(self.node_text(name_node), kind, self.line_of(stmt))]

    @cached_property
    def has_default_export(self) -> bool:
        """Whether the module has a default export."""
        for stmt in self.statements:
            if stmt.type != "export_statement":
                continue
            if _is_default_export(stmt):
                return True
            clause = next((c for c in stmt.named_children if c.type == "export_clause"), None)
            if clause is None:
                continue
            for spec in clause.named_children:
                alias_node = spec.child_by_field_name("alias")
                name_node = spec.child_by_field_name("name")
                exported = alias_node if alias_node is not None else name_node
                if exported is not None and _string_value(self.node_text(exported)) == "default":
                    return True
        return False

    def first_statement_is_directive(self, value: str | None = None) -> bool:
        """Whether the first statement is the string directive ``value``."""
        value = value or self.directive_marker
        if not self.statements:
            return False

        first = self.statements[0]
        if first.type != "expression_statement":
            return False

        expr = next((c for c in first.named_children if c.type != "comment"), None)
        if expr is None or expr.type != "string":
            return False
        return _string_value(self.node_text(expr)) == value

    def jsx_attributes(self) -> list[JsxAttribute]:
        """All JSX attribute names in the file, in source order."""
        if self.kind not in (ScriptKind.TSX, ScriptKind.JSX, ScriptKind.JS):
            return []

        query = self.provider.query(self.kind, _JSX_ATTRIBUTE_QUERY)
        captures = QueryCursor(query).captures(self.root)
        nodes = sorted(captures.get("attribute_name", []), key=lambda n: n.start_byte)

        return [
            JsxAttribute(
                name=self.node_text(node),
                line=node.start_point[0] + 1,
                column=node.start_point[1] + 1,
            )
            for node in nodes
        ]


def _string_value(literal: str) -> str:
    """Strip the quotes from a string literal's source text."""
    if len(literal) >= 2 and literal[0] in "'\"`" and literal[-1] == literal[0]:
        return literal[1:-1]
    return literal


def _unwrap_export(stmt: Node) -> tuple[Node | None, Node | None]:
    """Return (declaration, export_statement) for a top-level statement."""
    if stmt.type == "export_statement":
        return stmt.child_by_field_name("declaration"), stmt
    return stmt, None


def _is_default_export(export_node: Node | None) -> bool:
    if export_node is None:
        return False
    return any(child.type == "default" for child in export_node.children)


def _first_error_line(node: Node) -> int | None:
    """Return the line of the first ERROR or MISSING node under ``node``."""
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error or child.is_missing:
            line = _first_error_line(child)
            if line is not None:
                return line
    return None


def parse_code(
    code: str,
    filename: str,
    provider: BaseTreeProvider | None = None,
) -> SourceUnit:
    """Parse in-memory source text.

    Args:
        code: Source text.
        filename: File name; its extension selects the grammar.
        provider: Tree provider (defaults to the shared tree-sitter provider).

    Returns:
        The parsed source unit.

    Raises:
        SourceParseError: If the text does not parse cleanly.
    """
    provider = provider or get_tree_provider()
    kind = kind_for_filename(filename)
    tree = provider.parse(code, kind)

    if tree.root_node.has_error:
        raise SourceParseError(filename, _first_error_line(tree.root_node))

    return SourceUnit(str(filename), code, tree, kind, provider)


def parse_file(path: str | Path, provider: BaseTreeProvider | None = None) -> SourceUnit:
    """Read and parse a source file.

    Raises:
        SourceNotFoundError: If the file does not exist.
        SourceParseError: If the file does not parse cleanly.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceNotFoundError(str(path))

    logger.debug("Parsing %s", path)
    return parse_code(path.read_text(encoding="utf-8"), str(path), provider)


def should_exclude(file_path: Path, base_path: Path, exclude_patterns: list[str]) -> bool:
    """Check if a file should be excluded from a directory walk.

    Args:
        file_path: File to check.
        base_path: Base directory for relative path calculation.
        exclude_patterns: Patterns matched against each path component.

    Returns:
        True if file should be excluded.
    """
    try:
        relative_path = file_path.relative_to(base_path)
    except ValueError:
        relative_path = file_path

    for pattern in exclude_patterns:
        for part in relative_path.parts:
            if fnmatch.fnmatch(part, pattern):
                return True

    return False


def find_source_files(
    directory: str | Path,
    exclude_patterns: list[str] | None = None,
) -> list[Path]:
    """Find all source files under a directory, in sorted order.

    Raises:
        SourceNotFoundError: If the directory does not exist.
    """
    directory = Path(directory).resolve()
    if not directory.is_dir():
        raise SourceNotFoundError(str(directory))

    patterns = DEFAULT_EXCLUDE_PATTERNS if exclude_patterns is None else exclude_patterns

    files = [
        file_path
        for file_path in directory.rglob("*")
        if file_path.suffix in SOURCE_EXTENSIONS
        and file_path.is_file()
        and not should_exclude(file_path, directory, patterns)
    ]
    return sorted(files)


def parse_directory(
    directory: str | Path,
    exclude_patterns: list[str] | None = None,
    provider: BaseTreeProvider | None = None,
) -> list[SourceUnit]:
    """Parse every source file under a directory.

    All files are parsed before the list is returned; a single unparseable
    file aborts the whole call.
    """
    files = find_source_files(directory, exclude_patterns)
    logger.debug("Parsing %d files under %s", len(files), directory)
    return [parse_file(file_path, provider) for file_path in files]
