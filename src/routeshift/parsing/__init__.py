"""Tree-sitter parsing of JavaScript and TypeScript sources."""

from routeshift.parsing.source import (
    BaseTreeProvider,
    ScriptKind,
    SourceUnit,
    TreeSitterProvider,
    find_source_files,
    get_tree_provider,
    parse_code,
    parse_directory,
    parse_file,
)

__all__ = [
    "BaseTreeProvider",
    "ScriptKind",
    "SourceUnit",
    "TreeSitterProvider",
    "find_source_files",
    "get_tree_provider",
    "parse_code",
    "parse_directory",
    "parse_file",
]
