"""Detection of named exports that nothing in the project imports."""

import os
from pathlib import Path
from typing import Optional

from routeshift.core.models import DeadCodeAnalysis, DeadCodeSummary, DeadExport
from routeshift.parsing.source import SourceUnit, parse_directory
from routeshift.utils.logging import get_logger

logger = get_logger(__name__)

# Exports of these files are consumed by the framework, not by imports
FRAMEWORK_FILE_NAMES = frozenset(
    {
        "page",
        "layout",
        "route",
        "loading",
        "error",
        "not-found",
        "template",
        "default",
        "middleware",
    }
)

RESOLVE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")


def strip_extension(file_path: str) -> str:
    root, ext = os.path.splitext(file_path)
    return root if ext in RESOLVE_EXTENSIONS else file_path


def resolve_module_specifier(importing_file: str, specifier: str) -> Optional[str]:
    """Resolve a relative import specifier to a file path.

    Tries ``<path>.<ext>``, then ``<path>/index.<ext>``, then the literal
    path. Falls back to the extension-stripped path when nothing exists.

    Returns:
        Resolved path, or None for bare (package) specifiers.
    """
    if not specifier.startswith("."):
        return None

    raw = os.path.normpath(os.path.join(os.path.dirname(importing_file), specifier))
    stripped = strip_extension(raw)

    for ext in RESOLVE_EXTENSIONS:
        if os.path.exists(stripped + ext):
            return stripped + ext

    for ext in RESOLVE_EXTENSIONS:
        index_path = os.path.join(stripped, "index" + ext)
        if os.path.exists(index_path):
            return index_path

    if os.path.exists(raw):
        return raw

    return stripped


def _base_name(file_path: str) -> str:
    return Path(file_path).stem


def is_framework_file(file_path: str) -> bool:
    return _base_name(file_path) in FRAMEWORK_FILE_NAMES


def is_index_file(file_path: str) -> bool:
    return _base_name(file_path) == "index"


class DeadCodeDetector:
    """Two-pass export/import reachability over a set of parsed files."""

    def __init__(self, units: list[SourceUnit]):
        self.units = units

    def collect_exports(self) -> list[DeadExport]:
        """Collect every named, non-default export."""
        exports: list[DeadExport] = []
        for unit in self.units:
            for decl in unit.exported_declarations:
                exports.append(
                    DeadExport(
                        file_path=unit.path,
                        export_name=decl.name,
                        type=decl.kind,
                        line=decl.line,
                    )
                )
        return exports

    def collect_imported_symbols(self) -> set[str]:
        """Collect ``<file-without-extension>::<name>`` keys of named imports.

        Aliased imports count under their original name.
        """
        imported: set[str] = set()
        for unit in self.units:
            for decl in unit.imports:
                resolved = resolve_module_specifier(unit.path, decl.specifier)
                if resolved is None:
                    continue

                normalized = strip_extension(os.path.abspath(resolved))
                for named in decl.named:
                    imported.add(f"{normalized}::{named.name}")
        return imported

    def detect(self) -> DeadCodeAnalysis:
        """Report exports with no matching import.

        Framework entry files and index files are never reported.
        """
        all_exports = self.collect_exports()
        imported = self.collect_imported_symbols()

        dead_exports = [
            export
            for export in all_exports
            if not is_framework_file(export.file_path)
            and not is_index_file(export.file_path)
            and f"{strip_extension(export.file_path)}::{export.export_name}" not in imported
        ]
        dead_exports.sort(key=lambda d: (d.file_path, d.line))

        logger.debug(
            "Found %d dead exports out of %d", len(dead_exports), len(all_exports)
        )

        summary = DeadCodeSummary(
            total_exports=len(all_exports),
            dead_exports=len(dead_exports),
            files_with_dead_code=len({d.file_path for d in dead_exports}),
        )
        return DeadCodeAnalysis(dead_exports=dead_exports, summary=summary)


def detect_dead_exports(
    src_dir: str | Path,
    exclude_patterns: Optional[list[str]] = None,
) -> DeadCodeAnalysis:
    """Convenience function to find unused exports under a directory.

    Args:
        src_dir: Directory to scan.
        exclude_patterns: Patterns for files to skip.

    Returns:
        Dead code analysis sorted by file path then line.
    """
    return DeadCodeDetector(parse_directory(src_dir, exclude_patterns)).detect()
