"""Classification of package.json dependencies for migration."""

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from routeshift.core.models import (
    DependencyAnalysis,
    DependencyClassification,
    DependencyInfo,
    DependencySection,
    DependencySummary,
)
from routeshift.data import ReplacementEntry, load_known_replacements
from routeshift.errors import ParseError, SourceNotFoundError
from routeshift.utils.logging import get_logger

logger = get_logger(__name__)

CORE_PACKAGES = ("next", "react", "react-dom")

TYPES_PREFIX = "@types/"

DEV_TOOL_NAMES = frozenset(
    {
        "typescript",
        "eslint",
        "prettier",
        "vitest",
        "jest",
        "ts-node",
        "tsx",
        "webpack",
        "turbopack",
        "postcss",
        "tailwindcss",
        "autoprefixer",
    }
)


def classify_dependency(
    name: str,
    known_replacements: Mapping[str, ReplacementEntry],
) -> DependencyClassification:
    """Classify a package name.

    Core packages win over the replacement table, which wins over dev tools.
    """
    if name in CORE_PACKAGES:
        return DependencyClassification.CORE
    if name in known_replacements:
        return DependencyClassification.REPLACEABLE
    if name.startswith(TYPES_PREFIX) or name in DEV_TOOL_NAMES:
        return DependencyClassification.DEV_TOOL
    return DependencyClassification.UNKNOWN


def _read_manifest(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise SourceNotFoundError(str(path))

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Invalid JSON in {path}: {e}",
            "package.json must be a valid JSON object.",
        ) from e

    if not isinstance(data, dict):
        raise ParseError(f"Invalid package manifest: {path}", "Expected a JSON object.")
    return data


def analyze_dependencies(
    package_json_path: str | Path,
    known_replacements: Optional[Mapping[str, ReplacementEntry]] = None,
) -> DependencyAnalysis:
    """Classify every declared dependency of a package.json.

    A package listed in both sections is reported once per section.

    Args:
        package_json_path: Path to package.json.
        known_replacements: Replacement table (defaults to the packaged one).

    Returns:
        Dependency analysis in manifest order.
    """
    path = Path(package_json_path)
    manifest = _read_manifest(path)
    if known_replacements is None:
        known_replacements = load_known_replacements()

    dependencies: list[DependencyInfo] = []

    for section in (DependencySection.DEPENDENCIES, DependencySection.DEV_DEPENDENCIES):
        declared = manifest.get(section.value)
        if not isinstance(declared, dict):
            continue

        for name, version in declared.items():
            classification = classify_dependency(name, known_replacements)
            info = DependencyInfo(
                name=name,
                version=str(version),
                source=section,
                classification=classification,
            )

            if classification == DependencyClassification.REPLACEABLE:
                entry = known_replacements[name]
                info.replacement = entry.replacement
                info.note = entry.note

            dependencies.append(info)

    logger.debug("Classified %d dependencies from %s", len(dependencies), path)

    summary = DependencySummary(
        total=len(dependencies),
        core=_count(dependencies, DependencyClassification.CORE),
        replaceable=_count(dependencies, DependencyClassification.REPLACEABLE),
        dev_tool=_count(dependencies, DependencyClassification.DEV_TOOL),
        unknown=_count(dependencies, DependencyClassification.UNKNOWN),
    )

    return DependencyAnalysis(dependencies=dependencies, summary=summary)


def _count(dependencies: list[DependencyInfo], classification: DependencyClassification) -> int:
    return sum(1 for d in dependencies if d.classification == classification)
