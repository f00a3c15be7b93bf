"""Post-migration checks over an app directory."""

import re
from pathlib import Path
from typing import Optional

from routeshift.core.models import Severity, ValidationIssue, ValidationResult, ValidationSummary
from routeshift.parsing.source import SourceUnit, parse_directory
from routeshift.utils.logging import get_logger

logger = get_logger(__name__)

LEGACY_ROUTER_MODULE = "next/router"

LEGACY_DATA_FETCHING = frozenset(
    {"getStaticProps", "getServerSideProps", "getStaticPaths", "getInitialProps"}
)

CLIENT_FEATURE_PATTERNS = [
    re.compile(r"\buseState\b"),
    re.compile(r"\buseEffect\b"),
    re.compile(r"\buseRef\b"),
    re.compile(r"\bonClick\b"),
    re.compile(r"\bonChange\b"),
    re.compile(r"\bonSubmit\b"),
]

RULE_NO_NEXT_ROUTER = "no-next-router"
RULE_NO_OLD_DATA_FETCHING = "no-old-data-fetching"
RULE_MISSING_CLIENT_DIRECTIVE = "missing-client-directive"


def check_file(unit: SourceUnit) -> list[ValidationIssue]:
    """Run every validation rule against one file."""
    issues: list[ValidationIssue] = []

    for decl in unit.imports:
        if decl.specifier == LEGACY_ROUTER_MODULE:
            issues.append(
                ValidationIssue(
                    file_path=unit.path,
                    line=decl.line,
                    rule=RULE_NO_NEXT_ROUTER,
                    severity=Severity.ERROR,
                    message=(
                        "Import from 'next/router' is not compatible with App Router. "
                        "Use 'next/navigation' instead."
                    ),
                )
            )

    for fn in unit.functions:
        if fn.name in LEGACY_DATA_FETCHING and fn.is_exported:
            issues.append(
                ValidationIssue(
                    file_path=unit.path,
                    line=fn.line,
                    rule=RULE_NO_OLD_DATA_FETCHING,
                    severity=Severity.ERROR,
                    message=(
                        f"'{fn.name}' is not supported in App Router. "
                        "Use server components or route handlers."
                    ),
                )
            )

    if not unit.first_statement_is_directive("use client"):
        if any(pattern.search(unit.text) for pattern in CLIENT_FEATURE_PATTERNS):
            issues.append(
                ValidationIssue(
                    file_path=unit.path,
                    line=1,
                    rule=RULE_MISSING_CLIENT_DIRECTIVE,
                    severity=Severity.WARNING,
                    message="File uses client-side features but is missing 'use client' directive.",
                )
            )

    return issues


def validate_migration(
    app_dir: str | Path,
    exclude_patterns: Optional[list[str]] = None,
) -> ValidationResult:
    """Validate every source file under a migrated app directory.

    Args:
        app_dir: Directory to validate.
        exclude_patterns: Patterns for files to skip.

    Returns:
        Issues sorted by file then line; ``passed`` is False on any error.
    """
    units = parse_directory(app_dir, exclude_patterns)

    issues: list[ValidationIssue] = []
    for unit in units:
        issues.extend(check_file(unit))
    issues.sort(key=lambda i: (i.file_path, i.line))

    errors = sum(1 for i in issues if i.severity == Severity.ERROR)
    warnings = sum(1 for i in issues if i.severity == Severity.WARNING)

    logger.debug("Validated %d files: %d errors, %d warnings", len(units), errors, warnings)

    return ValidationResult(
        issues=issues,
        files_checked=len(units),
        summary=ValidationSummary(
            total=len(issues),
            errors=errors,
            warnings=warnings,
            passed=errors == 0,
        ),
    )
