"""Analysis of pages-router data-fetching exports."""

import re
from typing import Optional

from routeshift.core.models import (
    Complexity,
    DataFetchingAnalysis,
    DataFetchingPattern,
    DataFetchingSummary,
    DataFetchingType,
)
from routeshift.parsing.source import parse_code

DATA_FETCHING_NAMES = frozenset(t.value for t in DataFetchingType)

_REVALIDATE_RE = re.compile(r"revalidate\s*:")
_REVALIDATE_VALUE_RE = re.compile(r"revalidate\s*:\s*(\d+)")

_CONTROL_FLOW_RES = [
    re.compile(r"try\s*\{"),
    re.compile(r"catch\s*\("),
    re.compile(r"if\s*\("),
    re.compile(r"switch\s*\("),
    re.compile(r"\.then\s*\("),
]
_REQUEST_CONTEXT_RE = re.compile(r"cookies|headers|redirect")
_FETCHES_DATA_RE = re.compile(r"fetch|axios|prisma|query|request|api", re.IGNORECASE)

GENERATE_STATIC_PARAMS_STUB = (
    "export async function generateStaticParams() {\n"
    "  // Return array of params\n"
    "  return [{ slug: '...' }];\n"
    "}"
)


def extract_revalidate_value(body_text: str) -> Optional[int]:
    """Return the literal revalidate interval, if it is a plain number."""
    match = _REVALIDATE_VALUE_RE.search(body_text)
    return int(match.group(1)) if match else None


def build_suggestion(kind: DataFetchingType, revalidate_value: Optional[int] = None) -> str:
    """Return replacement code for a data-fetching function."""
    if kind == DataFetchingType.GET_STATIC_PROPS:
        if revalidate_value is not None:
            return (
                "// Fetch data with ISR\n"
                f"const data = await fetch('...', {{ next: {{ revalidate: {revalidate_value} }} }});"
            )
        return (
            "// Fetch data in Server Component\n"
            "const data = await fetch('...', { cache: 'force-cache' });"
        )
    if kind == DataFetchingType.GET_SERVER_SIDE_PROPS:
        return (
            "// Fetch data on every request\n"
            "const data = await fetch('...', { cache: 'no-store' });"
        )
    if kind == DataFetchingType.GET_STATIC_PATHS:
        return GENERATE_STATIC_PARAMS_STUB
    return "// MANUAL MIGRATION: Move data fetching to Server Component or Route Handler"


def determine_complexity(
    kind: DataFetchingType, body_text: str, has_revalidate: bool
) -> Complexity:
    """Estimate migration effort from the function body."""
    if kind == DataFetchingType.GET_STATIC_PROPS:
        if has_revalidate:
            return Complexity.MODERATE
        if any(regex.search(body_text) for regex in _CONTROL_FLOW_RES):
            return Complexity.COMPLEX
        return Complexity.SIMPLE

    if kind == DataFetchingType.GET_SERVER_SIDE_PROPS:
        return Complexity.COMPLEX if _REQUEST_CONTEXT_RE.search(body_text) else Complexity.SIMPLE

    if kind == DataFetchingType.GET_STATIC_PATHS:
        return Complexity.MODERATE if _FETCHES_DATA_RE.search(body_text) else Complexity.SIMPLE

    return Complexity.COMPLEX


def analyze_function(name: str, body_text: str, line: int) -> DataFetchingPattern:
    kind = DataFetchingType(name)
    has_revalidate = bool(_REVALIDATE_RE.search(body_text))
    revalidate_value = extract_revalidate_value(body_text) if has_revalidate else None

    return DataFetchingPattern(
        name=name,
        line=line,
        type=kind,
        has_revalidate=has_revalidate,
        revalidate_value=revalidate_value,
        suggested_replacement=build_suggestion(kind, revalidate_value),
        complexity=determine_complexity(kind, body_text, has_revalidate),
    )


def analyze_data_fetching(code: str, filename: str) -> DataFetchingAnalysis:
    """Find exported data-fetching functions and suggest replacements.

    Function declarations are reported before exported ``const`` forms.

    Args:
        code: Source text.
        filename: File name used to pick the grammar.

    Returns:
        Data-fetching analysis.
    """
    unit = parse_code(code, filename)
    patterns: list[DataFetchingPattern] = []

    for fn in unit.functions:
        if fn.name in DATA_FETCHING_NAMES and fn.is_exported:
            patterns.append(analyze_function(fn.name, fn.body_text, fn.line))

    for var in unit.variables:
        if var.name not in DATA_FETCHING_NAMES or not var.is_exported:
            continue
        if var.initializer is None:
            continue
        patterns.append(analyze_function(var.name, var.initializer_text, var.statement_line))

    summary = DataFetchingSummary(
        total=len(patterns),
        get_static_props=_count(patterns, DataFetchingType.GET_STATIC_PROPS),
        get_server_side_props=_count(patterns, DataFetchingType.GET_SERVER_SIDE_PROPS),
        get_static_paths=_count(patterns, DataFetchingType.GET_STATIC_PATHS),
        get_initial_props=_count(patterns, DataFetchingType.GET_INITIAL_PROPS),
    )
    return DataFetchingAnalysis(patterns=patterns, summary=summary)


def _count(patterns: list[DataFetchingPattern], kind: DataFetchingType) -> int:
    return sum(1 for p in patterns if p.type == kind)
