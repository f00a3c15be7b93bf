"""Detection of pages-router API usage that changes under the App Router."""

import re
from dataclasses import dataclass
from typing import Optional

from routeshift.core.models import RouterAnalysis, RouterSummary, RouterUsage
from routeshift.parsing.source import parse_code

LEGACY_ROUTER_MODULE = "next/router"


@dataclass(frozen=True)
class RouterPattern:
    """A router access to look for and its App Router guidance."""

    regex: re.Pattern[str]
    pattern: str
    replacement: str
    breaking: bool
    note: str
    suggests_import: Optional[str] = None


_COMPATIBLE_NOTE = "Compatible with App Router's useRouter"

ROUTER_PATTERNS: list[RouterPattern] = [
    RouterPattern(
        regex=re.compile(r"router\.push\("),
        pattern="router.push",
        replacement="router.push() (from next/navigation, same API)",
        breaking=False,
        note=_COMPATIBLE_NOTE,
    ),
    RouterPattern(
        regex=re.compile(r"router\.replace\("),
        pattern="router.replace",
        replacement="router.replace() (from next/navigation, same API)",
        breaking=False,
        note=_COMPATIBLE_NOTE,
    ),
    RouterPattern(
        regex=re.compile(r"router\.back\("),
        pattern="router.back",
        replacement="router.back() (from next/navigation, same API)",
        breaking=False,
        note=_COMPATIBLE_NOTE,
    ),
    RouterPattern(
        regex=re.compile(r"router\.query(?!\w)"),
        pattern="router.query",
        replacement="useSearchParams() for query string, useParams() for dynamic route params",
        breaking=True,
        note="router.query is removed in App Router",
        suggests_import="useSearchParams",
    ),
    RouterPattern(
        regex=re.compile(r"router\.pathname(?!\w)"),
        pattern="router.pathname",
        replacement="usePathname() from next/navigation",
        breaking=True,
        note="router.pathname is removed in App Router",
        suggests_import="usePathname",
    ),
    RouterPattern(
        regex=re.compile(r"router\.asPath(?!\w)"),
        pattern="router.asPath",
        replacement="usePathname() from next/navigation",
        breaking=True,
        note="router.asPath is removed in App Router",
        suggests_import="usePathname",
    ),
    RouterPattern(
        regex=re.compile(r"router\.isReady(?!\w)"),
        pattern="router.isReady",
        replacement="Remove it; App Router components are always ready",
        breaking=True,
        note="isReady is not needed in App Router",
    ),
    RouterPattern(
        regex=re.compile(r"router\.events(?!\w)"),
        pattern="router.events",
        replacement="Use usePathname() + useSearchParams() in useEffect",
        breaking=True,
        note="Router events are removed in App Router",
        suggests_import="usePathname",
    ),
    RouterPattern(
        regex=re.compile(r"router\.locale(?!\w)"),
        pattern="router.locale",
        replacement="Use middleware or next-intl for i18n",
        breaking=True,
        note="Built-in i18n routing is removed in App Router",
    ),
    RouterPattern(
        regex=re.compile(r"router\.isFallback(?!\w)"),
        pattern="router.isFallback",
        replacement="Use loading.tsx for fallback states",
        breaking=True,
        note="isFallback is removed; use loading.tsx or Suspense",
    ),
    RouterPattern(
        regex=re.compile(r"withRouter(?!\w)"),
        pattern="withRouter",
        replacement="Use useRouter(), usePathname(), useSearchParams() hooks directly",
        breaking=True,
        note="withRouter HOC is removed; use hooks instead",
        suggests_import="useRouter",
    ),
]


def offset_to_position(text: str, offset: int) -> tuple[int, int]:
    """Convert a character offset into a 1-based (line, column) pair."""
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def analyze_router_usage(code: str, filename: str) -> RouterAnalysis:
    """Find every legacy router access in a file.

    Each pattern reports all of its matches; overlapping matches from
    different patterns are all kept.

    Args:
        code: Source text.
        filename: File name used to pick the grammar.

    Returns:
        Router analysis with usages grouped by pattern, in match order.
    """
    unit = parse_code(code, filename)
    text = unit.text

    has_router_import = any(decl.specifier == LEGACY_ROUTER_MODULE for decl in unit.imports)

    usages: list[RouterUsage] = []
    # dict keys keep first-insertion order
    suggested_imports: dict[str, None] = {}

    for entry in ROUTER_PATTERNS:
        for match in entry.regex.finditer(text):
            line, column = offset_to_position(text, match.start())
            usages.append(
                RouterUsage(
                    pattern=entry.pattern,
                    line=line,
                    column=column,
                    replacement=entry.replacement,
                    breaking=entry.breaking,
                    note=entry.note,
                    suggests_import=entry.suggests_import,
                )
            )
            if entry.suggests_import:
                suggested_imports[entry.suggests_import] = None

    if has_router_import:
        suggested_imports["useRouter"] = None

    breaking = sum(1 for u in usages if u.breaking)

    return RouterAnalysis(
        usages=usages,
        has_router_import=has_router_import,
        suggested_imports=list(suggested_imports),
        summary=RouterSummary(
            total=len(usages),
            breaking=breaking,
            compatible=len(usages) - breaking,
        ),
    )
