"""Client/server classification of React components."""

import re
from pathlib import Path
from typing import Optional

from routeshift.core.models import (
    ComponentClassification,
    ComponentInfo,
    ComponentInventory,
    ComponentSummary,
)
from routeshift.parsing.source import SourceUnit, parse_directory
from routeshift.utils.logging import get_logger

logger = get_logger(__name__)

CLIENT_DIRECTIVE = "use client"

REACT_HOOKS = frozenset(
    {
        "useState",
        "useEffect",
        "useRef",
        "useReducer",
        "useCallback",
        "useMemo",
        "useContext",
        "useLayoutEffect",
        "useImperativeHandle",
        "useDebugValue",
        "useSyncExternalStore",
        "useTransition",
        "useDeferredValue",
        "useId",
    }
)

NAVIGATION_HOOKS = frozenset({"useRouter", "usePathname", "useSearchParams", "useParams"})

NAVIGATION_MODULES = frozenset({"next/router", "next/navigation"})

# Matched as plain substrings of the file text
BROWSER_APIS = [
    "document.",
    "window.",
    "localStorage.",
    "sessionStorage.",
    "navigator.",
    "alert(",
    "confirm(",
    "prompt(",
]

EVENT_HANDLER_PATTERN = re.compile(r"^on[A-Z]")

# Only these handler props count; custom on* props are ignored
EVENT_HANDLERS = frozenset(
    {
        "onClick",
        "onChange",
        "onSubmit",
        "onKeyDown",
        "onKeyUp",
        "onMouseEnter",
        "onMouseLeave",
        "onFocus",
        "onBlur",
        "onScroll",
    }
)


def component_name(file_path: str) -> str:
    """Derive a display name from a file name: ``header.tsx`` -> ``Header``."""
    stem = Path(file_path).stem
    return stem[:1].upper() + stem[1:]


def has_default_export_component(unit: SourceUnit) -> bool:
    if unit.has_default_export:
        return True
    return "export default " in unit.text


def _hooks_imported_from(unit: SourceUnit, modules: frozenset[str], hooks: frozenset[str]) -> list[str]:
    found: list[str] = []
    for decl in unit.imports:
        if decl.specifier not in modules:
            continue
        for named in decl.named:
            if named.name in hooks:
                found.append(named.name)
    return found


def detect_react_hooks(unit: SourceUnit) -> list[str]:
    """Return state/effect hooks imported from react."""
    return _hooks_imported_from(unit, frozenset({"react"}), REACT_HOOKS)


def detect_navigation_hooks(unit: SourceUnit) -> list[str]:
    """Return navigation hooks imported from next/router or next/navigation."""
    return _hooks_imported_from(unit, NAVIGATION_MODULES, NAVIGATION_HOOKS)


def detect_event_handlers(unit: SourceUnit) -> list[str]:
    """Return distinct DOM event-handler JSX attributes, in source order."""
    handlers: list[str] = []
    for attribute in unit.jsx_attributes():
        name = attribute.name
        if EVENT_HANDLER_PATTERN.match(name) and name in EVENT_HANDLERS and name not in handlers:
            handlers.append(name)
    return handlers


def detect_browser_apis(text: str) -> list[str]:
    """Return browser globals referenced in the text, without ``.``/``(``."""
    found: list[str] = []
    for api in BROWSER_APIS:
        if api in text:
            name = api.rstrip(".(")
            if name not in found:
                found.append(name)
    return found


def classify_component(unit: SourceUnit) -> Optional[ComponentInfo]:
    """Classify one file, or return None if it has no default export.

    Args:
        unit: Parsed source file.

    Returns:
        Component classification, or None for non-component files.
    """
    if not has_default_export_component(unit):
        return None

    has_directive = unit.first_statement_is_directive(CLIENT_DIRECTIVE)

    indicators: list[str] = []
    indicators.extend(detect_react_hooks(unit))
    indicators.extend(detect_navigation_hooks(unit))
    indicators.extend(detect_event_handlers(unit))
    indicators.extend(detect_browser_apis(unit.text))

    if has_directive and CLIENT_DIRECTIVE not in indicators:
        indicators.insert(0, CLIENT_DIRECTIVE)

    classification = (
        ComponentClassification.CLIENT if indicators else ComponentClassification.SERVER
    )

    return ComponentInfo(
        file_path=unit.path,
        name=component_name(unit.path),
        classification=classification,
        client_indicators=indicators,
        has_client_directive=has_directive,
    )


def inventory_components(
    src_dir: str | Path,
    exclude_patterns: Optional[list[str]] = None,
) -> ComponentInventory:
    """Classify every default-exporting component under a directory.

    Args:
        src_dir: Directory to scan.
        exclude_patterns: Patterns for files to skip.

    Returns:
        Components sorted by file path, with summary counts.
    """
    components: list[ComponentInfo] = []

    for unit in parse_directory(src_dir, exclude_patterns):
        info = classify_component(unit)
        if info is not None:
            components.append(info)

    components.sort(key=lambda c: c.file_path)
    logger.debug("Classified %d components under %s", len(components), src_dir)

    summary = ComponentSummary(
        total=len(components),
        client=sum(1 for c in components if c.classification == ComponentClassification.CLIENT),
        server=sum(1 for c in components if c.classification == ComponentClassification.SERVER),
        with_client_directive=sum(1 for c in components if c.has_client_directive),
    )

    return ComponentInventory(components=components, summary=summary)
