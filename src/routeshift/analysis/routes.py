"""Route extraction from a pages directory."""

import re
from pathlib import Path
from typing import Optional

from routeshift.core.models import RouteAnalysis, RouteInfo, RouteSummary, RouteType
from routeshift.parsing.source import SourceUnit, parse_directory
from routeshift.utils.logging import get_logger

logger = get_logger(__name__)

DATA_FETCHING_NAMES = ("getStaticProps", "getServerSideProps", "getStaticPaths")

_EXTENSION_RE = re.compile(r"\.(tsx?|jsx?)$")
_CATCH_ALL_SEGMENT_RE = re.compile(r"\[\.\.\.(\w+)\]")
_DYNAMIC_SEGMENT_RE = re.compile(r"\[(\w+)\]")
_API_METHOD_RE = re.compile(r"\b(?:req|request)\.method\s*===\s*['\"](\w+)['\"]")


def file_path_to_route(relative_path: str) -> str:
    """Map a pages-relative file path to its URL route.

    ``index`` files collapse into their directory, ``[slug]`` becomes
    ``:slug`` and ``[...slug]`` becomes ``*slug``.
    """
    route = _EXTENSION_RE.sub("", relative_path.replace("\\", "/"))

    if route == "index":
        route = "/"
    elif route.endswith("/index"):
        route = route[: -len("/index")]

    route = _CATCH_ALL_SEGMENT_RE.sub(r"*\1", route)
    route = _DYNAMIC_SEGMENT_RE.sub(r":\1", route)

    return route if route.startswith("/") else f"/{route}"


def classify_route(route_path: str, relative_path: str) -> RouteType:
    """Classify a route by its path shape."""
    if route_path.startswith("/api"):
        return RouteType.API
    if "[..." in relative_path:
        return RouteType.CATCH_ALL
    if "[" in relative_path:
        return RouteType.DYNAMIC
    return RouteType.STATIC


def detect_data_fetching(unit: SourceUnit) -> list[str]:
    """Return the legacy data-fetching functions a page exports."""
    found: list[str] = []

    for name in DATA_FETCHING_NAMES:
        fn = unit.get_function(name)
        if fn is not None and fn.is_exported:
            found.append(name)
            continue

        var = unit.get_variable(name)
        if var is not None and var.is_exported:
            found.append(name)

    return found


def detect_api_methods(text: str) -> list[str]:
    """Return HTTP verbs compared against the request method, first-seen order."""
    methods: list[str] = []
    for match in _API_METHOD_RE.finditer(text):
        method = match.group(1)
        if method not in methods:
            methods.append(method)
    return methods


class RouteExtractor:
    """Derives routes from every source file under a pages directory."""

    def __init__(self, exclude_patterns: Optional[list[str]] = None):
        """Initialize the extractor.

        Args:
            exclude_patterns: Patterns for files to skip (defaults apply when None).
        """
        self.exclude_patterns = exclude_patterns

    def extract(self, pages_dir: str | Path) -> RouteAnalysis:
        """Extract routes from a pages directory.

        Args:
            pages_dir: Directory holding page files.

        Returns:
            Routes sorted by route path, with summary counts.
        """
        root = Path(pages_dir).resolve()
        units = parse_directory(root, self.exclude_patterns)

        routes = [self._route_for(unit, root) for unit in units]
        routes.sort(key=lambda r: r.route_path)

        logger.debug("Extracted %d routes from %s", len(routes), root)
        return RouteAnalysis(routes=routes, summary=summarize_routes(routes))

    def _route_for(self, unit: SourceUnit, root: Path) -> RouteInfo:
        relative_path = Path(unit.path).relative_to(root).as_posix()
        route_path = file_path_to_route(relative_path)
        route_type = classify_route(route_path, relative_path)

        return RouteInfo(
            file_path=unit.path,
            route_path=route_path,
            type=route_type,
            data_fetching=detect_data_fetching(unit),
            has_default_export=unit.has_default_export,
            api_methods=detect_api_methods(unit.text) if route_type == RouteType.API else None,
        )


def summarize_routes(routes: list[RouteInfo]) -> RouteSummary:
    """Compute summary counts from a route list."""
    return RouteSummary(
        total=len(routes),
        static=sum(1 for r in routes if r.type == RouteType.STATIC),
        dynamic=sum(1 for r in routes if r.type == RouteType.DYNAMIC),
        api=sum(1 for r in routes if r.type == RouteType.API),
        catch_all=sum(1 for r in routes if r.type == RouteType.CATCH_ALL),
        with_get_static_props=sum(1 for r in routes if "getStaticProps" in r.data_fetching),
        with_get_server_side_props=sum(
            1 for r in routes if "getServerSideProps" in r.data_fetching
        ),
        with_get_static_paths=sum(1 for r in routes if "getStaticPaths" in r.data_fetching),
    )


def extract_routes(
    pages_dir: str | Path,
    exclude_patterns: Optional[list[str]] = None,
) -> RouteAnalysis:
    """Convenience function to extract routes from a pages directory.

    Args:
        pages_dir: Directory holding page files.
        exclude_patterns: Patterns for files to skip.

    Returns:
        Route analysis.
    """
    return RouteExtractor(exclude_patterns).extract(pages_dir)
