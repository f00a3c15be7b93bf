"""Project-wide analysis of a pages-router codebase.

Components:
- routes: Map page files to URL routes
- components: Classify components as client or server
- dependencies: Bucket package.json dependencies
- dead_code: Find exports nothing imports
- props: Extract component props from type annotations
- validator: Check a migrated app directory
"""

from routeshift.analysis.components import classify_component, inventory_components
from routeshift.analysis.dead_code import DeadCodeDetector, detect_dead_exports
from routeshift.analysis.dependencies import analyze_dependencies, classify_dependency
from routeshift.analysis.props import extract_props
from routeshift.analysis.routes import RouteExtractor, extract_routes
from routeshift.analysis.validator import validate_migration

__all__ = [
    "DeadCodeDetector",
    "RouteExtractor",
    "analyze_dependencies",
    "classify_component",
    "classify_dependency",
    "detect_dead_exports",
    "extract_props",
    "extract_routes",
    "inventory_components",
    "validate_migration",
]
