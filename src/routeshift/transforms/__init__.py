"""Single-file rewrites and migration reports."""

from routeshift.transforms.data_fetching import analyze_data_fetching
from routeshift.transforms.image import analyze_image_usage
from routeshift.transforms.imports import ImportRewriter, transform_imports
from routeshift.transforms.next_config import analyze_config, analyze_config_text
from routeshift.transforms.router import analyze_router_usage

__all__ = [
    "ImportRewriter",
    "analyze_config",
    "analyze_config_text",
    "analyze_data_fetching",
    "analyze_image_usage",
    "analyze_router_usage",
    "transform_imports",
]
