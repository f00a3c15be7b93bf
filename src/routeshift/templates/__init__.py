"""Jinja2 templates for scaffolding App Router files."""

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

TEMPLATES_DIR = Path(__file__).parent

TEMPLATE_SUFFIX = ".jinja"


def get_template_path(name: str) -> Path:
    """Get the path to a scaffold template.

    Args:
        name: Template name, e.g. ``page.tsx``.

    Returns:
        Path to template file.
    """
    return TEMPLATES_DIR / f"{name}{TEMPLATE_SUFFIX}"


@lru_cache(maxsize=1)
def _environment() -> Environment:
    # Generates TSX, not HTML, so nothing is escaped
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


def load_template(name: str) -> Template:
    return _environment().get_template(f"{name}{TEMPLATE_SUFFIX}")


def render_template(name: str, data: dict[str, Any]) -> str:
    """Render a template by name with the given context."""
    return load_template(name).render(**data)


def render_layout(
    name: str,
    is_root: bool = False,
    metadata: Optional[dict[str, str]] = None,
) -> str:
    """Render ``layout.tsx``.

    Args:
        name: Component name prefix (``Root`` renders ``RootLayout``).
        is_root: Wrap children in ``<html>``/``<body>``.
        metadata: Optional ``title``/``description`` for a Metadata export.
    """
    return render_template(
        "layout.tsx",
        {"name": name, "is_root": is_root, "metadata": metadata},
    )


def render_page(
    name: str,
    is_client: bool = False,
    is_async: bool = False,
    props: Optional[list[dict[str, Any]]] = None,
    imports: Optional[list[dict[str, str]]] = None,
    fetch_data: bool = False,
    fetch_url: str = "",
    fetch_options: str = "",
) -> str:
    """Render ``page.tsx``.

    Props are ``{name, type, optional}`` dicts and imports are
    ``{default, from}`` dicts. Fetching data makes the page async.
    """
    return render_template(
        "page.tsx",
        {
            "name": name,
            "is_client": is_client,
            "is_async": is_async or fetch_data,
            "has_props": bool(props),
            "props": props or [],
            "imports": imports or [],
            "fetch_data": fetch_data,
            "fetch_url": fetch_url,
            "fetch_options": fetch_options,
        },
    )


def render_route(methods: list[str]) -> str:
    """Render ``route.ts`` with one handler per HTTP method."""
    return render_template("route.ts", {"methods": [m.upper() for m in methods]})


def render_loading(name: str) -> str:
    return render_template("loading.tsx", {"name": name})


def render_error(name: str) -> str:
    return render_template("error.tsx", {"name": name})
