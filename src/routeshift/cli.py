"""Command-line interface for routeshift."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Iterator, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from routeshift import __version__
from routeshift.config import RouteshiftConfig, generate_example_config, load_config
from routeshift.errors import RouteshiftError, SourceNotFoundError
from routeshift.utils.logging import configure_logging, enable_debug_logging, get_logger
from routeshift.utils.output import format_diff, print_output

app = typer.Typer(
    name="routeshift",
    help="Analyze and rewrite a Next.js pages-router project for the App Router.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

analyze_app = typer.Typer(
    name="analyze",
    help="Inventory routes, components, dependencies and configuration.",
    no_args_is_help=True,
)
app.add_typer(analyze_app, name="analyze")

transform_app = typer.Typer(
    name="transform",
    help="Rewrite imports and report pages-router API usage in a file.",
    no_args_is_help=True,
)
app.add_typer(transform_app, name="transform")

state_app = typer.Typer(
    name="state",
    help="Track migration phases and logged problems.",
    no_args_is_help=True,
)
app.add_typer(state_app, name="state")

scaffold_app = typer.Typer(
    name="scaffold",
    help="Generate App Router files from templates.",
    no_args_is_help=True,
)
app.add_typer(scaffold_app, name="scaffold")

config_app = typer.Typer(
    name="config",
    help="Configuration management.",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

# Results go to stdout as JSON; everything else goes to stderr
console = Console()
stderr_console = Console(stderr=True)
logger = get_logger(__name__)

_settings: Optional[RouteshiftConfig] = None


def _config() -> RouteshiftConfig:
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"routeshift version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Routeshift - migrate a Next.js app from pages/ to app/."""
    global _settings

    try:
        _settings = load_config(config)
    except RouteshiftError as e:
        _handle_cli_error(e)

    if verbose:
        enable_debug_logging()
    else:
        configure_logging(level="WARNING" if quiet else _settings.log_level)

    if config:
        logger.debug("Using configuration file: %s", config)


def _handle_cli_error(error: Exception) -> NoReturn:
    """Handle exceptions and display user-friendly error messages.

    Args:
        error: The exception to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, RouteshiftError):
        stderr_console.print(f"[bold red]Error:[/bold red] {escape(error.message)}", highlight=False)
        if error.hint:
            stderr_console.print(f"[yellow]Hint:[/yellow] {escape(error.hint)}", highlight=False)
    else:
        stderr_console.print(f"[red]Error: {escape(str(error))}[/red]", highlight=False)
        logger.exception("Command failed")

    raise typer.Exit(code=1)


def _emit(result: object) -> None:
    print_output(result, indent=_config().output.indent)


def _read_source(path: Path) -> str:
    if not path.is_file():
        raise SourceNotFoundError(str(path))
    return path.read_text(encoding="utf-8")


PathArgument = Annotated[Path, typer.Argument(help="File or directory to analyze.")]
FileArgument = Annotated[Path, typer.Argument(help="Source file to analyze.")]


# analyze


@analyze_app.command("routes")
def analyze_routes(path: PathArgument) -> None:
    """Map a pages directory to URL routes."""
    from routeshift.analysis.routes import extract_routes

    try:
        result = extract_routes(path, _config().scanner.exclude_patterns)
    except Exception as e:
        _handle_cli_error(e)
    _emit(result)


@analyze_app.command("components")
def analyze_components(path: PathArgument) -> None:
    """Classify components as client or server."""
    from routeshift.analysis.components import inventory_components

    try:
        result = inventory_components(path, _config().scanner.exclude_patterns)
    except Exception as e:
        _handle_cli_error(e)
    _emit(result)


@analyze_app.command("dependencies")
def analyze_dependencies_command(
    path: Annotated[Path, typer.Argument(help="Path to package.json.")],
) -> None:
    """Classify package.json dependencies."""
    from routeshift.analysis.dependencies import analyze_dependencies
    from routeshift.data import load_known_replacements

    try:
        table = load_known_replacements(_config().data.known_replacements)
        result = analyze_dependencies(path, table)
    except Exception as e:
        _handle_cli_error(e)
    _emit(result)


@analyze_app.command("dead-code")
def analyze_dead_code(path: PathArgument) -> None:
    """Report exports that nothing imports."""
    from routeshift.analysis.dead_code import detect_dead_exports

    try:
        result = detect_dead_exports(path, _config().scanner.exclude_patterns)
    except Exception as e:
        _handle_cli_error(e)
    _emit(result)


@analyze_app.command("props")
def analyze_props(path: FileArgument) -> None:
    """Extract the props of exported components in a file."""
    from routeshift.analysis.props import extract_props

    try:
        result = extract_props(_read_source(path), str(path))
    except Exception as e:
        _handle_cli_error(e)
    _emit(result)


@analyze_app.command("config")
def analyze_config_command(
    path: Annotated[Path, typer.Argument(help="Path to next.config.js.")],
) -> None:
    """Flag next.config settings that change under the App Router."""
    from routeshift.transforms.next_config import analyze_config

    try:
        result = analyze_config(path)
    except Exception as e:
        _handle_cli_error(e)
    _emit(result)


# transform


@transform_app.command("imports")
def transform_imports_command(
    path: FileArgument,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Report changes without rewriting anything.",
        ),
    ] = False,
    write: Annotated[
        bool,
        typer.Option(
            "--write",
            "-w",
            help="Write the rewritten code back to the file.",
        ),
    ] = False,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: json or diff.",
        ),
    ] = "json",
) -> None:
    """Rewrite next/* imports for the App Router."""
    from routeshift.data import load_transform_rules
    from routeshift.transforms.imports import transform_imports

    if output_format not in ("json", "diff"):
        stderr_console.print(f"[red]Unknown format: {output_format}[/red]")
        raise typer.Exit(code=1)

    try:
        original = _read_source(path)
        rules = load_transform_rules(_config().data.transform_rules)
        result = transform_imports(original, str(path), dry_run=dry_run, rules=rules)

        if write and not dry_run and result.code != original:
            path.write_text(result.code, encoding="utf-8")
            logger.info("Wrote %s", path)
    except Exception as e:
        _handle_cli_error(e)

    if output_format == "diff":
        print_output(format_diff(original, result.code, path.name), fmt="diff")
    else:
        _emit(result)


@transform_app.command("data-fetching")
def transform_data_fetching(path: FileArgument) -> None:
    """Suggest replacements for getStaticProps and friends."""
    from routeshift.transforms.data_fetching import analyze_data_fetching

    try:
        result = analyze_data_fetching(_read_source(path), str(path))
    except Exception as e:
        _handle_cli_error(e)
    _emit(result)


@transform_app.command("router")
def transform_router(path: FileArgument) -> None:
    """Locate next/router API usage that changes."""
    from routeshift.transforms.router import analyze_router_usage

    try:
        result = analyze_router_usage(_read_source(path), str(path))
    except Exception as e:
        _handle_cli_error(e)
    _emit(result)


@transform_app.command("image")
def transform_image(path: FileArgument) -> None:
    """Report next/image and next/legacy/image imports."""
    from routeshift.transforms.image import analyze_image_usage

    try:
        result = analyze_image_usage(_read_source(path), str(path))
    except Exception as e:
        _handle_cli_error(e)
    _emit(result)


# validate


@app.command()
def validate(
    path: Annotated[Path, typer.Argument(help="Migrated app directory.")],
) -> None:
    """Check a migrated app directory; exits 1 if any error is found."""
    from routeshift.analysis.validator import validate_migration

    try:
        result = validate_migration(path, _config().scanner.exclude_patterns)
    except Exception as e:
        _handle_cli_error(e)

    _emit(result)
    if not result.summary.passed:
        raise typer.Exit(code=1)


# state

RootOption = Annotated[
    Path,
    typer.Option(
        "--root",
        "-r",
        help="Project root holding the .migration directory.",
    ),
]


@state_app.command("init")
def state_init(root: RootOption = Path()) -> None:
    """Start tracking migration phases."""
    from routeshift.state.progress import ProgressTracker

    try:
        state = ProgressTracker(root).init()
    except Exception as e:
        _handle_cli_error(e)
    _emit(state.to_dict())


@state_app.command("show")
def state_show(root: RootOption = Path()) -> None:
    """Print the migration state."""
    from routeshift.state.progress import ProgressTracker

    try:
        state = ProgressTracker(root).read()
    except Exception as e:
        _handle_cli_error(e)
    _emit(state.to_dict() if state else None)


@state_app.command("update")
def state_update(
    phase: Annotated[str, typer.Argument(help="Phase name.")],
    status: Annotated[
        str,
        typer.Argument(help="New status: pending, in-progress, completed or failed."),
    ],
    root: RootOption = Path(),
) -> None:
    """Set the status of a phase."""
    from routeshift.state.progress import PhaseStatus, ProgressTracker

    allowed = [s.value for s in PhaseStatus]
    if status not in allowed:
        stderr_console.print(f"[red]Invalid status: {status}[/red]")
        stderr_console.print(f"Valid statuses: {', '.join(allowed)}")
        raise typer.Exit(code=1)

    try:
        state = ProgressTracker(root).update_phase(phase, status)
    except Exception as e:
        _handle_cli_error(e)
    _emit(state.to_dict())


@state_app.command("resume")
def state_resume(root: RootOption = Path()) -> None:
    """Print the first phase that is not completed."""
    from routeshift.state.progress import ProgressTracker

    try:
        phase = ProgressTracker(root).resume_point()
    except Exception as e:
        _handle_cli_error(e)
    _emit({"resumePoint": phase})


@state_app.command("errors")
def state_errors(
    root: RootOption = Path(),
    unresolved: Annotated[
        bool,
        typer.Option("--unresolved", help="Only show unresolved entries."),
    ] = False,
) -> None:
    """Print the error log."""
    from routeshift.state.error_log import ErrorLog

    try:
        entries = ErrorLog(root).read()
    except Exception as e:
        _handle_cli_error(e)

    if unresolved:
        entries = [e for e in entries if not e.resolved]
    _emit({"errors": [e.to_dict() for e in entries]})


@state_app.command("log-error")
def state_log_error(
    phase: Annotated[str, typer.Argument(help="Phase the problem occurred in.")],
    message: Annotated[str, typer.Argument(help="What went wrong.")],
    severity: Annotated[
        str,
        typer.Option("--severity", "-s", help="error, warning or info."),
    ] = "error",
    file: Annotated[
        Optional[str],
        typer.Option("--file", help="File the problem relates to."),
    ] = None,
    root: RootOption = Path(),
) -> None:
    """Append an entry to the error log."""
    from routeshift.core.models import Severity
    from routeshift.state.error_log import ErrorLog

    allowed = [s.value for s in Severity]
    if severity not in allowed:
        stderr_console.print(f"[red]Invalid severity: {severity}[/red]")
        stderr_console.print(f"Valid severities: {', '.join(allowed)}")
        raise typer.Exit(code=1)

    try:
        entry = ErrorLog(root).log(phase, message, severity, file=file)
    except Exception as e:
        _handle_cli_error(e)
    _emit(entry.to_dict())


@state_app.command("resolve")
def state_resolve(
    error_id: Annotated[str, typer.Argument(help="Id of the entry to resolve.")],
    root: RootOption = Path(),
) -> None:
    """Mark an error log entry as resolved."""
    from routeshift.state.error_log import ErrorLog

    try:
        resolved = ErrorLog(root).resolve(error_id)
    except Exception as e:
        _handle_cli_error(e)

    if not resolved:
        stderr_console.print(f"[yellow]No error with id {error_id}[/yellow]")
    _emit({"id": error_id, "resolved": resolved})


# scaffold

OutputOption = Annotated[
    Optional[Path],
    typer.Option(
        "--output",
        "-o",
        help="Write to this file instead of stdout.",
    ),
]


def _write_scaffold(content: str, output: Optional[Path]) -> None:
    if output is None:
        print_output(content, fmt="text")
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    stderr_console.print(f"[green]Created {output}[/green]")


@scaffold_app.command("layout")
def scaffold_layout(
    name: Annotated[str, typer.Argument(help="Component name prefix, e.g. Dashboard.")],
    root: Annotated[bool, typer.Option("--root", help="Render the root layout.")] = False,
    title: Annotated[Optional[str], typer.Option("--title", help="Metadata title.")] = None,
    description: Annotated[
        str, typer.Option("--description", help="Metadata description.")
    ] = "",
    output: OutputOption = None,
) -> None:
    """Generate a layout.tsx."""
    from routeshift.templates import render_layout

    metadata = {"title": title, "description": description} if title else None
    _write_scaffold(render_layout(name, is_root=root, metadata=metadata), output)


@scaffold_app.command("page")
def scaffold_page(
    name: Annotated[str, typer.Argument(help="Component name prefix, e.g. Home.")],
    client: Annotated[bool, typer.Option("--client", help="Add 'use client'.")] = False,
    is_async: Annotated[bool, typer.Option("--async", help="Make the page async.")] = False,
    fetch_url: Annotated[
        Optional[str],
        typer.Option("--fetch", help="Fetch this URL in the page body."),
    ] = None,
    output: OutputOption = None,
) -> None:
    """Generate a page.tsx."""
    from routeshift.templates import render_page

    content = render_page(
        name,
        is_client=client,
        is_async=is_async,
        fetch_data=fetch_url is not None,
        fetch_url=fetch_url or "",
    )
    _write_scaffold(content, output)


@scaffold_app.command("route")
def scaffold_route(
    methods: Annotated[
        list[str],
        typer.Option("--method", "-m", help="HTTP method to handle (repeatable)."),
    ] = ["GET"],
    output: OutputOption = None,
) -> None:
    """Generate a route.ts handler."""
    from routeshift.templates import render_route

    _write_scaffold(render_route(methods), output)


@scaffold_app.command("loading")
def scaffold_loading(
    name: Annotated[str, typer.Argument(help="Component name prefix.")],
    output: OutputOption = None,
) -> None:
    """Generate a loading.tsx."""
    from routeshift.templates import render_loading

    _write_scaffold(render_loading(name), output)


@scaffold_app.command("error")
def scaffold_error(
    name: Annotated[str, typer.Argument(help="Component name prefix.")],
    output: OutputOption = None,
) -> None:
    """Generate an error.tsx."""
    from routeshift.templates import render_error

    _write_scaffold(render_error(name), output)


# config


@config_app.command("init")
def config_init(
    path: Annotated[
        Path,
        typer.Argument(
            help="Directory to create configuration file in.",
        ),
    ] = Path(),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing configuration file.",
        ),
    ] = False,
) -> None:
    """Initialize a new configuration file."""
    config_path = path / ".routeshift.yml"

    if config_path.exists() and not force:
        stderr_console.print(f"[yellow]Configuration file already exists: {config_path}[/yellow]")
        stderr_console.print("Use --force to overwrite.")
        raise typer.Exit(code=1)

    config_path.write_text(generate_example_config(), encoding="utf-8")
    console.print(f"[green]Created configuration file: {config_path}[/green]")


def _setting_rows(values: dict, section: str = "") -> Iterator[tuple[str, str]]:
    """Yield dotted setting names with display values."""
    for name, value in values.items():
        dotted = f"{section}.{name}" if section else name
        if isinstance(value, dict):
            yield from _setting_rows(value, dotted)
        elif isinstance(value, list):
            yield dotted, ", ".join(map(str, value)) if value else "(empty)"
        elif value is None:
            yield dotted, "(default)"
        else:
            yield dotted, str(value)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration."""
    settings = _config()

    table = Table(title="Routeshift Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for setting, value in _setting_rows(settings.model_dump(mode="json")):
        table.add_row(setting, value)

    console.print(table)


if __name__ == "__main__":
    app()
