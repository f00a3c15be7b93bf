"""Packaged lookup tables for dependency and import migration."""

import json
from pathlib import Path
from types import MappingProxyType
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from routeshift.errors import DataTableError
from routeshift.utils.logging import get_logger

logger = get_logger(__name__)

DATA_DIR = Path(__file__).parent

KNOWN_REPLACEMENTS_FILE = "known_replacements.json"
TRANSFORM_RULES_FILE = "transform_rules.json"


class ReplacementEntry(BaseModel):
    """Suggested replacement for a package that does not carry over."""

    model_config = ConfigDict(frozen=True)

    replacement: str | None = None
    note: str = ""


class ImportRule(BaseModel):
    """How to rewrite imports of one module specifier."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    replacement: str | None = None
    action: Literal["remove"] | None = None
    named_exports: dict[str, str] | None = Field(default=None, alias="namedExports")
    note: str | None = None


def _read_table(path: Path) -> dict:
    """Read a JSON table, wrapping every failure in DataTableError."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DataTableError(str(path), e) from e

    if not isinstance(data, dict):
        raise DataTableError(str(path), message=f"Data table {path} must be a JSON object")

    logger.debug("Loaded data table %s", path)
    return data


def load_known_replacements(path: Path | str | None = None) -> Mapping[str, ReplacementEntry]:
    """Load the package name to replacement table.

    Args:
        path: Table to load. Defaults to the packaged table.

    Returns:
        Read-only mapping of package name to replacement entry.

    Raises:
        DataTableError: If the table is missing or malformed.
    """
    path = Path(path) if path else DATA_DIR / KNOWN_REPLACEMENTS_FILE
    data = _read_table(path)

    try:
        table = {name: ReplacementEntry.model_validate(entry) for name, entry in data.items()}
    except ValidationError as e:
        raise DataTableError(str(path), e) from e

    return MappingProxyType(table)


def load_transform_rules(path: Path | str | None = None) -> Mapping[str, ImportRule]:
    """Load the import specifier rewrite rules.

    The file holds ``{"imports": {specifier: rule}}``.

    Args:
        path: Rules file to load. Defaults to the packaged rules.

    Returns:
        Read-only mapping of module specifier to rule.

    Raises:
        DataTableError: If the rules are missing or malformed.
    """
    path = Path(path) if path else DATA_DIR / TRANSFORM_RULES_FILE
    data = _read_table(path)

    imports = data.get("imports")
    if not isinstance(imports, dict):
        raise DataTableError(str(path), message=f"Data table {path} has no 'imports' object")

    try:
        rules = {spec: ImportRule.model_validate(rule) for spec, rule in imports.items()}
    except ValidationError as e:
        raise DataTableError(str(path), e) from e

    return MappingProxyType(rules)
