"""Persisted migration progress and error log."""

from datetime import datetime, timezone

MIGRATION_DIR = ".migration"


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO 8601 string with a Z suffix."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
