"""Append-only log of problems hit during a migration."""

import json
import uuid
from dataclasses import dataclass
from pathlib import Path

from routeshift.core.models import Severity
from routeshift.state import MIGRATION_DIR, utc_timestamp


@dataclass
class MigrationErrorEntry:
    """One logged problem."""

    id: str
    phase: str
    message: str
    severity: Severity
    timestamp: str
    resolved: bool = False
    file: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data: dict = {
            "id": self.id,
            "phase": self.phase,
            "message": self.message,
            "severity": self.severity.value,
            "timestamp": self.timestamp,
            "resolved": self.resolved,
        }
        if self.file is not None:
            data["file"] = self.file
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "MigrationErrorEntry":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            phase=data["phase"],
            message=data["message"],
            severity=Severity(data.get("severity", "error")),
            timestamp=data.get("timestamp", ""),
            resolved=data.get("resolved", False),
            file=data.get("file"),
        )


class ErrorLog:
    """Handle over ``.migration/errors.json`` of one project."""

    LOG_FILE_NAME = "errors.json"

    def __init__(self, project_root: str | Path) -> None:
        self._log_path = Path(project_root) / MIGRATION_DIR / self.LOG_FILE_NAME

    @property
    def log_file_path(self) -> Path:
        return self._log_path

    def read(self) -> list[MigrationErrorEntry]:
        """Return all entries, or an empty list if nothing was logged yet."""
        if not self._log_path.exists():
            return []

        with open(self._log_path, encoding="utf-8") as f:
            data = json.load(f)
        return [MigrationErrorEntry.from_dict(e) for e in data.get("errors", [])]

    def log(
        self,
        phase: str,
        message: str,
        severity: Severity | str = Severity.ERROR,
        file: str | None = None,
    ) -> MigrationErrorEntry:
        """Append an entry with a fresh id and timestamp.

        Returns:
            The appended entry.
        """
        entry = MigrationErrorEntry(
            id=str(uuid.uuid4()),
            phase=phase,
            message=message,
            severity=Severity(severity),
            timestamp=utc_timestamp(),
            file=file,
        )
        entries = self.read()
        entries.append(entry)
        self._save(entries)
        return entry

    def resolve(self, error_id: str) -> bool:
        """Mark an entry resolved.

        Unknown ids and a missing log are ignored.

        Returns:
            True if an entry was updated.
        """
        entries = self.read()
        for entry in entries:
            if entry.id == error_id:
                entry.resolved = True
                self._save(entries)
                return True
        return False

    def _save(self, entries: list[MigrationErrorEntry]) -> None:
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._log_path, "w", encoding="utf-8") as f:
            json.dump({"errors": [e.to_dict() for e in entries]}, f, indent=2)
