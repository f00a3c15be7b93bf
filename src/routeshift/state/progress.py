"""Phase tracking for a migration in progress.

The whole state lives in ``.migration/progress.json`` and every update is a
read-modify-write of that file. Concurrent writers are not coordinated; the
last write wins.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from routeshift.errors import StateNotInitializedError, UnknownPhaseError
from routeshift.state import MIGRATION_DIR, utc_timestamp
from routeshift.utils.logging import get_logger

logger = get_logger(__name__)

STATE_VERSION = "1.0.0"

DEFAULT_PHASES = [
    "assessment",
    "planning",
    "dependencies",
    "routes",
    "components",
    "data-layer",
    "validation",
]


class PhaseStatus(str, Enum):
    """Status of one migration phase."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class PhaseState:
    """State of a single phase."""

    name: str
    status: PhaseStatus = PhaseStatus.PENDING
    started_at: str | None = None
    completed_at: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data: dict = {"name": self.name, "status": self.status.value}
        if self.started_at:
            data["startedAt"] = self.started_at
        if self.completed_at:
            data["completedAt"] = self.completed_at
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PhaseState":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            status=PhaseStatus(data.get("status", "pending")),
            started_at=data.get("startedAt"),
            completed_at=data.get("completedAt"),
        )


@dataclass
class MigrationState:
    """Complete progress state for a project."""

    version: str
    started_at: str
    updated_at: str
    phases: list[PhaseState] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "startedAt": self.started_at,
            "updatedAt": self.updated_at,
            "phases": [p.to_dict() for p in self.phases],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MigrationState":
        """Create from dictionary."""
        return cls(
            version=data.get("version", STATE_VERSION),
            started_at=data["startedAt"],
            updated_at=data["updatedAt"],
            phases=[PhaseState.from_dict(p) for p in data.get("phases", [])],
        )

    def get_phase(self, name: str) -> PhaseState | None:
        """Get a phase by name."""
        for phase in self.phases:
            if phase.name == name:
                return phase
        return None


class ProgressTracker:
    """Reads and updates the progress file of one project."""

    STATE_FILE_NAME = "progress.json"
    STATE_DIR = MIGRATION_DIR

    def __init__(self, project_root: str | Path) -> None:
        """Initialize the tracker.

        Args:
            project_root: Root directory of the project being migrated.
        """
        self._project_root = Path(project_root)
        self._state_path = self._project_root / self.STATE_DIR / self.STATE_FILE_NAME

    @property
    def state_file_path(self) -> Path:
        """Get the path to the state file."""
        return self._state_path

    def init(self) -> MigrationState:
        """Write a fresh state with every default phase pending.

        An existing progress file is overwritten.
        """
        now = utc_timestamp()
        state = MigrationState(
            version=STATE_VERSION,
            started_at=now,
            updated_at=now,
            phases=[PhaseState(name=name) for name in DEFAULT_PHASES],
        )
        self._save(state)
        logger.debug("Initialized migration state at %s", self._state_path)
        return state

    def read(self) -> MigrationState | None:
        """Load the state, or None if it was never initialized."""
        if not self._state_path.exists():
            return None

        with open(self._state_path, encoding="utf-8") as f:
            return MigrationState.from_dict(json.load(f))

    def update_phase(self, phase: str, status: PhaseStatus | str) -> MigrationState:
        """Set a phase's status and stamp its timestamps.

        Args:
            phase: Phase name.
            status: New status.

        Returns:
            The updated state.

        Raises:
            StateNotInitializedError: If there is no progress file.
            UnknownPhaseError: If the phase is not tracked.
        """
        status = PhaseStatus(status)
        state = self.read()
        if state is None:
            raise StateNotInitializedError()

        entry = state.get_phase(phase)
        if entry is None:
            raise UnknownPhaseError(phase)

        now = utc_timestamp()
        entry.status = status
        state.updated_at = now

        if status == PhaseStatus.IN_PROGRESS:
            entry.started_at = now
        elif status == PhaseStatus.COMPLETED:
            entry.completed_at = now

        self._save(state)
        return state

    def resume_point(self) -> str | None:
        """Name of the first phase not completed, or None."""
        state = self.read()
        if state is None:
            return None

        for phase in state.phases:
            if phase.status != PhaseStatus.COMPLETED:
                return phase.name
        return None

    def _save(self, state: MigrationState) -> None:
        self._state_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._state_path, "w", encoding="utf-8") as f:
            json.dump(state.to_dict(), f, indent=2)
