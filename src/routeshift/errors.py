"""Custom exceptions for routeshift with user-friendly error messages."""


class RouteshiftError(Exception):
    """Base exception with user-friendly message and optional hint.

    Attributes:
        message: The main error message.
        hint: Optional hint for resolving the error.
    """

    def __init__(self, message: str, hint: str = "") -> None:
        """Initialize the exception.

        Args:
            message: The main error message.
            hint: Optional hint for resolving the error.
        """
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation."""
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class NotFoundError(RouteshiftError):
    """Resource not found."""

    pass


class SourceNotFoundError(NotFoundError, FileNotFoundError):
    """A source file or directory given for analysis does not exist."""

    def __init__(
        self,
        path: str = "",
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Path not found: {path}" if path else "Path not found"
        if not hint:
            hint = "Check the path argument; it is resolved relative to the current directory."
        self.path = path
        super().__init__(message, hint)


class ParseError(RouteshiftError):
    """Failed to parse a source file or data file."""

    pass


class SourceParseError(ParseError):
    """The syntax tree for a source file contains errors."""

    def __init__(
        self,
        filename: str = "",
        line: int | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            location = filename or "<source>"
            if line:
                location = f"{location}:{line}"
            message = f"Failed to parse {location}"
        if not hint:
            hint = "Fix the syntax error or exclude the file from analysis."
        self.filename = filename
        self.line = line
        super().__init__(message, hint)


class DataTableError(ParseError):
    """A packaged or user-supplied data table could not be loaded."""

    def __init__(
        self,
        table: str,
        original_error: Exception | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Failed to load data table {table}"
            if original_error:
                message += f": {original_error}"
        if not hint:
            hint = "Check the table path in .routeshift.yml or reinstall routeshift."
        super().__init__(message, hint)


class StateError(RouteshiftError):
    """Error reading or updating persisted migration state."""

    pass


class StateNotInitializedError(StateError):
    """Migration state file does not exist yet."""

    def __init__(
        self,
        message: str = "Migration state not initialized",
        hint: str = "Run 'routeshift state init' in the project root first.",
    ) -> None:
        super().__init__(message, hint)


class UnknownPhaseError(StateError):
    """Phase name is not part of the migration state."""

    def __init__(
        self,
        phase: str,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Unknown phase: {phase}"
        if not hint:
            hint = "Run 'routeshift state show' to list the known phases."
        self.phase = phase
        super().__init__(message, hint)


class ConfigurationError(RouteshiftError):
    """Invalid configuration."""

    pass
