"""Exception types raised by the rule engine and the level storage boundary."""


class OutOfBoundsError(IndexError):
    """A grid operation addressed a cell that does not exist."""

    def __init__(self, row: int, col: int):
        super().__init__(f"No cell at row={row}, col={col}")
        self.row = row
        self.col = col


class SessionOverError(RuntimeError):
    """An engine operation was requested after the session reached game over."""


class DecodeError(ValueError):
    """Persisted level data could not be turned back into grid state."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class MissingValueError(DecodeError):
    """A required value is absent from the persisted data."""


class InvalidValueError(DecodeError):
    """A value is present but is not acceptable."""


class LoadError(Exception):
    """A level could not be read from storage."""


class LevelNotFoundError(LoadError):
    """No saved level exists under the requested name."""
