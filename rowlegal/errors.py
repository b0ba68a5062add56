"""Exceptions raised by the legalization pipeline and its collaborators."""


class RowLegalError(Exception):
    """Base class for all rowlegal errors."""


class PreconditionError(RowLegalError, ValueError):
    """A caller broke the contract of a pipeline stage."""


class GridError(PreconditionError):
    """Grid pitch has a zero component."""

    def __init__(self, grid):
        self.grid = grid
        super().__init__(f"grid pitch must be non-zero in x and y, got {grid}")


class EmptyRowError(PreconditionError):
    """An empty row was handed to the row legalizer."""

    def __init__(self):
        super().__init__("cannot legalize an empty row")


class ConfigError(RowLegalError):
    """Configuration or cell file could not be interpreted."""

    def __init__(self, message: str, path=None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
