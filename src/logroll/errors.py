"""Exception taxonomy for rotation failures."""

from __future__ import annotations


class RotationError(Exception):
    """Base class for every filesystem failure raised by logroll."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class DirectoryAccessError(RotationError):
    """The log directory cannot be opened or listed."""


class PathResolutionError(RotationError):
    """An absolute path could not be derived for the log directory."""


class OpenError(RotationError):
    """The active log file could not be created or opened."""


class CloseError(RotationError):
    """The active log file could not be closed."""


class RenameError(RotationError):
    """The active log file could not be renamed into history."""


class DeleteError(RotationError):
    """A history file could not be removed while pruning."""
