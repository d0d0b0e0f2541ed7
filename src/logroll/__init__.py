"""logroll - time-bucketed rolling log files for the logging module."""

from __future__ import annotations

__version__ = "0.1.0"

from logroll.errors import (
    CloseError,
    DeleteError,
    DirectoryAccessError,
    OpenError,
    PathResolutionError,
    RenameError,
    RotationError,
)
from logroll.handler import TimedRollingFileHandler
from logroll.policy import RotationPolicy, TimeBucketPolicy
from logroll.rolling import RollingFile, RollResult

__all__ = [
    "CloseError",
    "DeleteError",
    "DirectoryAccessError",
    "OpenError",
    "PathResolutionError",
    "RenameError",
    "RollResult",
    "RollingFile",
    "RotationError",
    "RotationPolicy",
    "TimeBucketPolicy",
    "TimedRollingFileHandler",
    "__version__",
]
