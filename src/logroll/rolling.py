"""Rotation core: owns the active file and performs rolls.

On-disk layout::

    <dir>/<name>              active file
    <dir>/<name>.<suffix>     history, suffix chosen by the policy

No index is persisted. History is rebuilt from the directory listing on every
roll, filtered through the policy so unrelated files are never touched.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from logroll.errors import CloseError, DeleteError, OpenError, RenameError
from logroll.fsutils import list_dir_files, try_remove_file
from logroll.policy import RotationPolicy

logger = logging.getLogger(__name__)

HISTORY_DELIMITER = "."


@dataclass
class RollResult:
    """Outcome of one roll. Delete failures are reported here, not raised."""

    history_name: str
    renamed: bool = True
    deleted: list[str] = field(default_factory=list)
    warnings: list[DeleteError] = field(default_factory=list)


class RollingFile:
    """Active log file plus its roll history, guarded by a single RLock."""

    def __init__(
        self,
        file_path: str | os.PathLike,
        policy: RotationPolicy,
        max_rolls: int = 0,
        encoding: str = "utf-8",
    ) -> None:
        dir_path, file_name = os.path.split(os.fspath(file_path))
        if not file_name:
            raise ValueError(f"log file path {file_path!r} has no file name")
        self.dir_path = dir_path or "."
        self.file_name = file_name
        self.policy = policy
        self.max_rolls = max_rolls
        self.encoding = encoding
        self.lock = threading.RLock()
        self.stream: TextIO | None = None
        self.size = 0
        self.current_name: str | None = None
        # (source path, history name) of a rename that failed mid-roll.
        self.pending_rename: tuple[str, str] | None = None
        self.last_roll: RollResult | None = None

    @property
    def active_path(self) -> str:
        return os.path.join(self.dir_path, self.current_name or self.policy.current_file_name())

    def _history_prefix(self) -> str:
        return self.file_name + HISTORY_DELIMITER

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def ensure_ready_for_write(self) -> bool:
        """Roll if the policy asks for it, then make sure a file is open.

        Returns True when a new stream was opened by this call.
        """
        with self.lock:
            if self.pending_rename is not None:
                self._retry_pending_rename()
            if self.policy.needs_to_roll():
                self.roll()
            if self.stream is None:
                self._open()
                return True
            return False

    def record_written(self, nbytes: int) -> None:
        with self.lock:
            self.size += nbytes

    def flush(self) -> None:
        with self.lock:
            if self.stream is not None:
                self.stream.flush()

    def close(self) -> None:
        """Close the active file. Safe to call more than once."""
        with self.lock:
            self._close_stream()

    def _open(self) -> None:
        name = self.policy.current_file_name()
        path = os.path.join(self.dir_path, name)
        try:
            Path(self.dir_path).mkdir(parents=True, exist_ok=True)
            # Append mode: resumes an existing file without truncating it.
            stream = open(path, "a", encoding=self.encoding)
        except OSError as exc:
            raise OpenError(f"cannot open log file {path}: {exc}", path) from exc
        try:
            self.size = os.fstat(stream.fileno()).st_size
        except OSError as exc:
            stream.close()
            raise OpenError(f"cannot stat log file {path}: {exc}", path) from exc
        self.current_name = name
        self.stream = stream
        logger.debug("opened %s (%d bytes)", path, self.size)

    def _close_stream(self) -> None:
        stream, self.stream = self.stream, None
        if stream is None:
            return
        try:
            stream.close()
        except OSError as exc:
            raise CloseError(f"cannot close log file {self.active_path}: {exc}", self.active_path) from exc

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def history(self) -> list[str]:
        """History file names found on disk, oldest first."""
        prefix = self._history_prefix()
        with self.lock:
            names = list_dir_files(self.dir_path, lambda name: name.startswith(prefix))
            suffixes = [
                name[len(prefix):]
                for name in names
                if self.policy.is_history_name_valid(name[len(prefix):])
            ]
            return [prefix + suffix for suffix in self.policy.sort_ascending(suffixes)]

    def roll(self) -> RollResult:
        """Close the active file, rename it into history and prune."""
        with self.lock:
            self._close_stream()
            src = self.active_path

            if not os.path.exists(src):
                # Nothing was ever written; just move the policy forward.
                history_name = self._history_prefix() + self.policy.next_history_suffix([])
                logger.info("nothing to roll, %s does not exist", src)
                self.last_roll = RollResult(history_name=history_name, renamed=False)
                return self.last_roll

            history = self.history()
            history_name = self._history_prefix() + self.policy.next_history_suffix(history)
            dst = os.path.join(self.dir_path, history_name)
            try:
                if os.path.exists(dst):
                    raise FileExistsError(f"history file {dst} already exists")
                os.rename(src, dst)
            except OSError as exc:
                self.pending_rename = (src, history_name)
                raise RenameError(f"cannot rename {src} to {history_name}: {exc}", src) from exc

            logger.info("rolled %s -> %s", src, history_name)
            self.last_roll = self._complete_roll(history, history_name)
            return self.last_roll

    def _retry_pending_rename(self) -> None:
        src, history_name = self.pending_rename
        self.pending_rename = None
        dst = os.path.join(self.dir_path, history_name)
        try:
            if os.path.exists(dst):
                raise FileExistsError(f"history file {dst} already exists")
            os.rename(src, dst)
        except OSError as exc:
            logger.warning(
                "retried rename %s -> %s failed, appending to %s instead: %s",
                src, history_name, src, exc,
            )
            return
        logger.info("rolled %s -> %s on retry", src, history_name)
        self.last_roll = self._complete_roll(self.history(), history_name)

    def _complete_roll(self, history: list[str], history_name: str) -> RollResult:
        if history_name not in history:
            history.append(history_name)
        deleted, warnings = self.prune(history)
        return RollResult(history_name=history_name, deleted=deleted, warnings=warnings)

    def prune(self, history: list[str]) -> tuple[list[str], list[DeleteError]]:
        """Delete the oldest entries of history beyond max_rolls.

        Failures are logged and collected; the remaining entries are still
        attempted.
        """
        deleted: list[str] = []
        warnings: list[DeleteError] = []
        if self.max_rolls <= 0:
            return deleted, warnings
        excess = len(history) - self.max_rolls
        if excess <= 0:
            return deleted, warnings

        with self.lock:
            for name in history[:excess]:
                try:
                    try_remove_file(os.path.join(self.dir_path, name))
                except DeleteError as exc:
                    logger.warning("could not prune %s: %s", name, exc)
                    warnings.append(exc)
                    continue
                deleted.append(name)
        if deleted:
            logger.info("pruned %d history file(s): %s", len(deleted), ", ".join(deleted))
        return deleted, warnings

    def apply_retention(self) -> tuple[list[str], list[DeleteError]]:
        """Prune the on-disk history without rolling."""
        with self.lock:
            return self.prune(self.history())
