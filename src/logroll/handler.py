"""logging.Handler that writes through a RollingFile."""

from __future__ import annotations

import logging
import os

from logroll.policy import Clock, TimeBucketPolicy
from logroll.rolling import RollingFile


class TimedRollingFileHandler(logging.StreamHandler):
    """Write records to a file that rolls when the time bucket changes.

    The handler shares the rolling core's RLock, so the roll check, the
    stream switch, the write and the size update happen as one unit for
    concurrent emitters. Roll and I/O failures are routed to handleError()
    like any other handler failure.

    Example::

        handler = TimedRollingFileHandler("logs/app.log", "%Y-%m-%d", max_rolls=7)
        logging.getLogger().addHandler(handler)
    """

    def __init__(
        self,
        filename: str | os.PathLike,
        pattern: str = "%Y-%m-%d",
        max_rolls: int = 0,
        encoding: str = "utf-8",
        clock: Clock | None = None,
    ) -> None:
        policy = TimeBucketPolicy(os.path.basename(os.fspath(filename)), pattern, clock=clock)
        self._init_rolling(RollingFile(filename, policy, max_rolls=max_rolls, encoding=encoding))

    @classmethod
    def from_rolling_file(cls, rolling: RollingFile) -> TimedRollingFileHandler:
        """Build a handler around an existing core (any policy)."""
        handler = cls.__new__(cls)
        handler._init_rolling(rolling)
        return handler

    def _init_rolling(self, rolling: RollingFile) -> None:
        self._rolling = rolling
        super().__init__(stream=None)
        # StreamHandler defaults to stderr; nothing is open until first emit.
        self.stream = None
        self.setLevel(logging.NOTSET)
        # Records routed to handleError() instead of reaching the file.
        self.failed_emits = 0

    @property
    def rolling(self) -> RollingFile:
        return self._rolling

    def createLock(self) -> None:
        self.lock = self._rolling.lock

    def emit(self, record: logging.LogRecord) -> None:
        try:
            with self._rolling.lock:
                opened = self._rolling.ensure_ready_for_write()
                if opened or self.stream is not self._rolling.stream:
                    self.stream = self._rolling.stream
                msg = self.format(record) + self.terminator
                self.stream.write(msg)
                self.stream.flush()
                self._rolling.record_written(len(msg.encode(self._rolling.encoding)))
        except RecursionError:
            raise
        except Exception:
            self.failed_emits += 1
            self.handleError(record)

    def flush(self) -> None:
        self._rolling.flush()

    def close(self) -> None:
        with self._rolling.lock:
            try:
                self._rolling.close()
            finally:
                self.stream = None
                super().close()
