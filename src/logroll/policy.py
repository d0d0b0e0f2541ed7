"""Rotation policies: when to roll and how history files are named.

A policy is a strategy object owned by a RollingFile. It never holds a
reference back to the core; everything it needs (the clock, the current
history) is handed to it. The core calls every method while holding its
lock, so implementations need no locking of their own.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable

from logroll.utils import has_time_directive, translate_layout

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_YEAR_RE = re.compile(r"%[Yy]")

# Dates every accepted pattern must round-trip, besides the clock's own now.
_SAMPLE_TIMES = (
    datetime(2000, 2, 29, 23, 59, 59),
    datetime(2001, 7, 18, 13, 5, 9),
    datetime(2003, 12, 31, 0, 0, 0),
)


class RotationPolicy(ABC):
    """Capability set every rotation policy provides to the core."""

    @abstractmethod
    def needs_to_roll(self) -> bool:
        """Return True if the active file must be rolled before the next write."""

    @abstractmethod
    def is_history_name_valid(self, suffix: str) -> bool:
        """Return True if suffix (base name and delimiter stripped) was produced by this policy."""

    @abstractmethod
    def sort_ascending(self, suffixes: list[str]) -> list[str]:
        """Order valid suffixes oldest first."""

    @abstractmethod
    def next_history_suffix(self, history: list[str]) -> str:
        """Suffix the active file is renamed to when rolling now.

        history is the sorted list of existing history file names, for
        policies that keep a running index.
        """

    @abstractmethod
    def current_file_name(self) -> str:
        """Base name of the active file opened after a roll."""


class TimeBucketPolicy(RotationPolicy):
    """Roll whenever the clock, rendered with pattern, changes value.

    Patterns whose labels cannot be parsed back (``%W`` without a weekday,
    for instance) are rejected up front; history files they produced would
    otherwise never be recognised or pruned.

    The first needs_to_roll() call only captures the current bucket, so a
    freshly started process keeps appending to the existing file even if it
    was started right after a bucket boundary.
    """

    def __init__(self, file_name: str, pattern: str, clock: Clock | None = None) -> None:
        pattern = translate_layout(pattern)
        if not has_time_directive(pattern):
            raise ValueError(f"time pattern {pattern!r} has no date/time directive")
        self.file_name = file_name
        self.pattern = pattern
        self._clock = clock or datetime.now
        self._current_label: str | None = None
        # Without a year, parse against a leap year so "02-29" stays valid.
        self._yearless = not _YEAR_RE.search(pattern)
        for sample in (self._clock(), *_SAMPLE_TIMES):
            label = sample.strftime(pattern)
            if not self.is_history_name_valid(label):
                raise ValueError(
                    f"time pattern {pattern!r} renders {label!r}, which does not parse back"
                )

    @property
    def current_label(self) -> str | None:
        return self._current_label

    def _now_label(self) -> str:
        return self._clock().strftime(self.pattern)

    def needs_to_roll(self) -> bool:
        label = self._now_label()
        if self._current_label is None:
            self._current_label = label
            return False
        return label != self._current_label

    def _parse(self, suffix: str) -> datetime:
        if self._yearless:
            return datetime.strptime("2000|" + suffix, "%Y|" + self.pattern)
        return datetime.strptime(suffix, self.pattern)

    def is_history_name_valid(self, suffix: str) -> bool:
        if not suffix:
            return False
        try:
            parsed = self._parse(suffix)
        except ValueError:
            return False
        # strptime is lenient about padding; only canonical renders count.
        return parsed.strftime(self.pattern) == suffix

    def sort_ascending(self, suffixes: list[str]) -> list[str]:
        return sorted(suffixes, key=self._parse)

    def next_history_suffix(self, history: list[str]) -> str:
        previous = self._current_label
        self._current_label = self._now_label()
        if previous is None:
            # Rolled before any bucket was captured; name it after now.
            previous = self._current_label
        logger.debug("bucket %s -> %s", previous, self._current_label)
        return previous

    def current_file_name(self) -> str:
        return self.file_name
