"""Shared fixtures: a controllable clock."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest


class FakeClock:
    """Callable clock whose current time is set by the test."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 9, 30))
