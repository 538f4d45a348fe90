"""
Pytest configuration and shared fixtures.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from timeblock.config.manager import ConfigManager
from timeblock.models.event import Event, recompute_derived_fields


class FakeClock:
    """Monotonic clock the tests advance by hand"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def config(tmp_path):
    """Config read from the environment only, with no .env file"""
    return ConfigManager(env_file=str(tmp_path / 'missing.env'))


@pytest.fixture
def created_at():
    return datetime(2026, 4, 1, 9, 0, tzinfo=ZoneInfo('America/Los_Angeles'))


@pytest.fixture
def make_event(created_at):
    """Factory for events on Thursday April 2, 2026"""
    def _make(start_time='7:00 AM', end_time='8:00 AM', event_id='evt-1', day=date(2026, 4, 2), **fields):
        event = Event(
            id=event_id,
            type=fields.pop('type', 'Work'),
            color=fields.pop('color', 'bg-cyan-300'),
            title=fields.pop('title', 'Deep work'),
            date=day,
            start_time=start_time,
            end_time=end_time,
            created_at=created_at,
            updated_at=created_at,
            **fields,
        )
        return recompute_derived_fields(event)
    return _make
