"""Shared fixtures for boss-timer-bot tests."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from boss_timer.clock import FrozenClock
from boss_timer.notifier import DeliveryError, Notice
from boss_timer.storage import StateStore

WARSAW = ZoneInfo("Europe/Warsaw")


class RecordingNotifier:
    """Notifier that remembers every (destination, notice) it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, Notice]] = []

    async def send(self, destination: str, notice: Notice) -> None:
        self.sent.append((destination, notice))

    def to(self, destination: str) -> list[Notice]:
        return [n for d, n in self.sent if d == destination]


class FailingNotifier:
    """Notifier whose every send fails, counting the attempts."""

    def __init__(self, exc: Exception | None = None) -> None:
        self.attempts = 0
        self.exc = exc or DeliveryError("channel #nowhere not found")

    async def send(self, destination: str, notice: Notice) -> None:
        self.attempts += 1
        raise self.exc


@pytest.fixture()
def tz() -> ZoneInfo:
    return WARSAW


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 5, 10, 12, 0, tzinfo=WARSAW))


@pytest.fixture()
def store(tmp_path) -> StateStore:
    s = StateStore(tmp_path / "data.json")
    s.load()
    return s


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def failing_notifier() -> FailingNotifier:
    return FailingNotifier()
