"""Boss timers, event series and the persisted document that holds them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

log = logging.getLogger(__name__)

TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
DURATION_RE = re.compile(r"^\+(?:(\d+)h)?(?:(\d+)m)?$", re.IGNORECASE)


def normalize_time(raw: str | None) -> str | None:
    """Return ``HH:MM`` for a 24-hour clock time, accepting ``;`` as separator."""
    if not raw:
        return None
    text = raw.strip().replace(";", ":")
    if not TIME_RE.match(text):
        return None
    return text


def parse_clock_time(raw: str | None) -> tuple[int, int] | None:
    """``"18:43"`` -> ``(18, 43)``; None for anything malformed."""
    normalized = normalize_time(raw)
    if normalized is None:
        return None
    hour, minute = normalized.split(":")
    return int(hour), int(minute)


def parse_duration(raw: str | None) -> timedelta | None:
    """Parse ``+Xh``, ``+Xm`` or ``+XhYm``. Zero-length durations are rejected."""
    if not raw:
        return None
    match = DURATION_RE.match(raw.strip())
    if not match:
        return None
    try:
        delta = timedelta(
            hours=int(match.group(1) or 0), minutes=int(match.group(2) or 0)
        )
    except (OverflowError, ValueError):
        return None  # out of range for timedelta, or too many digits for int()
    if delta <= timedelta(0):
        return None
    return delta


@dataclass(frozen=True, slots=True)
class BossTimer:
    name: str
    map: str
    respawn_at: datetime  # tz-aware
    added_by: str

    def matches(self, name: str, map_name: str | None = None) -> bool:
        """Case-insensitive identity check on name, and map when given."""
        if self.name.lower() != name.lower():
            return False
        return map_name is None or self.map.lower() == map_name.lower()

    def is_due(self, now: datetime) -> bool:
        return self.respawn_at <= now

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "map": self.map,
            "respawn": self.respawn_at.isoformat(),
            "addedBy": self.added_by,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BossTimer:
        respawn = datetime.fromisoformat(str(data["respawn"]))
        if respawn.tzinfo is None:
            respawn = respawn.replace(tzinfo=timezone.utc)
        return cls(
            name=str(data["name"]),
            map=str(data["map"]),
            respawn_at=respawn,
            added_by=str(data.get("addedBy", "")),
        )


@dataclass(slots=True)
class PersistentState:
    """The whole ``data.json`` document.

    ``events`` maps a series name to its trigger times in insertion order.
    """

    bosses: list[BossTimer] = field(default_factory=list)
    events: dict[str, list[str]] = field(default_factory=dict)

    def active_bosses(self, now: datetime) -> list[BossTimer]:
        return [b for b in self.bosses if not b.is_due(now)]

    def add_event_time(self, name: str, time_str: str) -> bool:
        """Returns False when the series already has that time."""
        times = self.events.setdefault(name, [])
        if time_str in times:
            return False
        times.append(time_str)
        return True

    def remove_event_time(self, name: str, time_str: str) -> bool:
        """Drop one time; the series goes away with its last time."""
        times = self.events.get(name)
        if times is None or time_str not in times:
            return False
        remaining = [t for t in times if t != time_str]
        if remaining:
            self.events[name] = remaining
        else:
            del self.events[name]
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "bosses": [b.to_dict() for b in self.bosses],
            "events": {name: list(times) for name, times in self.events.items()},
        }

    @classmethod
    def from_dict(cls, data: Any) -> PersistentState:
        """Skips malformed entries; raises ValueError only for a non-object document."""
        if not isinstance(data, dict):
            raise ValueError("document root is not an object")

        bosses: list[BossTimer] = []
        raw_bosses = data.get("bosses") or []
        if not isinstance(raw_bosses, list):
            log.warning("Ignoring malformed bosses section: %.200r", raw_bosses)
            raw_bosses = []
        for raw in raw_bosses:
            try:
                bosses.append(BossTimer.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                log.warning("Skipping malformed boss entry: %.200r", raw)

        events: dict[str, list[str]] = {}
        raw_events = data.get("events") or {}
        if not isinstance(raw_events, dict):
            log.warning("Ignoring malformed events section: %.200r", raw_events)
            raw_events = {}
        for name, raw_times in raw_events.items():
            times: list[str] = []
            for raw_time in raw_times if isinstance(raw_times, list) else []:
                normalized = normalize_time(str(raw_time))
                if normalized is None:
                    log.warning("Skipping malformed time %r for %s", raw_time, name)
                    continue
                if normalized not in times:
                    times.append(normalized)
            if times:
                events[str(name)] = times

        return cls(bosses=bosses, events=events)
