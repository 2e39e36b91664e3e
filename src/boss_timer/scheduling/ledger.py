"""In-memory record of notifications already sent.

Keys are typed so that two evaluations of the same occurrence produce equal
keys and distinct occurrences never collide.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import NamedTuple

log = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    BOSS_SOON = "boss-15-min"
    BOSS_SPAWNED = "boss-spawned"
    EVENT_SOON = "event-15-min"
    EVENT_STARTED = "event-started"


class LedgerKey(NamedTuple):
    kind: NotificationKind
    name: str  # lowercased
    scope: str  # boss map (lowercased) or event clock time "HH:MM"
    bucket: str  # "YYYY-MM-DD HH:MM" for bosses, "YYYY-MM-DD" for events

    @property
    def occurrence_date(self) -> str:
        """ISO date prefix of ``bucket``; compares correctly as a string."""
        return self.bucket[:10]

    @classmethod
    def for_boss(
        cls, kind: NotificationKind, name: str, map_name: str, respawn_local: datetime
    ) -> LedgerKey:
        return cls(
            kind, name.lower(), map_name.lower(), respawn_local.strftime("%Y-%m-%d %H:%M")
        )

    @classmethod
    def for_event(
        cls, kind: NotificationKind, series: str, time_str: str, occurrence: date
    ) -> LedgerKey:
        return cls(kind, series.lower(), time_str, occurrence.isoformat())


class ReminderLedger:
    """Four disjoint sets, one per NotificationKind, pruned once per local day."""

    def __init__(self) -> None:
        self._sent: dict[NotificationKind, set[LedgerKey]] = {
            kind: set() for kind in NotificationKind
        }
        self._reset_date: date | None = None

    def __contains__(self, key: LedgerKey) -> bool:
        return key in self._sent[key.kind]

    def __len__(self) -> int:
        return sum(len(keys) for keys in self._sent.values())

    def record(self, key: LedgerKey) -> bool:
        """Add ``key``; returns False if it was already there."""
        bucket = self._sent[key.kind]
        if key in bucket:
            return False
        bucket.add(key)
        return True

    def keys(self, kind: NotificationKind) -> frozenset[LedgerKey]:
        return frozenset(self._sent[kind])

    def clear(self) -> None:
        for keys in self._sent.values():
            keys.clear()

    def roll_over(self, today: date) -> bool:
        """Forget past occurrences when the local date changed since the last reset.

        Keys dated ``today`` or later survive, so an occurrence announced just
        before midnight is not announced again just after it. The first call
        only remembers the date. Returns True when a reset happened.
        """
        if self._reset_date is None:
            self._reset_date = today
            return False
        if today == self._reset_date:
            return False
        cutoff = today.isoformat()
        dropped = 0
        for keys in self._sent.values():
            stale = {key for key in keys if key.occurrence_date < cutoff}
            keys -= stale
            dropped += len(stale)
        self._reset_date = today
        log.info("Reminder ledger reset for %s (%d keys dropped)", today, dropped)
        return True
