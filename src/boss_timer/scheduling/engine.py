"""Per-minute reminder evaluation for boss respawns and daily events.

``ReminderEngine.tick`` is synchronous and never touches the network or the
disk: it takes the current document and time and returns what should be sent
and what the document looks like afterwards. The caller persists and delivers.

Bosses: one "15 minutes" notice when the floored minutes-to-respawn equals 15,
one "spawned" notice once the respawn instant has passed, after which the boss
is dropped whether or not the notice gets delivered.

Events: each clock time is measured against its next occurrence (today, or
tomorrow once today's has passed). Notices go out at 15 and 0 minutes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from boss_timer.formatting import (
    BOSS_SOON_COLOR,
    BOSS_SPAWN_COLOR,
    event_style,
    format_hm,
)
from boss_timer.models import BossTimer, PersistentState, parse_clock_time
from boss_timer.notifier import Delivery, Notice
from boss_timer.scheduling.ledger import LedgerKey, NotificationKind, ReminderLedger

log = logging.getLogger(__name__)

LEAD_MINUTES = 15
_DAY_MINUTES = 24 * 60


@dataclass(frozen=True, slots=True)
class TickResult:
    state: PersistentState
    deliveries: list[Delivery] = field(default_factory=list)
    spawned: list[BossTimer] = field(default_factory=list)


def _minutes_until(target: datetime, now: datetime) -> tuple[float, int]:
    """(seconds, floored minutes) between two instants, DST-safe."""
    seconds = target.timestamp() - now.timestamp()
    return seconds, math.floor(seconds / 60)


class ReminderEngine:
    def __init__(
        self,
        *,
        tz: ZoneInfo,
        boss_channel: str,
        event_channel: str,
        ledger: ReminderLedger | None = None,
    ) -> None:
        self.tz = tz
        self.boss_channel = boss_channel
        self.event_channel = event_channel
        self.ledger = ledger if ledger is not None else ReminderLedger()

    def tick(self, state: PersistentState, now: datetime) -> TickResult:
        now = now.astimezone(self.tz)
        self.ledger.roll_over(now.date())

        deliveries: list[Delivery] = []
        kept, spawned = self._check_bosses(state.bosses, now, deliveries)
        self._check_events(state.events, now, deliveries)

        new_state = PersistentState(
            bosses=kept,
            events={name: list(times) for name, times in state.events.items()},
        )
        return TickResult(state=new_state, deliveries=deliveries, spawned=spawned)

    # --- bosses ---

    def _check_bosses(
        self, bosses: list[BossTimer], now: datetime, out: list[Delivery]
    ) -> tuple[list[BossTimer], list[BossTimer]]:
        kept: list[BossTimer] = []
        spawned: list[BossTimer] = []
        for boss in bosses:
            seconds, minutes = _minutes_until(boss.respawn_at, now)
            respawn_local = boss.respawn_at.astimezone(self.tz)

            if minutes == LEAD_MINUTES:
                key = LedgerKey.for_boss(
                    NotificationKind.BOSS_SOON, boss.name, boss.map, respawn_local
                )
                if self.ledger.record(key):
                    out.append(Delivery(self.boss_channel, self._boss_soon(boss)))

            if seconds <= 0:
                key = LedgerKey.for_boss(
                    NotificationKind.BOSS_SPAWNED, boss.name, boss.map, respawn_local
                )
                if self.ledger.record(key):
                    out.append(Delivery(self.boss_channel, self._boss_spawned(boss)))
                spawned.append(boss)
                continue

            kept.append(boss)

        if spawned:
            log.info("Removing %d spawned boss(es)", len(spawned))
        return kept, spawned

    def _boss_soon(self, boss: BossTimer) -> Notice:
        return Notice(
            title="\N{HOURGLASS WITH FLOWING SAND} Reminder: boss in 15 minutes",
            description=(
                f"\N{SKULL} **{boss.name}** on **{boss.map}** "
                f"at {format_hm(boss.respawn_at, self.tz)}"
            ),
            color=BOSS_SOON_COLOR,
        )

    def _boss_spawned(self, boss: BossTimer) -> Notice:
        return Notice(
            title="\N{CROSSED SWORDS}\ufe0f BOSS SPAWNED!",
            description=f"\N{FIRE} **{boss.name}** on **{boss.map}** has just spawned!",
            color=BOSS_SPAWN_COLOR,
        )

    # --- events ---

    def _check_events(
        self, events: dict[str, list[str]], now: datetime, out: list[Delivery]
    ) -> None:
        for series, times in events.items():
            for raw in times:
                parsed = parse_clock_time(raw)
                if parsed is None:
                    continue
                hour, minute = parsed
                time_str = f"{hour:02d}:{minute:02d}"

                target = datetime.combine(now.date(), time(hour, minute), tzinfo=self.tz)
                _, diff = _minutes_until(target, now)
                occurrence = now.date()
                if diff < 0:
                    diff += _DAY_MINUTES
                    occurrence += timedelta(days=1)

                if diff == LEAD_MINUTES:
                    kind = NotificationKind.EVENT_SOON
                elif diff == 0:
                    kind = NotificationKind.EVENT_STARTED
                else:
                    continue

                key = LedgerKey.for_event(kind, series, time_str, occurrence)
                if self.ledger.record(key):
                    out.append(
                        Delivery(self.event_channel, self._event_notice(kind, series, time_str))
                    )

    def _event_notice(self, kind: NotificationKind, series: str, time_str: str) -> Notice:
        emoji, color = event_style(series)
        if kind is NotificationKind.EVENT_SOON:
            return Notice(
                title=f"{emoji} Event in 15 minutes!",
                description=f"\N{DIRECT HIT} **{series}** at {time_str}",
                color=color,
            )
        return Notice(
            title=f"{emoji} Event started!",
            description=f"\N{PARTY POPPER} **{series}** has just started at {time_str}",
            color=color,
        )
