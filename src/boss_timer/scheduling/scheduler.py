"""Periodic jobs via APScheduler.

The reminder tick runs every 60s and is the only writer that isn't a command.
Backups run every 12h, reports every 6h, the vault reminder twice a day on
Sundays and Mondays. A failing run is logged and the next one still fires.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from boss_timer.backup import BackupManager
from boss_timer.clock import Clock
from boss_timer.notifier import Dispatcher
from boss_timer.reports import (
    REPORT_HOURS,
    VAULT_DAYS,
    VAULT_HOURS,
    backup_announcements,
    boss_report,
    event_report,
    vault_reminder,
)
from boss_timer.scheduling.engine import ReminderEngine, TickResult
from boss_timer.storage import StateStore

log = logging.getLogger(__name__)

TICK_SECONDS = 60
BACKUP_HOURS = 12


@dataclass(frozen=True, slots=True)
class Channels:
    boss: str
    event: str
    vault: str
    logs: str
    chat: str


@dataclass(slots=True)
class Jobs:
    """The coroutines APScheduler runs; callable directly from tests."""

    store: StateStore
    engine: ReminderEngine
    backups: BackupManager
    dispatcher: Dispatcher
    clock: Clock
    channels: Channels

    async def reminder_tick(self) -> TickResult | None:
        try:
            now = self.clock.now()
            async with self.store.lock():
                result = self.engine.tick(self.store.state, now)
                if result.spawned:
                    self.store.save(result.state)
            self.dispatcher.fire_all(result.deliveries)
            return result
        except Exception:
            log.exception("Reminder tick failed")
            return None

    async def backup(self) -> None:
        # File I/O only; the lock keeps a half-applied mutation out of the snapshot.
        async with self.store.lock():
            snapshot = self.backups.create_backup()
        if snapshot is None:
            return
        self.dispatcher.fire_all(
            backup_announcements(
                snapshot, logs_channel=self.channels.logs, chat_channel=self.channels.chat
            )
        )

    async def reports(self) -> None:
        now = self.clock.now()
        async with self.store.lock():
            bosses = boss_report(self.store.state, now, self.engine.tz)
            events = event_report(self.store.state)
        self.dispatcher.fire(self.channels.boss, bosses)
        self.dispatcher.fire(self.channels.event, events)

    async def vault(self) -> None:
        self.dispatcher.fire(self.channels.vault, vault_reminder())


def setup_scheduler(jobs: Jobs, tz: ZoneInfo) -> AsyncIOScheduler:
    """Registers every periodic job; the caller starts the scheduler."""
    scheduler = AsyncIOScheduler(timezone=tz)

    scheduler.add_job(
        jobs.reminder_tick,
        IntervalTrigger(seconds=TICK_SECONDS),
        id="reminder_tick",
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        jobs.backup,
        IntervalTrigger(hours=BACKUP_HOURS),
        id="backup",
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        jobs.reports,
        CronTrigger(hour=REPORT_HOURS, minute=0, timezone=tz),
        id="reports",
    )
    scheduler.add_job(
        jobs.vault,
        CronTrigger(day_of_week=VAULT_DAYS, hour=VAULT_HOURS, minute=0, timezone=tz),
        id="vault_reminder",
    )
    return scheduler
