"""Scheduling: the reminder engine, its ledger, and the APScheduler integration."""

from boss_timer.scheduling.engine import LEAD_MINUTES, ReminderEngine, TickResult
from boss_timer.scheduling.ledger import LedgerKey, NotificationKind, ReminderLedger
from boss_timer.scheduling.scheduler import Channels, Jobs, setup_scheduler

__all__ = [
    "LEAD_MINUTES",
    "Channels",
    "Jobs",
    "LedgerKey",
    "NotificationKind",
    "ReminderEngine",
    "ReminderLedger",
    "TickResult",
    "setup_scheduler",
]
