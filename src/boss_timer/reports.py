"""Periodic summaries and housekeeping announcements."""

from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from boss_timer.formatting import BOSS_COLOR, BOSS_EMOJI, EVENT_DEFAULT_COLOR, format_hm
from boss_timer.models import PersistentState
from boss_timer.notifier import Delivery, Notice

REPORT_HOURS = "0,6,12,18"
VAULT_DAYS = "sun,mon"
VAULT_HOURS = "9,21"


def boss_report(state: PersistentState, now: datetime, tz: ZoneInfo) -> Notice:
    active = state.active_bosses(now)
    if active:
        description = "\n".join(
            f"{BOSS_EMOJI} **{b.name}** ({b.map}) - {format_hm(b.respawn_at, tz)}"
            for b in active
        )
    else:
        description = "No active bosses."
    return Notice(
        title="\N{BAR CHART} Boss report (every 6h)",
        description=description,
        color=BOSS_COLOR,
    )


def event_report(state: PersistentState) -> Notice:
    if state.events:
        description = "\n".join(
            f"\N{DIRECT HIT} **{name}** - {', '.join(times)}"
            for name, times in state.events.items()
        )
    else:
        description = "No saved events."
    return Notice(
        title="\N{CALENDAR} Event report (every 6h)",
        description=description,
        color=EVENT_DEFAULT_COLOR,
    )


def vault_reminder() -> Notice:
    return Notice(content="\N{MONEY BAG} Please deposit zen into the Guild Vault!")


def backup_announcements(
    snapshot: Path, *, logs_channel: str, chat_channel: str
) -> list[Delivery]:
    """Snapshot file to the logs channel, a short confirmation to the chat channel."""
    return [
        Delivery(
            logs_channel,
            Notice(
                content=f"\N{FLOPPY DISK} New data backup ({snapshot.name})",
                attachment=snapshot,
            ),
        ),
        Delivery(
            chat_channel,
            Notice(
                content="\N{FLOPPY DISK} Backup completed successfully "
                "\N{WHITE HEAVY CHECK MARK}"
            ),
        ),
    ]
