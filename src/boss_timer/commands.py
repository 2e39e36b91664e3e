"""Text commands typed into the boss and event channels.

Boss channel: ``!boss``, ``!delboss``, ``!timer``, ``!timerclean``.
Event channel: ``!event``, ``!delevent``, ``!eventlist`` (aliases ``!listevent``, ``!events``).
Anything else, or a command in the wrong channel, gets no reply.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from zoneinfo import ZoneInfo

from boss_timer.clock import Clock
from boss_timer.formatting import (
    BOSS_COLOR,
    BOSS_EMOJI,
    EVENT_DEFAULT_COLOR,
    event_style,
    format_hm,
    minutes_left,
)
from boss_timer.models import BossTimer, PersistentState, normalize_time, parse_duration
from boss_timer.notifier import Notice, NoticeField
from boss_timer.storage import StateStore

log = logging.getLogger(__name__)

BOSS_USAGE = "\N{CROSS MARK} Usage: `!boss <name> <map> +1h30m`"
DURATION_HELP = (
    "\N{CROSS MARK} Give the time as `+Xm`, `+Xh` or `+XhYm` "
    "(e.g. `+1h30m`, `+45m`)."
)
DELBOSS_USAGE = "\N{CROSS MARK} Usage: `!delboss <name>`"
EVENT_USAGE = (
    "\N{CROSS MARK} Usage: `!event <name> <HH:MM>` (e.g. `!event Rabbit Invasion 15:23`)"
)
TIME_HELP = "\N{CROSS MARK} Invalid time format. Use HH:MM (24h)."
DELEVENT_USAGE = (
    "\N{CROSS MARK} Usage: `!delevent <name> <HH:MM>` "
    "or `!delevent <name>` to remove the whole event"
)

_Handler = Callable[[str, list[str]], Awaitable[Notice]]


def _text(message: str) -> Notice:
    return Notice(content=message)


def _series_name(parts: list[str]) -> str:
    """Join name tokens; a single pair of surrounding double quotes is dropped."""
    name = " ".join(parts).strip()
    if len(name) >= 2 and name[0] == name[-1] == '"':
        name = name[1:-1].strip()
    return name


class CommandHandler:
    def __init__(
        self,
        *,
        store: StateStore,
        clock: Clock,
        tz: ZoneInfo,
        boss_channel: str,
        event_channel: str,
    ) -> None:
        self.store = store
        self.clock = clock
        self.tz = tz
        self.boss_channel = boss_channel
        self.event_channel = event_channel

        self._routes: dict[str, dict[str, _Handler]] = {
            boss_channel: {
                "!boss": self.add_boss,
                "!delboss": self.delete_boss,
                "!timer": self.list_bosses,
                "!timerclean": self.clean_bosses,
            },
            event_channel: {
                "!event": self.add_event,
                "!delevent": self.delete_event,
                "!eventlist": self.list_events,
                "!listevent": self.list_events,
                "!events": self.list_events,
            },
        }

    async def handle(self, channel_name: str, author: str, content: str) -> Notice | None:
        """Run one message; returns the reply, or None when it isn't ours."""
        parts = content.strip().split()
        if not parts or not parts[0].startswith("!"):
            return None
        command = parts[0].lower()
        handler = self._routes.get(channel_name, {}).get(command)
        if handler is None:
            return None
        log.info("%s in #%s by %s", command, channel_name, author)
        return await handler(author, parts[1:])

    # --- bosses ---

    async def add_boss(self, author: str, args: list[str]) -> Notice:
        if len(args) < 3:
            return _text(BOSS_USAGE)
        name, map_name, raw_duration = args[0], args[1], args[2]
        duration = parse_duration(raw_duration)
        if duration is None:
            return _text(DURATION_HELP)

        try:
            respawn_at = self.clock.now() + duration
        except OverflowError:
            return _text(DURATION_HELP)

        boss = BossTimer(
            name=name,
            map=map_name,
            respawn_at=respawn_at,
            added_by=author,
        )
        await self.store.mutate(lambda state: state.bosses.append(boss))
        return Notice(
            title=f"{BOSS_EMOJI} {boss.name}",
            description=(
                f"\N{ROUND PUSHPIN} **Map:** {boss.map}\n"
                f"\N{ALARM CLOCK} **Respawn:** {format_hm(boss.respawn_at, self.tz)}\n"
                f"\N{BUST IN SILHOUETTE} Added by: {boss.added_by}"
            ),
            color=BOSS_COLOR,
        )

    async def delete_boss(self, author: str, args: list[str]) -> Notice:
        if not args:
            return _text(DELBOSS_USAGE)
        name = args[0]

        def _remove(state: PersistentState) -> int:
            before = len(state.bosses)
            state.bosses = [b for b in state.bosses if not b.matches(name)]
            return before - len(state.bosses)

        removed = await self.store.mutate(_remove)
        return _text(f"\N{WASTEBASKET}\ufe0f Removed {removed} boss(es) named **{name}**.")

    async def list_bosses(self, author: str, args: list[str]) -> Notice:
        now = self.clock.now()
        async with self.store.lock():
            active = self.store.state.active_bosses(now)
        if not active:
            return _text("\N{HOURGLASS WITH FLOWING SAND} No active bosses.")

        fields = tuple(
            NoticeField(
                name=f"{BOSS_EMOJI} {b.name} ({b.map})",
                value=(
                    f"\N{ALARM CLOCK} {format_hm(b.respawn_at, self.tz)} - in "
                    f"{minutes_left(b.respawn_at, now)}m \N{BULLET} "
                    f"\N{BUST IN SILHOUETTE} {b.added_by}"
                ),
            )
            for b in active
        )
        return Notice(
            title="\N{CLOCK FACE THREE OCLOCK} Active boss timers",
            color=BOSS_COLOR,
            fields=fields,
        )

    async def clean_bosses(self, author: str, args: list[str]) -> Notice:
        now = self.clock.now()

        def _clean(state: PersistentState) -> int:
            before = len(state.bosses)
            state.bosses = state.active_bosses(now)
            return before - len(state.bosses)

        removed = await self.store.mutate(_clean)
        return _text(f"\N{BROOM} Removed {removed} finished boss(es).")

    # --- events ---

    async def add_event(self, author: str, args: list[str]) -> Notice:
        if len(args) < 2:
            return _text(EVENT_USAGE)
        time_str = normalize_time(args[-1])
        name = _series_name(args[:-1])
        if not name:
            return _text(EVENT_USAGE)
        if time_str is None:
            return _text(TIME_HELP)

        added = await self.store.mutate(lambda state: state.add_event_time(name, time_str))
        if not added:
            return _text(
                "\N{INFORMATION SOURCE}\ufe0f This time already exists for this event."
            )
        emoji, color = event_style(name)
        return Notice(
            title=f"{emoji} Event added",
            description=f"\N{DIRECT HIT} **{name}** at **{time_str}**",
            color=color,
        )

    async def delete_event(self, author: str, args: list[str]) -> Notice:
        if not args:
            return _text(DELEVENT_USAGE)
        time_str = normalize_time(args[-1]) if len(args) >= 2 else None
        name = _series_name(args[:-1] if time_str else args)

        def _delete(state: PersistentState) -> str:
            if name not in state.events:
                return "missing"
            if time_str is None:
                del state.events[name]
                return "series"
            return "time" if state.remove_event_time(name, time_str) else "no-time"

        outcome = await self.store.mutate(_delete)
        if outcome == "missing":
            return _text("\N{CROSS MARK} Event not found.")
        if outcome == "series":
            return _text(f"\N{WASTEBASKET}\ufe0f Removed event **{name}** (all times).")
        if outcome == "no-time":
            return _text(f"\N{CROSS MARK} **{name}** has no time {time_str}.")
        return _text(f"\N{WASTEBASKET}\ufe0f Removed {time_str} from **{name}**.")

    async def list_events(self, author: str, args: list[str]) -> Notice:
        async with self.store.lock():
            events = {name: list(times) for name, times in self.store.state.events.items()}
        if not events:
            return _text("\N{OPEN MAILBOX WITH LOWERED FLAG} No saved events.")

        fields = tuple(
            NoticeField(name=f"{event_style(name)[0]} {name}", value=", ".join(times))
            for name, times in events.items()
        )
        return Notice(
            title="\N{CALENDAR} Scheduled events",
            color=EVENT_DEFAULT_COLOR,
            fields=fields,
        )
