"""Display helpers shared by the reminder engine, commands and reports."""

import math
from datetime import datetime
from zoneinfo import ZoneInfo

BOSS_EMOJI = "\N{SKULL}"
BOSS_COLOR = 0xFF4444
BOSS_SOON_COLOR = 0xFFD700
BOSS_SPAWN_COLOR = 0xFF5500

EVENT_DEFAULT_EMOJI = "\N{PARTY POPPER}"
EVENT_DEFAULT_COLOR = 0x55FF55

# Series name -> (emoji, embed colour).
EVENT_STYLES: dict[str, tuple[str, int]] = {
    "Rabbit Invasion": ("\N{RABBIT FACE}", 0xFFB6C1),
    "Golden Invasion": ("\N{MONEY BAG}", 0xFFD700),
    "Magic Treasure": ("\N{SPARKLES}", 0x9370DB),
    "Kanturu Domination": ("\N{CROSSED SWORDS}\ufe0f", 0x1E90FF),
    "Great Golden Dragon Invasion": ("\N{DRAGON}", 0xFF4500),
    "Death King": ("\N{SKULL}", 0x696969),
    "White Wizard": ("\N{MAGE}\u200d\N{MALE SIGN}\ufe0f", 0xFFFFFF),
}


def event_style(name: str) -> tuple[str, int]:
    return EVENT_STYLES.get(name, (EVENT_DEFAULT_EMOJI, EVENT_DEFAULT_COLOR))


def format_hm(when: datetime, tz: ZoneInfo) -> str:
    """24-hour ``HH:MM`` in the bot's timezone."""
    return when.astimezone(tz).strftime("%H:%M")


def minutes_left(when: datetime, now: datetime) -> int:
    """Whole minutes until ``when``, rounded up, never negative."""
    seconds = when.timestamp() - now.timestamp()
    return max(0, math.ceil(seconds / 60))
