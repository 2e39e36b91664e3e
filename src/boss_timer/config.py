"""User-configurable values loaded from environment variables."""

import os
import sys
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()


def _get_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"Ignoring non-integer {name}={raw!r}, using {default}", file=sys.stderr)
        return default


TOKEN: str = (os.environ.get("TOKEN") or os.environ.get("DISCORD_TOKEN") or "").strip()

BOSS_CHANNEL: str = os.environ.get("CHANNEL_RESP") or "resp-boss"
EVENT_CHANNEL: str = os.environ.get("CHANNEL_EVENT") or "eventy"
VAULT_CHANNEL: str = os.environ.get("CHANNEL_VAULT") or "skarbowka-pierogow"
LOGS_CHANNEL: str = os.environ.get("CHANNEL_LOGS") or "logs"
CHAT_CHANNEL: str = os.environ.get("CHANNEL_CHAT") or "guild-czat"

PORT: int = _get_int("PORT", 8000)

TZ: ZoneInfo = ZoneInfo(os.environ.get("TIMEZONE") or "Europe/Warsaw")

DATA_FILE: Path = Path(os.environ.get("DATA_FILE") or "./data.json")
BACKUP_DIR: Path = Path(os.environ.get("BACKUP_DIR") or "./backups")
