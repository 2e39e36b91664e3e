"""Entry point for the boss timer bot."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

import discord

from boss_timer import config, health
from boss_timer.backup import BackupManager
from boss_timer.clock import SystemClock
from boss_timer.commands import CommandHandler
from boss_timer.notifier import DiscordNotifier, Dispatcher
from boss_timer.scheduling import Channels, Jobs, ReminderEngine, setup_scheduler
from boss_timer.storage import StateStore

if TYPE_CHECKING:
    from discord.ext.commands import Bot

log = logging.getLogger(__name__)


async def _run(bot: Bot, token: str) -> None:
    """Run the bot until a signal or a fatal error, then shut everything down."""
    loop = asyncio.get_running_loop()
    _background_tasks: set[asyncio.Task[None]] = set()

    def _on_signal(sig_name: str) -> None:
        async def _shutdown() -> None:
            log.info("Received %s, shutting down", sig_name)
            if not bot.is_closed():
                await bot.close()

        task = loop.create_task(_shutdown())
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

    loop.add_signal_handler(signal.SIGTERM, _on_signal, "SIGTERM")
    loop.add_signal_handler(signal.SIGINT, _on_signal, "SIGINT")

    try:
        await health.start(config.PORT)
    except OSError:
        log.exception("Health server could not bind port %d", config.PORT)
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        pass  # Signal handler already closed the bot
    finally:
        if not bot.is_closed():
            await bot.close()
        await health.stop()


def build(store: StateStore, backups: BackupManager) -> Bot:
    """Wire the engine, handler and scheduler around an already-loaded store."""
    from boss_timer.bot import create_bot

    clock = SystemClock(config.TZ)
    channels = Channels(
        boss=config.BOSS_CHANNEL,
        event=config.EVENT_CHANNEL,
        vault=config.VAULT_CHANNEL,
        logs=config.LOGS_CHANNEL,
        chat=config.CHAT_CHANNEL,
    )
    engine = ReminderEngine(
        tz=config.TZ, boss_channel=channels.boss, event_channel=channels.event
    )
    handler = CommandHandler(
        store=store,
        clock=clock,
        tz=config.TZ,
        boss_channel=channels.boss,
        event_channel=channels.event,
    )

    async def _on_first_ready(bot: Bot) -> None:
        jobs = Jobs(
            store=store,
            engine=engine,
            backups=backups,
            dispatcher=Dispatcher(DiscordNotifier(bot)),
            clock=clock,
            channels=channels,
        )
        scheduler = setup_scheduler(jobs, config.TZ)
        scheduler.start()
        log.info("Scheduler started: %d jobs", len(scheduler.get_jobs()))
        await jobs.backup()

    return create_bot(handler, on_first_ready=_on_first_ready)


def main() -> None:
    discord.utils.setup_logging(level=logging.INFO)

    if not config.TOKEN:
        print("Set TOKEN (or DISCORD_TOKEN) in .env")
        raise SystemExit(1)

    backups = BackupManager(config.DATA_FILE, config.BACKUP_DIR)
    backups.restore_latest_backup()

    store = StateStore(config.DATA_FILE)
    state = store.load()
    log.info(
        "Loaded %d boss(es) and %d event series from %s",
        len(state.bosses),
        len(state.events),
        config.DATA_FILE,
    )

    bot = build(store, backups)
    asyncio.run(_run(bot, config.TOKEN))


if __name__ == "__main__":
    main()
