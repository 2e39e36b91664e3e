"""Discord client: routes channel messages to the command handler."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

import discord
from discord.ext import commands

from boss_timer.commands import CommandHandler
from boss_timer.embeds import send_notice

log = logging.getLogger(__name__)


def create_bot(
    handler: CommandHandler,
    *,
    on_first_ready: Callable[[commands.Bot], Awaitable[None]] | None = None,
) -> commands.Bot:
    """``on_first_ready`` runs once, on the first connect only."""
    intents = discord.Intents.default()
    intents.message_content = True

    bot = commands.Bot(
        command_prefix="!",
        intents=intents,
        help_command=None,
        status=discord.Status.online,
        activity=discord.Activity(type=discord.ActivityType.watching, name="boss timers"),
    )
    _ready_fired = False

    @bot.event
    async def on_ready():
        nonlocal _ready_fired
        log.info("Logged in as %s", bot.user)

        # on_ready fires again on every reconnect; init must only happen once
        if _ready_fired:
            return
        _ready_fired = True

        if on_first_ready is not None:
            await on_first_ready(bot)

    @bot.event
    async def on_message(message: discord.Message):
        if message.author.bot:
            return
        channel_name = getattr(message.channel, "name", None)
        if channel_name is None:
            return

        reply = await handler.handle(channel_name, message.author.name, message.content)
        if reply is None:
            return
        try:
            await send_notice(message.channel, reply)
        except discord.HTTPException:
            log.exception("Could not reply in #%s", channel_name)

    return bot
