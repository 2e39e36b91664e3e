"""Outgoing messages and the capability that delivers them.

Scheduling code builds ``Notice`` values and never touches discord objects;
``DiscordNotifier`` is the only place a notice meets the network.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple, Protocol

if TYPE_CHECKING:
    import discord

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NoticeField:
    name: str
    value: str
    inline: bool = False


@dataclass(frozen=True, slots=True)
class Notice:
    """A message; ``title``/``description``/``fields`` render as an embed, ``content`` as text."""

    title: str | None = None
    description: str | None = None
    color: int | None = None
    fields: tuple[NoticeField, ...] = field(default_factory=tuple)
    content: str | None = None
    attachment: Path | None = None

    @property
    def has_embed(self) -> bool:
        return bool(self.title or self.description or self.fields)


class Delivery(NamedTuple):
    destination: str  # channel name
    notice: Notice


class DeliveryError(Exception):
    """The destination could not be found or refused the message."""


class Notifier(Protocol):
    async def send(self, destination: str, notice: Notice) -> None: ...


class DiscordNotifier:
    """Sends to every text channel named ``destination`` across the bot's guilds."""

    def __init__(self, client: discord.Client) -> None:
        self.client = client

    def _channels(self, name: str) -> list[discord.abc.Messageable]:
        found = []
        for guild in self.client.guilds:
            for channel in guild.text_channels:
                if channel.name == name:
                    found.append(channel)
        return found

    async def send(self, destination: str, notice: Notice) -> None:
        from boss_timer.embeds import send_notice

        channels = self._channels(destination)
        if not channels:
            raise DeliveryError(f"channel #{destination} not found")
        failures = 0
        for channel in channels:
            try:
                await send_notice(channel, notice)
            except Exception as e:
                failures += 1
                log.warning("Delivery to #%s failed: %s", destination, e)
        if failures == len(channels):
            raise DeliveryError(f"every #{destination} channel rejected the message")


class Dispatcher:
    """Fire-and-forget delivery: callers never wait on the network."""

    def __init__(self, notifier: Notifier) -> None:
        self.notifier = notifier
        self._background_tasks: set[asyncio.Task[None]] = set()

    def fire(self, destination: str, notice: Notice) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(
            self._deliver(destination, notice)
        )
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    def fire_all(self, deliveries: list[Delivery]) -> None:
        for destination, notice in deliveries:
            self.fire(destination, notice)

    async def _deliver(self, destination: str, notice: Notice) -> None:
        try:
            await self.notifier.send(destination, notice)
        except DeliveryError as e:
            log.warning("Notice for #%s not delivered: %s", destination, e)
        except Exception:
            log.exception("Notice for #%s not delivered", destination)

    async def drain(self) -> None:
        """Wait for in-flight deliveries. Used at shutdown and in tests."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
