"""Turn rendering-neutral notices into discord messages."""

import discord

from boss_timer.notifier import Notice


def build_embed(notice: Notice) -> discord.Embed | None:
    """Returns None for plain-text notices."""
    if not notice.has_embed:
        return None
    embed = discord.Embed(
        title=notice.title,
        description=notice.description,
        color=discord.Color(notice.color) if notice.color is not None else None,
        timestamp=discord.utils.utcnow(),
    )
    for nf in notice.fields:
        embed.add_field(name=nf.name, value=nf.value, inline=nf.inline)
    return embed


async def send_notice(channel: discord.abc.Messageable, notice: Notice) -> None:
    kwargs: dict = {}
    if notice.content:
        kwargs["content"] = notice.content
    embed = build_embed(notice)
    if embed is not None:
        kwargs["embed"] = embed
    if notice.attachment is not None:
        kwargs["file"] = discord.File(notice.attachment)
    await channel.send(**kwargs)
