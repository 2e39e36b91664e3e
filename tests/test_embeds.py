"""Tests for embeds.py — notice rendering into discord embeds and messages."""

import discord
import pytest

from boss_timer.embeds import build_embed, send_notice
from boss_timer.notifier import Notice, NoticeField


class _FakeChannel:
    def __init__(self) -> None:
        self.kwargs: dict | None = None

    async def send(self, **kwargs) -> None:
        self.kwargs = kwargs


def test_plain_text_notice_has_no_embed():
    assert build_embed(Notice(content="hello")) is None


def test_embed_carries_title_colour_and_fields():
    notice = Notice(
        title="Active boss timers",
        description="two bosses",
        color=0xFF4444,
        fields=(NoticeField("Kundun (Kalima7)", "13:30", inline=True),),
    )

    embed = build_embed(notice)

    assert embed.title == "Active boss timers"
    assert embed.description == "two bosses"
    assert embed.color == discord.Color(0xFF4444)
    assert embed.timestamp is not None
    assert [(f.name, f.value, f.inline) for f in embed.fields] == [
        ("Kundun (Kalima7)", "13:30", True)
    ]


@pytest.mark.asyncio
async def test_send_notice_text_only():
    channel = _FakeChannel()

    await send_notice(channel, Notice(content="hi"))

    assert channel.kwargs == {"content": "hi"}


@pytest.mark.asyncio
async def test_send_notice_with_attachment(tmp_path):
    snapshot = tmp_path / "data_backup_x.json"
    snapshot.write_text("{}")
    channel = _FakeChannel()

    await send_notice(channel, Notice(content="backup", attachment=snapshot))

    assert channel.kwargs["content"] == "backup"
    assert isinstance(channel.kwargs["file"], discord.File)
    assert channel.kwargs["file"].filename == "data_backup_x.json"
    assert "embed" not in channel.kwargs
