"""Tests for models.py — time and duration parsing, document (de)serialisation."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from boss_timer.models import (
    BossTimer,
    PersistentState,
    normalize_time,
    parse_clock_time,
    parse_duration,
)

WARSAW = ZoneInfo("Europe/Warsaw")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("18:43", "18:43"),
        ("00:00", "00:00"),
        ("23:59", "23:59"),
        ("18;43", "18:43"),
        (" 07:05 ", "07:05"),
    ],
)
def test_normalize_time_accepts(raw, expected):
    assert normalize_time(raw) == expected


@pytest.mark.parametrize("raw", ["24:00", "7:05", "12:60", "1843", "ab:cd", "", None])
def test_normalize_time_rejects(raw):
    assert normalize_time(raw) is None


def test_parse_clock_time():
    assert parse_clock_time("09;30") == (9, 30)
    assert parse_clock_time("25:00") is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("+1h30m", timedelta(hours=1, minutes=30)),
        ("+45m", timedelta(minutes=45)),
        ("+2h", timedelta(hours=2)),
        ("+1H5M", timedelta(hours=1, minutes=5)),
        ("+90m", timedelta(minutes=90)),
    ],
)
def test_parse_duration_accepts(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "1h30m",
        "+",
        "+0m",
        "+0h0m",
        "+30",
        "+1d",
        "+m30",
        "",
        "+99999999999999h",
        "+" + "9" * 5000 + "m",
    ],
)
def test_parse_duration_rejects(raw):
    assert parse_duration(raw) is None


def test_boss_matches_case_insensitively():
    boss = BossTimer("Kundun", "Kalima7", datetime(2024, 5, 10, tzinfo=WARSAW), "ana")

    assert boss.matches("kundun")
    assert boss.matches("KUNDUN", "kalima7")
    assert not boss.matches("kundun", "Lorencia")
    assert not boss.matches("Medusa")


def test_boss_round_trips_through_dict():
    boss = BossTimer("Medusa", "Swamp", datetime(2024, 5, 10, 18, 30, tzinfo=WARSAW), "ana")

    data = boss.to_dict()

    assert data["addedBy"] == "ana"
    assert BossTimer.from_dict(data) == boss


def test_naive_respawn_is_read_as_utc():
    boss = BossTimer.from_dict(
        {"name": "Kundun", "map": "K7", "respawn": "2024-05-10T10:00:00", "addedBy": "x"}
    )

    assert boss.respawn_at == datetime(2024, 5, 10, 10, 0, tzinfo=timezone.utc)


def test_add_event_time_is_idempotent():
    state = PersistentState()

    assert state.add_event_time("Rabbit Invasion", "15:23") is True
    assert state.add_event_time("Rabbit Invasion", "15:23") is False
    assert state.add_event_time("Rabbit Invasion", "18:00") is True

    assert state.events == {"Rabbit Invasion": ["15:23", "18:00"]}


def test_removing_last_time_drops_series():
    state = PersistentState(events={"Death King": ["10:00"]})

    assert state.remove_event_time("Death King", "11:00") is False
    assert state.remove_event_time("Death King", "10:00") is True

    assert "Death King" not in state.events


def test_active_bosses_excludes_due():
    now = datetime(2024, 5, 10, 12, 0, tzinfo=WARSAW)
    due = BossTimer("Old", "M", now - timedelta(minutes=1), "a")
    exact = BossTimer("Exact", "M", now, "a")
    live = BossTimer("Live", "M", now + timedelta(minutes=1), "a")
    state = PersistentState(bosses=[due, exact, live])

    assert state.active_bosses(now) == [live]


def test_from_dict_skips_malformed_entries():
    raw = {
        "bosses": [
            {"name": "Kundun", "map": "K7", "respawn": "2024-05-10T12:00:00+02:00"},
            {"name": "Broken"},
            {"name": "BadDate", "map": "X", "respawn": "yesterday"},
        ],
        "events": {
            "Rabbit Invasion": ["15:23", "15;23", "99:99", "08:00"],
            "Empty": ["nope"],
        },
    }

    state = PersistentState.from_dict(raw)

    assert [b.name for b in state.bosses] == ["Kundun"]
    assert state.bosses[0].added_by == ""
    assert state.events == {"Rabbit Invasion": ["15:23", "08:00"]}


def test_from_dict_missing_sections_yield_empty_document():
    state = PersistentState.from_dict({})

    assert state.bosses == []
    assert state.events == {}


def test_from_dict_rejects_non_object_root():
    with pytest.raises(ValueError):
        PersistentState.from_dict(["not", "a", "document"])


def test_from_dict_ignores_non_list_bosses_section():
    state = PersistentState.from_dict({"bosses": 5, "events": {"Death King": ["10:00"]}})

    assert state.bosses == []
    assert state.events == {"Death King": ["10:00"]}
