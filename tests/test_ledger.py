"""Tests for the reminder ledger — key identity and daily reset."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from boss_timer.scheduling.ledger import LedgerKey, NotificationKind, ReminderLedger

WARSAW = ZoneInfo("Europe/Warsaw")


def _boss_key(kind=NotificationKind.BOSS_SOON, name="Kundun", map_name="Kalima7"):
    return LedgerKey.for_boss(
        kind, name, map_name, datetime(2024, 5, 10, 12, 16, tzinfo=WARSAW)
    )


def test_boss_keys_ignore_case():
    assert _boss_key(name="kundun", map_name="KALIMA7") == _boss_key()


def test_same_name_different_map_is_distinct():
    assert _boss_key(map_name="Lorencia") != _boss_key()


def test_kinds_do_not_collide():
    ledger = ReminderLedger()

    assert ledger.record(_boss_key(NotificationKind.BOSS_SOON)) is True
    assert ledger.record(_boss_key(NotificationKind.BOSS_SPAWNED)) is True
    assert len(ledger) == 2


def test_record_refuses_duplicates():
    ledger = ReminderLedger()
    key = _boss_key()

    assert ledger.record(key) is True
    assert ledger.record(key) is False
    assert key in ledger
    assert ledger.keys(NotificationKind.BOSS_SOON) == frozenset({key})


def test_event_keys_are_dated_by_occurrence():
    today = LedgerKey.for_event(
        NotificationKind.EVENT_STARTED, "Death King", "00:05", date(2024, 5, 10)
    )
    tomorrow = LedgerKey.for_event(
        NotificationKind.EVENT_STARTED, "Death King", "00:05", date(2024, 5, 11)
    )

    assert today != tomorrow
    assert today.bucket == "2024-05-10"


def test_first_roll_over_only_remembers_date():
    ledger = ReminderLedger()
    ledger.record(_boss_key())

    assert ledger.roll_over(date(2024, 5, 10)) is False
    assert len(ledger) == 1


def test_roll_over_drops_past_keys_on_new_date():
    ledger = ReminderLedger()
    ledger.roll_over(date(2024, 5, 10))
    ledger.record(_boss_key())

    assert ledger.roll_over(date(2024, 5, 10)) is False
    assert len(ledger) == 1
    assert ledger.roll_over(date(2024, 5, 11)) is True
    assert len(ledger) == 0


def test_roll_over_keeps_keys_for_today_and_later():
    ledger = ReminderLedger()
    ledger.roll_over(date(2024, 5, 10))
    midnight = LedgerKey.for_event(
        NotificationKind.EVENT_STARTED, "Death King", "00:00", date(2024, 5, 11)
    )
    ledger.record(midnight)

    ledger.roll_over(date(2024, 5, 11))

    assert midnight in ledger
    assert ledger.record(midnight) is False
