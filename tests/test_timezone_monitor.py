from datetime import datetime
import pytest
from dateutil import tz

from shiftcompass.data import Database
from shiftcompass.providers import MemoryStore
from shiftcompass.timezone_monitor import (
    LAST_TIMEZONE_KEY, LAST_TIMEZONE_OFFSET_KEY, TimezoneChangeDetector,
    check_for_timezone_change, system_timezone_name,
)

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=tz.UTC)


def detector(store, current):
    return TimezoneChangeDetector(store, lambda: current, now=lambda: NOW)


def test_first_run_stores_timezone():
    store = MemoryStore()
    assert detector(store, "Asia/Kuwait").check_for_change() is None
    assert store.get(LAST_TIMEZONE_KEY) == "Asia/Kuwait"
    assert store.get(LAST_TIMEZONE_OFFSET_KEY) == 10800
    # zweiter Aufruf ohne Wechsel
    assert detector(store, "Asia/Kuwait").check_for_change() is None


def test_change_reports_hours_difference():
    store = MemoryStore({LAST_TIMEZONE_KEY: "UTC"})
    change = detector(store, "Asia/Kuwait").check_for_change()
    assert change.old_timezone == "UTC"
    assert change.new_timezone == "Asia/Kuwait"
    assert change.hours_difference == 3
    assert change.is_significant
    assert change.description == "Timezone changed from UTC to Asia/Kuwait"
    # Stand wurde aktualisiert
    assert store.get(LAST_TIMEZONE_KEY) == "Asia/Kuwait"
    assert detector(store, "Asia/Kuwait").check_for_change() is None


def test_change_westwards_is_negative():
    store = MemoryStore({LAST_TIMEZONE_KEY: "Asia/Kuwait"})
    assert detector(store, "UTC").check_for_change().hours_difference == -3


@pytest.mark.parametrize("old,new,hours", [
    ("Asia/Kolkata", "Asia/Kathmandu", 0),     # +05:30 -> +05:45
    ("Asia/Kolkata", "Asia/Kuwait", -2),       # -2.5h, Richtung null
    ("Asia/Kuwait", "Asia/Kolkata", 2),
])
def test_fractional_offsets_truncate(old, new, hours):
    store = MemoryStore({LAST_TIMEZONE_KEY: old})
    change = detector(store, new).check_for_change()
    assert change.hours_difference == hours
    assert change.is_significant == (hours != 0)


@pytest.mark.parametrize("stored", ["Mars/Base", ""])
def test_unreadable_stored_timezone_is_first_run(stored):
    store = MemoryStore({LAST_TIMEZONE_KEY: stored})
    assert detector(store, "Europe/Berlin").check_for_change() is None
    assert store.get(LAST_TIMEZONE_KEY) == "Europe/Berlin"


def test_database_as_store():
    db = Database(':memory:')
    assert detector(db, "UTC").check_for_change() is None
    change = detector(db, "Asia/Tokyo").check_for_change()
    assert change.hours_difference == 9
    assert db.get(LAST_TIMEZONE_OFFSET_KEY) == 9 * 3600
    db.close()


def test_stored_timezone_and_clear():
    store = MemoryStore()
    det = detector(store, "Asia/Kuwait")
    assert det.stored_timezone() is None
    det.update_stored_timezone()
    snap = det.stored_timezone()
    assert snap.identifier == "Asia/Kuwait"
    assert snap.utc_offset_seconds == 10800
    det.clear()
    assert det.stored_timezone() is None
    assert store.values == {}


def test_check_for_timezone_change_helper():
    store = MemoryStore({LAST_TIMEZONE_KEY: "UTC"})
    change = check_for_timezone_change(store, lambda: "Asia/Tokyo")
    assert change.new_timezone == "Asia/Tokyo"


def test_system_timezone_name_from_env(monkeypatch):
    monkeypatch.setenv("TZ", "Europe/Berlin")
    assert system_timezone_name() == "Europe/Berlin"
    monkeypatch.setenv("TZ", ":Asia/Tokyo")
    assert system_timezone_name() == "Asia/Tokyo"


def test_system_timezone_name_always_resolvable(monkeypatch):
    monkeypatch.setenv("TZ", "Nowhere/Town")
    assert tz.gettz(system_timezone_name()) is not None
