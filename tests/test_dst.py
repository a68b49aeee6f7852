from datetime import date, datetime, timedelta
import pytest

from shiftcompass.config import FeatureFlags
from shiftcompass.dst import detect_dst_transition, timezone_uses_dst, validate_shift_time
from shiftcompass.models import DSTTransition

ON = FeatureFlags(dst_aware_mode=True)
ON_WITH_ALERTS = FeatureFlags(dst_aware_mode=True, dst_show_alerts=True)


@pytest.mark.parametrize("day,zone,expected", [
    (date(2025, 3, 30), "Europe/Berlin", DSTTransition.SPRING_FORWARD),
    (date(2025, 10, 26), "Europe/Berlin", DSTTransition.FALL_BACK),
    (date(2025, 3, 9), "America/New_York", DSTTransition.SPRING_FORWARD),
    (date(2025, 7, 1), "Europe/Berlin", None),
    (date(2025, 3, 30), "Asia/Kuwait", None),
])
def test_detect_dst_transition(day, zone, expected):
    assert detect_dst_transition(day, zone) is expected


def test_spring_forward_gap_moves_to_next_hour():
    res = validate_shift_time(datetime(2025, 3, 30, 2, 30), "Europe/Berlin", ON)
    assert res.is_in_window
    assert res.transition is DSTTransition.SPRING_FORWARD
    assert (res.adjusted_time.hour, res.adjusted_time.minute, res.adjusted_time.second) == (3, 0, 0)
    assert res.adjusted_time.utcoffset() == timedelta(hours=2)
    assert res.message is None


def test_spring_forward_new_york():
    res = validate_shift_time(datetime(2025, 3, 9, 2, 15), "America/New_York", ON)
    assert (res.adjusted_time.hour, res.adjusted_time.minute) == (3, 0)


def test_existing_time_on_transition_day_is_kept():
    res = validate_shift_time(datetime(2025, 3, 30, 10, 45), "Europe/Berlin", ON)
    assert res.is_in_window
    assert (res.adjusted_time.hour, res.adjusted_time.minute) == (10, 45)


def test_fall_back_uses_first_occurrence():
    res = validate_shift_time(datetime(2025, 10, 26, 2, 30), "Europe/Berlin", ON)
    assert res.transition is DSTTransition.FALL_BACK
    assert res.adjusted_time.fold == 0
    assert res.adjusted_time.utcoffset() == timedelta(hours=2)


@pytest.mark.parametrize("moment,zone", [
    (datetime(2025, 6, 1, 7, 0), "Europe/Berlin"),
    (datetime(2025, 3, 30, 2, 30), "Asia/Kuwait"),
])
def test_no_transition_is_clean(moment, zone):
    res = validate_shift_time(moment, zone, ON)
    assert not res.is_in_window
    assert res.transition is None
    assert res.adjusted_time is None


def test_flag_off_is_always_clean():
    res = validate_shift_time(datetime(2025, 3, 30, 2, 30), "Europe/Berlin", FeatureFlags())
    assert res.is_in_window is False
    assert res.adjusted_time is None


def test_alert_message_only_with_alerts_flag():
    res = validate_shift_time(datetime(2025, 3, 30, 2, 30), "Europe/Berlin", ON_WITH_ALERTS)
    assert "Spring Forward" in res.message


def test_flags_loaded_from_config(tmp_path, monkeypatch):
    # ohne gespeicherte Konfiguration ist der Modus aus
    monkeypatch.setenv("HOME", str(tmp_path))
    res = validate_shift_time(datetime(2025, 3, 30, 2, 30), "Europe/Berlin")
    assert not res.is_in_window


def test_timezone_uses_dst():
    assert timezone_uses_dst("Europe/Berlin", 2025)
    assert not timezone_uses_dst("Asia/Kuwait", 2025)


def test_unknown_timezone_raises():
    with pytest.raises(ValueError):
        detect_dst_transition(date(2025, 3, 30), "Mars/Base")
