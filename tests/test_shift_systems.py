import pytest

from shiftcompass.models import Phase, ShiftSystemID, ShiftSystemKind
from shiftcompass.phase_cycles import validate_cycle
from shiftcompass.shift_systems import (
    EightHourShiftSystem, ShiftSystem, StandardMorningSchedule, ThreeShiftTwoOffSystem, get_system,
)


@pytest.mark.parametrize("system,phase,expected", [
    (ShiftSystemID.THREE_SHIFT_TWO_OFF, Phase.MORNING, (0, 8)),
    (ShiftSystemID.THREE_SHIFT_TWO_OFF, Phase.EVENING, (8, 8)),
    (ShiftSystemID.THREE_SHIFT_TWO_OFF, Phase.NIGHT, (16, 8)),
    (ShiftSystemID.THREE_SHIFT_TWO_OFF, Phase.OFF, (0, 0)),
    (ShiftSystemID.EIGHT_HOUR_SHIFT, Phase.NIGHT, (16, 8)),
    (ShiftSystemID.TWENTY_FOUR_FORTY_EIGHT, Phase.MORNING, (0, 24)),
    (ShiftSystemID.TWO_WORK_FOUR_OFF, Phase.MORNING, (0, 24)),
    (ShiftSystemID.TWO_WORK_FOUR_OFF, Phase.OFF, (0, 0)),
    (ShiftSystemID.STANDARD_MORNING, Phase.MORNING, (0, 7)),
])
def test_time_logic(system, phase, expected):
    assert get_system(system).time_logic(phase) == expected


def test_get_system_by_string_and_fallback():
    assert isinstance(get_system("eight_hour_shift"), EightHourShiftSystem)
    assert isinstance(get_system("three_shift_two_off"), ThreeShiftTwoOffSystem)
    assert isinstance(get_system("kein_system"), StandardMorningSchedule)


def test_start_options_follow_cycle():
    opts = get_system(ShiftSystemID.THREE_SHIFT_TWO_OFF).start_options()
    assert [o.index for o in opts] == [0, 1, 2, 3, 4]
    assert [o.phase for o in opts] == [Phase.MORNING, Phase.EVENING, Phase.NIGHT, Phase.OFF, Phase.OFF]
    assert opts[3].title == "1st Off Day"
    assert get_system(ShiftSystemID.STANDARD_MORNING).start_options() == []


def test_system_properties():
    std = get_system(ShiftSystemID.STANDARD_MORNING)
    assert std.kind is ShiftSystemKind.FIXED_WEEK
    assert std.work_duration_minutes == 420
    assert std.allows_flexibility
    rot = get_system(ShiftSystemID.TWENTY_FOUR_FORTY_EIGHT)
    assert rot.work_duration_minutes == 1440
    assert rot.supports_night_shift
    assert not rot.allows_flexibility


@pytest.mark.parametrize("system", list(ShiftSystemID))
def test_every_cycle_is_valid(system):
    s = get_system(system)
    if s.kind is ShiftSystemKind.CYCLIC:
        assert validate_cycle(s.phases) == s.phases
        assert len(s.start_options()) == len(s.phases)


def test_validate_cycle_rejects_bad_input():
    with pytest.raises(ValueError):
        validate_cycle([])
    with pytest.raises(ValueError):
        validate_cycle([Phase.MORNING, "frei"])


def test_base_class_has_no_timeline():
    with pytest.raises(NotImplementedError):
        ShiftSystem().build_timeline(None, None, 1)
