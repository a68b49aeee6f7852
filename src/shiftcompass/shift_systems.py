"""
Die Schichtsysteme. Eine geschlossene Menge von Varianten mit denselben
Fähigkeiten: Zyklus (phases), Zeitlogik je Phase und build_timeline().
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple, Union

from . import phase_cycles
from .locale_calendar import LocaleCalendar
from .models import (
    Phase, ShiftContext, ShiftStartOption, ShiftSystemID, ShiftSystemKind, TimelineItem,
)
from .providers import HolidayCalendar

# Fr und Sa (Python-Zählung Mo=0), fest und nicht aus der Locale abgeleitet
WEEKEND_DAYS = (4, 5)


class ShiftSystem:
    """Abstrakte Basis der Varianten; build_timeline liefern die Unterklassen."""
    system_id: ShiftSystemID
    kind: ShiftSystemKind = ShiftSystemKind.CYCLIC
    name: str = ""
    phases: Tuple[Phase, ...] = ()
    work_hours_per_shift: int = 8
    supports_night_shift: bool = False

    @property
    def work_duration_minutes(self) -> int:
        return self.work_hours_per_shift * 60

    @property
    def allows_flexibility(self) -> bool:
        return self.kind is ShiftSystemKind.FIXED_WEEK

    def start_offset(self, phase: Phase) -> int:
        return 0

    def duration(self, phase: Phase) -> int:
        return self.work_hours_per_shift if phase.is_counted_as_work_day else 0

    def time_logic(self, phase: Phase) -> Tuple[int, int]:
        """(Startversatz in Stunden ab "Stunde null", Dauer in Stunden)"""
        return self.start_offset(phase), self.duration(phase)

    def start_options(self) -> List[ShiftStartOption]:
        return []

    def _calendar_for(self, context: ShiftContext, calendar: Optional[LocaleCalendar]) -> LocaleCalendar:
        return calendar if calendar is not None else LocaleCalendar(context.timezone)

    def _days(self, start: date, day_count: int, cal: LocaleCalendar):
        for offset in range(max(day_count, 0)):
            try:
                current = cal.add_days(start, offset)
            except OverflowError:
                logging.warning(f"Tag {offset} ab {start} liegt außerhalb des Kalenders, übersprungen")
                continue
            yield current

    def build_timeline(
        self,
        context: ShiftContext,
        start_date: Union[date, datetime],
        day_count: int,
        calendar: Optional[LocaleCalendar] = None,
    ) -> List[TimelineItem]:
        raise NotImplementedError


class CyclicShiftSystem(ShiftSystem):
    """Rotation über einen festen Zyklus, verankert über setup_index oder start_phase."""

    _labels: Tuple[str, ...] = ()

    def anchor_index(self, context: ShiftContext) -> Optional[int]:
        count = len(self.phases)
        if context.setup_index is not None:
            return context.setup_index % count
        if context.start_phase is not None and context.start_phase in self.phases:
            return self.phases.index(context.start_phase)
        return None

    def start_options(self) -> List[ShiftStartOption]:
        return [ShiftStartOption(i, p, self._labels[i]) for i, p in enumerate(self.phases)]

    def build_timeline(self, context, start_date, day_count, calendar=None):
        anchor = self.anchor_index(context)
        if anchor is None:
            # nicht eingerichtet: keine Daten statt Fehler
            return []

        cal = self._calendar_for(context, calendar)
        reference = cal.to_local_date(context.reference_date)
        first = cal.to_local_date(start_date)
        cycle_length = len(self.phases)

        items: List[TimelineItem] = []
        for current in self._days(first, day_count, cal):
            diff = cal.days_between(reference, current)
            index = (anchor + diff) % cycle_length
            items.append(TimelineItem(current, self.phases[index]))
        return items


class EightHourPhasesMixin:
    def start_offset(self, phase: Phase) -> int:
        if phase is Phase.EVENING:
            return 8
        if phase is Phase.NIGHT:
            return 16
        return 0


class ThreeShiftTwoOffSystem(EightHourPhasesMixin, CyclicShiftSystem):
    system_id = ShiftSystemID.THREE_SHIFT_TWO_OFF
    name = "3 Shifts / 2 Off System"
    phases = phase_cycles.THREE_SHIFT_TWO_OFF
    work_hours_per_shift = 8
    supports_night_shift = True
    _labels = ("Morning Shift", "Afternoon Shift", "Night Shift", "1st Off Day", "2nd Off Day")


class EightHourShiftSystem(EightHourPhasesMixin, CyclicShiftSystem):
    system_id = ShiftSystemID.EIGHT_HOUR_SHIFT
    name = "8-Hour Rotation (2M, 2E, 2N, 2Off)"
    phases = phase_cycles.EIGHT_HOUR_SHIFT
    work_hours_per_shift = 8
    supports_night_shift = True
    _labels = (
        "1st Day Morning", "2nd Day Morning", "1st Day Evening", "2nd Day Evening",
        "1st Day Night", "2nd Day Night", "1st Day Off", "2nd Day Off",
    )


class TwentyFourFortyEightSystem(CyclicShiftSystem):
    system_id = ShiftSystemID.TWENTY_FOUR_FORTY_EIGHT
    name = "24/48 System (1 Work, 2 Off)"
    phases = phase_cycles.TWENTY_FOUR_FORTY_EIGHT
    work_hours_per_shift = 24
    supports_night_shift = True
    _labels = ("Work Day (24h)", "1st Off Day", "2nd Off Day")


class TwoWorkFourOffSystem(CyclicShiftSystem):
    system_id = ShiftSystemID.TWO_WORK_FOUR_OFF
    name = "2 Work / 4 Off (48/96)"
    phases = phase_cycles.TWO_WORK_FOUR_OFF
    work_hours_per_shift = 24
    supports_night_shift = True
    _labels = (
        "1st Work Day (24h)", "2nd Work Day (24h)",
        "1st Off Day", "2nd Off Day", "3rd Off Day", "4th Off Day",
    )


class StandardMorningSchedule(ShiftSystem):
    """Feste Arbeitswoche: Wochenende und Feiertage frei, sonst Frühdienst (7h)."""
    system_id = ShiftSystemID.STANDARD_MORNING
    kind = ShiftSystemKind.FIXED_WEEK
    name = "Standard Morning"
    work_hours_per_shift = 7

    def __init__(self, holidays: Optional[HolidayCalendar] = None):
        self.holidays = holidays

    def is_holiday(self, day: date) -> bool:
        return self.holidays is not None and self.holidays.is_holiday(day)

    def build_timeline(self, context, start_date, day_count, calendar=None):
        # setup_index/start_phase spielen hier keine Rolle
        cal = self._calendar_for(context, calendar)
        first = cal.to_local_date(start_date)
        items: List[TimelineItem] = []
        for current in self._days(first, day_count, cal):
            if cal.weekday(current) in WEEKEND_DAYS:
                phase = Phase.OFF
            elif self.is_holiday(current):
                phase = Phase.OFF
            else:
                phase = Phase.MORNING
            items.append(TimelineItem(current, phase))
        return items


SYSTEM_CLASSES: Dict[ShiftSystemID, type] = {
    ShiftSystemID.THREE_SHIFT_TWO_OFF: ThreeShiftTwoOffSystem,
    ShiftSystemID.TWENTY_FOUR_FORTY_EIGHT: TwentyFourFortyEightSystem,
    ShiftSystemID.TWO_WORK_FOUR_OFF: TwoWorkFourOffSystem,
    ShiftSystemID.STANDARD_MORNING: StandardMorningSchedule,
    ShiftSystemID.EIGHT_HOUR_SHIFT: EightHourShiftSystem,
}


def get_system(system_id: Union[ShiftSystemID, str], holidays: Optional[HolidayCalendar] = None) -> ShiftSystem:
    """Variante zum Systembezeichner; Unbekanntes fällt auf den Standard-Frühdienst zurück."""
    try:
        sid = ShiftSystemID(system_id)
    except ValueError:
        logging.warning(f"Unbekanntes Schichtsystem {system_id!r}, nutze standard_morning")
        sid = ShiftSystemID.STANDARD_MORNING
    cls = SYSTEM_CLASSES[sid]
    if cls is StandardMorningSchedule:
        return StandardMorningSchedule(holidays)
    return cls()
