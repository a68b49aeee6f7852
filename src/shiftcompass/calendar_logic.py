from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

from dateutil import tz

from .locale_calendar import LocaleCalendar
from .models import Phase, ShiftContext, ShiftTimes, TimelineItem
from .providers import HolidayCalendar, LeaveProvider
from .shift_systems import ShiftSystem, get_system


def build_timeline(
    context: ShiftContext,
    start_date: Union[date, datetime],
    day_count: int,
    calendar: Optional[LocaleCalendar] = None,
    holidays: Optional[HolidayCalendar] = None,
) -> List[TimelineItem]:
    """
    Erzeuge die Folge (Tag, Phase) ab start_date für day_count Tage nach dem
    System aus context. Gleiche Eingaben (inkl. Kalenderzone) -> gleiche Folge.
    """
    system = get_system(context.system_id, holidays)
    return system.build_timeline(context, start_date, day_count, calendar)


def time_logic(context: ShiftContext, phase: Phase) -> Tuple[int, int]:
    return get_system(context.system_id).time_logic(phase)


def is_work_day(day: Union[date, datetime], context: ShiftContext,
                calendar: Optional[LocaleCalendar] = None,
                holidays: Optional[HolidayCalendar] = None) -> bool:
    items = build_timeline(context, day, 1, calendar, holidays)
    return bool(items) and items[0].phase.is_counted_as_work_day


def calculate_exact_shift_times(
    context: ShiftContext,
    day: Union[date, datetime],
    phase: Phase,
    system: Optional[ShiftSystem] = None,
    calendar: Optional[LocaleCalendar] = None,
) -> Optional[ShiftTimes]:
    """
    Beginn und Ende einer Schicht als aware datetimes.
    Beginn = Tag + Startzeit des Nutzers + Versatz der Phase (Wanduhr),
    Ende = Beginn + Dauer (tatsächlich verstrichene Zeit).
    """
    if not phase.is_counted_as_work_day:
        return None

    system = system or get_system(context.system_id)
    cal = calendar if calendar is not None else LocaleCalendar(context.timezone)
    d = cal.to_local_date(day)

    offset = system.start_offset(phase)
    if context.work_duration_hours is not None:
        hours = context.work_duration_hours
    else:
        hours = system.duration(phase)

    anchor = context.shift_start_time
    wall = datetime(d.year, d.month, d.day) + timedelta(
        hours=anchor.hour + offset, minutes=anchor.minute)
    start = cal.localize(wall)

    # Dauer in echter Zeit rechnen, nicht in Wanduhrzeit
    end = (start.astimezone(tz.UTC) + timedelta(hours=hours)).astimezone(cal.tz)
    if end <= start:
        end = end + timedelta(days=1)
    return ShiftTimes(start, end)


def apply_leave_overrides(timeline: List[TimelineItem], leaves: LeaveProvider) -> List[TimelineItem]:
    """
    Wende Urlaube auf eine Zeitleiste an:
      - abziehbarer Urlaub: Tag wird LEAVE (zählt nicht als Arbeitstag)
      - Ruhetag/Ausgleich: Tag wird OFF
    """
    out = []
    for item in timeline:
        leave = leaves.get_leave(item.date)
        if leave is None:
            out.append(item)
        elif leave.is_deductible:
            out.append(TimelineItem(item.date, Phase.LEAVE))
        else:
            out.append(TimelineItem(item.date, Phase.OFF))
    return out
