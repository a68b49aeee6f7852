from collections import Counter
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union
from .locale_calendar import LocaleCalendar
from .models import AggregateResult, LeaveType, ManualLeave, Phase, ShiftContext, ShiftSystemKind, TimelineItem
from .providers import NO_EVENTS, NO_LEAVES, EventAdjustmentProvider, HolidayCalendar, LeaveProvider
from .shift_systems import get_system


def aggregate(
    start: Union[date, datetime],
    end: Union[date, datetime],
    context: ShiftContext,
    leave_provider: Optional[LeaveProvider] = None,
    event_provider: Optional[EventAdjustmentProvider] = None,
    holidays: Optional[HolidayCalendar] = None,
    calendar: Optional[LocaleCalendar] = None,
) -> AggregateResult:
    """
    Arbeitszeit-Statistik für den Zeitraum start..end (beide inklusive):
      scheduled_work_days      : geplante Arbeitstage laut Rotation
      effective_deduction_days : davon durch abziehbaren Urlaub entfallen
      net_working_days         : geplant - Abzüge, nie negativ
      net_working_minutes      : Summe je Arbeitstag max(0, Tagesminuten + Korrektur),
                                 0 an ganztägigen Urlaubstagen
    """
    cal = calendar if calendar is not None else LocaleCalendar(context.timezone)
    first = cal.to_local_date(start)
    last = cal.to_local_date(end)
    if last < first:
        return AggregateResult()

    leaves = leave_provider or NO_LEAVES
    events = event_provider or NO_EVENTS
    system = get_system(context.system_id, holidays)

    # work_duration_hours betrifft nur die Schichtzeiten, nicht die Statistik
    net_daily_minutes = max(system.work_duration_minutes - context.flexibility.break_duration_minutes, 0)

    day_count = cal.days_between(first, last) + 1
    timeline = system.build_timeline(context, first, day_count, cal)

    scheduled = 0
    deductions = 0
    minutes = 0
    for item in timeline:
        if not item.phase.is_counted_as_work_day:
            continue
        # doppelt gegen Feiertage prüfen, falls die Zeitleiste ohne Kalender gebaut wurde
        if system.kind is ShiftSystemKind.FIXED_WEEK and holidays is not None and holidays.is_holiday(item.date):
            continue

        scheduled += 1
        leave = leaves.get_leave(item.date)
        if leave is not None and leave.is_deductible:
            deductions += 1
            minutes_today = 0
        else:
            minutes_today = net_daily_minutes + events.net_minutes_adjustment(item.date)
        minutes += max(0, minutes_today)

    return AggregateResult(
        scheduled_work_days=scheduled,
        effective_deduction_days=deductions,
        net_working_days=max(scheduled - deductions, 0),
        net_working_minutes=minutes,
    )


def summarize_phases(timeline: List[TimelineItem]) -> Dict[Phase, int]:
    """Anzahl Tage je Phase in einer Zeitleiste."""
    counts = Counter(item.phase for item in timeline)
    return {phase: counts.get(phase, 0) for phase in Phase}


def count_leave_days(leaves: Iterable[ManualLeave], leave_type: LeaveType, year: int) -> int:
    """Tage eines Urlaubstyps, die in das angegebene Jahr fallen."""
    year_start = date(year, 1, 1)
    year_end = date(year, 12, 31)
    total = 0
    for lv in leaves:
        if LeaveType(lv.type) is not LeaveType(leave_type):
            continue
        overlap_start = max(lv.start_date, year_start)
        overlap_end = min(lv.end_date, year_end)
        if overlap_start <= overlap_end:
            total += (overlap_end - overlap_start).days + 1
    return total
