from datetime import date, datetime
from typing import Optional, Union
from shiftcompass.calendar_logic import calculate_exact_shift_times
from shiftcompass.locale_calendar import LocaleCalendar
from shiftcompass.models import AggregateResult, Phase, ShiftContext, ShiftTimes


def _day_offset(times: ShiftTimes) -> int:
    # Kalendertage zwischen Beginn und Ende, in der Zone des Beginns
    return (times.end.astimezone(times.start.tzinfo).date() - times.start.date()).days


def format_time_range(
    context: ShiftContext,
    day: Union[date, datetime],
    phase: Phase,
    calendar: Optional[LocaleCalendar] = None,
) -> Optional[str]:
    """
    "HH:MM - HH:MM" bzw. "HH:MM - HH:MM (+N)", wenn die Schicht N Tage später endet.
    None für freie Tage.
    """
    times = calculate_exact_shift_times(context, day, phase, calendar=calendar)
    if times is None:
        return None
    offset = _day_offset(times)
    tag = f" (+{offset})" if offset > 0 else ""
    return f"{times.start:%H:%M} - {times.end:%H:%M}{tag}"


def is_overnight_shift(
    context: ShiftContext,
    day: Union[date, datetime],
    phase: Phase,
    calendar: Optional[LocaleCalendar] = None,
) -> bool:
    times = calculate_exact_shift_times(context, day, phase, calendar=calendar)
    return times is not None and _day_offset(times) > 0


def format_duration(minutes: int) -> str:
    """450 -> "7h 30m", 480 -> "8h"."""
    hours, mins = divmod(max(minutes, 0), 60)
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_summary(result: AggregateResult) -> str:
    return (
        f"Arbeitstage geplant: {result.scheduled_work_days}, "
        f"Urlaubsabzug: {result.effective_deduction_days}, "
        f"netto: {result.net_working_days} Tage / {format_duration(result.net_working_minutes)}"
    )
