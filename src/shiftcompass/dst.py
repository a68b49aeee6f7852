"""
Erkennung von Sommerzeit-Umstellungen und Korrektur von Schichtzeiten.

Ob ein Tag ein Umstellungstag ist, ergibt sich aus dem Vergleich der
UTC-Abweichung am Tagesanfang mit der am Anfang des Folgetags. Bei der
Rückstellung wird eine doppelte Uhrzeit immer als erstes Auftreten gelesen;
welches Auftreten gemeint war, wird bewusst nicht unterschieden.

Ist das Flag dst_aware_mode aus, liefert validate_shift_time immer ein
"sauberes" Ergebnis, unabhängig vom tatsächlichen Kalender.
"""
import logging
from datetime import date, datetime
from typing import Optional, Union

from dateutil import tz

from .config import FeatureFlags, load_feature_flags
from .locale_calendar import LocaleCalendar, TimezoneLike, first_existing_hour
from .models import DSTTransition, DSTValidationResult


def detect_dst_transition(day: Union[date, datetime], timezone: TimezoneLike = None) -> Optional[DSTTransition]:
    cal = LocaleCalendar(timezone)
    d = cal.to_local_date(day)
    start_offset = cal.utc_offset_seconds(cal.start_of_day(d))
    end_offset = cal.utc_offset_seconds(cal.start_of_day(cal.add_days(d, 1)))
    if end_offset > start_offset:
        return DSTTransition.SPRING_FORWARD
    if end_offset < start_offset:
        return DSTTransition.FALL_BACK
    return None


def validate_shift_time(
    moment: datetime,
    timezone: TimezoneLike = None,
    flags: Optional[FeatureFlags] = None,
) -> DSTValidationResult:
    """`moment` ist eine Wanduhrzeit in `timezone` (ein tzinfo am Wert wird ignoriert)."""
    flags = flags if flags is not None else load_feature_flags()
    if not flags.dst_aware_mode:
        return DSTValidationResult.clean()

    cal = LocaleCalendar(timezone)
    wall = moment.replace(tzinfo=None)
    transition = detect_dst_transition(wall.date(), cal.tz)
    if transition is None:
        return DSTValidationResult.clean()

    logging.info(f"Sommerzeit-Umstellung am {wall.date()}: {transition.display_name}")

    if transition is DSTTransition.SPRING_FORWARD:
        adjusted = _adjust_spring_forward(wall, cal)
    else:
        logging.debug("Rückstellung: erstes Auftreten wird verwendet")
        adjusted = tz.enfold(wall.replace(tzinfo=cal.tz), fold=0)

    message = None
    if flags.dst_show_alerts:
        message = f"Note: Clock change today ({transition.display_name})"

    return DSTValidationResult(
        is_in_window=True,
        transition=transition,
        adjusted_time=adjusted,
        message=message,
    )


def _adjust_spring_forward(wall: datetime, cal: LocaleCalendar) -> datetime:
    # Uhrzeiten in der übersprungenen Stunde gibt es nicht: zur nächsten gültigen Stunde
    if tz.datetime_exists(wall, cal.tz):
        return tz.enfold(wall.replace(tzinfo=cal.tz), fold=0)
    adjusted = first_existing_hour(wall, cal.tz).replace(tzinfo=cal.tz)
    logging.debug(f"Spring-forward Korrektur: {wall} -> {adjusted}")
    return adjusted


def timezone_uses_dst(timezone: TimezoneLike = None, year: Optional[int] = None) -> bool:
    """Wechselt die UTC-Abweichung der Zone innerhalb des Jahres?"""
    cal = LocaleCalendar(timezone)
    year = year or date.today().year
    for month in range(1, 13):
        month_start = cal.start_of_day(date(year, month, 1))
        next_month = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        if cal.utc_offset_seconds(month_start) != cal.utc_offset_seconds(cal.start_of_day(next_month)):
            return True
    return False
