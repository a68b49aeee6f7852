from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union

from dateutil import tz

TimezoneLike = Union[str, tzinfo, None]


def resolve_timezone(timezone: TimezoneLike) -> tzinfo:
    """IANA-Name oder tzinfo -> tzinfo. None bedeutet die lokale Zone des Hosts."""
    if timezone is None:
        return tz.tzlocal()
    if isinstance(timezone, tzinfo):
        return timezone
    zone = tz.gettz(timezone)
    if zone is None:
        raise ValueError(f"Unbekannte Zeitzone: {timezone}")
    return zone


class LocaleCalendar:
    """
    Ein Kalender für genau eine Zeitzone. Alle Datumsrechnungen einer
    Berechnung (Tagesanfang, Tagesdifferenz, Wochentag) laufen hierüber,
    damit mitten in einer Rechnung keine zweite Zone ins Spiel kommt.
    """

    def __init__(self, timezone: TimezoneLike = None):
        self.tz = resolve_timezone(timezone)
        self.name: Optional[str] = timezone if isinstance(timezone, str) else None

    def __repr__(self):
        return f"LocaleCalendar({self.name or self.tz!r})"

    def to_local_date(self, value: Union[date, datetime]) -> date:
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                return value.astimezone(self.tz).date()
            return value.date()
        return value

    def start_of_day(self, day: Union[date, datetime]) -> datetime:
        d = self.to_local_date(day)
        midnight = datetime(d.year, d.month, d.day)
        # Zonen, die um Mitternacht umstellen, haben kein 00:00
        if not tz.datetime_exists(midnight, self.tz):
            return tz.resolve_imaginary(midnight.replace(tzinfo=self.tz))
        return tz.enfold(midnight.replace(tzinfo=self.tz), fold=0)

    def add_days(self, day: date, days: int) -> date:
        # OverflowError jenseits von date.min/date.max
        return day + timedelta(days=days)

    def days_between(self, start: Union[date, datetime], end: Union[date, datetime]) -> int:
        return (self.to_local_date(end) - self.to_local_date(start)).days

    def weekday(self, day: Union[date, datetime]) -> int:
        return self.to_local_date(day).weekday()

    def utc_offset_seconds(self, moment: datetime) -> int:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=self.tz)
        return int(moment.utcoffset().total_seconds())

    def localize(self, wall: datetime) -> datetime:
        """
        Wanduhrzeit -> aware datetime. Liegt die Zeit in einer Sommerzeit-Lücke,
        wird auf die erste gültige volle Stunde danach vorgerückt; doppelte
        Zeiten (Rückstellung) bekommen immer das erste Auftreten.
        """
        naive = wall.replace(tzinfo=None)
        if not tz.datetime_exists(naive, self.tz):
            naive = first_existing_hour(naive, self.tz)
        return tz.enfold(naive.replace(tzinfo=self.tz), fold=0)


def first_existing_hour(wall: datetime, zone: tzinfo) -> datetime:
    """Erste volle Stunde ab `wall`, die in `zone` existiert (Minute/Sekunde = 0)."""
    candidate = wall.replace(minute=0, second=0, microsecond=0, tzinfo=None)
    for _ in range(48):
        if tz.datetime_exists(candidate, zone):
            return candidate
        candidate += timedelta(hours=1)
    return candidate
