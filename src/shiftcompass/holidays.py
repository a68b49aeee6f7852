import logging
from datetime import date, timedelta
from typing import Dict, Iterable, Optional, Tuple


class StaticHolidayCalendar:
    """Feiertage aus einer festen Liste (z. B. aus einer Import-Datei)."""

    def __init__(self, days: Iterable[date] = (), names: Optional[Dict[date, str]] = None):
        self.names: Dict[date, str] = dict(names or {})
        self.days = set(days) | set(self.names)

    def is_holiday(self, day: date) -> bool:
        return day in self.days

    def holiday_name(self, day: date) -> Optional[str]:
        return self.names.get(day)


# (Monat, Tag) je Jahr: Eid al-Fitr, Eid al-Adha, Islamisches Neujahr, Maulid, Isra und Miradsch.
# Geschätzte Daten, tatsächliche Termine hängen von der Mondsichtung ab.
_ISLAMIC_ESTIMATES: Dict[int, Tuple[Tuple[int, int], ...]] = {
    2024: ((4, 10), (6, 16), (7, 7), (9, 15), (2, 7)),
    2025: ((3, 30), (6, 6), (6, 26), (9, 4), (1, 27)),
    2026: ((3, 20), (5, 27), (6, 16), (8, 25), (1, 17)),
    2027: ((3, 9), (5, 16), (6, 5), (8, 14), (1, 6)),
    2028: ((2, 26), (5, 4), (5, 25), (8, 3), (12, 26)),
    2029: ((2, 14), (4, 23), (5, 14), (7, 23), (12, 15)),
    2030: ((2, 3), (4, 12), (5, 3), (7, 12), (12, 5)),
}
_ISLAMIC_NAMES = ("Eid al-Fitr", "Eid al-Adha", "Islamic New Year", "Prophet's Birthday", "Isra and Mi'raj")
_ISLAMIC_LENGTHS = (3, 4, 1, 1, 1)
_BASELINE_YEAR = 2026
_SHIFT_PER_YEAR = 10.88     # islamisches Jahr ~354.37 Tage


class KuwaitHolidayCalendar:
    """
    Offizielle Feiertage Kuwait: feste Tage (Neujahr, Nationalfeiertag,
    Befreiungstag) plus geschätzte islamische Feiertage. Für Jahre ohne
    Tabelle wird vom Basisjahr 2026 extrapoliert.
    """
    region_code = "KW"

    def __init__(self):
        self._cache: Dict[int, Dict[date, str]] = {}

    def is_holiday(self, day: date) -> bool:
        return day in self.holidays_for_year(day.year)

    def holiday_name(self, day: date) -> Optional[str]:
        return self.holidays_for_year(day.year).get(day)

    def holidays_for_year(self, year: int) -> Dict[date, str]:
        if year in self._cache:
            return self._cache[year]

        out: Dict[date, str] = {
            date(year, 1, 1): "New Year's Day",
            date(year, 2, 25): "National Day",
            date(year, 2, 26): "Liberation Day",
        }
        if year in _ISLAMIC_ESTIMATES:
            starts = [date(year, m, d) for m, d in _ISLAMIC_ESTIMATES[year]]
        else:
            logging.warning(f"Keine islamischen Feiertage für {year} hinterlegt, extrapoliere")
            starts = self._extrapolate(year)

        for start, name, length in zip(starts, _ISLAMIC_NAMES, _ISLAMIC_LENGTHS):
            for offset in range(length):
                out[start + timedelta(days=offset)] = name

        logging.info(f"{len(out)} Feiertage für {year} erzeugt")
        self._cache[year] = out
        return out

    @staticmethod
    def _extrapolate(year: int):
        shift = int((year - _BASELINE_YEAR) * _SHIFT_PER_YEAR)
        starts = []
        for m, d in _ISLAMIC_ESTIMATES[_BASELINE_YEAR]:
            shifted = date(_BASELINE_YEAR, m, d) - timedelta(days=shift)
            # Monat/Tag ins Zieljahr übernehmen
            try:
                starts.append(date(year, shifted.month, shifted.day))
            except ValueError:
                # 29.02. in einem Nicht-Schaltjahr
                starts.append(date(year, 3, 1))
        return starts
