"""
Erkennt, ob sich die Zeitzone des Geräts seit dem letzten Aufruf geändert hat.

Wird vom Host bei jedem Wiedereintritt (App wird aktiv) manuell abgefragt.
Der gespeicherte Stand ist eine einzige Ressource: Aufrufe müssen vom
Aufrufer serialisiert werden.
"""
import logging
import os
from datetime import datetime
from typing import Callable, Optional

from dateutil import tz

from .models import TimezoneChange, TimezoneSnapshot
from .providers import KeyValueStore

LAST_TIMEZONE_KEY = "last_known_timezone_identifier"
LAST_TIMEZONE_OFFSET_KEY = "last_known_timezone_offset"


def system_timezone_name() -> str:
    """IANA-Name der Host-Zone: TZ, sonst Ziel des /etc/localtime-Links, sonst UTC."""
    name = os.environ.get("TZ", "").lstrip(":")
    if name and tz.gettz(name) is not None:
        return name
    try:
        target = os.path.realpath("/etc/localtime")
    except OSError:
        target = ""
    marker = "zoneinfo" + os.sep
    if marker in target:
        candidate = target.split(marker, 1)[1]
        if tz.gettz(candidate) is not None:
            return candidate
    return "UTC"


class TimezoneChangeDetector:

    def __init__(
        self,
        store: KeyValueStore,
        current_timezone: Optional[Callable[[], str]] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.current_timezone = current_timezone or system_timezone_name
        self.now = now or (lambda: datetime.now(tz.UTC))

    def _offset_seconds(self, identifier: str) -> int:
        zone = tz.gettz(identifier) or tz.UTC
        return int(self.now().astimezone(zone).utcoffset().total_seconds())

    def check_for_change(self) -> Optional[TimezoneChange]:
        current = self.current_timezone()
        stored = self.store.get(LAST_TIMEZONE_KEY)

        if not isinstance(stored, str) or not stored or tz.gettz(stored) is None:
            # erster Start (oder unlesbarer Stand): aktuellen Stand merken
            logging.info(f"Erster Start, speichere Zeitzone {current}")
            self.update_stored_timezone(current)
            return None

        if stored != current:
            diff_seconds = self._offset_seconds(current) - self._offset_seconds(stored)
            hours = int(diff_seconds / 3600)    # Richtung null abschneiden
            logging.info(f"Zeitzone geändert: {stored} -> {current} ({hours}h)")
            self.update_stored_timezone(current)
            return TimezoneChange(old_timezone=stored, new_timezone=current, hours_difference=hours)

        logging.debug(f"Zeitzone unverändert: {current}")
        return None

    def update_stored_timezone(self, identifier: Optional[str] = None):
        identifier = identifier or self.current_timezone()
        self.store.set(LAST_TIMEZONE_KEY, identifier)
        self.store.set(LAST_TIMEZONE_OFFSET_KEY, self._offset_seconds(identifier))

    def stored_timezone(self) -> Optional[TimezoneSnapshot]:
        identifier = self.store.get(LAST_TIMEZONE_KEY)
        if not isinstance(identifier, str) or not identifier or tz.gettz(identifier) is None:
            return None
        offset = self.store.get(LAST_TIMEZONE_OFFSET_KEY)
        if not isinstance(offset, int):
            offset = self._offset_seconds(identifier)
        return TimezoneSnapshot(identifier, offset)

    def clear(self):
        self.store.remove(LAST_TIMEZONE_KEY)
        self.store.remove(LAST_TIMEZONE_OFFSET_KEY)
        logging.info("Gespeicherte Zeitzone gelöscht")


def check_for_timezone_change(store: KeyValueStore, current_timezone: Optional[Callable[[], str]] = None):
    return TimezoneChangeDetector(store, current_timezone).check_for_change()
