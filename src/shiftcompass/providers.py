"""
Schnittstellen zu den externen Datenquellen (Feiertage, Urlaub, Ereignisse,
dauerhafter Schlüssel-Wert-Speicher) und einfache In-Memory-Umsetzungen.
Die sqlite-Umsetzung steht in data.py.
"""
from datetime import date
from typing import Dict, Iterable, List, Optional, Protocol, Union

from .models import ManualLeave, ShiftEvent

StoredValue = Union[str, int]


class HolidayCalendar(Protocol):
    def is_holiday(self, day: date) -> bool: ...


class LeaveProvider(Protocol):
    def get_leave(self, day: date) -> Optional[ManualLeave]: ...


class EventAdjustmentProvider(Protocol):
    def net_minutes_adjustment(self, day: date) -> int: ...


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[StoredValue]: ...

    def set(self, key: str, value: StoredValue) -> None: ...

    def remove(self, key: str) -> None: ...


class ManualLeaveBook:
    """Urlaubsliste im Speicher."""

    def __init__(self, leaves: Iterable[ManualLeave] = ()):
        self.leaves: List[ManualLeave] = list(leaves)

    def add(self, leave: ManualLeave):
        self.leaves.append(leave)

    def get_leave(self, day: date) -> Optional[ManualLeave]:
        return next((lv for lv in self.leaves if lv.contains(day)), None)

    def has_leave(self, day: date) -> bool:
        return self.get_leave(day) is not None


class ShiftEventLog:
    """Ereignisse (Verspätung, Überstunden …) im Speicher."""

    def __init__(self, events: Iterable[ShiftEvent] = ()):
        self.events: List[ShiftEvent] = list(events)

    def add(self, event: ShiftEvent):
        self.events.append(event)

    def events_for(self, day: date) -> List[ShiftEvent]:
        return [ev for ev in self.events if ev.day == day]

    def net_minutes_adjustment(self, day: date) -> int:
        return sum(ev.effective_minutes for ev in self.events_for(day))


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, StoredValue]] = None):
        self.values: Dict[str, StoredValue] = dict(initial or {})

    def get(self, key: str) -> Optional[StoredValue]:
        return self.values.get(key)

    def set(self, key: str, value: StoredValue) -> None:
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)


class _NoLeaves:
    def get_leave(self, day: date) -> Optional[ManualLeave]:
        return None


class _NoEvents:
    def net_minutes_adjustment(self, day: date) -> int:
        return 0


NO_LEAVES = _NoLeaves()
NO_EVENTS = _NoEvents()
