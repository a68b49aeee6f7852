# src/shiftcompass/models.py
import uuid
from dataclasses import dataclass, field, fields
from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from dateutil import tz


class Phase(str, Enum):
    """Kategorie eines Tages innerhalb einer Schichtrotation."""
    MORNING = "morning"
    EVENING = "evening"
    NIGHT = "night"
    OFF = "off"
    LEAVE = "leave"     # nur nach apply_leave_overrides

    @property
    def is_counted_as_work_day(self) -> bool:
        return self in (Phase.MORNING, Phase.EVENING, Phase.NIGHT)


class ShiftSystemID(str, Enum):
    THREE_SHIFT_TWO_OFF = "three_shift_two_off"
    TWENTY_FOUR_FORTY_EIGHT = "twenty_four_forty_eight"
    TWO_WORK_FOUR_OFF = "two_work_four_off"
    STANDARD_MORNING = "standard_morning"
    EIGHT_HOUR_SHIFT = "eight_hour_shift"


class ShiftSystemKind(str, Enum):
    CYCLIC = "cyclic"           # Dienst folgt einer festen Zyklusfolge
    FIXED_WEEK = "fixed_week"   # feste Arbeitswoche mit Wochenende


@dataclass(frozen=True)
class ShiftStartOption:
    """Auswählbare Position im Zyklus ("Wo stehe ich heute?")."""
    index: int
    phase: Phase
    title: str


@dataclass(frozen=True)
class ShiftFlexibilityRules:
    allowed_late_entry_minutes: int = 0
    break_duration_minutes: int = 0     # unbezahlte Pause, wird je Schicht abgezogen
    is_flexible_time: bool = False
    calculate_overtime: bool = False


@dataclass(frozen=True)
class ShiftContext:
    """
    Verankerung einer Rotation: welches System, welche Zyklusposition an
    welchem Referenztag, und die Uhrzeit, zu der die Schicht "Stunde null" beginnt.
    """
    system_id: ShiftSystemID
    start_phase: Optional[Phase] = None
    setup_index: Optional[int] = None
    shift_start_time: time = time(7, 0)
    reference_date: date = field(default_factory=date.today)
    flexibility: ShiftFlexibilityRules = field(default_factory=ShiftFlexibilityRules)
    work_duration_hours: Optional[int] = None
    timezone: Optional[str] = None      # IANA-Name, None = lokale Zone

    def to_dict(self) -> dict:
        ref = self.reference_date
        if isinstance(ref, datetime):
            ref = ref.date()
        return {
            'system_id': ShiftSystemID(self.system_id).value,
            'start_phase': self.start_phase.value if self.start_phase else None,
            'setup_index': self.setup_index,
            'start_hour': self.shift_start_time.hour,
            'start_minute': self.shift_start_time.minute,
            'work_duration_hours': self.work_duration_hours,
            'reference_date': ref.isoformat(),
            'flexibility': {
                'allowed_late_entry_minutes': self.flexibility.allowed_late_entry_minutes,
                'break_duration_minutes': self.flexibility.break_duration_minutes,
                'is_flexible_time': self.flexibility.is_flexible_time,
                'calculate_overtime': self.flexibility.calculate_overtime,
            },
            'timezone': self.timezone,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShiftContext":
        # ältere Konfigurationen haben weder flexibility noch timezone
        tz_name = data.get('timezone')
        if tz_name and tz.gettz(tz_name) is None:
            tz_name = None
        phase = data.get('start_phase')
        flex = data.get('flexibility') or {}
        known = {f.name for f in fields(ShiftFlexibilityRules)}
        return cls(
            system_id=ShiftSystemID(data['system_id']),
            start_phase=Phase(phase) if phase else None,
            setup_index=data.get('setup_index'),
            shift_start_time=time(int(data.get('start_hour', 7)), int(data.get('start_minute', 0))),
            reference_date=date.fromisoformat(data['reference_date']),
            flexibility=ShiftFlexibilityRules(**{k: v for k, v in flex.items() if k in known}),
            work_duration_hours=data.get('work_duration_hours'),
            timezone=tz_name,
        )


@dataclass(frozen=True)
class TimelineItem:
    date: date
    phase: Phase


@dataclass(frozen=True)
class ShiftTimes:
    start: datetime
    end: datetime


class LeaveType(str, Enum):
    REGULAR = "regular"
    SICK = "sick"
    EMERGENCY = "emergency"
    ALLOWANCE = "allowance"         # Ruhetag als Ausgleich für Mehrarbeit
    OFF = "off"
    COMPENSATION = "compensation"
    STUDY = "study"
    OTHER = "other"

    @property
    def is_deductible(self) -> bool:
        # Ruhetage zählen nicht gegen die Arbeitstage
        return self not in (LeaveType.ALLOWANCE, LeaveType.OFF, LeaveType.COMPENSATION)

    @property
    def priority(self) -> int:
        if self in (LeaveType.SICK, LeaveType.EMERGENCY):
            return 100
        if self is LeaveType.REGULAR:
            return 80
        return 50


@dataclass
class ManualLeave:
    """Urlaub/Abwesenheit von start_date bis end_date (inklusive)."""
    id: Optional[int] = field(default=None, init=False)    # db-Primärschlüssel
    start_date: date
    end_date: date
    type: LeaveType = LeaveType.REGULAR
    note: Optional[str] = None

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def is_deductible(self) -> bool:
        return LeaveType(self.type).is_deductible


class EventImpact(str, Enum):
    DEDUCTION = "deduction"
    ADDITION = "addition"
    NEUTRAL = "neutral"


class EventType(str, Enum):
    LATE_ENTRY = "late_entry"
    EARLY_EXIT = "early_exit"
    MID_SHIFT_PERMISSION = "mid_shift_permission"
    OVERTIME = "overtime"

    @property
    def default_impact(self) -> EventImpact:
        if self in (EventType.LATE_ENTRY, EventType.EARLY_EXIT):
            return EventImpact.DEDUCTION
        if self is EventType.OVERTIME:
            return EventImpact.ADDITION
        return EventImpact.NEUTRAL


@dataclass
class ShiftEvent:
    """Verspätung, früher Feierabend oder Überstunden an einem Tag."""
    day: date
    type: EventType
    duration_minutes: int
    note: str = ""
    is_ignored: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def effective_minutes(self) -> int:
        if self.is_ignored:
            return 0
        impact = EventType(self.type).default_impact
        if impact is EventImpact.DEDUCTION:
            return -self.duration_minutes
        if impact is EventImpact.ADDITION:
            return self.duration_minutes
        return 0


@dataclass(frozen=True)
class AggregateResult:
    scheduled_work_days: int = 0
    effective_deduction_days: int = 0
    net_working_days: int = 0
    net_working_minutes: int = 0

    @property
    def net_working_hours(self) -> float:
        return self.net_working_minutes / 60.0

    @property
    def average_hours_per_day(self) -> float:
        if self.net_working_days <= 0:
            return 0.0
        return self.net_working_hours / self.net_working_days


@dataclass(frozen=True)
class TimezoneSnapshot:
    identifier: str
    utc_offset_seconds: int


@dataclass(frozen=True)
class TimezoneChange:
    old_timezone: str
    new_timezone: str
    hours_difference: int

    @property
    def is_significant(self) -> bool:
        return abs(self.hours_difference) >= 1

    @property
    def description(self) -> str:
        return f"Timezone changed from {self.old_timezone} to {self.new_timezone}"


class DSTTransition(str, Enum):
    SPRING_FORWARD = "spring_forward"   # Uhr springt vor, eine Stunde fehlt
    FALL_BACK = "fall_back"             # Uhr wird zurückgestellt, eine Stunde doppelt

    @property
    def display_name(self) -> str:
        return "Spring Forward" if self is DSTTransition.SPRING_FORWARD else "Fall Back"


@dataclass(frozen=True)
class DSTValidationResult:
    is_in_window: bool = False
    transition: Optional[DSTTransition] = None
    adjusted_time: Optional[datetime] = None
    message: Optional[str] = None

    @classmethod
    def clean(cls) -> "DSTValidationResult":
        return cls()
