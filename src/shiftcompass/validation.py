"""
Prüfung des gespeicherten Ankers (Referenzdatum + Zyklusposition).

Jede Zeitleiste hängt an diesem Anker; ein fehlendes, weit in der Zukunft
oder sehr weit zurück liegendes Referenzdatum führt zur Neueinrichtung.
Ist das Flag reference_date_validation aus, gilt jeder Anker als gültig.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from dateutil.relativedelta import relativedelta

from .config import FeatureFlags, load_feature_flags
from .models import ShiftContext, ShiftSystemKind
from .shift_systems import get_system

MAX_FUTURE_DAYS = 1     # Toleranz für Zeitzonen-Randfälle
MAX_AGE_YEARS = 2


class ReferenceDateStatus(str, Enum):
    VALID = "valid"
    MISSING = "missing"
    SETUP_INDEX_MISSING = "setup_index_missing"
    FUTURE_DATE = "future_date"
    TOO_OLD = "too_old"


@dataclass(frozen=True)
class ReferenceDateCheck:
    status: ReferenceDateStatus = ReferenceDateStatus.VALID
    amount: int = 0     # Tage in der Zukunft bzw. Jahre alt

    @property
    def is_valid(self) -> bool:
        return self.status is ReferenceDateStatus.VALID

    @property
    def description(self) -> str:
        if self.status is ReferenceDateStatus.MISSING:
            return "Reference date missing"
        if self.status is ReferenceDateStatus.SETUP_INDEX_MISSING:
            return "Setup index missing"
        if self.status is ReferenceDateStatus.FUTURE_DATE:
            return f"Reference date is {self.amount} days in the future"
        if self.status is ReferenceDateStatus.TOO_OLD:
            return f"Reference date is too old ({self.amount} years)"
        return "Valid"


def validate_reference_date(
    context: ShiftContext,
    today: Optional[date] = None,
    flags: Optional[FeatureFlags] = None,
) -> ReferenceDateCheck:
    flags = flags if flags is not None else load_feature_flags()
    if not flags.reference_date_validation:
        return ReferenceDateCheck()

    ref = context.reference_date
    if ref is None:
        logging.warning("Referenzdatum fehlt")
        return ReferenceDateCheck(ReferenceDateStatus.MISSING)
    if isinstance(ref, datetime):
        ref = ref.date()

    system = get_system(context.system_id)
    if system.kind is ShiftSystemKind.CYCLIC and system.anchor_index(context) is None:
        logging.warning(f"Keine Zyklusposition für {system.system_id.value}")
        return ReferenceDateCheck(ReferenceDateStatus.SETUP_INDEX_MISSING)

    today = today or date.today()
    days_ahead = (ref - today).days
    if days_ahead > MAX_FUTURE_DAYS:
        logging.warning(f"Referenzdatum liegt {days_ahead} Tage in der Zukunft")
        return ReferenceDateCheck(ReferenceDateStatus.FUTURE_DATE, days_ahead)

    years_old = relativedelta(today, ref).years
    if years_old > MAX_AGE_YEARS:
        logging.warning(f"Referenzdatum ist {years_old} Jahre alt")
        return ReferenceDateCheck(ReferenceDateStatus.TOO_OLD, years_old)

    logging.debug("Referenzdatum gültig")
    return ReferenceDateCheck()
