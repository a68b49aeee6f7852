# src/shiftcompass/main.py

import calendar as _calendar
import logging
from datetime import date, time

from .calendar_logic import build_timeline
from .config import load_config, load_feature_flags, save_config
from .data import Database
from .dst import detect_dst_transition
from .export_utils import format_summary, format_time_range
from .holidays import KuwaitHolidayCalendar
from .locale_calendar import LocaleCalendar
from .models import ShiftContext, ShiftSystemID
from .shift_systems import get_system
from .statistics import aggregate
from .timezone_monitor import TimezoneChangeDetector
from .validation import validate_reference_date


def input_shift_context() -> ShiftContext:
    print("\n✏️  Schichtsystem einrichten:")
    ids = list(ShiftSystemID)
    for i, sid in enumerate(ids):
        print(f"  [{i}] {get_system(sid).name}")
    choice = input("  System-Nr.: ").strip()
    sid = ids[int(choice)] if choice.isdigit() and int(choice) < len(ids) else ShiftSystemID.STANDARD_MORNING

    system = get_system(sid)
    setup_index = None
    options = system.start_options()
    if options:
        for opt in options:
            print(f"  [{opt.index}] {opt.title}")
        idx = input("  Position am Referenztag: ").strip()
        setup_index = int(idx) if idx.isdigit() else 0

    ref_str = input("  Referenzdatum (YYYY-MM-DD) [leer=heute]: ").strip()
    ref = date.today() if not ref_str else date.fromisoformat(ref_str)
    start_str = input("  Dienstbeginn (HH:MM) [07:00]: ").strip()
    start = time.fromisoformat(start_str) if start_str else time(7, 0)
    tz_name = input("  Zeitzone (z.B. Asia/Kuwait) [leer=System]: ").strip() or None

    return ShiftContext(
        system_id=sid,
        setup_index=setup_index,
        shift_start_time=start,
        reference_date=ref,
        timezone=tz_name,
    )


def run_wizard():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    print("🎯 Willkommen zum ShiftCompass Setup Wizard 🎯")

    cfg = load_config()
    flags = load_feature_flags()
    ctx = None
    if cfg.get('shift_context'):
        if input("Gespeicherte Einrichtung verwenden? (j/n) ").lower() == "j":
            ctx = ShiftContext.from_dict(cfg['shift_context'])
    if ctx is None:
        ctx = input_shift_context()

    check = validate_reference_date(ctx, flags=flags)
    if not check.is_valid:
        print(f"⚠️  {check.description}, bitte neu einrichten.")
        ctx = input_shift_context()

    month_str = input("Monat (YYYY-MM) [leer=aktueller Monat]: ").strip()
    today = date.today()
    year, month = (int(x) for x in month_str.split("-")) if month_str else (today.year, today.month)
    days_in_month = _calendar.monthrange(year, month)[1]
    first = date(year, month, 1)
    last = date(year, month, days_in_month)

    cal = LocaleCalendar(ctx.timezone)
    holidays = KuwaitHolidayCalendar()
    db = Database()
    try:
        # 1) Zeitleiste mit Schichtzeiten
        print(f"\n📅 Dienstplan {year}-{month:02d}:")
        for item in build_timeline(ctx, first, days_in_month, cal, holidays):
            times = format_time_range(ctx, item.date, item.phase, cal) or ""
            note = ""
            if flags.dst_aware_mode and detect_dst_transition(item.date, cal.tz):
                note = "  ⚠️ Zeitumstellung"
            print(f"  {item.date.isoformat()}  {item.phase.value:<8} {times}{note}")

        # 2) Statistik mit Urlauben und Ereignissen aus der Datenbank
        result = aggregate(first, last, ctx, db, db, holidays, cal)
        print(f"\n✅ {format_summary(result)}")

        # 3) Zeitzone des Geräts seit dem letzten Start gewechselt?
        if flags.timezone_auto_rebuild:
            change = TimezoneChangeDetector(db).check_for_change()
            if change and change.is_significant:
                print(f"\n🌍 {change.description} ({change.hours_difference:+d}h)")
    finally:
        db.close()

    if input("\nEinrichtung speichern? (j/n) ").lower() == "j":
        cfg['shift_context'] = ctx.to_dict()
        save_config(cfg)
        print("Einrichtung gespeichert.")


if __name__ == "__main__":
    run_wizard()
