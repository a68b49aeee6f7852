import json
from datetime import date

from shiftcompass import main
from shiftcompass.config import save_config, set_feature_flag
from shiftcompass.models import ShiftContext, ShiftSystemID

SETUP = ["0", "0", "2025-01-01", "07:00", "Asia/Kuwait"]


def feed(monkeypatch, answers):
    it = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(it))


def test_wizard_prints_month_and_saves(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("TZ", "UTC")
    # festes Referenzdatum, unabhängig vom heutigen Tag
    set_feature_flag("reference_date_validation", False)
    feed(monkeypatch, SETUP + ["2025-01", "j"])
    main.run_wizard()

    out = capsys.readouterr().out
    assert "Dienstplan 2025-01" in out
    assert "2025-01-03  night    23:00 - 07:00 (+1)" in out
    assert "Arbeitstage geplant: 19" in out
    assert "Einrichtung gespeichert." in out
    assert "Timezone changed" not in out

    with open(tmp_path / ".shiftcompass" / "shiftcompass_config.json", encoding="utf-8") as f:
        cfg = json.load(f)
    assert cfg['shift_context']['system_id'] == ShiftSystemID.THREE_SHIFT_TWO_OFF.value
    assert cfg['shift_context']['timezone'] == "Asia/Kuwait"

    # zweiter Lauf mit gespeicherter Einrichtung
    feed(monkeypatch, ["j", "2025-02", "n"])
    main.run_wizard()
    out = capsys.readouterr().out
    assert "Dienstplan 2025-02" in out
    assert "Einrichtung gespeichert." not in out


def test_wizard_reports_device_timezone_change(tmp_path, monkeypatch, capsys):
    # konfigurierte Zone bleibt Kuwait, nur die Zone des Geräts wechselt
    monkeypatch.setenv("HOME", str(tmp_path))
    set_feature_flag("reference_date_validation", False)
    monkeypatch.setenv("TZ", "UTC")
    feed(monkeypatch, SETUP + ["2025-01", "j"])
    main.run_wizard()
    capsys.readouterr()

    monkeypatch.setenv("TZ", "Asia/Tokyo")
    feed(monkeypatch, ["j", "2025-01", "n"])
    main.run_wizard()
    out = capsys.readouterr().out
    assert "Timezone changed from UTC to Asia/Tokyo (+9h)" in out


def test_wizard_skips_timezone_check_when_flag_off(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    set_feature_flag("reference_date_validation", False)
    set_feature_flag("timezone_auto_rebuild", False)
    monkeypatch.setenv("TZ", "UTC")
    feed(monkeypatch, SETUP + ["2025-01", "j"])
    main.run_wizard()

    monkeypatch.setenv("TZ", "Asia/Tokyo")
    feed(monkeypatch, ["j", "2025-01", "n"])
    main.run_wizard()
    assert "Timezone changed" not in capsys.readouterr().out


def test_wizard_asks_again_for_stale_reference_date(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("TZ", "UTC")
    old = ShiftContext(system_id=ShiftSystemID.THREE_SHIFT_TWO_OFF, setup_index=0,
                       reference_date=date(2020, 1, 1), timezone="Asia/Kuwait")
    save_config({'shift_context': old.to_dict()})

    # gespeicherte Einrichtung -> zu alt -> neu einrichten mit heute als Referenz
    feed(monkeypatch, ["j", "0", "0", "", "07:00", "Asia/Kuwait", "", "j"])
    main.run_wizard()
    out = capsys.readouterr().out
    assert "Reference date is too old" in out

    with open(tmp_path / ".shiftcompass" / "shiftcompass_config.json", encoding="utf-8") as f:
        cfg = json.load(f)
    assert cfg['shift_context']['reference_date'] == date.today().isoformat()
