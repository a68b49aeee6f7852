import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Optional


def _config_path():
    base = os.path.join(os.path.expanduser('~'), '.shiftcompass')
    os.makedirs(base, exist_ok=True)
    return os.path.join(base, 'shiftcompass_config.json')


def _defaults():
    return {
        'feature_flags': asdict(FeatureFlags()),
        'shift_context': None,
    }


@dataclass
class FeatureFlags:
    # Kuwait und der Golf kennen keine Sommerzeit, daher standardmäßig aus
    dst_aware_mode: bool = False
    dst_show_alerts: bool = False
    timezone_auto_rebuild: bool = True
    reference_date_validation: bool = True


def load_config(path: Optional[str] = None) -> dict:
    path = path or _config_path()
    if not os.path.exists(path):
        return _defaults()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            cfg = json.load(f)
    except (OSError, ValueError) as e:
        logging.error(f"Konfiguration {path} nicht lesbar: {e}")
        return _defaults()
    if not isinstance(cfg, dict):
        return _defaults()
    merged = _defaults()
    merged.update(cfg)
    return merged


def save_config(cfg: dict, path: Optional[str] = None):
    path = path or _config_path()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)


def load_feature_flags(path: Optional[str] = None) -> FeatureFlags:
    raw = load_config(path).get('feature_flags') or {}
    known = {f.name for f in fields(FeatureFlags)}
    # nur echte Wahrheitswerte, "false" aus Handbearbeitung bleibt beim Standard
    return FeatureFlags(**{k: v for k, v in raw.items() if k in known and isinstance(v, bool)})


def set_feature_flag(name: str, value: bool, path: Optional[str] = None) -> FeatureFlags:
    if name not in {f.name for f in fields(FeatureFlags)}:
        raise ValueError(f"Unbekanntes Feature-Flag: {name}")
    cfg = load_config(path)
    flags = asdict(load_feature_flags(path))
    flags[name] = bool(value)
    cfg['feature_flags'] = flags
    save_config(cfg, path)
    logging.info(f"Feature-Flag {name} geändert auf: {bool(value)}")
    return FeatureFlags(**flags)


def reset_feature_flags(path: Optional[str] = None):
    cfg = load_config(path)
    cfg['feature_flags'] = asdict(FeatureFlags())
    save_config(cfg, path)
    logging.info("Alle Feature-Flags auf Standard zurückgesetzt")
