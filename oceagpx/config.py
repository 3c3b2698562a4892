from pathlib import Path
import copy
import os
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

import yaml
from dotenv import load_dotenv

DEFAULTS: Dict[str, Any] = {
    "paths": {
        "db_path": "",
        "output_dir": "",
        "preview_html": "preview.html",
    },
    "export": {
        "max_points": 50000,   # 0 = unlimited
    },
    "time": {
        "timezone": None,      # None = system local time
    },
    "map": {
        "center_lat": 35.6,
        "center_lon": 135.9,
        "zoom_start": 10,
        "track_weight": 3,
        "track_opacity": 0.8,
        "marker_radius": 6,
    },
}

ENV_OVERRIDES = {
    "OCEAGPX_DB_PATH": ("paths", "db_path", str),
    "OCEAGPX_OUTPUT_DIR": ("paths", "output_dir", str),
    "OCEAGPX_MAX_POINTS": ("export", "max_points", int),
}


def _merge(base: Dict[str, Any], override: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(out.get(k), dict):
            # "export:" with every key commented out loads as None
            if v is None:
                continue
            if not isinstance(v, dict):
                raise ValueError(f"config section '{prefix}{k}' must be a mapping")
            out[k] = _merge(out[k], v, f"{prefix}{k}.")
        else:
            out[k] = v
    return out


def load_config(config_path: str = "config.yaml") -> Dict[str, Any]:
    """Read config.yaml over the defaults, then apply env / .env overrides.

    A missing file just means defaults.
    """
    path = Path(config_path)
    user_cfg = yaml.safe_load(path.read_text(encoding="utf-8")) if path.exists() else None
    if user_cfg is not None and not isinstance(user_cfg, dict):
        raise ValueError(f"{config_path}: expected a mapping at the top level")
    cfg = _merge(DEFAULTS, user_cfg or {})

    load_dotenv()
    for var, (section, key, cast) in ENV_OVERRIDES.items():
        value = os.getenv(var)
        if value:
            cfg[section][key] = cast(value)

    max_points = cfg["export"]["max_points"]
    if not isinstance(max_points, int) or isinstance(max_points, bool) or max_points < 0:
        raise ValueError(f"export.max_points must be an integer >= 0, got {max_points!r}")
    return cfg


def get_timezone(cfg: Dict[str, Any]) -> Optional[ZoneInfo]:
    name = cfg.get("time", {}).get("timezone")
    return ZoneInfo(name) if name else None
