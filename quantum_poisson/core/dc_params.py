from __future__ import annotations

import json
import os
from typing import Optional, Dict, Any


def load_dc_params(path: Optional[str]) -> Optional[Dict[str, Any]]:
    if not path or not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def get_rho(path: Optional[str], default: float) -> float:
    params = load_dc_params(path)
    if not params or "rho" not in params:
        return float(default)
    try:
        return float(params["rho"])
    except (TypeError, ValueError):
        return float(default)
