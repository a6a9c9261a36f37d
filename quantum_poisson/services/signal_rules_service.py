from __future__ import annotations

import json
import os
from typing import Dict, Any

from quantum_poisson.core.config import settings


DEFAULT_RULES: Dict[str, Any] = {
    "min_probability": 65.0,
    "min_value": 1.10,
    "max_signals": 3,
}


def get_signal_rules(overrides: Dict[str, Any] | None = None) -> Dict[str, Any]:
    rules = dict(DEFAULT_RULES)
    path = settings.signal_rules_path
    if path and os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
                if isinstance(data, dict):
                    rules.update(data)
        except (OSError, ValueError):
            pass
    if overrides:
        rules.update(overrides)
    return rules
