from __future__ import annotations

import os
from typing import Any, Dict

from acuity.models import ZestConfig

FAST_GUESS_MS = int(os.getenv("FAST_GUESS_MS", "500"))
MAX_FAST_FRACTION = float(os.getenv("MAX_FAST_FRACTION", "0.4"))
ACUITY_MAX_SESSIONS = int(os.getenv("ACUITY_MAX_SESSIONS", "1000"))

_ENV_FIELDS = {
    "ACUITY_MAX_TRIALS": ("max_trials", int),
    "ACUITY_CONFIDENCE_THRESHOLD": ("confidence_threshold", float),
    "ACUITY_PRIOR_MEAN": ("prior_mean", float),
    "ACUITY_PRIOR_SD": ("prior_sd", float),
}


def zest_config_from_env() -> ZestConfig:
    """Default ZEST parameters with any ACUITY_* environment overrides applied."""
    overrides: Dict[str, Any] = {}
    for env_name, (field_name, cast) in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw:
            overrides[field_name] = cast(raw)
    return ZestConfig(**overrides)
