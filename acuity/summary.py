from __future__ import annotations

from datetime import date as date_type
from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel

from acuity.levels import logmar_to_decimal, logmar_to_snellen, logmar_to_snellen_metric
from acuity.models import GuessingReport, ZestState
from acuity.reliability import detect_guessing
from acuity.zest import credible_interval, get_threshold_estimate


class Eye(str, Enum):
    left = "left"
    right = "right"
    both = "both"


class AcuityResult(BaseModel):
    eye: Eye
    threshold_logmar: float
    ci_lower: float
    ci_upper: float
    confidence_interval: float
    decimal: float
    snellen: str
    snellen_metric: str
    trial_count: int
    is_complete: bool
    guessing: GuessingReport


class VisionTestResult(BaseModel):
    date: str
    left_eye: Optional[float] = None
    right_eye: Optional[float] = None
    both_eyes: Optional[float] = None


def summarize(
    state: ZestState,
    eye: Eye,
    fast_threshold_ms: float = 500.0,
    max_fast_fraction: float = 0.4,
) -> AcuityResult:
    threshold = get_threshold_estimate(state)
    lower, upper = credible_interval(state)
    return AcuityResult(
        eye=eye,
        threshold_logmar=round(threshold, 3),
        ci_lower=lower,
        ci_upper=upper,
        confidence_interval=state.confidence_interval,
        decimal=round(logmar_to_decimal(threshold), 2),
        snellen=logmar_to_snellen(threshold),
        snellen_metric=logmar_to_snellen_metric(threshold),
        trial_count=state.trial_number,
        is_complete=state.is_complete,
        guessing=detect_guessing(state.trials, fast_threshold_ms, max_fast_fraction),
    )


def combine_eyes(results: Mapping[Eye, AcuityResult], date: Optional[str] = None) -> VisionTestResult:
    """Collect per-eye decimal acuities into one test record.

    Without a binocular run, ``both_eyes`` falls back to the better eye.
    """
    left = results.get(Eye.left)
    right = results.get(Eye.right)
    both = results.get(Eye.both)
    both_decimal = both.decimal if both else None
    if both_decimal is None and (left or right):
        both_decimal = max(r.decimal for r in (left, right) if r is not None)
    return VisionTestResult(
        date=date or date_type.today().isoformat(),
        left_eye=left.decimal if left else None,
        right_eye=right.decimal if right else None,
        both_eyes=both_decimal,
    )
