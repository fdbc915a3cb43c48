"""Adaptive visual-acuity estimation (ZEST) and psychophysical scoring."""

from acuity.errors import AcuityError, SessionCompleteError, SessionNotFoundError
from acuity.levels import (
    LOGMAR_LEVELS,
    closest_level,
    decimal_to_logmar,
    get_closest_level_index,
    logmar_to_decimal,
    logmar_to_snellen,
    logmar_to_snellen_metric,
)
from acuity.models import GuessingReport, LogMARLevel, PosteriorPoint, ZestConfig, ZestState, ZestTrial
from acuity.reliability import detect_guessing
from acuity.summary import AcuityResult, Eye, VisionTestResult, combine_eyes, summarize
from acuity.zest import (
    credible_interval,
    get_next_stimulus,
    get_threshold_estimate,
    initialize_zest,
    posterior_mean,
    posterior_sd,
    update_zest_state,
)

__all__ = [
    "AcuityError",
    "SessionCompleteError",
    "SessionNotFoundError",
    "LOGMAR_LEVELS",
    "LogMARLevel",
    "closest_level",
    "decimal_to_logmar",
    "get_closest_level_index",
    "logmar_to_decimal",
    "logmar_to_snellen",
    "logmar_to_snellen_metric",
    "GuessingReport",
    "PosteriorPoint",
    "ZestConfig",
    "ZestState",
    "ZestTrial",
    "detect_guessing",
    "AcuityResult",
    "Eye",
    "VisionTestResult",
    "combine_eyes",
    "summarize",
    "credible_interval",
    "get_next_stimulus",
    "get_threshold_estimate",
    "initialize_zest",
    "posterior_mean",
    "posterior_sd",
    "update_zest_state",
]
