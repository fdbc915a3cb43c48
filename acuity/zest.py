"""ZEST (Zippy Estimation by Sequential Testing) for logMAR acuity.

The posterior over the subject's threshold lives on a fixed logMAR grid.
Each response multiplies it by the likelihood of that response under a
logistic psychometric function with a guess floor and a lapse ceiling
(King-Smith et al. 1994; Turpin et al. 2003). After a short fixed
bracketing sequence the next stimulus is the posterior mean, snapped to the
nearest chart line.

Every function here is pure: states are frozen pydantic models and each
update returns a new one.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from acuity.errors import SessionCompleteError
from acuity.levels import LOGMAR_LEVELS, get_closest_level_index
from acuity.models import LogMARLevel, PosteriorPoint, ZestConfig, ZestState, ZestTrial

logger = logging.getLogger(__name__)


def logmar_grid(config: ZestConfig) -> np.ndarray:
    n_points = int(round((config.grid_max - config.grid_min) / config.grid_step)) + 1
    return np.round(np.linspace(config.grid_min, config.grid_max, n_points), 6)


def probability_correct(stimulus_logmar: float, threshold_logmar, config: ZestConfig) -> np.ndarray:
    """P(correct) for a stimulus against one or more candidate thresholds.

    Larger logMAR means a larger, easier optotype, so the probability rises
    as the stimulus moves above the threshold.
    """
    x = np.asarray(threshold_logmar, dtype=float)
    z = np.clip((stimulus_logmar - x) / config.slope, -500.0, 500.0)
    span = 1.0 - config.guess_rate - config.lapse_rate
    return config.guess_rate + span / (1.0 + np.exp(-z))


def normalize_posterior(weights: np.ndarray) -> np.ndarray:
    """Scale to unit mass; fall back to uniform when the mass has vanished."""
    weights = np.asarray(weights, dtype=float)
    total = float(weights.sum())
    if not np.isfinite(total) or total <= 0.0:
        logger.warning("Posterior mass underflowed (total=%s); reseeding uniform", total)
        return np.full(weights.shape, 1.0 / weights.size)
    return weights / total


def _mean(values: np.ndarray, probs: np.ndarray) -> float:
    return float(np.dot(values, probs))


def _quantile_bounds(values: np.ndarray, probs: np.ndarray, mass: float) -> Tuple[float, float]:
    tail = (1.0 - mass) / 2.0
    cdf = np.cumsum(probs)
    last = values.size - 1
    lower_idx = min(int(np.searchsorted(cdf, tail, side="left")), last)
    upper_idx = min(int(np.searchsorted(cdf, 1.0 - tail, side="left")), last)
    return float(values[lower_idx]), float(values[upper_idx])


def _build_posterior(values: np.ndarray, probs: np.ndarray) -> Tuple[PosteriorPoint, ...]:
    return tuple(PosteriorPoint(logmar=float(v), probability=float(p)) for v, p in zip(values, probs))


def posterior_mean(state: ZestState) -> float:
    return _mean(state.logmar_values(), state.probabilities())


def posterior_sd(state: ZestState) -> float:
    values = state.logmar_values()
    probs = state.probabilities()
    mean = _mean(values, probs)
    return float(np.sqrt(np.dot(probs, (values - mean) ** 2)))


def credible_interval(state: ZestState) -> Tuple[float, float]:
    """Lower and upper logMAR bounds holding the central ``credible_mass``."""
    return _quantile_bounds(state.logmar_values(), state.probabilities(), state.config.credible_mass)


def initialize_zest(config: Optional[ZestConfig] = None) -> ZestState:
    config = config or ZestConfig()
    values = logmar_grid(config)
    prior = np.exp(-0.5 * ((values - config.prior_mean) / config.prior_sd) ** 2)
    probs = normalize_posterior(prior)
    lower, upper = _quantile_bounds(values, probs, config.credible_mass)
    return ZestState(
        trial_number=0,
        posterior=_build_posterior(values, probs),
        trials=(),
        is_complete=False,
        confidence_interval=upper - lower,
        config=config,
    )


def get_next_stimulus(state: ZestState, levels: Sequence[LogMARLevel] = LOGMAR_LEVELS) -> float:
    bracketing = state.config.bracketing_trials
    if state.trial_number < len(bracketing):
        return float(bracketing[state.trial_number])
    mean = posterior_mean(state)
    return float(levels[get_closest_level_index(mean, levels)].logmar)


def update_zest_state(
    state: ZestState,
    tested_logmar: float,
    is_correct: bool,
    response_time_ms: float,
) -> ZestState:
    if state.is_complete:
        raise SessionCompleteError(
            f"ZEST run already finished after {state.trial_number} trials"
        )
    config = state.config
    if response_time_ms < 0:
        logger.warning("Negative response time %s ms clamped to 0", response_time_ms)
        response_time_ms = 0
    trial_number = state.trial_number + 1
    trial = ZestTrial(
        stimulus_logmar=float(tested_logmar),
        is_correct=bool(is_correct),
        response_time_ms=int(round(response_time_ms)),
        trial_number=trial_number,
    )

    values = state.logmar_values()
    p_correct = probability_correct(float(tested_logmar), values, config)
    likelihood = p_correct if is_correct else 1.0 - p_correct
    probs = normalize_posterior(state.probabilities() * likelihood)

    lower, upper = _quantile_bounds(values, probs, config.credible_mass)
    ci = upper - lower
    # grid values carry float noise; a width equal to the threshold still counts
    complete = ci <= config.confidence_threshold + 1e-9 or trial_number >= config.max_trials
    estimate = _mean(values, probs) if complete else None

    logger.debug(
        "ZEST trial %d: stimulus=%.2f correct=%s ci=%.3f",
        trial_number,
        tested_logmar,
        is_correct,
        ci,
    )
    if complete:
        logger.info("ZEST finished after %d trials: estimate=%.3f ci=%.3f", trial_number, estimate, ci)

    return ZestState(
        trial_number=trial_number,
        posterior=_build_posterior(values, probs),
        trials=state.trials + (trial,),
        is_complete=complete,
        confidence_interval=ci,
        threshold_estimate=estimate,
        config=config,
    )


def get_threshold_estimate(state: ZestState) -> float:
    if state.threshold_estimate is not None:
        return state.threshold_estimate
    return posterior_mean(state)
