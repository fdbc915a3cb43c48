"""Synthetic observers for checking how well ZEST recovers a known threshold."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from acuity.models import ZestConfig, ZestState
from acuity.zest import get_next_stimulus, get_threshold_estimate, initialize_zest, update_zest_state


@dataclass
class SyntheticObserver:
    true_threshold: float
    noise: float = 0.05  # chance of ignoring the stimulus and guessing
    guess_rate: float = 0.25
    rt_mean_ms: float = 1200.0
    rt_sd_ms: float = 250.0

    def respond(self, stimulus_logmar: float, rng: np.random.Generator) -> bool:
        if rng.random() < self.noise:
            return bool(rng.random() < self.guess_rate)
        return stimulus_logmar > self.true_threshold

    def response_time(self, rng: np.random.Generator) -> int:
        return int(max(0.0, rng.normal(self.rt_mean_ms, self.rt_sd_ms)))


@dataclass
class ThresholdStats:
    true_threshold: float
    runs: int
    hits: int
    mean_abs_error: float
    mean_trials: float

    @property
    def hit_rate(self) -> float:
        return self.hits / self.runs if self.runs else 0.0


@dataclass
class ConvergenceReport:
    tolerance: float
    runs: int
    hits: int
    mean_abs_error: float
    mean_trials: float
    per_threshold: List[ThresholdStats] = field(default_factory=list)

    @property
    def hit_rate(self) -> float:
        return self.hits / self.runs if self.runs else 0.0

    def as_dict(self) -> Dict[str, object]:
        return {
            "tolerance": self.tolerance,
            "runs": self.runs,
            "hits": self.hits,
            "hit_rate": self.hit_rate,
            "mean_abs_error": self.mean_abs_error,
            "mean_trials": self.mean_trials,
            "per_threshold": [
                {
                    "true_threshold": s.true_threshold,
                    "runs": s.runs,
                    "hit_rate": s.hit_rate,
                    "mean_abs_error": s.mean_abs_error,
                    "mean_trials": s.mean_trials,
                }
                for s in self.per_threshold
            ],
        }


def run_session(
    observer: SyntheticObserver,
    rng: np.random.Generator,
    config: Optional[ZestConfig] = None,
) -> ZestState:
    state = initialize_zest(config)
    while not state.is_complete:
        stimulus = get_next_stimulus(state)
        correct = observer.respond(stimulus, rng)
        state = update_zest_state(state, stimulus, correct, observer.response_time(rng))
    return state


def evaluate_convergence(
    thresholds: Sequence[float],
    runs_per_threshold: int = 20,
    tolerance: float = 0.15,
    noise: float = 0.05,
    seed: int = 42,
    config: Optional[ZestConfig] = None,
) -> ConvergenceReport:
    rng = np.random.default_rng(seed)
    per_threshold: List[ThresholdStats] = []
    all_errors: List[float] = []
    all_trials: List[int] = []
    for threshold in thresholds:
        observer = SyntheticObserver(true_threshold=float(threshold), noise=noise)
        errors = []
        trials = []
        for _ in range(runs_per_threshold):
            state = run_session(observer, rng, config)
            errors.append(abs(get_threshold_estimate(state) - observer.true_threshold))
            trials.append(state.trial_number)
        errors_arr = np.array(errors)
        per_threshold.append(
            ThresholdStats(
                true_threshold=float(threshold),
                runs=len(errors),
                hits=int(np.count_nonzero(errors_arr <= tolerance)),
                mean_abs_error=float(errors_arr.mean()) if errors else 0.0,
                mean_trials=float(np.mean(trials)) if trials else 0.0,
            )
        )
        all_errors.extend(errors)
        all_trials.extend(trials)
    errors_arr = np.array(all_errors)
    return ConvergenceReport(
        tolerance=tolerance,
        runs=len(all_errors),
        hits=int(np.count_nonzero(errors_arr <= tolerance)),
        mean_abs_error=float(errors_arr.mean()) if all_errors else 0.0,
        mean_trials=float(np.mean(all_trials)) if all_trials else 0.0,
        per_threshold=per_threshold,
    )
