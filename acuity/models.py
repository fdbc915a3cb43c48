from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from pydantic import BaseModel, Field, model_validator

# best and worst lines of acuity.levels.LOGMAR_LEVELS
CHART_LOGMAR_RANGE: Tuple[float, float] = (-0.3, 1.0)


class ZestConfig(BaseModel):
    """Parameters of one ZEST run. Carried by every state it produces."""

    max_trials: int = Field(default=15, ge=1)
    confidence_threshold: float = Field(default=0.10, gt=0.0)
    prior_mean: float = 0.0
    prior_sd: float = Field(default=0.8, gt=0.0)
    slope: float = Field(default=0.05, gt=0.0)
    guess_rate: float = Field(default=0.25, ge=0.0, lt=1.0)
    lapse_rate: float = Field(default=0.04, ge=0.0, lt=1.0)
    bracketing_trials: Tuple[float, ...] = (0.4, 0.0, -0.2)
    grid_min: float = -0.4
    grid_max: float = 1.0
    grid_step: float = Field(default=0.02, gt=0.0)
    credible_mass: float = Field(default=0.95, gt=0.0, lt=1.0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_ranges(self) -> "ZestConfig":
        if self.grid_min >= self.grid_max:
            raise ValueError("grid_min must be below grid_max")
        if self.grid_min > CHART_LOGMAR_RANGE[0] + 1e-9 or self.grid_max < CHART_LOGMAR_RANGE[1] - 1e-9:
            raise ValueError(
                f"grid {self.grid_min}..{self.grid_max} must cover the chart range "
                f"{CHART_LOGMAR_RANGE[0]}..{CHART_LOGMAR_RANGE[1]}"
            )
        steps = (self.grid_max - self.grid_min) / self.grid_step
        if abs(steps - round(steps)) > 1e-6:
            raise ValueError("grid_step must divide the grid range evenly")
        if self.guess_rate + self.lapse_rate >= 1.0:
            raise ValueError("guess_rate + lapse_rate must stay below 1")
        return self


class ZestTrial(BaseModel):
    stimulus_logmar: float
    is_correct: bool
    response_time_ms: int = Field(..., ge=0)
    trial_number: int = Field(..., ge=1)

    model_config = {"frozen": True}


class PosteriorPoint(BaseModel):
    logmar: float
    probability: float = Field(..., ge=0.0)

    model_config = {"frozen": True}


class ZestState(BaseModel):
    trial_number: int = Field(default=0, ge=0)
    posterior: Tuple[PosteriorPoint, ...]
    trials: Tuple[ZestTrial, ...] = ()
    is_complete: bool = False
    confidence_interval: float = Field(..., ge=0.0)
    threshold_estimate: Optional[float] = None
    config: ZestConfig = Field(default_factory=ZestConfig)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_invariants(self) -> "ZestState":
        if len(self.trials) != self.trial_number:
            raise ValueError("trial_number must equal the number of recorded trials")
        if not self.posterior:
            raise ValueError("posterior must not be empty")
        total = float(sum(p.probability for p in self.posterior))
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"posterior must sum to 1, got {total}")
        return self

    def logmar_values(self) -> np.ndarray:
        return np.array([p.logmar for p in self.posterior], dtype=float)

    def probabilities(self) -> np.ndarray:
        return np.array([p.probability for p in self.posterior], dtype=float)


class LogMARLevel(BaseModel):
    logmar: float
    snellen: str
    snellen_metric: str
    decimal: float
    optotype_size_px: int  # presentation hint for the optotype renderer

    model_config = {"frozen": True}


class GuessingReport(BaseModel):
    average_response_time: float
    is_likely_guessing: bool
    too_fast_count: int = 0
