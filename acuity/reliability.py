from __future__ import annotations

from typing import Sequence

import numpy as np

from acuity.models import GuessingReport, ZestTrial


def detect_guessing(
    trials: Sequence[ZestTrial],
    fast_threshold_ms: float = 500.0,
    max_fast_fraction: float = 0.4,
) -> GuessingReport:
    """Flag a run whose responses are mostly too fast to be perceptual.

    Advisory only: the report never feeds back into the threshold estimate.
    """
    if not trials:
        return GuessingReport(average_response_time=0.0, is_likely_guessing=False, too_fast_count=0)
    times = np.clip(np.array([t.response_time_ms for t in trials], dtype=float), 0.0, None)
    too_fast = int(np.count_nonzero(times < fast_threshold_ms))
    return GuessingReport(
        average_response_time=float(times.mean()),
        is_likely_guessing=too_fast / times.size > max_fast_fraction,
        too_fast_count=too_fast,
    )
