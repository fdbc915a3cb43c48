"""Reference acuity chart and notation conversions.

The chart runs from 1.0 logMAR (20/200) down to -0.3 logMAR (20/10) in
0.1 logMAR lines, ordered top to bottom as printed on a chart.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from acuity.models import LogMARLevel


LOGMAR_LEVELS: Tuple[LogMARLevel, ...] = (
    LogMARLevel(logmar=1.0, snellen="20/200", snellen_metric="6/60", decimal=0.1, optotype_size_px=200),
    LogMARLevel(logmar=0.9, snellen="20/160", snellen_metric="6/48", decimal=0.125, optotype_size_px=159),
    LogMARLevel(logmar=0.8, snellen="20/125", snellen_metric="6/38", decimal=0.16, optotype_size_px=126),
    LogMARLevel(logmar=0.7, snellen="20/100", snellen_metric="6/30", decimal=0.2, optotype_size_px=100),
    LogMARLevel(logmar=0.6, snellen="20/80", snellen_metric="6/24", decimal=0.25, optotype_size_px=80),
    LogMARLevel(logmar=0.5, snellen="20/63", snellen_metric="6/19", decimal=0.32, optotype_size_px=63),
    LogMARLevel(logmar=0.4, snellen="20/50", snellen_metric="6/15", decimal=0.4, optotype_size_px=50),
    LogMARLevel(logmar=0.3, snellen="20/40", snellen_metric="6/12", decimal=0.5, optotype_size_px=40),
    LogMARLevel(logmar=0.2, snellen="20/32", snellen_metric="6/9.5", decimal=0.63, optotype_size_px=32),
    LogMARLevel(logmar=0.1, snellen="20/25", snellen_metric="6/7.5", decimal=0.8, optotype_size_px=25),
    LogMARLevel(logmar=0.0, snellen="20/20", snellen_metric="6/6", decimal=1.0, optotype_size_px=20),
    LogMARLevel(logmar=-0.1, snellen="20/16", snellen_metric="6/4.8", decimal=1.25, optotype_size_px=16),
    LogMARLevel(logmar=-0.2, snellen="20/12.5", snellen_metric="6/3.8", decimal=1.6, optotype_size_px=13),
    LogMARLevel(logmar=-0.3, snellen="20/10", snellen_metric="6/3", decimal=2.0, optotype_size_px=10),
)


def logmar_to_decimal(logmar: float) -> float:
    return float(10.0 ** (-logmar))


def decimal_to_logmar(decimal: float) -> float:
    if decimal <= 0:
        raise ValueError("decimal acuity must be positive")
    return float(-math.log10(decimal))


def get_closest_level_index(logmar: float, levels: Sequence[LogMARLevel] = LOGMAR_LEVELS) -> int:
    """Index of the level nearest to ``logmar``.

    Ties go to the first entry in table order. Inputs beyond either end of
    the table land on that end.
    """
    if not levels:
        raise ValueError("level table is empty")
    values = np.array([level.logmar for level in levels], dtype=float)
    # argmin returns the first minimum, which gives the tie rule
    return int(np.argmin(np.abs(values - float(logmar))))


def closest_level(logmar: float, levels: Sequence[LogMARLevel] = LOGMAR_LEVELS) -> LogMARLevel:
    return levels[get_closest_level_index(logmar, levels)]


def logmar_to_snellen(logmar: float, levels: Sequence[LogMARLevel] = LOGMAR_LEVELS) -> str:
    return closest_level(logmar, levels).snellen


def logmar_to_snellen_metric(logmar: float, levels: Sequence[LogMARLevel] = LOGMAR_LEVELS) -> str:
    return closest_level(logmar, levels).snellen_metric
