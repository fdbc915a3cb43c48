import pytest

from acuity.levels import (
    LOGMAR_LEVELS,
    closest_level,
    decimal_to_logmar,
    get_closest_level_index,
    logmar_to_decimal,
    logmar_to_snellen,
    logmar_to_snellen_metric,
)
from acuity.models import CHART_LOGMAR_RANGE, LogMARLevel


def test_every_table_entry_maps_back_to_itself():
    for idx, level in enumerate(LOGMAR_LEVELS):
        assert get_closest_level_index(level.logmar, LOGMAR_LEVELS) == idx


def test_table_is_ordered_worst_to_best_and_consistent():
    values = [level.logmar for level in LOGMAR_LEVELS]
    assert values == sorted(values, reverse=True)
    assert values[0] == 1.0 and values[-1] == -0.3
    for level in LOGMAR_LEVELS:
        assert level.decimal == pytest.approx(logmar_to_decimal(level.logmar), rel=0.02)


def test_out_of_range_inputs_clamp_to_table_ends():
    assert get_closest_level_index(5.0) == 0
    assert get_closest_level_index(-3.0) == len(LOGMAR_LEVELS) - 1
    assert closest_level(1.3).snellen == "20/200"
    assert closest_level(-0.9).snellen == "20/10"


def test_between_entries_rounds_to_nearest():
    assert logmar_to_snellen(0.04) == "20/20"
    assert logmar_to_snellen(0.31) == "20/40"
    assert logmar_to_snellen(0.96) == "20/200"
    assert logmar_to_snellen_metric(0.0) == "6/6"
    assert logmar_to_snellen_metric(0.18) == "6/9.5"


def test_ties_go_to_first_entry():
    levels = [
        LogMARLevel(logmar=0.5, snellen="a", snellen_metric="a", decimal=0.32, optotype_size_px=63),
        LogMARLevel(logmar=0.0, snellen="b", snellen_metric="b", decimal=1.0, optotype_size_px=20),
    ]
    assert get_closest_level_index(0.25, levels) == 0


def test_empty_table_is_rejected():
    with pytest.raises(ValueError):
        get_closest_level_index(0.0, [])


def test_decimal_conversions():
    assert logmar_to_decimal(0.0) == 1.0
    assert logmar_to_decimal(1.0) == pytest.approx(0.1)
    assert logmar_to_decimal(-0.3) == pytest.approx(1.995, abs=1e-3)
    assert decimal_to_logmar(0.1) == pytest.approx(1.0)
    assert decimal_to_logmar(logmar_to_decimal(0.42)) == pytest.approx(0.42)
    with pytest.raises(ValueError):
        decimal_to_logmar(0)


def test_chart_range_matches_table_ends():
    values = [level.logmar for level in LOGMAR_LEVELS]
    assert (min(values), max(values)) == CHART_LOGMAR_RANGE
