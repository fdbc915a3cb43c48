import pytest
from pydantic import ValidationError

from acuity.config import zest_config_from_env


def test_env_overrides_are_applied(monkeypatch):
    monkeypatch.setenv("ACUITY_MAX_TRIALS", "9")
    monkeypatch.setenv("ACUITY_PRIOR_SD", "0.5")
    monkeypatch.setenv("ACUITY_CONFIDENCE_THRESHOLD", "0.12")
    monkeypatch.delenv("ACUITY_PRIOR_MEAN", raising=False)
    config = zest_config_from_env()
    assert config.max_trials == 9
    assert config.prior_sd == 0.5
    assert config.confidence_threshold == 0.12
    assert config.prior_mean == 0.0


def test_no_env_gives_defaults(monkeypatch):
    for name in ("ACUITY_MAX_TRIALS", "ACUITY_PRIOR_SD", "ACUITY_PRIOR_MEAN", "ACUITY_CONFIDENCE_THRESHOLD"):
        monkeypatch.delenv(name, raising=False)
    config = zest_config_from_env()
    assert config.max_trials == 15
    assert config.prior_sd == 0.8


def test_invalid_env_value_is_rejected(monkeypatch):
    monkeypatch.setenv("ACUITY_PRIOR_SD", "0")
    with pytest.raises(ValidationError):
        zest_config_from_env()
