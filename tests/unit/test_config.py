"""
Unit tests for configuration and environment overrides.
"""

import pytest
from pydantic import ValidationError

from trafficsentinel.core.config import (
    Config,
    DetectionConfig,
    SeverityThresholds,
    SimulationConfig,
)


def test_defaults(tmp_path):
    settings = Config(logs_dir=tmp_path / "logs")

    assert settings.logs_dir.exists()
    assert settings.detection.anomaly_threshold == 2.5
    assert settings.detection.window_size == 50
    assert settings.detection.min_samples == 10
    assert settings.service.simulation_interval_ms == 1000
    assert settings.service.detection_interval_ms == 5000
    assert settings.simulation.max_events_history == 1000
    assert abs(sum(settings.detection.feature_weights.values()) - 1.0) < 1e-9


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("TRAFFICSENTINEL_LOGS_DIR", str(tmp_path / "env-logs"))
    monkeypatch.setenv("TRAFFICSENTINEL_DETECTION__ANOMALY_THRESHOLD", "3.0")
    monkeypatch.setenv("TRAFFICSENTINEL_SERVICE__SIMULATION_INTERVAL_MS", "250")
    monkeypatch.setenv("TRAFFICSENTINEL_SIMULATION__MAX_EVENTS_HISTORY", "2000")

    settings = Config()

    assert settings.logs_dir == tmp_path / "env-logs"
    assert settings.detection.anomaly_threshold == 3.0
    assert settings.detection.window_size == 50
    assert settings.service.simulation_interval_ms == 250
    assert settings.simulation.max_events_history == 2000


def test_scenarios_from_environment_json(tmp_path, monkeypatch):
    monkeypatch.setenv(
        "TRAFFICSENTINEL_SIMULATION__SCENARIOS",
        '{"normal": {"name": "Normal"}, "flood": {"name": "Flood", "requestRateMultiplier": 9}}',
    )

    settings = Config(logs_dir=tmp_path)

    assert set(settings.simulation.scenarios) == {"normal", "flood"}
    assert settings.simulation.scenarios["flood"].request_rate_multiplier == 9


def test_feature_weights_must_sum_to_one():
    with pytest.raises(ValidationError):
        DetectionConfig(feature_weights={"request_rate": 0.5, "error_rate": 0.2})


def test_feature_weights_reject_unknown_features():
    with pytest.raises(ValidationError):
        DetectionConfig(feature_weights={"request_rate": 0.5, "latency": 0.5})


def test_threshold_must_lie_in_bounds():
    with pytest.raises(ValidationError):
        DetectionConfig(anomaly_threshold=7.0)


def test_severity_thresholds_must_be_ordered():
    with pytest.raises(ValidationError):
        SeverityThresholds(low=3.0, medium=2.0)


def test_history_trim_cannot_exceed_capacity():
    with pytest.raises(ValidationError):
        SimulationConfig(max_events_history=100, history_trim_to=200)


def test_min_samples_cannot_exceed_window_size():
    with pytest.raises(ValidationError):
        DetectionConfig(window_size=5, min_samples=10)

    config = DetectionConfig(window_size=10, min_samples=10)
    assert config.min_samples == config.window_size
