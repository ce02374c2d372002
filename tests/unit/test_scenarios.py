"""
Unit tests for the scenario registry and profiles.
"""

import pytest
from pydantic import ValidationError

from trafficsentinel.core.config import ScenarioProfile, SimulationConfig
from trafficsentinel.core.exceptions import ConfigurationError
from trafficsentinel.simulation.scenarios import ScenarioRegistry


def test_default_registry_from_config():
    registry = ScenarioRegistry.from_config(SimulationConfig())

    assert registry.default == "normal"
    assert len(registry) == 5
    assert "bruteforce" in registry
    assert registry.get("ddos").request_rate_multiplier == 5.0
    assert registry.get("bruteforce").focus_endpoints == ["/api/login"]


def test_registry_rejects_unknown_lookup():
    registry = ScenarioRegistry.from_config(SimulationConfig())
    with pytest.raises(KeyError):
        registry.get("nope")


def test_registry_is_read_only():
    registry = ScenarioRegistry({"normal": ScenarioProfile(name="Normal")})
    with pytest.raises(TypeError):
        registry._scenarios["extra"] = ScenarioProfile(name="Extra")


def test_empty_registry_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        ScenarioRegistry({})


def test_missing_default_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        ScenarioRegistry({"ddos": ScenarioProfile(name="DDoS")}, default="normal")


def test_profile_validates_bias_fields():
    with pytest.raises(ValidationError):
        ScenarioProfile(name="bad", error_codes=[500], error_code_weights=[0.5, 0.5])
    with pytest.raises(ValidationError):
        ScenarioProfile(name="bad", focus_ip_probability=0.5)
    with pytest.raises(ValidationError):
        ScenarioProfile(name="bad", response_time_multiplier=0)


def test_profile_is_immutable():
    profile = ScenarioProfile(name="Normal")
    with pytest.raises(ValidationError):
        profile.name = "Changed"
