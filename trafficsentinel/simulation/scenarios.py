"""
Scenario registry.

Holds the fixed, validated mapping from scenario name to ScenarioProfile.
The registry is built once at startup and never mutated afterwards.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional

from trafficsentinel.core.config import ScenarioProfile, SimulationConfig, config
from trafficsentinel.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ScenarioRegistry:
    """
    Immutable name -> ScenarioProfile mapping.

    Raises:
        ConfigurationError: if the mapping is empty or lacks the default scenario
    """

    def __init__(self, scenarios: Mapping[str, ScenarioProfile], default: str = "normal") -> None:
        if not scenarios:
            raise ConfigurationError("Scenario registry must define at least one scenario")
        if default not in scenarios:
            raise ConfigurationError(f"Default scenario '{default}' is not in the registry")
        for name, profile in scenarios.items():
            if not isinstance(profile, ScenarioProfile):
                raise ConfigurationError(f"Scenario '{name}' is not a ScenarioProfile")

        self._scenarios = MappingProxyType(dict(scenarios))
        self.default = default
        logger.debug("Loaded %d scenarios: %s", len(self._scenarios), ", ".join(self._scenarios))

    @classmethod
    def from_config(cls, simulation_config: Optional[SimulationConfig] = None) -> "ScenarioRegistry":
        simulation_config = simulation_config or config.simulation
        return cls(simulation_config.scenarios, default=simulation_config.default_scenario)

    def get(self, name: str) -> ScenarioProfile:
        try:
            return self._scenarios[name]
        except KeyError:
            raise KeyError(f"Unknown scenario: {name}") from None

    def names(self) -> List[str]:
        return list(self._scenarios)

    def __contains__(self, name: object) -> bool:
        return name in self._scenarios

    def __iter__(self) -> Iterator[str]:
        return iter(self._scenarios)

    def __len__(self) -> int:
        return len(self._scenarios)
