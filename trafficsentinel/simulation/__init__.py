"""
Simulation module: Synthetic network traffic under named scenarios.
"""

from trafficsentinel.core.config import ScenarioProfile

from .scenarios import ScenarioRegistry
from .schema import NetworkEvent, SimulatorStatus
from .simulator import ENDPOINTS, ERROR_CODES, SUCCESS_CODES, NetworkSimulator

__all__ = [
    "ENDPOINTS",
    "ERROR_CODES",
    "SUCCESS_CODES",
    "NetworkEvent",
    "NetworkSimulator",
    "ScenarioProfile",
    "ScenarioRegistry",
    "SimulatorStatus",
]
