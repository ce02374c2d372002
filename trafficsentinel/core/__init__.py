"""
Core module: Configuration, logging, and exception handling.
"""

from .config import (
    FEATURE_NAMES,
    Config,
    DetectionConfig,
    ScenarioProfile,
    ServiceConfig,
    SeverityThresholds,
    SimulationConfig,
    config,
)
from .exceptions import (
    ConfigurationError,
    DetectionServiceError,
    ServiceDisposedError,
    TrafficSentinelError,
)
from .logging_config import setup_logging

__all__ = [
    "FEATURE_NAMES",
    "Config",
    "DetectionConfig",
    "ScenarioProfile",
    "ServiceConfig",
    "SeverityThresholds",
    "SimulationConfig",
    "config",
    "ConfigurationError",
    "DetectionServiceError",
    "ServiceDisposedError",
    "TrafficSentinelError",
    "setup_logging",
]
