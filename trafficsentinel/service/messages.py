"""
Broadcast message envelope and service status records.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from trafficsentinel.anomaly.schema import DetectorStatus
from trafficsentinel.simulation.schema import SimulatorStatus


class MessageType(str, Enum):
    """Message types delivered to subscribers."""

    EVENT = "event"
    ANOMALY = "anomaly"
    ALERT = "alert"
    STATUS = "status"
    SCENARIO = "scenario"
    THRESHOLD = "threshold"
    ALERTS_CLEARED = "alerts_cleared"


class BroadcastMessage(BaseModel):
    """
    Typed message delivered to every subscriber.

    ``data`` is a JSON-ready dict using camelCase keys.
    """

    model_config = ConfigDict(frozen=True)

    type: MessageType
    data: Dict[str, Any] = Field(default_factory=dict)


class MetricsSnapshot(BaseModel):
    """Service counters with live-computed uptime."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    events_generated: int = 0
    anomalies_detected: int = 0
    alerts_generated: int = 0
    uptime_start: datetime
    uptime_ms: int = 0


class ServiceStatus(BaseModel):
    """Aggregated status of the detection service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_running: bool
    simulator: SimulatorStatus
    detector: DetectorStatus
    metrics: MetricsSnapshot
    subscriber_count: int
