"""
Schema definitions for streaming anomaly detection.

Every output is explainable: a result carries the feature vector it scored,
the per-feature absolute z-scores, and the threshold it was compared against.
Records serialize to camelCase names (``model_dump(by_alias=True)``) for the
dashboard transport.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, FieldSerializationInfo, field_serializer
from pydantic.alias_generators import to_camel

FEATURE_ALIASES: Dict[str, str] = {
    "request_rate": "requestRate",
    "error_rate": "errorRate",
    "response_time": "responseTime",
    "unique_ips": "uniqueIPs",
    "payload_size": "payloadSize",
}


def _alias_feature_keys(values: Dict[str, float], info: FieldSerializationInfo) -> Dict[str, float]:
    if not info.by_alias:
        return dict(values)
    return {FEATURE_ALIASES.get(key, key): value for key, value in values.items()}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AlertSeverity(str, Enum):
    """Severity levels for alerts."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FeatureVector(_CamelModel):
    """
    Traffic features for one trailing time window.

    Fields:
    - request_rate: events per second over the window
    - error_rate: fraction of error events in [0, 1]
    - response_time: mean response time (ms)
    - unique_ips: distinct source addresses
    - payload_size: mean payload size (bytes)
    - timestamp: when the window was evaluated
    - event_count: events inside the window
    """

    request_rate: float = Field(ge=0.0)
    error_rate: float = Field(ge=0.0, le=1.0)
    response_time: float = Field(ge=0.0)
    unique_ips: int = Field(ge=0, alias="uniqueIPs")
    payload_size: float = Field(ge=0.0)
    timestamp: datetime
    event_count: int = Field(ge=0)

    def feature_values(self) -> Dict[str, float]:
        """Return the tracked features keyed by name."""
        return {name: float(getattr(self, name)) for name in FEATURE_ALIASES}


class FeatureStats(BaseModel):
    """Rolling mean/std for a single feature, with the sample count used."""

    mean: float = 0.0
    std: float = 0.0
    count: int = 0


class Alert(_CamelModel):
    """
    Alert raised when the composite score exceeds the threshold.

    Fields:
    - alert_id: unique identifier (serialized as ``id``)
    - severity: derived from the composite score
    - description: names the feature with the largest absolute z-score
    - affected_ips: distinct sources in the triggering event sample
    - event_count: size of that sample
    """

    alert_id: str = Field(default_factory=lambda: f"alert_{uuid4().hex}", alias="id")
    timestamp: datetime
    severity: AlertSeverity
    score: float = Field(ge=0.0)
    description: str
    features: FeatureVector
    feature_scores: Dict[str, float]
    affected_ips: List[str] = Field(default_factory=list, alias="affectedIPs")
    event_count: int = Field(ge=0)

    @field_serializer("feature_scores")
    def _serialize_feature_scores(
        self, values: Dict[str, float], info: FieldSerializationInfo
    ) -> Dict[str, float]:
        return _alias_feature_keys(values, info)


class AnomalyResult(_CamelModel):
    """
    Outcome of one detection pass.

    ``features`` is None only for the zero result returned when no window
    could be evaluated.
    """

    composite_score: float = Field(0.0, ge=0.0)
    feature_scores: Dict[str, float] = Field(default_factory=dict)
    features: Optional[FeatureVector] = None
    is_anomaly: bool = False
    threshold: float
    alert: Optional[Alert] = None
    timestamp: Optional[datetime] = None

    @field_serializer("feature_scores")
    def _serialize_feature_scores(
        self, values: Dict[str, float], info: FieldSerializationInfo
    ) -> Dict[str, float]:
        return _alias_feature_keys(values, info)


class DetectorStatus(_CamelModel):
    """Snapshot of detector configuration and warm-up state."""

    threshold: float
    window_size: int
    min_samples: int
    feature_weights: Dict[str, float]
    sample_count: int
    alert_count: int
    is_ready: bool

    @field_serializer("feature_weights")
    def _serialize_feature_weights(
        self, values: Dict[str, float], info: FieldSerializationInfo
    ) -> Dict[str, float]:
        return _alias_feature_keys(values, info)
