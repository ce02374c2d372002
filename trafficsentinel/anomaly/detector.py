"""
Streaming anomaly detector.

Consumes batches of recent traffic events, extracts windowed features,
maintains rolling per-feature baselines, and raises alerts when the weighted
composite z-score crosses the configured threshold.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from trafficsentinel.core.config import FEATURE_NAMES, DetectionConfig, config
from trafficsentinel.simulation.schema import NetworkEvent

from .baselines import FeatureBaselines
from .features import extract_features
from .schema import Alert, AnomalyResult, DetectorStatus, FeatureVector
from .scoring import SeverityMapper, composite_score, describe_anomaly, dominant_feature

logger = logging.getLogger(__name__)


class AnomalyDetector:
    """
    Rolling-statistics anomaly detector.

    Notes:
    - Cold start: a feature scores 0 until it has min_samples observations.
    - Every detection pass feeds the rolling stats, including ad hoc ones.
    - All state is guarded by a single re-entrant lock.
    """

    def __init__(self, detection_config: Optional[DetectionConfig] = None) -> None:
        self.config = detection_config or config.detection
        self._lock = threading.RLock()
        self._threshold = self.config.anomaly_threshold
        self._baselines = FeatureBaselines(
            FEATURE_NAMES,
            window_size=self.config.window_size,
            min_samples=self.config.min_samples,
        )
        self._severity_mapper = SeverityMapper(self.config.severity_thresholds)
        self._alerts: List[Alert] = []

    @property
    def threshold(self) -> float:
        with self._lock:
            return self._threshold

    @property
    def feature_weights(self) -> Dict[str, float]:
        return dict(self.config.feature_weights)

    def extract_features(
        self,
        events: Sequence[NetworkEvent],
        time_window_ms: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Optional[FeatureVector]:
        window = time_window_ms if time_window_ms is not None else self.config.time_window_ms
        return extract_features(events, window, now)

    def update_statistics(self, features: FeatureVector) -> None:
        with self._lock:
            self._baselines.update(features.feature_values())

    def calculate_anomaly_score(self, features: FeatureVector) -> AnomalyResult:
        """
        Score a feature vector against the current baselines.

        Does not update the baselines and never raises an alert.
        """
        with self._lock:
            score, feature_scores = composite_score(
                features.feature_values(),
                self._baselines.snapshot(),
                self.config.feature_weights,
            )
            return AnomalyResult(
                composite_score=score,
                feature_scores=feature_scores,
                features=features,
                is_anomaly=score > self._threshold,
                threshold=self._threshold,
                timestamp=features.timestamp,
            )

    def detect_anomalies(
        self,
        events: Sequence[NetworkEvent],
        now: Optional[datetime] = None,
    ) -> Optional[AnomalyResult]:
        """
        Run one detection pass over a batch of recent events.

        Args:
            events: Recent events, oldest first
            now: Evaluation time (defaults to current UTC time)

        Returns:
            AnomalyResult, or None when the trailing window holds no events
        """
        features = self.extract_features(events, now=now)
        if features is None:
            return None

        with self._lock:
            self.update_statistics(features)
            result = self.calculate_anomaly_score(features)

            if not result.is_anomaly:
                return result

            alert = self._build_alert(result, features, events)
            self._alerts.append(alert)
            if len(self._alerts) > self.config.max_alerts:
                self._alerts = self._alerts[-self.config.alerts_trim_to:]

        logger.warning(
            "Anomaly detected: score=%.3f threshold=%.2f severity=%s (%s)",
            result.composite_score,
            result.threshold,
            alert.severity.value,
            alert.description,
        )
        return result.model_copy(update={"alert": alert})

    def _build_alert(
        self,
        result: AnomalyResult,
        features: FeatureVector,
        events: Sequence[NetworkEvent],
    ) -> Alert:
        context = list(events)[-self.config.alert_context_size:]
        feature = dominant_feature(result.feature_scores)

        affected_ips: List[str] = []
        for event in context:
            if event.source_ip not in affected_ips:
                affected_ips.append(event.source_ip)

        return Alert(
            timestamp=datetime.now(timezone.utc),
            severity=self._severity_mapper.severity(result.composite_score),
            score=result.composite_score,
            description=describe_anomaly(feature, features),
            features=features,
            feature_scores=result.feature_scores,
            affected_ips=affected_ips,
            event_count=len(context),
        )

    def set_threshold(self, value: float) -> float:
        """Clamp and apply a new detection threshold; returns the applied value."""
        clamped = max(self.config.threshold_min, min(self.config.threshold_max, float(value)))
        with self._lock:
            self._threshold = clamped
        logger.info("Anomaly detection threshold updated to %.2f", clamped)
        return clamped

    def get_status(self) -> DetectorStatus:
        with self._lock:
            sample_count = self._baselines.sample_count
            return DetectorStatus(
                threshold=self._threshold,
                window_size=self.config.window_size,
                min_samples=self.config.min_samples,
                feature_weights=self.feature_weights,
                sample_count=sample_count,
                alert_count=len(self._alerts),
                is_ready=sample_count >= self.config.min_samples,
            )

    def get_recent_alerts(self, count: int = 20) -> List[Alert]:
        if count <= 0:
            return []
        with self._lock:
            return self._alerts[-count:]

    def clear_alerts(self) -> None:
        with self._lock:
            self._alerts = []
        logger.info("Alert history cleared")
