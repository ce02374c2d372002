"""
Composite scoring and severity mapping.

The composite anomaly score is the weighted sum of per-feature absolute
z-scores. Features whose rolling std is still 0 (not warmed up, or perfectly
flat) contribute nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from trafficsentinel.core.config import SeverityThresholds

from . import statistics
from .schema import AlertSeverity, FeatureStats, FeatureVector


@dataclass
class SeverityMapper:
    """
    Maps composite scores to alert severity levels.
    """

    thresholds: SeverityThresholds

    def severity(self, score: float) -> AlertSeverity:
        if score >= self.thresholds.critical:
            return AlertSeverity.CRITICAL
        if score >= self.thresholds.high:
            return AlertSeverity.HIGH
        if score >= self.thresholds.medium:
            return AlertSeverity.MEDIUM
        return AlertSeverity.LOW


def composite_score(
    values: Mapping[str, float],
    stats: Mapping[str, FeatureStats],
    weights: Mapping[str, float],
) -> Tuple[float, Dict[str, float]]:
    """
    Combine per-feature deviations into a single score.

    Args:
        values: Observed feature values
        stats: Rolling stats per feature
        weights: Feature weights (sum to 1.0)

    Returns:
        (composite score, absolute z-score per scored feature)
    """
    score = 0.0
    feature_scores: Dict[str, float] = {}

    for name, weight in weights.items():
        baseline = stats.get(name)
        if baseline is None or baseline.std <= 0:
            continue
        z = abs(statistics.z_score(values[name], baseline.mean, baseline.std))
        feature_scores[name] = z
        score += z * weight

    return score, feature_scores


def dominant_feature(feature_scores: Mapping[str, float]) -> Optional[str]:
    """
    Return the most anomalous feature (largest absolute z-score), if any.

    Weights are not applied here.
    """

    if not feature_scores:
        return None
    return max(feature_scores, key=feature_scores.get)


def describe_anomaly(feature: Optional[str], features: FeatureVector) -> str:
    """
    Human-readable alert description naming the dominant feature.
    """

    if feature == "request_rate":
        return f"Unusual request rate detected: {features.request_rate:.1f} req/s"
    if feature == "error_rate":
        return f"High error rate detected: {features.error_rate * 100:.1f}%"
    if feature == "response_time":
        return f"Abnormal response times: {features.response_time:.0f}ms average"
    if feature == "unique_ips":
        return f"Suspicious IP activity: {features.unique_ips} unique sources"
    if feature == "payload_size":
        return f"Unusual payload sizes: {features.payload_size:.0f} bytes average"
    return "Anomalous network activity detected"
