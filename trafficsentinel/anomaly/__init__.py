"""
Anomaly module: Rolling-statistics anomaly detection.

Implements numeric helpers, rolling baselines, feature extraction, composite
scoring, and the streaming detector.
"""

from .baselines import FeatureBaselines, RollingFeatureStats
from .detector import AnomalyDetector
from .features import events_in_window, extract_features
from .schema import (
	Alert,
	AlertSeverity,
	AnomalyResult,
	DetectorStatus,
	FeatureStats,
	FeatureVector,
)
from .scoring import SeverityMapper, composite_score, describe_anomaly, dominant_feature

__all__ = [
	"AnomalyDetector",
	"Alert",
	"AlertSeverity",
	"AnomalyResult",
	"DetectorStatus",
	"FeatureStats",
	"FeatureVector",
	"FeatureBaselines",
	"RollingFeatureStats",
	"SeverityMapper",
	"composite_score",
	"describe_anomaly",
	"dominant_feature",
	"events_in_window",
	"extract_features",
]
