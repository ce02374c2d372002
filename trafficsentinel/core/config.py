"""
Application configuration for Traffic Sentinel.

Provides environment-aware settings with conservative defaults. Detection
thresholds, feature weights, scenario profiles and scheduling periods are all
configurable to avoid hard-coded "magic numbers".
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

FEATURE_NAMES = (
	"request_rate",
	"error_rate",
	"response_time",
	"unique_ips",
	"payload_size",
)


class ScenarioProfile(BaseModel):
	"""
	Named traffic profile applied during synthetic event generation.

	Notes:
	- Multipliers scale the simulation base rates.
	- focus_* fields bias source IP / endpoint selection toward a small set.
	- error_codes/error_code_weights bias error status codes; empty means uniform.
	"""

	model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

	name: str
	request_rate_multiplier: float = Field(1.0, gt=0.0)
	error_rate_multiplier: float = Field(1.0, ge=0.0)
	response_time_multiplier: float = Field(1.0, gt=0.0)
	description: str = ""

	focus_ip_count: int = Field(0, ge=0)
	focus_ip_probability: float = Field(0.0, ge=0.0, le=1.0)
	focus_endpoints: List[str] = Field(default_factory=list)
	focus_endpoint_probability: float = Field(0.0, ge=0.0, le=1.0)
	error_codes: List[int] = Field(default_factory=list)
	error_code_weights: List[float] = Field(default_factory=list)

	@model_validator(mode="after")
	def _check_bias(self) -> "ScenarioProfile":
		if self.error_code_weights and len(self.error_code_weights) != len(self.error_codes):
			raise ValueError("error_code_weights must match error_codes in length")
		if self.focus_ip_probability > 0 and self.focus_ip_count == 0:
			raise ValueError("focus_ip_probability requires focus_ip_count > 0")
		if self.focus_endpoint_probability > 0 and not self.focus_endpoints:
			raise ValueError("focus_endpoint_probability requires focus_endpoints")
		return self


def _default_scenarios() -> Dict[str, ScenarioProfile]:
	return {
		"normal": ScenarioProfile(
			name="Normal Traffic",
			description="Typical network activity",
		),
		"ddos": ScenarioProfile(
			name="DDoS Attack",
			request_rate_multiplier=5.0,
			error_rate_multiplier=3.0,
			response_time_multiplier=4.0,
			description="Distributed denial of service attack",
			focus_ip_count=5,
			focus_ip_probability=0.7,
			error_codes=[503, 429],
			error_code_weights=[0.6, 0.4],
		),
		"bruteforce": ScenarioProfile(
			name="Brute Force",
			request_rate_multiplier=2.0,
			error_rate_multiplier=8.0,
			response_time_multiplier=1.5,
			description="Login brute force attempts",
			focus_ip_count=3,
			focus_ip_probability=0.8,
			focus_endpoints=["/api/login"],
			focus_endpoint_probability=0.8,
			error_codes=[401, 403],
			error_code_weights=[0.7, 0.3],
		),
		"scanning": ScenarioProfile(
			name="Port Scanning",
			request_rate_multiplier=3.0,
			error_rate_multiplier=6.0,
			response_time_multiplier=0.8,
			description="Network reconnaissance",
		),
		"injection": ScenarioProfile(
			name="SQL Injection",
			request_rate_multiplier=1.5,
			error_rate_multiplier=4.0,
			response_time_multiplier=2.0,
			description="Database injection attempts",
			focus_endpoints=["/api/search", "/api/data"],
			focus_endpoint_probability=0.6,
		),
	}


class SeverityThresholds(BaseModel):
	"""
	Composite score thresholds for alert severity.

	Scores below `medium` still raise a low severity alert when they exceed
	the detection threshold.
	"""

	low: float = Field(2.0, ge=0.0)
	medium: float = Field(2.5, ge=0.0)
	high: float = Field(3.0, ge=0.0)
	critical: float = Field(4.0, ge=0.0)

	@model_validator(mode="after")
	def _check_order(self) -> "SeverityThresholds":
		if not (self.low <= self.medium <= self.high <= self.critical):
			raise ValueError("severity thresholds must be non-decreasing")
		return self


class DetectionConfig(BaseModel):
	"""
	Anomaly detector configuration.

	Notes:
	- window_size: number of recent feature values kept for rolling stats.
	- min_samples: warm-up values before a feature's stats are computed.
	- time_window_ms: trailing event window used for feature extraction.
	- feature_weights: composite score weights, must sum to 1.0.
	"""

	anomaly_threshold: float = Field(2.5, gt=0.0)
	threshold_min: float = Field(0.5, ge=0.0)
	threshold_max: float = Field(5.0, gt=0.0)

	window_size: int = Field(50, ge=2)
	min_samples: int = Field(10, ge=2)
	time_window_ms: int = Field(10_000, gt=0)

	max_alerts: int = Field(100, ge=1)
	alerts_trim_to: int = Field(50, ge=1)
	alert_context_size: int = Field(10, ge=1)

	severity_thresholds: SeverityThresholds = SeverityThresholds()

	feature_weights: Dict[str, float] = Field(
		default_factory=lambda: {
			"request_rate": 0.30,
			"error_rate": 0.25,
			"response_time": 0.20,
			"unique_ips": 0.15,
			"payload_size": 0.10,
		}
	)

	@field_validator("feature_weights")
	@classmethod
	def _check_weights(cls, weights: Dict[str, float]) -> Dict[str, float]:
		unknown = set(weights) - set(FEATURE_NAMES)
		if unknown:
			raise ValueError(f"Unknown features in weights: {sorted(unknown)}")
		if any(w < 0 for w in weights.values()):
			raise ValueError("feature weights must be non-negative")
		if abs(sum(weights.values()) - 1.0) > 1e-6:
			raise ValueError("feature weights must sum to 1.0")
		return weights

	@model_validator(mode="after")
	def _check_bounds(self) -> "DetectionConfig":
		if self.threshold_min > self.threshold_max:
			raise ValueError("threshold_min must not exceed threshold_max")
		if not self.threshold_min <= self.anomaly_threshold <= self.threshold_max:
			raise ValueError("anomaly_threshold must lie within [threshold_min, threshold_max]")
		if self.alerts_trim_to > self.max_alerts:
			raise ValueError("alerts_trim_to must not exceed max_alerts")
		if self.min_samples > self.window_size:
			raise ValueError("min_samples must not exceed window_size")
		return self


class SimulationConfig(BaseModel):
	"""
	Synthetic traffic configuration.

	Notes:
	- base_* values are scaled by the active scenario's multipliers.
	- History is trimmed to history_trim_to once it exceeds max_events_history.
	- seed makes generation reproducible (None for system entropy).
	"""

	base_request_rate: float = Field(10.0, gt=0.0, description="Requests per second")
	base_error_rate: float = Field(0.02, ge=0.0, le=1.0)
	base_response_time: float = Field(150.0, gt=0.0, description="Milliseconds")

	max_events_history: int = Field(1000, ge=1)
	history_trim_to: int = Field(500, ge=1)

	default_scenario: str = "normal"
	seed: Optional[int] = None
	scenarios: Dict[str, ScenarioProfile] = Field(default_factory=_default_scenarios)

	@model_validator(mode="after")
	def _check_history(self) -> "SimulationConfig":
		if self.history_trim_to > self.max_events_history:
			raise ValueError("history_trim_to must not exceed max_events_history")
		return self


class ServiceConfig(BaseModel):
	"""
	Detection service scheduling and broadcast configuration.
	"""

	simulation_interval_ms: int = Field(1000, gt=0)
	detection_interval_ms: int = Field(5000, gt=0)
	detection_event_count: int = Field(100, ge=1)
	snapshot_event_count: int = Field(50, ge=1)
	subscriber_queue_size: int = Field(1000, ge=1)
	scale_rate_by_scenario: bool = False


class Config(BaseSettings):
	"""
	Global configuration with environment overrides.

	Nested values use a double underscore, e.g.
	TRAFFICSENTINEL_DETECTION__ANOMALY_THRESHOLD=3.0
	"""

	model_config = SettingsConfigDict(
		env_prefix="TRAFFICSENTINEL_",
		env_nested_delimiter="__",
		env_file=".env",
		extra="ignore",
	)

	log_level: str = Field("INFO", description="Default logging level")
	logs_dir: Path = Field(Path("logs"), description="Directory for log files")
	detection: DetectionConfig = DetectionConfig()
	simulation: SimulationConfig = SimulationConfig()
	service: ServiceConfig = ServiceConfig()

	def model_post_init(self, __context: object) -> None:
		self.logs_dir.mkdir(parents=True, exist_ok=True)


config = Config()
