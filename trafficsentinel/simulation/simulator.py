"""
Synthetic network traffic simulator.

Generates HTTP-like events shaped by the active scenario profile and keeps a
bounded event history. Attack scenarios bias source IPs, endpoints and error
codes so the detector has something to find.
"""

from __future__ import annotations

import logging
import random
import threading
from datetime import datetime, timezone
from typing import List, Optional

from trafficsentinel.core.config import ScenarioProfile, SimulationConfig, config

from .scenarios import ScenarioRegistry
from .schema import NetworkEvent, SimulatorStatus

logger = logging.getLogger(__name__)

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_7_1 like Mac OS X)",
    "Mozilla/5.0 (Android 11; Mobile; rv:68.0) Gecko/68.0",
)

ENDPOINTS = (
    "/api/login",
    "/api/users",
    "/api/data",
    "/admin/dashboard",
    "/api/upload",
    "/api/search",
    "/api/orders",
    "/api/payments",
)

ERROR_CODES = (400, 401, 403, 404, 429, 500, 502, 503)
SUCCESS_CODES = (200, 201, 202, 204)


class NetworkSimulator:
    """
    Scenario-driven traffic generator.

    State machine: stopped -> running -> stopped. ``start``/``stop`` are
    idempotent. History and the active scenario share one lock, so a
    generation call uses a single profile throughout.
    """

    def __init__(
        self,
        simulation_config: Optional[SimulationConfig] = None,
        registry: Optional[ScenarioRegistry] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = simulation_config or config.simulation
        self.registry = registry or ScenarioRegistry.from_config(self.config)
        self._rng = rng or random.Random(self.config.seed)
        self._lock = threading.RLock()
        self._is_running = False
        self._current_scenario = self.registry.default
        self._history: List[NetworkEvent] = []
        self.ip_pool = self._generate_ip_pool()

    def _generate_ip_pool(self) -> List[str]:
        ips = []
        for _ in range(50):
            ips.append(f"192.168.1.{self._rng.randint(1, 254)}")
            ips.append(f"10.0.0.{self._rng.randint(1, 254)}")
        for _ in range(20):
            ips.append(".".join(str(self._rng.randint(0, 254)) for _ in range(4)))
        return ips

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def current_scenario(self) -> str:
        with self._lock:
            return self._current_scenario

    @property
    def profile(self) -> ScenarioProfile:
        with self._lock:
            return self.registry.get(self._current_scenario)

    def start(self) -> bool:
        with self._lock:
            if not self._is_running:
                self._is_running = True
                logger.info("Network simulation started (scenario=%s)", self._current_scenario)
            return self._is_running

    def stop(self) -> bool:
        with self._lock:
            if self._is_running:
                self._is_running = False
                logger.info("Network simulation stopped")
            return self._is_running

    def set_scenario(self, name: str) -> bool:
        """Switch the active scenario; returns False for unknown names."""
        if name not in self.registry:
            logger.warning("Rejected unknown scenario: %s", name)
            return False
        with self._lock:
            self._current_scenario = name
        logger.info("Simulation scenario changed to: %s", name)
        return True

    def burst_size(self) -> int:
        """Events per tick when generation scales with the scenario's request rate."""
        return max(1, round(self.profile.request_rate_multiplier))

    def generate_event(self, now: Optional[datetime] = None) -> NetworkEvent:
        """
        Synthesize one event from the active scenario and record it.

        Args:
            now: Event timestamp (defaults to current UTC time)
        """
        with self._lock:
            scenario = self._current_scenario
            profile = self.registry.get(scenario)
            rng = self._rng

            response_time = int(
                max(50.0, self.config.base_response_time + rng.uniform(-100, 100))
                * profile.response_time_multiplier
            )
            is_error = rng.random() < self.config.base_error_rate * profile.error_rate_multiplier
            status_code = self._error_status_code(profile) if is_error else rng.choice(SUCCESS_CODES)
            payload_size = rng.randrange(100, 10_100)

            event = NetworkEvent(
                timestamp=now or datetime.now(timezone.utc),
                source_ip=self._source_ip(profile),
                endpoint=self._endpoint(profile),
                method="POST" if rng.random() > 0.8 else "GET",
                status_code=status_code,
                response_time=response_time,
                payload_size=payload_size,
                bytes_transferred=payload_size + rng.randrange(0, 50_000),
                user_agent=rng.choice(USER_AGENTS),
                scenario=scenario,
            )

            self._history.append(event)
            if len(self._history) > self.config.max_events_history:
                self._history = self._history[-self.config.history_trim_to:]

        return event

    def _source_ip(self, profile: ScenarioProfile) -> str:
        if profile.focus_ip_count and self._rng.random() < profile.focus_ip_probability:
            focus = self.ip_pool[: min(profile.focus_ip_count, len(self.ip_pool))]
            return self._rng.choice(focus)
        return self._rng.choice(self.ip_pool)

    def _endpoint(self, profile: ScenarioProfile) -> str:
        if profile.focus_endpoints and self._rng.random() < profile.focus_endpoint_probability:
            return self._rng.choice(profile.focus_endpoints)
        return self._rng.choice(ENDPOINTS)

    def _error_status_code(self, profile: ScenarioProfile) -> int:
        if not profile.error_codes:
            return self._rng.choice(ERROR_CODES)
        weights = profile.error_code_weights or None
        return self._rng.choices(profile.error_codes, weights=weights, k=1)[0]

    def get_recent_events(self, count: int = 50) -> List[NetworkEvent]:
        """
        Return the last ``count`` events, oldest first (storage order).

        Reverse the result for newest-first display.
        """
        if count <= 0:
            return []
        with self._lock:
            return self._history[-count:]

    def get_status(self) -> SimulatorStatus:
        with self._lock:
            return SimulatorStatus(
                is_running=self._is_running,
                current_scenario=self._current_scenario,
                event_count=len(self._history),
                available_scenarios=self.registry.names(),
            )
