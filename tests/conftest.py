"""
Pytest configuration and shared fixtures.

Provides test configuration instances, event factories, and a polling helper
for tests that exercise background threads.
"""

import time
from datetime import datetime, timedelta, timezone
from typing import Callable, List

import pytest

from trafficsentinel.core.config import (
    Config,
    DetectionConfig,
    ServiceConfig,
    SimulationConfig,
)
from trafficsentinel.simulation.schema import NetworkEvent


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed evaluation time used by window-based tests."""
    return datetime(2025, 2, 7, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_event() -> Callable[..., NetworkEvent]:
    """
    Factory fixture for NetworkEvent objects with neutral defaults.

    Any field can be overridden by keyword.
    """

    def _make(**overrides) -> NetworkEvent:
        data = {
            "timestamp": datetime.now(timezone.utc),
            "source_ip": "10.0.0.1",
            "endpoint": "/api/users",
            "method": "GET",
            "status_code": 200,
            "response_time": 150,
            "payload_size": 1000,
            "bytes_transferred": 5000,
            "user_agent": "pytest",
            "scenario": "normal",
        }
        data.update(overrides)
        return NetworkEvent(**data)

    return _make


@pytest.fixture
def make_window(make_event) -> Callable[..., List[NetworkEvent]]:
    """
    Factory for a batch of events that all fall inside the window ending at ``now``.

    Events are spaced 10ms apart, oldest first.
    """

    def _make(
        now: datetime,
        count: int,
        errors: int = 0,
        response_time: int = 150,
        payload_size: int = 1000,
        unique_ips: int = 5,
    ) -> List[NetworkEvent]:
        events = []
        for i in range(count):
            events.append(
                make_event(
                    timestamp=now - timedelta(milliseconds=10 * (count - i)),
                    source_ip=f"10.0.0.{i % unique_ips}",
                    status_code=500 if i < errors else 200,
                    response_time=response_time,
                    payload_size=payload_size,
                )
            )
        return events

    return _make


@pytest.fixture
def detection_config() -> DetectionConfig:
    return DetectionConfig()


@pytest.fixture
def simulation_config() -> SimulationConfig:
    """Seeded simulation config so statistical tests are reproducible."""
    return SimulationConfig(seed=1234)


@pytest.fixture
def fast_settings(tmp_path) -> Config:
    """
    Settings with short scheduling periods for service tests.

    Logs go to a temporary directory.
    """
    return Config(
        log_level="WARNING",
        logs_dir=tmp_path / "logs",
        simulation=SimulationConfig(seed=7),
        service=ServiceConfig(simulation_interval_ms=20, detection_interval_ms=50),
    )


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    """Poll a predicate until it is true or the timeout expires."""

    def _wait(predicate: Callable[[], bool], timeout: float = 3.0, interval: float = 0.01) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()

    return _wait


def pytest_configure(config):
    """
    Pytest hook for custom configuration.

    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (deferred CI)"
    )
