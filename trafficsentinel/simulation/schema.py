"""
Schema definitions for synthetic network traffic.

A NetworkEvent is one HTTP-like observation produced by the simulator. Events
are immutable once created; ``is_error`` is derived from the status code.
"""

from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class NetworkEvent(BaseModel):
    """
    Single synthetic traffic event.

    Attributes:
        event_id: Unique identifier (serialized as ``id``)
        timestamp: UTC time the event was generated
        source_ip: Client address (serialized as ``sourceIP``)
        endpoint: Requested path
        method: HTTP method
        status_code: HTTP status code
        response_time: Response time in milliseconds
        payload_size: Request payload size in bytes
        bytes_transferred: Total bytes on the wire
        user_agent: Client user agent string
        scenario: Name of the scenario that generated the event
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    event_id: str = Field(default_factory=lambda: f"evt_{uuid4().hex}", alias="id")
    timestamp: datetime
    source_ip: str = Field(alias="sourceIP")
    endpoint: str
    method: str = "GET"
    status_code: int = Field(ge=100, le=599)
    response_time: int = Field(ge=0)
    payload_size: int = Field(ge=0)
    bytes_transferred: int = Field(ge=0)
    user_agent: str = ""
    scenario: str = "normal"

    @computed_field(alias="isError")
    @property
    def is_error(self) -> bool:
        return self.status_code >= 400


class SimulatorStatus(BaseModel):
    """Snapshot of simulator state."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_running: bool
    current_scenario: str
    event_count: int
    available_scenarios: List[str]
