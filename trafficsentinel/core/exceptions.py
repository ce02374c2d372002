"""
Custom exceptions for Traffic Sentinel.

Invalid input (unknown scenario, out-of-range threshold) and insufficient data
are reported through return values, not exceptions. These exceptions cover the
remaining cases: bad configuration and misuse of a disposed service.
"""


class TrafficSentinelError(Exception):
    """Base exception for Traffic Sentinel failures."""
    pass


class ConfigurationError(TrafficSentinelError):
    """Raised when configuration is invalid or missing."""
    pass


class DetectionServiceError(TrafficSentinelError):
    """Raised when the detection service is used incorrectly."""
    pass


class ServiceDisposedError(DetectionServiceError):
    """Raised when an operation is called on a disposed detection service."""
    pass
