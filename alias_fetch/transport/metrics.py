"""Metrics collection for the transport layer."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class TransportMetrics:
    """Metrics for transport calls.

    Singleton class that tracks request counts by status code and the
    cumulative time spent waiting on the network.
    """

    http_requests_total: dict[int, int] = field(default_factory=dict)
    http_request_count: int = 0
    http_duration_ms_total: float = 0.0
    alias_requests_total: int = 0

    _instance: ClassVar["TransportMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "TransportMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_request(self, status_code: int, duration_ms: float) -> None:
        """Record a completed request.

        Args:
            status_code: HTTP status code.
            duration_ms: Round-trip duration in milliseconds.
        """
        self.http_requests_total[status_code] = (
            self.http_requests_total.get(status_code, 0) + 1
        )
        self.http_request_count += 1
        self.http_duration_ms_total += duration_ms

    def record_alias_request(self) -> None:
        """Record a call to the alias management endpoint."""
        self.alias_requests_total += 1

    def to_dict(self) -> dict[str, int | float | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "http_requests_total": dict(self.http_requests_total),
            "http_request_count": self.http_request_count,
            "http_duration_ms_total": self.http_duration_ms_total,
            "alias_requests_total": self.alias_requests_total,
        }

