"""Metrics collection for alias resolution."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class AliasMetrics:
    """Metrics for alias resolution.

    Attributes:
        resolve_total: Resolve calls started.
        direct_fetch_total: Direct fetch attempts.
        alias_hits_total: Fetches through a cached alias.
        aliases_created_total: Aliases successfully created.
        alias_creation_failures_total: Alias creation calls refused.
        aliases_expired_total: Cached aliases found expired (404).
        aliases_reused_total: Creations skipped because a concurrent call
            had already created the alias.
        uri_too_long_total: URIs rejected by the client-side length check.
        server_uri_too_long_total: Direct fetches answered with 414.
    """

    resolve_total: int = 0
    direct_fetch_total: int = 0
    alias_hits_total: int = 0
    aliases_created_total: int = 0
    alias_creation_failures_total: int = 0
    aliases_expired_total: int = 0
    aliases_reused_total: int = 0
    uri_too_long_total: int = 0
    server_uri_too_long_total: int = 0

    _instance: ClassVar["AliasMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "AliasMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_resolve(self) -> None:
        """Record a resolve call."""
        self.resolve_total += 1

    def record_direct_fetch(self) -> None:
        """Record a direct fetch attempt."""
        self.direct_fetch_total += 1

    def record_alias_hit(self) -> None:
        """Record a fetch through a cached alias."""
        self.alias_hits_total += 1

    def record_alias_created(self) -> None:
        """Record a created alias."""
        self.aliases_created_total += 1

    def record_creation_failure(self) -> None:
        """Record a refused alias creation."""
        self.alias_creation_failures_total += 1

    def record_alias_expired(self) -> None:
        """Record an expired alias."""
        self.aliases_expired_total += 1

    def record_alias_reused(self) -> None:
        """Record an alias reused from a concurrent creation."""
        self.aliases_reused_total += 1

    def record_uri_too_long(self, server_side: bool = False) -> None:
        """Record a URI that was too long.

        Args:
            server_side: True when the server answered 414, False when the
                client-side length check triggered.
        """
        if server_side:
            self.server_uri_too_long_total += 1
        else:
            self.uri_too_long_total += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "resolve_total": self.resolve_total,
            "direct_fetch_total": self.direct_fetch_total,
            "alias_hits_total": self.alias_hits_total,
            "aliases_created_total": self.aliases_created_total,
            "alias_creation_failures_total": self.alias_creation_failures_total,
            "aliases_expired_total": self.aliases_expired_total,
            "aliases_reused_total": self.aliases_reused_total,
            "uri_too_long_total": self.uri_too_long_total,
            "server_uri_too_long_total": self.server_uri_too_long_total,
        }
