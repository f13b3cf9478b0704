"""Fetch API resources with transparent fallback to short query aliases."""

from alias_fetch.alias import (
    AliasCache,
    AliasCreationError,
    AliasFallbackController,
    resolve,
)
from alias_fetch.transport import (
    AliasRecord,
    FetchResult,
    InstanceConfig,
    RequestOptions,
    TransportAdapter,
)


__all__ = [
    "AliasCache",
    "AliasCreationError",
    "AliasFallbackController",
    "AliasRecord",
    "FetchResult",
    "InstanceConfig",
    "RequestOptions",
    "TransportAdapter",
    "resolve",
]
