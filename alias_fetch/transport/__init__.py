"""Authenticated HTTP transport for API instances.

This module provides the thin request layer used by alias resolution:
- Strict URL segment joining
- HTTP Basic authentication that callers cannot override
- One request per call, normalized into a FetchResult
- The alias creation call
- Header redaction for logging
"""

from alias_fetch.transport.client import TransportAdapter
from alias_fetch.transport.constants import (
    ALIAS_API_PATH,
    DEFAULT_TIMEOUT_SECONDS,
    HTTP_STATUS_NOT_FOUND,
    HTTP_STATUS_OK,
    HTTP_STATUS_URI_TOO_LONG,
    MAX_URI_LENGTH,
)
from alias_fetch.transport.metrics import TransportMetrics
from alias_fetch.transport.models import (
    AliasRecord,
    FetchResult,
    InstanceConfig,
    RequestOptions,
)
from alias_fetch.transport.paths import basic_auth_header, join_path
from alias_fetch.transport.redact import redact_headers, redact_url_credentials


__all__ = [
    # Client
    "TransportAdapter",
    # Models
    "AliasRecord",
    "FetchResult",
    "InstanceConfig",
    "RequestOptions",
    # Constants
    "ALIAS_API_PATH",
    "DEFAULT_TIMEOUT_SECONDS",
    "HTTP_STATUS_NOT_FOUND",
    "HTTP_STATUS_OK",
    "HTTP_STATUS_URI_TOO_LONG",
    "MAX_URI_LENGTH",
    # Metrics
    "TransportMetrics",
    # Paths
    "basic_auth_header",
    "join_path",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
