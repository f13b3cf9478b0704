"""Authenticated HTTP transport for API instances."""

import json
import time

import httpx
import structlog

from alias_fetch.transport.constants import (
    ALIAS_API_PATH,
    DEFAULT_TIMEOUT_SECONDS,
    HTTP_STATUS_OK,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
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


logger = structlog.get_logger()


class TransportAdapter:
    """Issues single authenticated requests against an instance.

    Every call performs exactly one HTTP round trip and never retries.
    Network failures raised by httpx propagate to the caller unchanged.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the transport adapter.

        Args:
            client: Shared async client. When omitted, a short-lived client
                is opened for each request.
            timeout_seconds: Timeout for per-request clients.
        """
        self._client = client
        self._timeout = timeout_seconds
        self._metrics = TransportMetrics.get_instance()
        self._log = logger.bind(component="transport")

    async def send(
        self,
        config: InstanceConfig,
        path: str,
        options: RequestOptions | None = None,
    ) -> FetchResult:
        """Send one request to ``path`` relative to the instance base URL.

        Args:
            config: Instance configuration with credentials.
            path: Path joined onto ``config.base_url``.
            options: Method, header and body overrides.

        Returns:
            FetchResult whose ``data`` is the parsed JSON body when the
            status is exactly 200, and ``None`` otherwise.
        """
        response = await self._dispatch(config, path, options)
        data = response.json() if response.status_code == HTTP_STATUS_OK else None
        return FetchResult(status=response.status_code, data=data)

    async def create_alias(self, config: InstanceConfig, target: str) -> FetchResult:
        """Ask the instance to create a short alias for ``target``.

        Args:
            config: Instance configuration with credentials.
            target: Long logical path the alias should resolve to.

        Returns:
            FetchResult whose ``data`` is the created AliasRecord for a 2xx
            response with a valid alias body, and ``None`` otherwise.
        """
        options = RequestOptions(
            method="POST",
            headers={
                "Content-Type": "application/json",
                "Accept": "*/*",
            },
            content=json.dumps({"target": target}),
        )
        self._metrics.record_alias_request()
        response = await self._dispatch(config, ALIAS_API_PATH, options)

        record: AliasRecord | None = None
        if HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
            record = self._parse_alias(response)
        return FetchResult(status=response.status_code, data=record)

    def build_headers(
        self,
        config: InstanceConfig,
        extra_headers: dict[str, str] | None = None,
    ) -> dict[str, str]:
        """Merge caller headers with the Basic Authorization header.

        A caller-supplied Authorization header, in any letter case, is
        replaced by the one built from the configured credentials.

        Args:
            config: Instance configuration with credentials.
            extra_headers: Headers supplied by the caller.

        Returns:
            Complete headers dictionary.
        """
        headers = {
            key: value
            for key, value in (extra_headers or {}).items()
            if key.lower() != "authorization"
        }
        headers["Authorization"] = basic_auth_header(config.username, config.password)
        return headers

    async def _dispatch(
        self,
        config: InstanceConfig,
        path: str,
        options: RequestOptions | None,
    ) -> httpx.Response:
        options = options or RequestOptions()
        url = join_path(config.base_url, path)
        headers = self.build_headers(config, options.headers)

        log = self._log.bind(
            method=options.method,
            url=redact_url_credentials(url),
            headers=redact_headers(headers),
        )

        start_time_ns = time.perf_counter_ns()
        if self._client is not None:
            response = await self._client.request(
                options.method, url, headers=headers, content=options.content
            )
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    options.method, url, headers=headers, content=options.content
                )
        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000

        self._metrics.record_request(response.status_code, duration_ms)
        log.debug(
            "request_complete",
            status_code=response.status_code,
            uri_length=len(url),
            duration_ms=round(duration_ms, 2),
        )
        return response

    def _parse_alias(self, response: httpx.Response) -> AliasRecord | None:
        """Parse an alias creation body, returning None when it is unusable."""
        try:
            return AliasRecord.model_validate(response.json())
        except ValueError as e:
            self._log.warning(
                "alias_body_invalid",
                status_code=response.status_code,
                error=str(e),
            )
            return None
