"""Alias fallback controller for long-URI requests."""

import structlog

from alias_fetch.alias.cache import AliasCache
from alias_fetch.alias.errors import AliasCreationError
from alias_fetch.alias.metrics import AliasMetrics
from alias_fetch.alias.state_machine import ResolutionState, ResolutionStateMachine
from alias_fetch.transport.client import TransportAdapter
from alias_fetch.transport.constants import (
    HTTP_STATUS_NOT_FOUND,
    HTTP_STATUS_URI_TOO_LONG,
    MAX_URI_LENGTH,
)
from alias_fetch.transport.models import (
    AliasRecord,
    FetchResult,
    InstanceConfig,
    RequestOptions,
)
from alias_fetch.transport.paths import join_path


logger = structlog.get_logger()


class AliasFallbackController:
    """Resolves logical paths, switching to server-side aliases when needed.

    For each call the controller:
    - Fetches through a cached alias when one exists, recreating it once
      if the server reports it expired (404)
    - Creates an alias up front when the joined URI reaches the length limit
    - Otherwise fetches directly, creating an alias if the server answers 414

    Alias creation is serialized per path, so concurrent calls for the same
    path share a single alias.
    """

    def __init__(
        self,
        transport: TransportAdapter | None = None,
        cache: AliasCache | None = None,
        max_uri_length: int = MAX_URI_LENGTH,
    ) -> None:
        """Initialize the controller.

        Args:
            transport: Transport used for every request.
            cache: Alias cache. A fresh cache is created when omitted.
            max_uri_length: URIs at least this long are never sent directly.

        Raises:
            ValueError: If max_uri_length is not positive.
        """
        if max_uri_length <= 0:
            msg = f"max_uri_length must be positive, got {max_uri_length}"
            raise ValueError(msg)
        self._transport = transport or TransportAdapter()
        self._cache = cache if cache is not None else AliasCache()
        self._max_uri_length = max_uri_length
        self._metrics = AliasMetrics.get_instance()
        self._log = logger.bind(component="alias")

    @property
    def cache(self) -> AliasCache:
        """Get the alias cache owned by this controller."""
        return self._cache

    @property
    def max_uri_length(self) -> int:
        """Get the URI length threshold."""
        return self._max_uri_length

    async def resolve(
        self,
        config: InstanceConfig,
        path: str,
        options: RequestOptions | None = None,
    ) -> FetchResult:
        """Fetch ``path``, falling back to an alias when the URI is too long.

        Args:
            config: Instance configuration with credentials and status sink.
            path: Logical resource path relative to the base URL.
            options: Method, header and body overrides for direct fetches.

        Returns:
            The final FetchResult. Statuses other than those handled here
            (including a second 404 or 414) are returned unchanged.

        Raises:
            AliasCreationError: If the instance refuses to create an alias.
        """
        self._metrics.record_resolve()
        machine = ResolutionStateMachine(path)
        alias = self._cache.get(path)

        # Each pass moves the state machine forward; a pass that would
        # loop past the retry budget raises ResolutionStateError.
        while True:
            if alias is not None:
                machine.transition(ResolutionState.VIA_ALIAS)
                config.report_status(f"Using found alias {alias.id}")
                self._metrics.record_alias_hit()
                result = await self._transport.send(config, alias.path)

                if result.status == HTTP_STATUS_NOT_FOUND and machine.recreate_allowed:
                    config.report_status(
                        f"Alias {alias.id} may have expired, attempting to recreate"
                    )
                    self._log.warning("alias_expired", alias_id=alias.id)
                    self._metrics.record_alias_expired()
                    self._cache.delete(path, expected=alias)
                    machine.transition(ResolutionState.RECREATING_ALIAS)
                    alias = None
                    continue

                return self._finish(config, machine, result)

            uri_length = len(join_path(config.base_url, path))
            if uri_length >= self._max_uri_length:
                config.report_status(
                    f"URI exceeds maximum length ({uri_length} >= "
                    f"{self._max_uri_length}), creating alias..."
                )
                self._metrics.record_uri_too_long()
                alias = await self._create_alias(config, path, machine)
                continue

            machine.transition(ResolutionState.DIRECT)
            config.report_status("Attempting to directly fetch target")
            self._metrics.record_direct_fetch()
            result = await self._transport.send(config, path, options)

            if result.status == HTTP_STATUS_URI_TOO_LONG:
                config.report_status("Received 414, creating alias")
                self._metrics.record_uri_too_long(server_side=True)
                alias = await self._create_alias(config, path, machine)
                continue

            return self._finish(config, machine, result)

    async def _create_alias(
        self,
        config: InstanceConfig,
        path: str,
        machine: ResolutionStateMachine,
    ) -> AliasRecord:
        """Create and cache an alias for ``path``.

        Reuses an alias cached by a concurrent call while this one waited
        for the per-path lock.

        Raises:
            AliasCreationError: If the creation call is not 2xx with a body.
        """
        machine.transition(ResolutionState.CREATING_ALIAS)

        async with self._cache.lock(path):
            existing = self._cache.get(path)
            if existing is not None:
                self._metrics.record_alias_reused()
                self._log.debug("alias_reused", alias_id=existing.id)
                return existing

            response = await self._transport.create_alias(config, path)
            alias = response.data
            if not response.is_success or not isinstance(alias, AliasRecord):
                self._metrics.record_creation_failure()
                self._log.error("alias_creation_failed", status_code=response.status)
                machine.transition(ResolutionState.FAILED)
                raise AliasCreationError(response.status, path)

            self._cache.set(path, alias)

        config.report_status(f"Alias {alias.id} created")
        self._metrics.record_alias_created()
        self._log.info(
            "alias_created",
            alias_id=alias.id,
            alias_path=alias.path,
            status_code=response.status,
        )
        return alias

    def _finish(
        self,
        config: InstanceConfig,
        machine: ResolutionStateMachine,
        result: FetchResult,
    ) -> FetchResult:
        config.report_status(f"Received response {result.status}")
        machine.transition(ResolutionState.FINISHED)
        self._log.info(
            "resolve_complete",
            status_code=result.status,
            states=[state.name for state in machine.history],
        )
        return result


_default_controller: AliasFallbackController | None = None


def get_default_controller() -> AliasFallbackController:
    """Get the process-wide controller used by :func:`resolve`."""
    global _default_controller  # noqa: PLW0603
    if _default_controller is None:
        _default_controller = AliasFallbackController()
    return _default_controller


async def resolve(
    config: InstanceConfig,
    path: str,
    options: RequestOptions | None = None,
) -> FetchResult:
    """Resolve ``path`` through the process-wide controller.

    Aliases created here are shared by every caller in the process.

    Args:
        config: Instance configuration with credentials and status sink.
        path: Logical resource path relative to the base URL.
        options: Method, header and body overrides for direct fetches.

    Returns:
        The final FetchResult.

    Raises:
        AliasCreationError: If the instance refuses to create an alias.
    """
    return await get_default_controller().resolve(config, path, options)
