"""Integration tests for alias fallback against a local HTTP server."""

import base64
import json
import threading
from collections.abc import Iterator
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import urlsplit

import pytest

from alias_fetch.alias.controller import AliasFallbackController
from alias_fetch.alias.errors import AliasCreationError
from alias_fetch.transport.client import TransportAdapter
from alias_fetch.transport.metrics import TransportMetrics
from alias_fetch.transport.models import InstanceConfig


EXPECTED_AUTH = "Basic " + base64.b64encode(b"admin:district").decode("ascii")
LONG_QUERY = "api/analytics?dimension=dx:" + ";".join(f"ind{i:05d}" for i in range(300))


class AliasServerHandler(BaseHTTPRequestHandler):
    """Serves analytics, query aliases and a request-line length limit."""

    # Class-level state shared across requests
    max_request_line: int = 8000
    aliases: dict[str, str] = {}  # noqa: RUF012
    expired: set[str] = set()  # noqa: RUF012
    alias_creation_status: int = 201
    request_log: list[tuple[str, str]] = []  # noqa: RUF012

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        """Suppress log messages during tests."""

    def _send_json(self, status: int, body: object) -> None:
        payload = json.dumps(body).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def _authorized(self) -> bool:
        if self.headers.get("Authorization") == EXPECTED_AUTH:
            return True
        self._send_json(401, {"message": "Unauthorized"})
        return False

    def do_GET(self) -> None:  # noqa: N802
        """Serve alias lookups and direct analytics requests."""
        AliasServerHandler.request_log.append(("GET", self.path))
        if len(self.path) > self.max_request_line:
            self.send_response(414)
            self.send_header("Content-Length", "0")
            self.end_headers()
            return
        if not self._authorized():
            return

        path = urlsplit(self.path).path
        if path.startswith("/api/query/alias/"):
            alias_id = path.rsplit("/", 1)[-1]
            if alias_id in self.expired or alias_id not in self.aliases:
                self._send_json(404, {"message": "Alias not found"})
                return
            self._send_json(200, {"via": alias_id, "target": self.aliases[alias_id]})
            return

        self._send_json(200, {"via": "direct", "path": self.path})

    def do_POST(self) -> None:  # noqa: N802
        """Create query aliases."""
        AliasServerHandler.request_log.append(("POST", self.path))
        if not self._authorized():
            return
        length = int(self.headers.get("Content-Length", "0"))
        body = json.loads(self.rfile.read(length))

        if self.path != "/api/query/alias":
            self._send_json(404, {"message": "Not found"})
            return
        if self.alias_creation_status != 201:
            self._send_json(self.alias_creation_status, {"message": "Refused"})
            return

        alias_id = f"alias{len(self.aliases) + 1}"
        AliasServerHandler.aliases[alias_id] = body["target"]
        self._send_json(
            201,
            {
                "id": alias_id,
                "path": f"/api/query/alias/{alias_id}",
                "href": f"http://localhost/api/query/alias/{alias_id}",
                "target": body["target"],
            },
        )


@pytest.fixture
def alias_server() -> Iterator[HTTPServer]:
    """Start a local alias-capable server."""
    AliasServerHandler.max_request_line = 8000
    AliasServerHandler.aliases = {}
    AliasServerHandler.expired = set()
    AliasServerHandler.alias_creation_status = 201
    AliasServerHandler.request_log = []
    server = HTTPServer(("127.0.0.1", 0), AliasServerHandler)
    thread = threading.Thread(target=server.serve_forever)
    thread.daemon = True
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def server_config(alias_server: HTTPServer) -> InstanceConfig:
    """Instance configuration for the local server."""
    host, port = alias_server.server_address[0], alias_server.server_address[1]
    if isinstance(host, bytes):
        host = host.decode("utf-8")
    return InstanceConfig(
        base_url=f"http://{host}:{port}/",
        username="admin",
        password="district",
    )


@pytest.fixture
def server_controller() -> AliasFallbackController:
    """Controller using per-request httpx clients."""
    return AliasFallbackController(transport=TransportAdapter(timeout_seconds=5.0))


class TestAliasFallbackServer:
    """End-to-end alias fallback over real HTTP."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_short_query_fetched_directly(
        self,
        server_controller: AliasFallbackController,
        server_config: InstanceConfig,
    ) -> None:
        """Test that short queries never touch the alias API."""
        result = await server_controller.resolve(server_config, "api/me")

        assert result.status == 200
        assert result.data == {"via": "direct", "path": "/api/me"}
        assert AliasServerHandler.request_log == [("GET", "/api/me")]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_long_query_goes_through_alias(
        self,
        server_controller: AliasFallbackController,
        server_config: InstanceConfig,
    ) -> None:
        """Test that a long query is resolved through a new alias."""
        result = await server_controller.resolve(server_config, LONG_QUERY)

        assert result.status == 200
        assert result.data == {"via": "alias1", "target": LONG_QUERY}
        assert AliasServerHandler.request_log == [
            ("POST", "/api/query/alias"),
            ("GET", "/api/query/alias/alias1"),
        ]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_server_414_triggers_alias(
        self,
        server_controller: AliasFallbackController,
        server_config: InstanceConfig,
    ) -> None:
        """Test that a server limit tighter than the client's is handled."""
        AliasServerHandler.max_request_line = 40
        path = "api/analytics?dimension=dx:abcdefghij;klmnopqrst"

        result = await server_controller.resolve(server_config, path)

        assert result.status == 200
        assert result.data == {"via": "alias1", "target": path}
        assert [method for method, _ in AliasServerHandler.request_log] == [
            "GET",
            "POST",
            "GET",
        ]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_expired_alias_recreated(
        self,
        server_controller: AliasFallbackController,
        server_config: InstanceConfig,
    ) -> None:
        """Test that an alias expired on the server is transparently replaced."""
        await server_controller.resolve(server_config, LONG_QUERY)
        AliasServerHandler.expired.add("alias1")

        result = await server_controller.resolve(server_config, LONG_QUERY)

        assert result.status == 200
        assert result.data == {"via": "alias2", "target": LONG_QUERY}
        cached = server_controller.cache.get(LONG_QUERY)
        assert cached is not None
        assert cached.id == "alias2"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_alias_refused(
        self,
        server_controller: AliasFallbackController,
        server_config: InstanceConfig,
    ) -> None:
        """Test that a refused alias surfaces as AliasCreationError."""
        AliasServerHandler.alias_creation_status = 403

        with pytest.raises(AliasCreationError) as exc_info:
            await server_controller.resolve(server_config, LONG_QUERY)

        assert exc_info.value.status_code == 403
        assert TransportMetrics.get_instance().http_requests_total == {403: 1}
