"""Shared pytest fixtures."""

from collections.abc import Iterator

import pytest

from alias_fetch.alias.controller import AliasFallbackController
from alias_fetch.alias.metrics import AliasMetrics
from alias_fetch.transport.client import TransportAdapter
from alias_fetch.transport.metrics import TransportMetrics
from alias_fetch.transport.models import InstanceConfig
from tests.helpers.fake_instance import BASE_URL, FakeInstance


@pytest.fixture(autouse=True)
def reset_metrics() -> Iterator[None]:
    """Give every test fresh metrics singletons."""
    TransportMetrics.reset()
    AliasMetrics.reset()
    yield
    TransportMetrics.reset()
    AliasMetrics.reset()


@pytest.fixture
def status_messages() -> list[str]:
    """Collects messages sent to the status sink."""
    return []


@pytest.fixture
def config(status_messages: list[str]) -> InstanceConfig:
    """Instance configuration pointing at the fake instance."""
    return InstanceConfig(
        base_url=BASE_URL,
        username="admin",
        password="district",
        report_status=status_messages.append,
    )


@pytest.fixture
def instance() -> FakeInstance:
    """A fake instance with default behaviour."""
    return FakeInstance()


@pytest.fixture
def controller(instance: FakeInstance) -> AliasFallbackController:
    """Controller wired to the fake instance."""
    return AliasFallbackController(transport=TransportAdapter(client=instance.client()))
