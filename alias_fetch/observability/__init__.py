"""Observability module for structured logging."""

from alias_fetch.observability.logging import configure_logging


__all__ = ["configure_logging"]
