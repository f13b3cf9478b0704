"""Command-line interface."""

from alias_fetch.cli.main import cli


__all__ = ["cli"]
