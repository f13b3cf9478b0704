"""Alias fallback for requests whose URI is too long.

Provides the controller that decides between direct fetches and
server-side query aliases, the alias cache it owns, and the per-call
state machine that bounds its retries.
"""

from alias_fetch.alias.cache import AliasCache
from alias_fetch.alias.controller import (
    AliasFallbackController,
    get_default_controller,
    resolve,
)
from alias_fetch.alias.errors import AliasCreationError
from alias_fetch.alias.metrics import AliasMetrics
from alias_fetch.alias.state_machine import (
    ResolutionState,
    ResolutionStateError,
    ResolutionStateMachine,
)


__all__ = [
    "AliasCache",
    "AliasCreationError",
    "AliasFallbackController",
    "AliasMetrics",
    "ResolutionState",
    "ResolutionStateError",
    "ResolutionStateMachine",
    "get_default_controller",
    "resolve",
]
