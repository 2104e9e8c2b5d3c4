"""Kernel services - state document persistence."""

from poultry_kernel.services.state_store import (
    InMemoryStateStore,
    SqlStateStore,
    StateStore,
)

__all__ = ["InMemoryStateStore", "SqlStateStore", "StateStore"]
