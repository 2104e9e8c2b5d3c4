"""
Pure domain layer.

This module contains immutable farm records, closed vocabularies, typed
update commands and the state document codec, with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Time/clock (beyond the Clock abstraction itself)
- I/O
"""

from poultry_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from poultry_kernel.domain.codec import decode_state, encode_state
from poultry_kernel.domain.records import FarmState, default_state
from poultry_kernel.domain.vocabulary import (
    BAG_SIZE_KG,
    EGGS_PER_PETI,
    UnderflowPolicy,
)

__all__ = [
    "BAG_SIZE_KG",
    "EGGS_PER_PETI",
    "Clock",
    "DeterministicClock",
    "FarmState",
    "SystemClock",
    "UnderflowPolicy",
    "decode_state",
    "default_state",
    "encode_state",
]
