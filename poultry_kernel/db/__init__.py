"""Database layer - engine, declarative base and session scope."""

from poultry_kernel.db.base import Base, UUIDString
from poultry_kernel.db.engine import build_engine, create_tables, session_scope

__all__ = [
    "Base",
    "UUIDString",
    "build_engine",
    "create_tables",
    "session_scope",
]
