"""Database layer: declarative bases, engine and money coercion."""

from ledger_kernel.db.base import Base, TenantScopedMixin, TrackedBase, UUIDString
from ledger_kernel.db.engine import create_tables, get_engine, get_session, session_scope
from ledger_kernel.db.types import ZERO, to_money

__all__ = [
    "Base",
    "TrackedBase",
    "TenantScopedMixin",
    "UUIDString",
    "get_engine",
    "get_session",
    "session_scope",
    "create_tables",
    "ZERO",
    "to_money",
]
