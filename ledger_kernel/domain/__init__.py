"""
Pure domain layer.

Contains value objects with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O (SystemClock aside)
"""

from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.events import DomainEvent, EventName

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "DomainEvent",
    "EventName",
]
