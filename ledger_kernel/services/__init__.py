"""Service layer for write operations."""

from ledger_kernel.services.base import BaseService
from ledger_kernel.services.event_dispatcher import (
    AuditLogSubscriber,
    EventDispatcher,
    PublishResult,
    transactional_dispatch,
)
from ledger_kernel.services.journal_service import (
    JournalInfo,
    JournalInput,
    JournalLineInfo,
    JournalLineInput,
    JournalService,
)

__all__ = [
    "AuditLogSubscriber",
    "BaseService",
    "EventDispatcher",
    "PublishResult",
    "transactional_dispatch",
    "JournalInfo",
    "JournalInput",
    "JournalLineInfo",
    "JournalLineInput",
    "JournalService",
]
