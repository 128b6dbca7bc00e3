"""Domain models for the ledger kernel."""

from ledger_kernel.models.account import (
    ACCOUNT_TYPES,
    Account,
    AccountRootType,
    AccountTypeKey,
    AccountTypeMeta,
    NormalBalance,
    get_account_type_meta,
)
from ledger_kernel.models.journal import (
    AccountingBasis,
    JournalEntry,
    JournalEntryStatus,
    JournalLine,
    LineSide,
)

__all__ = [
    "ACCOUNT_TYPES",
    "Account",
    "AccountRootType",
    "AccountTypeKey",
    "AccountTypeMeta",
    "NormalBalance",
    "get_account_type_meta",
    "AccountingBasis",
    "JournalEntry",
    "JournalEntryStatus",
    "JournalLine",
    "LineSide",
]
