"""Read-only selectors for querying data."""

from ledger_kernel.selectors.account_selector import AccountInfo, AccountSelector
from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.dynamic_list import (
    DynamicList,
    FilterComparator,
    FilterCondition,
    FilterMeta,
    FilterRole,
    ListFilter,
    ListingLimits,
    SortOrder,
    parse_list_filter,
)
from ledger_kernel.selectors.ledger_selector import (
    AccountDateTotals,
    LedgerSelector,
    bases_for,
)

__all__ = [
    "AccountInfo",
    "AccountSelector",
    "BaseSelector",
    "DynamicList",
    "FilterComparator",
    "FilterCondition",
    "FilterMeta",
    "FilterRole",
    "ListFilter",
    "ListingLimits",
    "SortOrder",
    "parse_list_filter",
    "AccountDateTotals",
    "LedgerSelector",
    "bases_for",
]
