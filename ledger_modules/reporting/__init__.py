"""
Financial Reporting Module.

Read-only profit and loss sheet derived from posted journal lines.

Pure transformation functions live in ``statements.py``; the service only
loads data and delegates.
"""

from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    DatePeriod,
    DisplayColumnsBy,
    DisplayColumnsType,
    NumberFormat,
    ProfitLossAccount,
    ProfitLossQuery,
    ProfitLossSection,
    ProfitLossSectionKey,
    ProfitLossSheet,
    ProfitLossSummary,
    ProfitLossTotal,
    ReportBasis,
    ReportMetadata,
)
from ledger_modules.reporting.service import ProfitLossSheetService
from ledger_modules.reporting.statements import (
    build_profit_loss_sheet,
    compute_natural_balance,
    format_amount,
    render_to_dict,
    split_date_periods,
)

__all__ = [
    "DatePeriod",
    "DisplayColumnsBy",
    "DisplayColumnsType",
    "NumberFormat",
    "ProfitLossAccount",
    "ProfitLossQuery",
    "ProfitLossSection",
    "ProfitLossSectionKey",
    "ProfitLossSheet",
    "ProfitLossSheetService",
    "ProfitLossSummary",
    "ProfitLossTotal",
    "ReportBasis",
    "ReportMetadata",
    "ReportingConfig",
    "build_profit_loss_sheet",
    "compute_natural_balance",
    "format_amount",
    "render_to_dict",
    "split_date_periods",
]
