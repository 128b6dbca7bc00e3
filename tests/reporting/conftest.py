"""
Reporting-specific test fixtures.

Provides:
- ProfitLossSheetService instances
- Helpers building AccountInfo / AccountDateTotals for pure function tests
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from ledger_kernel.models.account import ACCOUNT_TYPES, AccountTypeKey
from ledger_kernel.selectors.account_selector import AccountInfo
from ledger_kernel.selectors.ledger_selector import AccountDateTotals
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.service import ProfitLossSheetService


@pytest.fixture
def reporting_config() -> ReportingConfig:
    """Standard reporting configuration for tests."""
    return ReportingConfig(entity_name="Test Company")


@pytest.fixture
def profit_loss_service(
    session,
    deterministic_clock,
    reporting_config,
) -> ProfitLossSheetService:
    """ProfitLossSheetService wired to the test session."""
    return ProfitLossSheetService(
        session=session,
        clock=deterministic_clock,
        config=reporting_config,
    )


# =========================================================================
# Synthetic data for pure function tests (no DB required)
# =========================================================================


def make_account_info(
    account_id: UUID,
    code: str,
    name: str,
    account_type: AccountTypeKey,
    is_active: bool = True,
) -> AccountInfo:
    """Factory for AccountInfo used in pure tests."""
    meta = ACCOUNT_TYPES[account_type]
    return AccountInfo(
        id=account_id,
        code=code,
        name=name,
        account_type=account_type,
        root_type=meta.root_type,
        normal_balance=meta.normal,
        parent_account_id=None,
        is_active=is_active,
    )


def make_totals(
    account_id: UUID,
    day: date,
    debit: str = "0",
    credit: str = "0",
    line_count: int = 1,
) -> AccountDateTotals:
    """Factory for one (account, date) ledger row."""
    return AccountDateTotals(
        account_id=account_id,
        date=day,
        debit_total=Decimal(debit),
        credit_total=Decimal(credit),
        line_count=line_count,
    )
