"""
Reporting Module Service (``ledger_modules.reporting.service``).

Responsibility
--------------
Builds the profit and loss sheet by bridging the kernel selectors
(``AccountSelector``, ``LedgerSelector``) to the pure transformation
functions in ``statements.py``.  Read-only.

Invariants enforced
-------------------
* Read-only -- no mutations to the journal.
* Always computed fresh from posted journal lines; nothing is cached.
* All monetary amounts use ``Decimal`` -- NEVER ``float``.
* Every query is scoped to the caller's tenant.

Failure modes
-------------
* ``InvalidReportQueryError`` for a bad date range or enum value, raised
  before any query is executed.
* Selector failures propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.selectors.account_selector import AccountInfo, AccountSelector
from ledger_kernel.selectors.ledger_selector import LedgerSelector
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import ProfitLossQuery, ProfitLossSheet, ReportMetadata
from ledger_modules.reporting.statements import (
    build_profit_loss_sheet,
    profit_loss_account_types,
    render_to_dict,
)

logger = get_logger("modules.reporting.service")


class ProfitLossSheetService:
    """
    Profit and loss sheet generation.

    Contract
    --------
    * ``profit_loss_sheet`` accepts a ``ProfitLossQuery``, a plain mapping of
      request arguments, or None for all defaults.
    * Missing dates default to the current calendar year of the injected
      clock.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()
        self._accounts = AccountSelector(session)
        self._ledger = LedgerSelector(session)

    def _load_accounts(self, tenant_id: UUID) -> list[AccountInfo]:
        accounts = self._accounts.list_by_types(tenant_id, profit_loss_account_types())
        if not self._config.include_inactive:
            accounts = [a for a in accounts if a.is_active]
        logger.debug(
            "accounts_loaded_for_reporting",
            extra={"account_count": len(accounts)},
        )
        return accounts

    def _build_metadata(self, query: ProfitLossQuery) -> ReportMetadata:
        """Build report metadata with injected clock timestamp."""
        return ReportMetadata(
            report_name="profit_loss_sheet",
            entity_name=self._config.entity_name,
            currency=self._config.default_currency,
            generated_at=self._clock.now().isoformat(),
            period_start=query.from_date,
            period_end=query.to_date,
            basis=query.basis,
        )

    def profit_loss_sheet(
        self,
        tenant_id: UUID,
        query: ProfitLossQuery | Mapping[str, Any] | None = None,
    ) -> ProfitLossSheet:
        """
        Generate the profit and loss sheet for a tenant.

        Raises:
            InvalidReportQueryError: Bad parameters.
        """
        if not isinstance(query, ProfitLossQuery):
            query = ProfitLossQuery.from_dict(query)
        query = query.resolve(self._clock.today())

        with LogContext.bind(tenant_id=tenant_id):
            accounts = self._load_accounts(tenant_id)
            totals = self._ledger.account_date_totals(
                tenant_id,
                from_date=query.from_date,
                to_date=query.to_date,
                basis=query.basis.value,
                account_ids=query.accounts_ids or None,
            )
            sheet = build_profit_loss_sheet(
                accounts, totals, query, self._build_metadata(query), self._config,
            )
            logger.info(
                "profit_loss_sheet_generated",
                extra={
                    "from_date": query.from_date.isoformat(),
                    "to_date": query.to_date.isoformat(),
                    "basis": query.basis.value,
                    "display_columns_type": query.display_columns_type.value,
                    "column_count": len(sheet.columns),
                    "net_income": str(sheet.net_income.total.amount),
                },
            )
            return sheet

    def to_dict(self, report: object) -> dict:
        """Convert a report to a JSON-safe dict."""
        return render_to_dict(report)
