"""
Module: ledger_kernel.selectors.ledger_selector
Responsibility: Read-only ledger aggregation.  The ledger is a derived view
    over posted JournalLines -- there are no stored balances anywhere.
Architecture position: Kernel > Selectors.  May import from models/ and
    selectors/base.py.

Invariants enforced:
    - Only POSTED entries are aggregated.
    - Basis filtering: an accrual view reads entries recognized under
      ``both`` or ``accrual``; a cash view reads ``both`` or ``cash``.
    - Every query is filtered by tenant_id.

Failure modes:
    - Returns empty results when no posted entries exist in range.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import case, func, select

from ledger_kernel.models.journal import (
    AccountingBasis,
    JournalEntry,
    JournalEntryStatus,
    JournalLine,
    LineSide,
)
from ledger_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class AccountDateTotals:
    """Posted debit/credit totals of one account on one date."""

    account_id: UUID
    date: date
    debit_total: Decimal
    credit_total: Decimal
    line_count: int

    @property
    def balance(self) -> Decimal:
        """Net balance (debits - credits)."""
        return self.debit_total - self.credit_total


def bases_for(basis: AccountingBasis | str) -> tuple[str, ...]:
    """Entry bases visible to a report run on ``basis``."""
    basis = AccountingBasis(basis)
    if basis == AccountingBasis.BOTH:
        return tuple(b.value for b in AccountingBasis)
    return (AccountingBasis.BOTH.value, basis.value)


class LedgerSelector(BaseSelector[JournalLine]):
    """
    Selector for ledger aggregation.

    Guarantees:
        - No stored balances.  Every total is computed at query time.
        - All totals are Decimal (never float).
    """

    @staticmethod
    def _sums():
        debit_sum = func.sum(
            case(
                (JournalLine.side == LineSide.DEBIT.value, JournalLine.amount),
                else_=0,
            )
        ).label("debit_total")
        credit_sum = func.sum(
            case(
                (JournalLine.side == LineSide.CREDIT.value, JournalLine.amount),
                else_=0,
            )
        ).label("credit_total")
        return debit_sum, credit_sum

    def account_date_totals(
        self,
        tenant_id: UUID,
        from_date: date | None = None,
        to_date: date | None = None,
        basis: AccountingBasis | str = AccountingBasis.ACCRUAL,
        account_ids: list[UUID] | tuple[UUID, ...] | None = None,
    ) -> list[AccountDateTotals]:
        """
        Posted totals grouped by (account, date).

        Args:
            tenant_id: Owning tenant.
            from_date: Inclusive lower bound on entry date.
            to_date: Inclusive upper bound on entry date.
            basis: Report basis; see ``bases_for``.
            account_ids: Optional restriction to these accounts.

        Returns:
            Rows ordered by date then account.
        """
        debit_sum, credit_sum = self._sums()
        query = (
            select(
                JournalLine.account_id,
                JournalEntry.date,
                debit_sum,
                credit_sum,
                func.count(JournalLine.id).label("line_count"),
            )
            .join(JournalEntry, JournalLine.journal_entry_id == JournalEntry.id)
            .where(
                JournalEntry.tenant_id == tenant_id,
                JournalEntry.status == JournalEntryStatus.POSTED.value,
                JournalEntry.basis.in_(bases_for(basis)),
            )
            .group_by(JournalLine.account_id, JournalEntry.date)
            .order_by(JournalEntry.date, JournalLine.account_id)
        )

        if from_date is not None:
            query = query.where(JournalEntry.date >= from_date)
        if to_date is not None:
            query = query.where(JournalEntry.date <= to_date)
        if account_ids:
            query = query.where(JournalLine.account_id.in_(list(account_ids)))

        return [
            AccountDateTotals(
                account_id=row.account_id,
                date=row.date,
                debit_total=Decimal(row.debit_total or 0),
                credit_total=Decimal(row.credit_total or 0),
                line_count=row.line_count,
            )
            for row in self.session.execute(query).all()
        ]

    def total_debits_credits(self, tenant_id: UUID) -> tuple[Decimal, Decimal]:
        """
        Total posted debits and credits for a tenant.

        For a balanced ledger the two values are equal.
        """
        debit_sum, credit_sum = self._sums()
        row = self.session.execute(
            select(debit_sum, credit_sum)
            .select_from(JournalLine)
            .join(JournalEntry, JournalLine.journal_entry_id == JournalEntry.id)
            .where(
                JournalEntry.tenant_id == tenant_id,
                JournalEntry.status == JournalEntryStatus.POSTED.value,
            )
        ).one()
        return Decimal(row.debit_total or 0), Decimal(row.credit_total or 0)
