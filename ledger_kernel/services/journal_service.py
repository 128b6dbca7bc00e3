"""
Service layer for manual journal entries.

Writes balanced JournalEntry/JournalLine rows -- the ledger that every
financial statement reads.  Returns JournalInfo DTOs instead of ORM entities.

Invariants enforced:
    - At least two lines; every amount strictly positive.
    - Sum of debits equals sum of credits.
    - Every line account exists in the tenant and is active.
    - journal_number is unique per tenant.
    - All validation precedes the first session.add().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from ledger_kernel.db.types import ZERO, to_money
from ledger_kernel.domain.events import EventName
from ledger_kernel.exceptions import (
    AccountInactiveError,
    AccountNotFoundError,
    InvalidJournalLineError,
    JournalNumberExistsError,
    UnbalancedEntryError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.journal import (
    AccountingBasis,
    JournalEntry,
    JournalEntryStatus,
    JournalLine,
    LineSide,
)
from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.services.base import BaseService

logger = get_logger("services.journal")


@dataclass(frozen=True)
class JournalLineInput:
    account_id: UUID
    side: LineSide
    amount: Decimal
    memo: str | None = None


@dataclass(frozen=True)
class JournalInput:
    """Payload for a manual journal."""

    journal_number: str
    date: date
    lines: tuple[JournalLineInput, ...]
    reference: str | None = None
    description: str | None = None
    basis: AccountingBasis = AccountingBasis.BOTH
    status: JournalEntryStatus = JournalEntryStatus.POSTED


@dataclass(frozen=True)
class JournalLineInfo:
    id: UUID
    account_id: UUID
    side: LineSide
    amount: Decimal
    memo: str | None
    line_seq: int


@dataclass(frozen=True)
class JournalInfo:
    """Immutable DTO for a persisted journal entry."""

    id: UUID
    journal_number: str
    date: date
    reference: str | None
    description: str | None
    status: JournalEntryStatus
    basis: AccountingBasis
    lines: tuple[JournalLineInfo, ...] = field(default_factory=tuple)

    @property
    def total(self) -> Decimal:
        return sum(
            (line.amount for line in self.lines if line.side == LineSide.DEBIT),
            ZERO,
        )


class JournalService(BaseService[JournalEntry]):
    """
    Creates manual journals.

    Contract:
        make_journal() validates the whole payload, adds the entry with its
        lines, flushes, and enqueues a ``journal.created`` event.
    """

    def _to_dto(self, entry: JournalEntry) -> JournalInfo:
        return JournalInfo(
            id=entry.id,
            journal_number=entry.journal_number,
            date=entry.date,
            reference=entry.reference,
            description=entry.description,
            status=JournalEntryStatus(entry.status),
            basis=AccountingBasis(entry.basis),
            lines=tuple(
                JournalLineInfo(
                    id=line.id,
                    account_id=line.account_id,
                    side=LineSide(line.side),
                    amount=line.amount,
                    memo=line.memo,
                    line_seq=line.line_seq,
                )
                for line in entry.lines
            ),
        )

    def _validate_lines(self, tenant_id: UUID, data: JournalInput) -> None:
        if len(data.lines) < 2:
            raise InvalidJournalLineError("a journal needs at least two lines")

        debits = credits = ZERO
        for index, line in enumerate(data.lines):
            amount = to_money(line.amount)
            if amount <= ZERO:
                raise InvalidJournalLineError("amount must be positive", line_index=index)
            if LineSide(line.side) == LineSide.DEBIT:
                debits += amount
            else:
                credits += amount
        if debits != credits:
            raise UnbalancedEntryError(str(debits), str(credits))

        accounts = AccountSelector(self.session).find_by_ids(
            tenant_id, {line.account_id for line in data.lines}
        )
        for line in data.lines:
            account = accounts.get(line.account_id)
            if account is None:
                raise AccountNotFoundError(str(line.account_id))
            if not account.is_active:
                raise AccountInactiveError(str(line.account_id))

    def _validate_number(self, tenant_id: UUID, journal_number: str) -> None:
        existing = self.session.execute(
            select(JournalEntry.id).where(
                JournalEntry.tenant_id == tenant_id,
                JournalEntry.journal_number == journal_number,
            )
        ).first()
        if existing is not None:
            raise JournalNumberExistsError(journal_number)

    def make_journal(
        self,
        tenant_id: UUID,
        data: JournalInput,
        actor_id: UUID,
    ) -> JournalInfo:
        """
        Validate and persist a manual journal.

        Raises:
            InvalidJournalLineError: Fewer than two lines or non-positive amount.
            UnbalancedEntryError: Debits != credits.
            AccountNotFoundError: A line account is missing from the tenant.
            AccountInactiveError: A line account is deactivated.
            JournalNumberExistsError: The number is already used in the tenant.
        """
        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            self._validate_lines(tenant_id, data)
            self._validate_number(tenant_id, data.journal_number)

            entry = JournalEntry(
                tenant_id=tenant_id,
                journal_number=data.journal_number,
                date=data.date,
                reference=data.reference,
                description=data.description,
                status=JournalEntryStatus(data.status).value,
                basis=AccountingBasis(data.basis).value,
                created_by_id=actor_id,
            )
            for seq, line in enumerate(data.lines):
                entry.lines.append(
                    JournalLine(
                        account_id=line.account_id,
                        side=LineSide(line.side).value,
                        amount=to_money(line.amount),
                        memo=line.memo,
                        line_seq=seq,
                        created_by_id=actor_id,
                    )
                )
            self.session.add(entry)
            self.session.flush()

            info = self._to_dto(entry)
            self._emit(
                EventName.JOURNAL_CREATED,
                tenant_id,
                actor_id,
                {
                    "journal_id": info.id,
                    "journal_number": info.journal_number,
                    "date": info.date.isoformat(),
                    "total": str(info.total),
                },
            )
            logger.info(
                "journal_created",
                extra={
                    "journal_id": str(info.id),
                    "journal_number": info.journal_number,
                    "line_count": len(info.lines),
                    "basis": info.basis.value,
                },
            )
            return info
