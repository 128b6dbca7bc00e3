"""
Module: ledger_kernel.models.journal
Responsibility: ORM persistence for journal entries and journal lines -- the
    ledger that every financial statement is derived from.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - journal_number is unique per tenant.
    - Balance (debits == credits) is checked by JournalService before flush;
      ``is_balanced`` is the read-side convenience.
    - Line amounts are always positive; ``side`` carries the sign.

Audit relevance:
    Statements are never stored.  Every report is recomputed from posted
    JournalLine rows at query time.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TenantScopedMixin, TrackedBase, UUIDString

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account


class JournalEntryStatus(str, Enum):
    """Lifecycle status of a journal entry.  Only POSTED entries feed reports."""

    DRAFT = "draft"
    POSTED = "posted"


class AccountingBasis(str, Enum):
    """Basis a journal entry is recognized under."""

    BOTH = "both"
    ACCRUAL = "accrual"
    CASH = "cash"


class LineSide(str, Enum):
    """Debit or credit side of a journal line."""

    DEBIT = "debit"
    CREDIT = "credit"


class JournalEntry(TenantScopedMixin, TrackedBase):
    """
    A dated, balanced set of journal lines.

    Guarantees:
        - (tenant_id, journal_number) is unique.
        - basis is BOTH unless the entry only exists under one basis
          (e.g. a cash receipt recognized only on cash basis).
    """

    __tablename__ = "journal_entries"

    __table_args__ = (
        UniqueConstraint("tenant_id", "journal_number", name="uq_journal_tenant_number"),
        Index("idx_journal_date", "date"),
        Index("idx_journal_status", "status"),
    )

    journal_number: Mapped[str] = mapped_column(String(50), nullable=False)

    date: Mapped[date] = mapped_column(Date, nullable=False)

    reference: Mapped[str | None] = mapped_column(String(255), nullable=True)

    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=JournalEntryStatus.POSTED.value,
        nullable=False,
    )

    basis: Mapped[str] = mapped_column(
        String(20),
        default=AccountingBasis.BOTH.value,
        nullable=False,
    )

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="entry",
        order_by="JournalLine.line_seq",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.journal_number} {self.date}>"

    @property
    def total_debits(self) -> Decimal:
        return sum(
            (line.amount for line in self.lines if line.side == LineSide.DEBIT.value),
            Decimal("0"),
        )

    @property
    def total_credits(self) -> Decimal:
        return sum(
            (line.amount for line in self.lines if line.side == LineSide.CREDIT.value),
            Decimal("0"),
        )

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits


class JournalLine(TrackedBase):
    """
    Individual debit or credit line within a journal entry.

    Contract:
        Each line belongs to exactly one JournalEntry (and so to its tenant),
        references exactly one Account, and records a positive amount.
    """

    __tablename__ = "journal_lines"

    __table_args__ = (
        Index("idx_line_entry", "journal_entry_id"),
        Index("idx_line_account", "account_id"),
    )

    journal_entry_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("journal_entries.id"),
        nullable=False,
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=False,
    )

    side: Mapped[str] = mapped_column(String(10), nullable=False)

    # Always positive; side determines debit/credit
    amount: Mapped[Decimal] = mapped_column(Numeric(38, 9), nullable=False)

    memo: Mapped[str | None] = mapped_column(String(500), nullable=True)

    line_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    entry: Mapped["JournalEntry"] = relationship(back_populates="lines")

    account: Mapped["Account"] = relationship()

    def __repr__(self) -> str:
        return f"<JournalLine {self.side} {self.amount}>"
