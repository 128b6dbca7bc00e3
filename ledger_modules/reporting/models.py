"""
Financial Reporting Domain Models (``ledger_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects for the profit and loss sheet: the query
that drives it and the sheet it produces.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
``ProfitLossSheetService`` and by the pure functions in ``statements.py``.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* A query with ``from_date > to_date`` or an unknown enum value raises
  ``InvalidReportQueryError``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from ledger_kernel.exceptions import InvalidReportQueryError


# =========================================================================
# Enums
# =========================================================================


class ReportBasis(str, Enum):
    """Accounting basis a report is run on."""

    ACCRUAL = "accrual"
    CASH = "cash"


class DisplayColumnsType(str, Enum):
    """Whether amounts are shown as one total or split into date periods."""

    TOTAL = "total"
    DATE_PERIODS = "date_periods"


class DisplayColumnsBy(str, Enum):
    """Period length used when ``display_columns_type`` is date_periods."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class ProfitLossSectionKey(str, Enum):
    INCOME = "income"
    COST_OF_SALES = "cost_of_sales"
    EXPENSES = "expenses"
    OTHER_EXPENSES = "other_expenses"


def _enum(enum_cls: type[Enum], value: Any, parameter: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidReportQueryError(parameter, f"unknown value {value!r}") from None


def _date(value: Any, parameter: str) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidReportQueryError(parameter, f"not an ISO date: {value!r}") from None


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


# =========================================================================
# Query
# =========================================================================


@dataclass(frozen=True)
class NumberFormat:
    """Display options for formatted amounts."""

    no_cents: bool = False
    divide_on_1000: bool = False


@dataclass(frozen=True)
class ProfitLossQuery:
    """
    Parameters of a profit and loss sheet request.

    ``from_date`` / ``to_date`` left as None are filled with the current
    calendar year by ``resolve()``.
    """

    basis: ReportBasis = ReportBasis.ACCRUAL
    from_date: date | None = None
    to_date: date | None = None
    number_format: NumberFormat = field(default_factory=NumberFormat)
    none_zero: bool = False
    none_transactions: bool = True
    accounts_ids: tuple[UUID, ...] = ()
    display_columns_type: DisplayColumnsType = DisplayColumnsType.TOTAL
    display_columns_by: DisplayColumnsBy = DisplayColumnsBy.MONTH

    def __post_init__(self) -> None:
        object.__setattr__(self, "basis", _enum(ReportBasis, self.basis, "basis"))
        object.__setattr__(
            self,
            "display_columns_type",
            _enum(DisplayColumnsType, self.display_columns_type, "display_columns_type"),
        )
        object.__setattr__(
            self,
            "display_columns_by",
            _enum(DisplayColumnsBy, self.display_columns_by, "display_columns_by"),
        )
        object.__setattr__(self, "from_date", _date(self.from_date, "from_date"))
        object.__setattr__(self, "to_date", _date(self.to_date, "to_date"))
        object.__setattr__(self, "accounts_ids", tuple(self.accounts_ids))
        if (
            self.from_date is not None
            and self.to_date is not None
            and self.from_date > self.to_date
        ):
            raise InvalidReportQueryError("from_date", "from_date is after to_date")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ProfitLossQuery:
        """Build a query from plain request arguments."""
        data = dict(data or {})
        number_format = data.get("number_format") or {}
        if isinstance(number_format, Mapping):
            number_format = NumberFormat(
                no_cents=_flag(number_format.get("no_cents", False)),
                divide_on_1000=_flag(number_format.get("divide_on_1000", False)),
            )
        elif not isinstance(number_format, NumberFormat):
            raise InvalidReportQueryError("number_format", "must be an object")

        accounts_ids = []
        for raw in data.get("accounts_ids") or ():
            try:
                accounts_ids.append(raw if isinstance(raw, UUID) else UUID(str(raw)))
            except ValueError:
                raise InvalidReportQueryError("accounts_ids", f"not a UUID: {raw!r}") from None

        return cls(
            basis=data.get("basis", ReportBasis.ACCRUAL),
            from_date=data.get("from_date"),
            to_date=data.get("to_date"),
            number_format=number_format,
            none_zero=_flag(data.get("none_zero", False)),
            none_transactions=_flag(data.get("none_transactions", True)),
            accounts_ids=tuple(accounts_ids),
            display_columns_type=data.get("display_columns_type", DisplayColumnsType.TOTAL),
            display_columns_by=data.get("display_columns_by", DisplayColumnsBy.MONTH),
        )

    def resolve(self, today: date) -> ProfitLossQuery:
        """Fill missing dates with the calendar year containing ``today``."""
        return replace(
            self,
            from_date=self.from_date or date(today.year, 1, 1),
            to_date=self.to_date or date(today.year, 12, 31),
        )


# =========================================================================
# Sheet
# =========================================================================


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every generated report."""

    report_name: str
    entity_name: str
    currency: str
    generated_at: str  # ISO format timestamp from injected clock
    period_start: date
    period_end: date
    basis: ReportBasis


@dataclass(frozen=True)
class DatePeriod:
    """One column of a date-periods report, inclusive on both ends."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class ProfitLossTotal:
    """An amount with its display form."""

    amount: Decimal
    formatted_amount: str
    currency_code: str
    date: date | None = None


@dataclass(frozen=True)
class ProfitLossAccount:
    """One account row of a section."""

    id: UUID
    index: int
    name: str
    code: str
    parent_account_id: UUID | None
    has_transactions: bool
    total: ProfitLossTotal
    total_periods: tuple[ProfitLossTotal, ...] = ()


@dataclass(frozen=True)
class ProfitLossSection:
    key: ProfitLossSectionKey
    label: str
    accounts: tuple[ProfitLossAccount, ...]
    total: ProfitLossTotal
    total_periods: tuple[ProfitLossTotal, ...] = ()


@dataclass(frozen=True)
class ProfitLossSummary:
    """A derived subtotal (gross profit, operating profit, net income)."""

    label: str
    total: ProfitLossTotal
    total_periods: tuple[ProfitLossTotal, ...] = ()


@dataclass(frozen=True)
class ProfitLossSheet:
    """
    Complete profit and loss sheet.

    gross_profit = income - cost_of_sales
    operating_profit = gross_profit - expenses
    net_income = operating_profit - other_expenses
    """

    metadata: ReportMetadata
    query: ProfitLossQuery
    columns: tuple[DatePeriod, ...]
    income: ProfitLossSection
    cost_of_sales: ProfitLossSection
    gross_profit: ProfitLossSummary
    expenses: ProfitLossSection
    operating_profit: ProfitLossSummary
    other_expenses: ProfitLossSection
    net_income: ProfitLossSummary
