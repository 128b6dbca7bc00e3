"""
Pure financial statement transformation functions.

These functions turn account metadata and ledger totals into the profit and
loss sheet.  ZERO I/O. ZERO side effects.

All monetary values are Decimal.  All inputs/outputs are frozen dataclasses.

- No database access
- No clock access
- Deterministic: same inputs always produce same outputs
"""

from __future__ import annotations

import calendar
import dataclasses
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from uuid import UUID

from ledger_kernel.models.account import AccountTypeKey, NormalBalance
from ledger_kernel.selectors.account_selector import AccountInfo
from ledger_kernel.selectors.ledger_selector import AccountDateTotals
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
    ReportMetadata,
)

ZERO = Decimal("0")

# Section membership by account type, in presentation order
PROFIT_LOSS_SECTIONS: dict[ProfitLossSectionKey, tuple[str, tuple[AccountTypeKey, ...]]] = {
    ProfitLossSectionKey.INCOME: (
        "Income",
        (AccountTypeKey.INCOME, AccountTypeKey.OTHER_INCOME),
    ),
    ProfitLossSectionKey.COST_OF_SALES: (
        "Cost of sales",
        (AccountTypeKey.COST_OF_GOODS_SOLD,),
    ),
    ProfitLossSectionKey.EXPENSES: (
        "Expenses",
        (AccountTypeKey.EXPENSE,),
    ),
    ProfitLossSectionKey.OTHER_EXPENSES: (
        "Other expenses",
        (AccountTypeKey.OTHER_EXPENSE,),
    ),
}


def profit_loss_account_types() -> tuple[AccountTypeKey, ...]:
    """Every account type that appears on the profit and loss sheet."""
    return tuple(t for _, types in PROFIT_LOSS_SECTIONS.values() for t in types)


# =========================================================================
# Helpers
# =========================================================================


def compute_natural_balance(
    debit_total: Decimal,
    credit_total: Decimal,
    normal_balance: NormalBalance,
) -> Decimal:
    """
    Compute balance adjusted for normal balance side.

    DEBIT-normal (expense types): balance = debit_total - credit_total
    CREDIT-normal (income types): balance = credit_total - debit_total
    """
    if normal_balance == NormalBalance.DEBIT:
        return debit_total - credit_total
    return credit_total - debit_total


def _add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def _period_start(day: date, by: DisplayColumnsBy) -> date:
    if by == DisplayColumnsBy.DAY:
        return day
    if by == DisplayColumnsBy.WEEK:
        return day - timedelta(days=day.weekday())
    if by == DisplayColumnsBy.MONTH:
        return day.replace(day=1)
    if by == DisplayColumnsBy.QUARTER:
        return date(day.year, 3 * ((day.month - 1) // 3) + 1, 1)
    return date(day.year, 1, 1)


def _next_period_start(start: date, by: DisplayColumnsBy) -> date:
    if by == DisplayColumnsBy.DAY:
        return start + timedelta(days=1)
    if by == DisplayColumnsBy.WEEK:
        return start + timedelta(days=7)
    if by == DisplayColumnsBy.MONTH:
        return _add_months(start, 1)
    if by == DisplayColumnsBy.QUARTER:
        return _add_months(start, 3)
    return date(start.year + 1, 1, 1)


def split_date_periods(
    from_date: date,
    to_date: date,
    by: DisplayColumnsBy,
) -> tuple[DatePeriod, ...]:
    """
    Split [from_date, to_date] into calendar-aligned periods.

    Weeks start on Monday.  The first and last periods are clipped to the
    range, so every day of the range falls in exactly one period.
    """
    by = DisplayColumnsBy(by)
    periods: list[DatePeriod] = []
    start = _period_start(from_date, by)
    while start <= to_date:
        following = _next_period_start(start, by)
        periods.append(
            DatePeriod(
                start=max(start, from_date),
                end=min(following - timedelta(days=1), to_date),
            )
        )
        start = following
    return tuple(periods)


def format_amount(
    amount: Decimal,
    number_format: NumberFormat,
    precision: int = 2,
    thousands_separator: str = ",",
) -> str:
    """
    Render an amount for display.

    ``divide_on_1000`` is applied first, then the value is rounded half-up
    to whole units (``no_cents``) or to ``precision`` places.
    """
    value = amount
    if number_format.divide_on_1000:
        value = value / Decimal(1000)
    places = 0 if number_format.no_cents else precision
    value = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    # Avoid rendering "-0"
    if value == ZERO:
        value = abs(value)
    text = f"{value:,.{places}f}"
    if thousands_separator != ",":
        text = text.replace(",", thousands_separator)
    return text


def make_total(
    amount: Decimal,
    number_format: NumberFormat,
    config: ReportingConfig,
    currency_code: str | None = None,
    day: date | None = None,
) -> ProfitLossTotal:
    return ProfitLossTotal(
        amount=amount,
        formatted_amount=format_amount(
            amount,
            number_format,
            precision=config.display_precision,
            thousands_separator=config.thousands_separator,
        ),
        currency_code=currency_code or config.default_currency,
        date=day,
    )


def _sum_columns(rows: Iterable[Sequence[Decimal]], width: int) -> list[Decimal]:
    sums = [ZERO] * width
    for row in rows:
        for i, value in enumerate(row):
            sums[i] += value
    return sums


# =========================================================================
# Account rows
# =========================================================================


@dataclasses.dataclass(frozen=True)
class _AccountAmounts:
    account: AccountInfo
    total: Decimal
    periods: tuple[Decimal, ...]
    has_transactions: bool


def _account_amounts(
    account: AccountInfo,
    rows: list[AccountDateTotals],
    columns: tuple[DatePeriod, ...],
) -> _AccountAmounts:
    debit = sum((r.debit_total for r in rows), ZERO)
    credit = sum((r.credit_total for r in rows), ZERO)
    periods = []
    for column in columns:
        in_column = [r for r in rows if column.contains(r.date)]
        periods.append(
            compute_natural_balance(
                sum((r.debit_total for r in in_column), ZERO),
                sum((r.credit_total for r in in_column), ZERO),
                account.normal_balance,
            )
        )
    return _AccountAmounts(
        account=account,
        total=compute_natural_balance(debit, credit, account.normal_balance),
        periods=tuple(periods),
        has_transactions=any(r.line_count > 0 for r in rows),
    )


def _keep(amounts: _AccountAmounts, query: ProfitLossQuery) -> bool:
    if query.none_transactions and not amounts.has_transactions:
        return False
    if query.none_zero and amounts.total == ZERO:
        return False
    return True


def _make_section(
    key: ProfitLossSectionKey,
    label: str,
    amounts: list[_AccountAmounts],
    columns: tuple[DatePeriod, ...],
    query: ProfitLossQuery,
    config: ReportingConfig,
) -> tuple[ProfitLossSection, Decimal, list[Decimal]]:
    """Build one section; also return its raw total and period totals."""
    fmt = query.number_format
    ordered = sorted(amounts, key=lambda a: a.account.code)
    lines = tuple(
        ProfitLossAccount(
            id=a.account.id,
            index=index,
            name=a.account.name,
            code=a.account.code,
            parent_account_id=a.account.parent_account_id,
            has_transactions=a.has_transactions,
            total=make_total(a.total, fmt, config, a.account.currency_code),
            total_periods=tuple(
                make_total(value, fmt, config, a.account.currency_code, column.start)
                for value, column in zip(a.periods, columns)
            ),
        )
        for index, a in enumerate(ordered)
    )
    total = sum((a.total for a in ordered), ZERO)
    period_totals = _sum_columns((a.periods for a in ordered), len(columns))
    section = ProfitLossSection(
        key=key,
        label=label,
        accounts=lines,
        total=make_total(total, fmt, config),
        total_periods=tuple(
            make_total(value, fmt, config, day=column.start)
            for value, column in zip(period_totals, columns)
        ),
    )
    return section, total, period_totals


def _make_summary(
    label: str,
    total: Decimal,
    period_totals: list[Decimal],
    columns: tuple[DatePeriod, ...],
    query: ProfitLossQuery,
    config: ReportingConfig,
) -> ProfitLossSummary:
    fmt = query.number_format
    return ProfitLossSummary(
        label=label,
        total=make_total(total, fmt, config),
        total_periods=tuple(
            make_total(value, fmt, config, day=column.start)
            for value, column in zip(period_totals, columns)
        ),
    )


def _subtract(left: list[Decimal], right: list[Decimal]) -> list[Decimal]:
    return [a - b for a, b in zip(left, right)]


# =========================================================================
# PROFIT AND LOSS SHEET
# =========================================================================


def build_profit_loss_sheet(
    accounts: Iterable[AccountInfo],
    totals: Iterable[AccountDateTotals],
    query: ProfitLossQuery,
    metadata: ReportMetadata,
    config: ReportingConfig,
) -> ProfitLossSheet:
    """
    Build the profit and loss sheet.

        Income
        - Cost of sales
        = Gross profit
        - Expenses
        = Operating profit
        - Other expenses
        = Net income

    ``query`` must be resolved (both dates set).  ``totals`` are expected to
    be already restricted to the query's range and basis; rows of accounts
    that are not in ``accounts`` are ignored.
    """
    if query.from_date is None or query.to_date is None:
        raise ValueError("query must be resolved before building the sheet")

    columns: tuple[DatePeriod, ...] = ()
    if query.display_columns_type == DisplayColumnsType.DATE_PERIODS:
        columns = split_date_periods(query.from_date, query.to_date, query.display_columns_by)

    rows_by_account: dict[UUID, list[AccountDateTotals]] = defaultdict(list)
    for row in totals:
        rows_by_account[row.account_id].append(row)

    selected = set(query.accounts_ids)
    by_type: dict[AccountTypeKey, list[_AccountAmounts]] = defaultdict(list)
    for account in accounts:
        if selected and account.id not in selected:
            continue
        amounts = _account_amounts(account, rows_by_account.get(account.id, []), columns)
        if _keep(amounts, query):
            by_type[account.account_type].append(amounts)

    built: dict[ProfitLossSectionKey, tuple[ProfitLossSection, Decimal, list[Decimal]]] = {}
    for key, (label, types) in PROFIT_LOSS_SECTIONS.items():
        members = [a for t in types for a in by_type.get(t, [])]
        built[key] = _make_section(key, label, members, columns, query, config)

    income, income_total, income_periods = built[ProfitLossSectionKey.INCOME]
    cost, cost_total, cost_periods = built[ProfitLossSectionKey.COST_OF_SALES]
    expenses, expenses_total, expenses_periods = built[ProfitLossSectionKey.EXPENSES]
    other, other_total, other_periods = built[ProfitLossSectionKey.OTHER_EXPENSES]

    gross_total = income_total - cost_total
    gross_periods = _subtract(income_periods, cost_periods)
    operating_total = gross_total - expenses_total
    operating_periods = _subtract(gross_periods, expenses_periods)
    net_total = operating_total - other_total
    net_periods = _subtract(operating_periods, other_periods)

    return ProfitLossSheet(
        metadata=metadata,
        query=query,
        columns=columns,
        income=income,
        cost_of_sales=cost,
        gross_profit=_make_summary(
            "Gross profit", gross_total, gross_periods, columns, query, config,
        ),
        expenses=expenses,
        operating_profit=_make_summary(
            "Operating profit", operating_total, operating_periods, columns, query, config,
        ),
        other_expenses=other,
        net_income=_make_summary(
            "Net income", net_total, net_periods, columns, query, config,
        ),
    )


# =========================================================================
# RENDERER (dict/JSON output)
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Decimal and UUID become strings, dates ISO strings, enums their value,
    tuples lists.
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
