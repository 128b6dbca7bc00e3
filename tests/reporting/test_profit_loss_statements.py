"""
Pure function unit tests for statements.py.

NO database, NO I/O. Tests every pure transformation with synthetic data.
"""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from ledger_kernel.models.account import AccountTypeKey, NormalBalance
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    DatePeriod,
    DisplayColumnsBy,
    DisplayColumnsType,
    NumberFormat,
    ProfitLossQuery,
    ProfitLossSectionKey,
    ReportBasis,
    ReportMetadata,
)
from ledger_modules.reporting.statements import (
    build_profit_loss_sheet,
    compute_natural_balance,
    format_amount,
    profit_loss_account_types,
    render_to_dict,
    split_date_periods,
)
from tests.reporting.conftest import make_account_info, make_totals

# =========================================================================
# Fixtures / helpers
# =========================================================================

SALES_ID = uuid4()
SERVICE_INCOME_ID = uuid4()
INTEREST_INCOME_ID = uuid4()
COGS_ID = uuid4()
RENT_ID = uuid4()
SALARY_ID = uuid4()
INTEREST_EXPENSE_ID = uuid4()
CASH_ID = uuid4()

JAN = date(2024, 1, 15)
FEB = date(2024, 2, 10)


def _config() -> ReportingConfig:
    return ReportingConfig.with_defaults()


def _accounts() -> list:
    return [
        make_account_info(SALES_ID, "4000", "Sales", AccountTypeKey.INCOME),
        make_account_info(SERVICE_INCOME_ID, "4100", "Service Income", AccountTypeKey.INCOME),
        make_account_info(INTEREST_INCOME_ID, "4900", "Interest Income", AccountTypeKey.OTHER_INCOME),
        make_account_info(COGS_ID, "5000", "Cost of Goods Sold", AccountTypeKey.COST_OF_GOODS_SOLD),
        make_account_info(SALARY_ID, "6100", "Salaries", AccountTypeKey.EXPENSE),
        make_account_info(RENT_ID, "6000", "Rent", AccountTypeKey.EXPENSE),
        make_account_info(INTEREST_EXPENSE_ID, "7000", "Interest Expense", AccountTypeKey.OTHER_EXPENSE),
    ]


def _query(**overrides) -> ProfitLossQuery:
    fields = {"from_date": date(2024, 1, 1), "to_date": date(2024, 12, 31)}
    fields.update(overrides)
    return ProfitLossQuery(**fields)


def _metadata(query: ProfitLossQuery) -> ReportMetadata:
    return ReportMetadata(
        report_name="profit_loss_sheet",
        entity_name="Test Company",
        currency="USD",
        generated_at="2024-12-31T23:59:59",
        period_start=query.from_date,
        period_end=query.to_date,
        basis=query.basis,
    )


def _build(totals, query=None, accounts=None, config=None):
    query = query or _query()
    return build_profit_loss_sheet(
        accounts if accounts is not None else _accounts(),
        totals,
        query,
        _metadata(query),
        config or _config(),
    )


def _standard_totals() -> list:
    """Income 1000, cost of sales 400, expenses 300."""
    return [
        make_totals(SALES_ID, JAN, credit="1000"),
        make_totals(COGS_ID, JAN, debit="400"),
        make_totals(RENT_ID, FEB, debit="200"),
        make_totals(SALARY_ID, FEB, debit="100"),
    ]


# =========================================================================
# compute_natural_balance
# =========================================================================


class TestComputeNaturalBalance:
    def test_debit_normal(self):
        assert compute_natural_balance(Decimal("500"), Decimal("200"), NormalBalance.DEBIT) == Decimal("300")

    def test_credit_normal(self):
        assert compute_natural_balance(Decimal("200"), Decimal("500"), NormalBalance.CREDIT) == Decimal("300")

    def test_contra_balance_is_negative(self):
        assert compute_natural_balance(Decimal("50"), Decimal("0"), NormalBalance.CREDIT) == Decimal("-50")


# =========================================================================
# split_date_periods
# =========================================================================


class TestSplitDatePeriods:
    def test_months_clipped_to_range(self):
        periods = split_date_periods(date(2024, 1, 15), date(2024, 3, 10), DisplayColumnsBy.MONTH)
        assert periods == (
            DatePeriod(date(2024, 1, 15), date(2024, 1, 31)),
            DatePeriod(date(2024, 2, 1), date(2024, 2, 29)),
            DatePeriod(date(2024, 3, 1), date(2024, 3, 10)),
        )

    def test_weeks_start_on_monday(self):
        # 2024-01-03 is a Wednesday
        periods = split_date_periods(date(2024, 1, 3), date(2024, 1, 16), DisplayColumnsBy.WEEK)
        assert periods == (
            DatePeriod(date(2024, 1, 3), date(2024, 1, 7)),
            DatePeriod(date(2024, 1, 8), date(2024, 1, 14)),
            DatePeriod(date(2024, 1, 15), date(2024, 1, 16)),
        )

    def test_quarters(self):
        periods = split_date_periods(date(2024, 2, 1), date(2024, 12, 31), DisplayColumnsBy.QUARTER)
        assert [(p.start, p.end) for p in periods] == [
            (date(2024, 2, 1), date(2024, 3, 31)),
            (date(2024, 4, 1), date(2024, 6, 30)),
            (date(2024, 7, 1), date(2024, 9, 30)),
            (date(2024, 10, 1), date(2024, 12, 31)),
        ]

    def test_years(self):
        periods = split_date_periods(date(2023, 6, 1), date(2024, 3, 31), DisplayColumnsBy.YEAR)
        assert periods == (
            DatePeriod(date(2023, 6, 1), date(2023, 12, 31)),
            DatePeriod(date(2024, 1, 1), date(2024, 3, 31)),
        )

    def test_days(self):
        periods = split_date_periods(date(2024, 2, 28), date(2024, 3, 1), "day")
        assert [p.start for p in periods] == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
        assert all(p.start == p.end for p in periods)

    def test_single_day_range(self):
        periods = split_date_periods(date(2024, 5, 5), date(2024, 5, 5), DisplayColumnsBy.MONTH)
        assert periods == (DatePeriod(date(2024, 5, 5), date(2024, 5, 5)),)


# =========================================================================
# format_amount
# =========================================================================


class TestFormatAmount:
    @pytest.mark.parametrize(
        "amount, fmt, expected",
        [
            ("1234567.891", NumberFormat(), "1,234,567.89"),
            ("1234.5", NumberFormat(no_cents=True), "1,235"),
            ("1234567", NumberFormat(divide_on_1000=True), "1,234.57"),
            ("1500", NumberFormat(no_cents=True, divide_on_1000=True), "2"),
            ("-2500.456", NumberFormat(), "-2,500.46"),
            ("0", NumberFormat(), "0.00"),
        ],
    )
    def test_formats(self, amount, fmt, expected):
        assert format_amount(Decimal(amount), fmt) == expected

    def test_negative_rounding_to_zero_has_no_sign(self):
        assert format_amount(Decimal("-0.004"), NumberFormat()) == "0.00"

    def test_precision_and_separator(self):
        assert format_amount(Decimal("1234.5"), NumberFormat(), precision=3, thousands_separator=".") == "1.234.500"

    def test_no_separator(self):
        assert format_amount(Decimal("1234.5"), NumberFormat(), thousands_separator="") == "1234.50"


# =========================================================================
# build_profit_loss_sheet
# =========================================================================


class TestBuildProfitLossSheet:
    def test_section_arithmetic(self):
        sheet = _build(_standard_totals())

        assert sheet.income.total.amount == Decimal("1000")
        assert sheet.cost_of_sales.total.amount == Decimal("400")
        assert sheet.expenses.total.amount == Decimal("300")
        assert sheet.other_expenses.total.amount == Decimal("0")
        assert sheet.gross_profit.total.amount == Decimal("600")
        assert sheet.operating_profit.total.amount == Decimal("300")
        assert sheet.net_income.total.amount == Decimal("300")
        assert sheet.net_income.total.formatted_amount == "300.00"

    def test_section_keys_and_labels(self):
        sheet = _build(_standard_totals())
        assert sheet.income.key == ProfitLossSectionKey.INCOME
        assert sheet.cost_of_sales.label == "Cost of sales"
        assert sheet.gross_profit.label == "Gross profit"
        assert sheet.net_income.label == "Net income"

    def test_other_income_in_income_section(self):
        totals = _standard_totals() + [make_totals(INTEREST_INCOME_ID, FEB, credit="50")]
        sheet = _build(totals)
        assert [a.code for a in sheet.income.accounts] == ["4000", "4900"]
        assert sheet.net_income.total.amount == Decimal("350")

    def test_other_expenses_reduce_net_income(self):
        totals = _standard_totals() + [make_totals(INTEREST_EXPENSE_ID, FEB, debit="25")]
        sheet = _build(totals)
        assert sheet.operating_profit.total.amount == Decimal("300")
        assert sheet.net_income.total.amount == Decimal("275")

    def test_accounts_ordered_by_code_with_index(self):
        sheet = _build(_standard_totals())
        assert [(a.index, a.code) for a in sheet.expenses.accounts] == [(0, "6000"), (1, "6100")]

    def test_normal_balance_signs(self):
        totals = [
            make_totals(SALES_ID, JAN, debit="30", credit="100"),
            make_totals(RENT_ID, JAN, debit="80", credit="5"),
        ]
        sheet = _build(totals)
        assert sheet.income.accounts[0].total.amount == Decimal("70")
        assert sheet.expenses.accounts[0].total.amount == Decimal("75")

    def test_balance_sheet_rows_ignored(self):
        totals = _standard_totals() + [make_totals(CASH_ID, JAN, debit="1000")]
        sheet = _build(totals)
        assert sheet.net_income.total.amount == Decimal("300")

    def test_accounts_without_transactions_hidden_by_default(self):
        sheet = _build(_standard_totals())
        assert SERVICE_INCOME_ID not in {a.id for a in sheet.income.accounts}

    def test_accounts_without_transactions_shown(self):
        sheet = _build(_standard_totals(), query=_query(none_transactions=False))
        codes = [a.code for a in sheet.income.accounts]
        assert codes == ["4000", "4100", "4900"]
        service_income = sheet.income.accounts[1]
        assert service_income.has_transactions is False
        assert service_income.total.amount == Decimal("0")

    def test_none_zero_hides_netted_accounts(self):
        totals = _standard_totals() + [make_totals(SERVICE_INCOME_ID, JAN, debit="20", credit="20")]
        shown = _build(totals)
        hidden = _build(totals, query=_query(none_zero=True))
        assert "4100" in [a.code for a in shown.income.accounts]
        assert "4100" not in [a.code for a in hidden.income.accounts]

    def test_accounts_ids_filter(self):
        sheet = _build(_standard_totals(), query=_query(accounts_ids=(SALES_ID, RENT_ID)))
        assert [a.code for a in sheet.income.accounts] == ["4000"]
        assert sheet.cost_of_sales.accounts == ()
        assert [a.code for a in sheet.expenses.accounts] == ["6000"]
        assert sheet.net_income.total.amount == Decimal("800")

    def test_empty_ledger(self):
        sheet = _build([])
        assert sheet.income.accounts == ()
        assert sheet.net_income.total.amount == Decimal("0")
        assert sheet.net_income.total.formatted_amount == "0.00"

    def test_total_mode_has_no_columns(self):
        sheet = _build(_standard_totals())
        assert sheet.columns == ()
        assert sheet.income.total_periods == ()
        assert sheet.income.accounts[0].total_periods == ()

    def test_monthly_periods(self):
        query = _query(
            to_date=date(2024, 3, 31),
            display_columns_type=DisplayColumnsType.DATE_PERIODS,
            display_columns_by=DisplayColumnsBy.MONTH,
        )
        sheet = _build(_standard_totals(), query=query)

        assert [c.start for c in sheet.columns] == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]
        assert [t.amount for t in sheet.income.total_periods] == [Decimal("1000"), Decimal("0"), Decimal("0")]
        assert [t.amount for t in sheet.expenses.total_periods] == [Decimal("0"), Decimal("300"), Decimal("0")]
        assert [t.amount for t in sheet.net_income.total_periods] == [Decimal("600"), Decimal("-300"), Decimal("0")]
        assert [t.date for t in sheet.net_income.total_periods] == [c.start for c in sheet.columns]

    def test_period_totals_sum_to_total(self):
        query = _query(display_columns_type="date_periods", display_columns_by="quarter")
        sheet = _build(_standard_totals(), query=query)
        for summary in (sheet.gross_profit, sheet.operating_profit, sheet.net_income):
            assert sum(t.amount for t in summary.total_periods) == summary.total.amount

    def test_number_format_applied(self):
        totals = [make_totals(SALES_ID, JAN, credit="1234567.891")]
        sheet = _build(totals, query=_query(number_format=NumberFormat(divide_on_1000=True)))
        assert sheet.income.total.formatted_amount == "1,234.57"
        assert sheet.income.total.amount == Decimal("1234567.891")

    def test_currency_from_config(self):
        sheet = _build(_standard_totals(), config=ReportingConfig(default_currency="EUR"))
        assert sheet.net_income.total.currency_code == "EUR"

    def test_unresolved_query_rejected(self):
        query = ProfitLossQuery()
        with pytest.raises(ValueError):
            build_profit_loss_sheet(_accounts(), [], query, _metadata(_query()), _config())


class TestProfitLossAccountTypes:
    def test_covers_income_statement_types(self):
        assert set(profit_loss_account_types()) == {
            AccountTypeKey.INCOME,
            AccountTypeKey.OTHER_INCOME,
            AccountTypeKey.COST_OF_GOODS_SOLD,
            AccountTypeKey.EXPENSE,
            AccountTypeKey.OTHER_EXPENSE,
        }


# =========================================================================
# render_to_dict
# =========================================================================


class TestRenderToDict:
    def test_sheet_is_json_native(self):
        sheet = _build(_standard_totals())
        data = render_to_dict(sheet)
        json.dumps(data)

        assert data["net_income"]["total"]["amount"] == "300"
        assert data["metadata"]["basis"] == ReportBasis.ACCRUAL.value
        assert data["query"]["from_date"] == "2024-01-01"
        assert data["income"]["accounts"][0]["id"] == str(SALES_ID)

    def test_primitives(self):
        assert render_to_dict(None) is None
        assert render_to_dict(Decimal("1.50")) == "1.50"
        assert render_to_dict({"a": (1, 2)}) == {"a": [1, 2]}
        uid = UUID(int=1)
        assert render_to_dict(uid) == str(uid)
