"""
Pytest fixtures for the tenant ledger test suite.

Provides:
- A fresh in-memory SQLite database per test (foreign keys enforced)
- Deterministic clock, event dispatcher and captured JSON logs
- Chart-of-accounts factories and service instances
- A helper that posts simple two-line journals

Environment Variables:
- DATABASE_URL: optional database URL; defaults to in-memory SQLite.
"""

import json
import logging
import os
from datetime import date
from decimal import Decimal
from io import StringIO
from typing import Generator
from uuid import UUID, uuid4

import pytest
from sqlalchemy import event
from sqlalchemy.orm import Session

from ledger_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.domain.events import DomainEvent
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from ledger_kernel.models.account import Account, AccountTypeKey
from ledger_kernel.models.journal import AccountingBasis, LineSide
from ledger_kernel.services.event_dispatcher import EventDispatcher
from ledger_kernel.services.journal_service import (
    JournalInput,
    JournalLineInput,
    JournalService,
)
from ledger_modules.items.category_service import ItemCategoryService
from ledger_modules.items.service import ItemService

# Test actor ID for all test operations
TEST_ACTOR_ID = uuid4()


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, category_service):
            category_service.create_category(...)
            logs = captured_logs()
            assert any(r["message"] == "item_category_created" for r in logs)
    """
    # No-op when already configured; keeps a later engine init from
    # resetting the level below.
    configure_logging(level=logging.DEBUG)
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


def get_database_url() -> str:
    return os.environ.get("DATABASE_URL", "sqlite://")


@pytest.fixture
def engine():
    """Fresh schema per test."""
    engine = init_engine_from_url(get_database_url())
    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    create_tables()
    yield engine
    drop_tables()
    reset_engine()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    session = get_session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def test_actor_id() -> UUID:
    """Provide a consistent test actor ID."""
    return TEST_ACTOR_ID


@pytest.fixture
def tenant_id() -> UUID:
    return uuid4()


@pytest.fixture
def other_tenant_id() -> UUID:
    return uuid4()


# Clock and events


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock()


@pytest.fixture
def dispatcher() -> EventDispatcher:
    return EventDispatcher()


@pytest.fixture
def published_events(dispatcher) -> list[DomainEvent]:
    """Every event the dispatcher delivers, in delivery order."""
    received: list[DomainEvent] = []
    dispatcher.subscribe(received.append)
    return received


# =============================================================================
# Chart of accounts
# =============================================================================


@pytest.fixture
def create_account(session, test_actor_id):
    """Factory: create_account(tenant_id, code, name, account_type, is_active=True)."""

    def _create(
        tenant_id: UUID,
        code: str,
        name: str,
        account_type: AccountTypeKey,
        is_active: bool = True,
    ) -> Account:
        account = Account(
            tenant_id=tenant_id,
            code=code,
            name=name,
            account_type=AccountTypeKey(account_type).value,
            is_active=is_active,
            created_by_id=test_actor_id,
        )
        session.add(account)
        session.flush()
        return account

    return _create


STANDARD_ACCOUNTS = (
    ("cash", "1000", "Cash", AccountTypeKey.CASH),
    ("bank", "1010", "Bank", AccountTypeKey.BANK),
    ("receivable", "1100", "Accounts Receivable", AccountTypeKey.ACCOUNTS_RECEIVABLE),
    ("inventory", "1300", "Inventory Asset", AccountTypeKey.INVENTORY),
    ("payable", "2000", "Accounts Payable", AccountTypeKey.ACCOUNTS_PAYABLE),
    ("equity", "3000", "Owner Equity", AccountTypeKey.EQUITY),
    ("sales", "4000", "Sales Income", AccountTypeKey.INCOME),
    ("other_income", "4900", "Other Income", AccountTypeKey.OTHER_INCOME),
    ("cogs", "5000", "Cost of Goods Sold", AccountTypeKey.COST_OF_GOODS_SOLD),
    ("rent", "6000", "Rent Expense", AccountTypeKey.EXPENSE),
    ("salaries", "6100", "Salaries Expense", AccountTypeKey.EXPENSE),
    ("interest", "7000", "Interest Expense", AccountTypeKey.OTHER_EXPENSE),
)


@pytest.fixture
def standard_accounts(create_account, tenant_id) -> dict[str, Account]:
    """A small chart of accounts for ``tenant_id`` keyed by role name."""
    return {
        key: create_account(tenant_id, code, name, account_type)
        for key, code, name, account_type in STANDARD_ACCOUNTS
    }


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def category_service(session, dispatcher, deterministic_clock) -> ItemCategoryService:
    return ItemCategoryService(session, dispatcher=dispatcher, clock=deterministic_clock)


@pytest.fixture
def item_service(session, dispatcher, deterministic_clock) -> ItemService:
    return ItemService(session, dispatcher=dispatcher, clock=deterministic_clock)


@pytest.fixture
def journal_service(session, dispatcher, deterministic_clock) -> JournalService:
    return JournalService(session, dispatcher=dispatcher, clock=deterministic_clock)


@pytest.fixture
def post_journal(journal_service, test_actor_id):
    """
    Post a two-line journal: debit one account, credit another.

    Usage::

        post_journal(tenant_id, date(2024, 3, 1), accounts["cash"], accounts["sales"], "1000")
    """
    counter = {"n": 0}

    def _post(
        tenant_id: UUID,
        entry_date: date,
        debit: Account,
        credit: Account,
        amount: str | Decimal,
        basis: AccountingBasis = AccountingBasis.BOTH,
    ):
        counter["n"] += 1
        return journal_service.make_journal(
            tenant_id,
            JournalInput(
                journal_number=f"JE-{counter['n']:05d}",
                date=entry_date,
                basis=basis,
                lines=(
                    JournalLineInput(debit.id, LineSide.DEBIT, Decimal(amount)),
                    JournalLineInput(credit.id, LineSide.CREDIT, Decimal(amount)),
                ),
            ),
            test_actor_id,
        )

    return _post
