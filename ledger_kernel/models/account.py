"""
Module: ledger_kernel.models.account
Responsibility: ORM persistence for the Chart of Accounts (COA) and the
    account type registry that governs which roles an account may serve.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Account.code is unique per tenant (uq_account_tenant_code).
    - account_type is a key of ACCOUNT_TYPES; its root type and normal
      balance are derived from the registry, never stored separately.

Failure modes:
    - KeyError from Account.type_meta when account_type is not registered
      (rows written outside the service layer).
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TenantScopedMixin, TrackedBase, UUIDString


class AccountRootType(str, Enum):
    """Top-level classification governing valid account usage."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"


class NormalBalance(str, Enum):
    """Normal balance side for an account."""

    DEBIT = "debit"
    CREDIT = "credit"


class AccountTypeKey(str, Enum):
    """Account types available in a tenant's chart of accounts."""

    CASH = "cash"
    BANK = "bank"
    ACCOUNTS_RECEIVABLE = "accounts_receivable"
    INVENTORY = "inventory"
    OTHER_CURRENT_ASSET = "other_current_asset"
    FIXED_ASSET = "fixed_asset"
    NON_CURRENT_ASSET = "non_current_asset"
    ACCOUNTS_PAYABLE = "accounts_payable"
    CREDIT_CARD = "credit_card"
    TAX_PAYABLE = "tax_payable"
    OTHER_CURRENT_LIABILITY = "other_current_liability"
    LONG_TERM_LIABILITY = "long_term_liability"
    NON_CURRENT_LIABILITY = "non_current_liability"
    EQUITY = "equity"
    INCOME = "income"
    OTHER_INCOME = "other_income"
    COST_OF_GOODS_SOLD = "cost_of_goods_sold"
    EXPENSE = "expense"
    OTHER_EXPENSE = "other_expense"


@dataclass(frozen=True)
class AccountTypeMeta:
    """Static metadata for one account type."""

    key: AccountTypeKey
    label: str
    root_type: AccountRootType
    normal: NormalBalance
    balance_sheet: bool
    income_sheet: bool


def _meta(
    key: AccountTypeKey,
    label: str,
    root_type: AccountRootType,
) -> AccountTypeMeta:
    debit_normal = root_type in (AccountRootType.ASSET, AccountRootType.EXPENSE)
    income_sheet = root_type in (AccountRootType.INCOME, AccountRootType.EXPENSE)
    return AccountTypeMeta(
        key=key,
        label=label,
        root_type=root_type,
        normal=NormalBalance.DEBIT if debit_normal else NormalBalance.CREDIT,
        balance_sheet=not income_sheet,
        income_sheet=income_sheet,
    )


ACCOUNT_TYPES: dict[AccountTypeKey, AccountTypeMeta] = {
    m.key: m
    for m in (
        _meta(AccountTypeKey.CASH, "Cash", AccountRootType.ASSET),
        _meta(AccountTypeKey.BANK, "Bank", AccountRootType.ASSET),
        _meta(AccountTypeKey.ACCOUNTS_RECEIVABLE, "Accounts Receivable (A/R)", AccountRootType.ASSET),
        _meta(AccountTypeKey.INVENTORY, "Inventory", AccountRootType.ASSET),
        _meta(AccountTypeKey.OTHER_CURRENT_ASSET, "Other Current Asset", AccountRootType.ASSET),
        _meta(AccountTypeKey.FIXED_ASSET, "Fixed Asset", AccountRootType.ASSET),
        _meta(AccountTypeKey.NON_CURRENT_ASSET, "Non-Current Asset", AccountRootType.ASSET),
        _meta(AccountTypeKey.ACCOUNTS_PAYABLE, "Accounts Payable (A/P)", AccountRootType.LIABILITY),
        _meta(AccountTypeKey.CREDIT_CARD, "Credit Card", AccountRootType.LIABILITY),
        _meta(AccountTypeKey.TAX_PAYABLE, "Tax Payable", AccountRootType.LIABILITY),
        _meta(AccountTypeKey.OTHER_CURRENT_LIABILITY, "Other Current Liability", AccountRootType.LIABILITY),
        _meta(AccountTypeKey.LONG_TERM_LIABILITY, "Long Term Liability", AccountRootType.LIABILITY),
        _meta(AccountTypeKey.NON_CURRENT_LIABILITY, "Non-Current Liability", AccountRootType.LIABILITY),
        _meta(AccountTypeKey.EQUITY, "Equity", AccountRootType.EQUITY),
        _meta(AccountTypeKey.INCOME, "Income", AccountRootType.INCOME),
        _meta(AccountTypeKey.OTHER_INCOME, "Other Income", AccountRootType.INCOME),
        _meta(AccountTypeKey.COST_OF_GOODS_SOLD, "Cost of Goods Sold", AccountRootType.EXPENSE),
        _meta(AccountTypeKey.EXPENSE, "Expense", AccountRootType.EXPENSE),
        _meta(AccountTypeKey.OTHER_EXPENSE, "Other Expense", AccountRootType.EXPENSE),
    )
}


def get_account_type_meta(account_type: AccountTypeKey | str) -> AccountTypeMeta:
    """Look up registry metadata for an account type key.

    Raises:
        KeyError: If the key is not a registered account type.
    """
    try:
        key = AccountTypeKey(account_type)
    except ValueError as exc:
        raise KeyError(account_type) from exc
    return ACCOUNT_TYPES[key]


class Account(TenantScopedMixin, TrackedBase):
    """
    Chart of Accounts entry owned by a tenant.

    Contract:
        (tenant_id, code) is unique.  The account's root type and normal
        balance are derived from ``account_type`` via ACCOUNT_TYPES.

    Non-goals:
        - Deletion guards; accounts are deactivated, not removed.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_account_tenant_code"),
        Index("idx_account_type", "account_type"),
        Index("idx_account_active", "is_active"),
    )

    code: Mapped[str] = mapped_column(String(50), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Key into ACCOUNT_TYPES
    account_type: Mapped[str] = mapped_column(String(40), nullable=False)

    parent_account_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=True,
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Currency restriction (null = base currency)
    currency_code: Mapped[str | None] = mapped_column(String(3), nullable=True)

    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    def __repr__(self) -> str:
        return f"<Account {self.code}: {self.name}>"

    @property
    def type_meta(self) -> AccountTypeMeta:
        return get_account_type_meta(self.account_type)

    @property
    def root_type(self) -> AccountRootType:
        return self.type_meta.root_type

    @property
    def normal_balance(self) -> NormalBalance:
        return self.type_meta.normal

    def is_root_type(self, root_type: AccountRootType | str) -> bool:
        """Check whether the account's root type equals ``root_type``."""
        return self.root_type == AccountRootType(root_type)

    def is_account_type(self, account_type: AccountTypeKey | str) -> bool:
        """Check whether the account is of the given account type."""
        return AccountTypeKey(self.account_type) == AccountTypeKey(account_type)
