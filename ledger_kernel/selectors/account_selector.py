"""
Module: ledger_kernel.selectors.account_selector
Responsibility: Read-only chart-of-accounts lookups scoped to one tenant.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - An account belonging to another tenant is indistinguishable from a
      missing account: lookups return None / omit it.
"""

from dataclasses import dataclass
from uuid import UUID

from ledger_kernel.models.account import (
    Account,
    AccountRootType,
    AccountTypeKey,
    NormalBalance,
)
from ledger_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class AccountInfo:
    """Immutable account snapshot."""

    id: UUID
    code: str
    name: str
    account_type: AccountTypeKey
    root_type: AccountRootType
    normal_balance: NormalBalance
    parent_account_id: UUID | None
    is_active: bool
    currency_code: str | None = None

    @classmethod
    def from_model(cls, model: Account) -> "AccountInfo":
        meta = model.type_meta
        return cls(
            id=model.id,
            code=model.code,
            name=model.name,
            account_type=meta.key,
            root_type=meta.root_type,
            normal_balance=meta.normal,
            parent_account_id=model.parent_account_id,
            is_active=model.is_active,
            currency_code=model.currency_code,
        )


class AccountSelector(BaseSelector[Account]):
    """Tenant-scoped account queries."""

    model = Account

    def get_model(self, tenant_id: UUID, account_id: UUID) -> Account | None:
        """Fetch the ORM row; used by services that need the live object."""
        return self.session.execute(
            self._scoped(tenant_id).where(Account.id == account_id)
        ).scalar_one_or_none()

    def get(self, tenant_id: UUID, account_id: UUID) -> AccountInfo | None:
        model = self.get_model(tenant_id, account_id)
        return AccountInfo.from_model(model) if model is not None else None

    def find_by_ids(
        self,
        tenant_id: UUID,
        account_ids: list[UUID] | tuple[UUID, ...] | set[UUID],
    ) -> dict[UUID, AccountInfo]:
        """Map each found id to its AccountInfo.  Missing ids are absent."""
        if not account_ids:
            return {}
        rows = self.session.execute(
            self._scoped(tenant_id).where(Account.id.in_(list(account_ids)))
        ).scalars().all()
        return {row.id: AccountInfo.from_model(row) for row in rows}

    def list_by_types(
        self,
        tenant_id: UUID,
        account_types: list[AccountTypeKey] | tuple[AccountTypeKey, ...],
    ) -> list[AccountInfo]:
        """All accounts of the given types, ordered by code."""
        rows = self.session.execute(
            self._scoped(tenant_id)
            .where(
                Account.account_type.in_([AccountTypeKey(t).value for t in account_types]),
            )
            .order_by(Account.code)
        ).scalars().all()
        return [AccountInfo.from_model(row) for row in rows]
