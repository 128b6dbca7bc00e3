"""
Account role validation shared by item categories and items.

An account referenced as the sell, cost or inventory account must exist in
the tenant and be able to serve that role:

    sell       -> root type income
    cost       -> root type expense (cost of goods sold or expense)
    inventory  -> account type inventory

Checks run in that order and stop at the first failure.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from ledger_kernel.exceptions import (
    CostAccountNotCogsError,
    CostAccountNotFoundError,
    InventoryAccountNotFoundError,
    InventoryAccountNotInventoryError,
    SellAccountNotFoundError,
    SellAccountNotIncomeError,
)
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import AccountRootType, AccountTypeKey
from ledger_kernel.selectors.account_selector import AccountSelector

logger = get_logger("modules.items.validators")


class AccountRoleValidator:
    """Validates account references against the chart of accounts."""

    def __init__(self, session: Session):
        self._accounts = AccountSelector(session)

    def validate_sell_account(self, tenant_id: UUID, account_id: UUID) -> None:
        logger.debug("validate_sell_account", extra={"account_id": str(account_id)})
        account = self._accounts.get(tenant_id, account_id)
        if account is None:
            raise SellAccountNotFoundError(str(account_id))
        if account.root_type != AccountRootType.INCOME:
            raise SellAccountNotIncomeError(str(account_id), account.root_type.value)

    def validate_cost_account(self, tenant_id: UUID, account_id: UUID) -> None:
        logger.debug("validate_cost_account", extra={"account_id": str(account_id)})
        account = self._accounts.get(tenant_id, account_id)
        if account is None:
            raise CostAccountNotFoundError(str(account_id))
        if account.root_type != AccountRootType.EXPENSE:
            raise CostAccountNotCogsError(str(account_id), account.root_type.value)

    def validate_inventory_account(self, tenant_id: UUID, account_id: UUID) -> None:
        logger.debug("validate_inventory_account", extra={"account_id": str(account_id)})
        account = self._accounts.get(tenant_id, account_id)
        if account is None:
            raise InventoryAccountNotFoundError(str(account_id))
        if account.account_type != AccountTypeKey.INVENTORY:
            raise InventoryAccountNotInventoryError(
                str(account_id), account.account_type.value,
            )

    def validate(
        self,
        tenant_id: UUID,
        sell_account_id: UUID | None = None,
        cost_account_id: UUID | None = None,
        inventory_account_id: UUID | None = None,
    ) -> None:
        """Validate each supplied account in order sell, cost, inventory."""
        if sell_account_id is not None:
            self.validate_sell_account(tenant_id, sell_account_id)
        if cost_account_id is not None:
            self.validate_cost_account(tenant_id, cost_account_id)
        if inventory_account_id is not None:
            self.validate_inventory_account(tenant_id, inventory_account_id)
