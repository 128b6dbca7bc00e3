"""
Item Service (``ledger_modules.items.service``).

Create, edit, delete, get and list items.  Items reuse the category account
rules through ``AccountRoleValidator`` and may point at one item category.

Invariants enforced
-------------------
* Item names are unique per tenant.
* ``category_id``, when given, references a category of the same tenant.
* Inventory items carry an inventory account.
* Validation precedes mutation.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.db.types import to_money
from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.events import EventName
from ledger_kernel.exceptions import (
    InvalidItemTypeError,
    InventoryAccountRequiredError,
    ItemCategoryNotFoundError,
    ItemNameExistsError,
    ItemNotFoundError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.selectors.dynamic_list import DynamicList, ListFilter, ListingLimits
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.event_dispatcher import EventDispatcher
from ledger_modules.items.models import Item, ItemInput, ItemsList, ItemType
from ledger_modules.items.orm import ItemCategoryModel, ItemModel
from ledger_modules.items.validators import AccountRoleValidator

logger = get_logger("modules.items.service")


class ItemService(BaseService[ItemModel]):
    """Item lifecycle within one tenant per call."""

    def __init__(
        self,
        session: Session,
        dispatcher: EventDispatcher | None = None,
        clock: Clock | None = None,
        listing_limits: ListingLimits | None = None,
    ):
        super().__init__(session, dispatcher=dispatcher, clock=clock)
        self._accounts = AccountRoleValidator(session)
        self._listing_limits = listing_limits or ListingLimits()

    def _get_model(self, tenant_id: UUID, item_id: UUID) -> ItemModel:
        model = self.session.execute(
            select(ItemModel).where(
                ItemModel.tenant_id == tenant_id,
                ItemModel.id == item_id,
            )
        ).scalar_one_or_none()
        if model is None:
            raise ItemNotFoundError(str(item_id))
        return model

    @staticmethod
    def _item_type(data: ItemInput) -> ItemType:
        try:
            return ItemType(data.type)
        except ValueError:
            raise InvalidItemTypeError(str(data.type)) from None

    def _validate_input(
        self,
        tenant_id: UUID,
        data: ItemInput,
        exclude_id: UUID | None = None,
    ) -> None:
        item_type = self._item_type(data)

        query = select(ItemModel.id).where(
            ItemModel.tenant_id == tenant_id,
            ItemModel.name == data.name,
        )
        if exclude_id is not None:
            query = query.where(ItemModel.id != exclude_id)
        if self.session.execute(query).first() is not None:
            raise ItemNameExistsError(data.name)

        if data.category_id is not None:
            category = self.session.execute(
                select(ItemCategoryModel.id).where(
                    ItemCategoryModel.tenant_id == tenant_id,
                    ItemCategoryModel.id == data.category_id,
                )
            ).first()
            if category is None:
                raise ItemCategoryNotFoundError(str(data.category_id))

        self._accounts.validate(
            tenant_id,
            sell_account_id=data.sell_account_id,
            cost_account_id=data.cost_account_id,
            inventory_account_id=data.inventory_account_id,
        )
        if item_type == ItemType.INVENTORY and data.inventory_account_id is None:
            raise InventoryAccountRequiredError(data.name)

    @staticmethod
    def _apply(model: ItemModel, data: ItemInput) -> None:
        model.name = data.name
        model.type = ItemService._item_type(data).value
        model.code = data.code
        model.sell_price = to_money(data.sell_price) if data.sell_price is not None else None
        model.cost_price = to_money(data.cost_price) if data.cost_price is not None else None
        model.sell_account_id = data.sell_account_id
        model.cost_account_id = data.cost_account_id
        model.inventory_account_id = data.inventory_account_id
        model.category_id = data.category_id
        model.active = data.active
        model.note = data.note

    def create_item(self, tenant_id: UUID, data: ItemInput, actor_id: UUID) -> Item:
        """
        Create an item.

        Raises:
            ItemNameExistsError, ItemCategoryNotFoundError,
            AccountNotFoundError, AccountRoleMismatchError,
            InventoryAccountRequiredError, InvalidItemTypeError.
        """
        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            self._validate_input(tenant_id, data)
            model = ItemModel(tenant_id=tenant_id, created_by_id=actor_id)
            self._apply(model, data)
            self.session.add(model)
            self.session.flush()

            item = model.to_dto()
            self._emit(
                EventName.ITEM_CREATED,
                tenant_id,
                actor_id,
                {"item_id": item.id, "name": item.name, "category_id": item.category_id},
            )
            logger.info("item_created", extra={"item_id": str(item.id), "item_name": item.name})
            return item

    def edit_item(
        self,
        tenant_id: UUID,
        item_id: UUID,
        data: ItemInput,
        actor_id: UUID,
    ) -> Item:
        """
        Replace an item's attributes with ``data``.

        Raises:
            ItemNotFoundError, plus every validation error of
            ``create_item``.
        """
        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            model = self._get_model(tenant_id, item_id)
            self._validate_input(tenant_id, data, exclude_id=item_id)
            self._apply(model, data)
            model.updated_by_id = actor_id
            self.session.flush()

            item = model.to_dto()
            self._emit(
                EventName.ITEM_EDITED,
                tenant_id,
                actor_id,
                {"item_id": item.id, "name": item.name, "category_id": item.category_id},
            )
            logger.info("item_edited", extra={"item_id": str(item.id)})
            return item

    def delete_item(self, tenant_id: UUID, item_id: UUID, actor_id: UUID) -> None:
        """
        Delete an item and enqueue ``item.deleted``.

        Raises:
            ItemNotFoundError: No such item in the tenant.
        """
        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            model = self._get_model(tenant_id, item_id)
            self.session.delete(model)
            self.session.flush()
            self._emit(EventName.ITEM_DELETED, tenant_id, actor_id, {"item_id": item_id})
            logger.info("item_deleted", extra={"item_id": str(item_id)})

    def get_item(self, tenant_id: UUID, item_id: UUID) -> Item:
        """
        Fetch one item.

        Raises:
            ItemNotFoundError: No such item in the tenant.
        """
        return self._get_model(tenant_id, item_id).to_dto()

    def list_items(self, tenant_id: UUID, list_filter: ListFilter | None = None) -> ItemsList:
        """
        One page of the tenant's items per ``list_filter``.

        Raises:
            InvalidSortColumnError, InvalidFilterFieldError,
            InvalidFilterComparatorError.
        """
        query = select(ItemModel).where(ItemModel.tenant_id == tenant_id)
        dynamic = DynamicList(ItemModel, list_filter, limits=self._listing_limits)
        rows, meta = dynamic.fetch(self.session, query)
        return ItemsList(
            items=tuple(row[0].to_dto() for row in rows),
            filter_meta=meta,
        )
