"""
Item Category Service (``ledger_modules.items.category_service``).

Responsibility
--------------
Lifecycle of item categories: create, edit, delete, bulk delete, get and
list.  Every mutation validates first (name uniqueness, then the sell, cost
and inventory accounts in that order) and only then writes, so a failed
call leaves the tenant's data untouched and emits no event.

Architecture position
---------------------
**Modules layer** -- service.  Extends ``BaseService``; flushes but never
commits.  Events are enqueued on the injected ``EventDispatcher`` and
delivered once the caller commits.

Invariants enforced
-------------------
* Category names are unique per tenant (case-sensitive exact match).
* Referenced accounts exist in the same tenant and can serve their role.
* Deleting a category clears ``category_id`` on its items before the row
  is removed.
* Bulk delete is all-or-nothing: any missing id aborts the whole call.

Failure modes
-------------
* ``ItemCategoryNotFoundError`` / ``ItemCategoriesNotFoundError``
* ``CategoryNameExistsError``
* ``AccountNotFoundError`` and ``AccountRoleMismatchError`` subclasses
* ``DynamicListError`` subclasses from ``list_categories``

Usage
-----
    service = ItemCategoryService(session, dispatcher=dispatcher, clock=clock)
    with transactional_dispatch(session, dispatcher):
        category = service.create_category(tenant_id, ItemCategoryInput(name="Hardware"), actor_id)
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.events import EventName
from ledger_kernel.exceptions import (
    CategoryNameExistsError,
    ItemCategoriesNotFoundError,
    ItemCategoryNotFoundError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.selectors.dynamic_list import DynamicList, ListFilter, ListingLimits
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.event_dispatcher import EventDispatcher
from ledger_modules.items.models import (
    ItemCategoriesList,
    ItemCategory,
    ItemCategoryInput,
)
from ledger_modules.items.orm import ItemCategoryModel, ItemModel
from ledger_modules.items.validators import AccountRoleValidator

logger = get_logger("modules.items.category_service")


class ItemCategoryService(BaseService[ItemCategoryModel]):
    """
    Item category lifecycle within one tenant per call.

    Contract:
        Every public method takes the tenant id first.  Rows of other
        tenants are invisible: referencing one behaves exactly like
        referencing a missing row.
    """

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

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _get_model(self, tenant_id: UUID, category_id: UUID) -> ItemCategoryModel:
        model = self.session.execute(
            select(ItemCategoryModel).where(
                ItemCategoryModel.tenant_id == tenant_id,
                ItemCategoryModel.id == category_id,
            )
        ).scalar_one_or_none()
        if model is None:
            logger.info(
                "item_category_not_found",
                extra={"category_id": str(category_id)},
            )
            raise ItemCategoryNotFoundError(str(category_id))
        return model

    def _validate_name_unique(
        self,
        tenant_id: UUID,
        name: str,
        exclude_id: UUID | None = None,
    ) -> None:
        query = select(ItemCategoryModel.id).where(
            ItemCategoryModel.tenant_id == tenant_id,
            ItemCategoryModel.name == name,
        )
        if exclude_id is not None:
            query = query.where(ItemCategoryModel.id != exclude_id)
        if self.session.execute(query).first() is not None:
            logger.info("item_category_name_exists", extra={"category_name": name})
            raise CategoryNameExistsError(name)

    def _validate_input(
        self,
        tenant_id: UUID,
        data: ItemCategoryInput,
        exclude_id: UUID | None = None,
    ) -> None:
        self._validate_name_unique(tenant_id, data.name, exclude_id)
        self._accounts.validate(
            tenant_id,
            sell_account_id=data.sell_account_id,
            cost_account_id=data.cost_account_id,
            inventory_account_id=data.inventory_account_id,
        )

    def _unassociate_items(self, tenant_id: UUID, category_ids: Iterable[UUID]) -> int:
        result = self.session.execute(
            update(ItemModel)
            .where(
                ItemModel.tenant_id == tenant_id,
                ItemModel.category_id.in_(list(category_ids)),
            )
            .values(category_id=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_category(
        self,
        tenant_id: UUID,
        data: ItemCategoryInput,
        actor_id: UUID,
    ) -> ItemCategory:
        """
        Create a new item category.

        Raises:
            CategoryNameExistsError: Name already used in the tenant.
            AccountNotFoundError: A supplied account does not exist.
            AccountRoleMismatchError: A supplied account cannot serve its role.
        """
        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            self._validate_input(tenant_id, data)

            model = ItemCategoryModel(
                tenant_id=tenant_id,
                name=data.name,
                description=data.description,
                sell_account_id=data.sell_account_id,
                cost_account_id=data.cost_account_id,
                inventory_account_id=data.inventory_account_id,
                user_id=actor_id,
                created_by_id=actor_id,
            )
            self.session.add(model)
            self.session.flush()

            category = model.to_dto()
            self._emit(
                EventName.ITEM_CATEGORY_CREATED,
                tenant_id,
                actor_id,
                {"category_id": category.id, "name": category.name},
            )
            logger.info(
                "item_category_created",
                extra={"category_id": str(category.id), "category_name": category.name},
            )
            return category

    def edit_category(
        self,
        tenant_id: UUID,
        category_id: UUID,
        data: ItemCategoryInput,
        actor_id: UUID,
    ) -> ItemCategory:
        """
        Replace an item category's attributes with ``data``.

        Raises:
            ItemCategoryNotFoundError: Category does not exist in the tenant.
            CategoryNameExistsError: Another category already has the name.
            AccountNotFoundError / AccountRoleMismatchError: as for create.
        """
        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            model = self._get_model(tenant_id, category_id)
            self._validate_input(tenant_id, data, exclude_id=category_id)

            model.name = data.name
            model.description = data.description
            model.sell_account_id = data.sell_account_id
            model.cost_account_id = data.cost_account_id
            model.inventory_account_id = data.inventory_account_id
            model.user_id = actor_id
            model.updated_by_id = actor_id
            self.session.flush()

            category = model.to_dto()
            self._emit(
                EventName.ITEM_CATEGORY_EDITED,
                tenant_id,
                actor_id,
                {"category_id": category.id, "name": category.name},
            )
            logger.info(
                "item_category_edited",
                extra={"category_id": str(category.id), "category_name": category.name},
            )
            return category

    def delete_category(
        self,
        tenant_id: UUID,
        category_id: UUID,
        actor_id: UUID,
    ) -> None:
        """
        Delete an item category, clearing the category of its items first.

        Raises:
            ItemCategoryNotFoundError: Category does not exist in the tenant.
        """
        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            model = self._get_model(tenant_id, category_id)

            unassociated = self._unassociate_items(tenant_id, [category_id])
            self.session.delete(model)
            self.session.flush()

            self._emit(
                EventName.ITEM_CATEGORY_DELETED,
                tenant_id,
                actor_id,
                {"category_id": category_id, "unassociated_items": unassociated},
            )
            logger.info(
                "item_category_deleted",
                extra={
                    "category_id": str(category_id),
                    "unassociated_items": unassociated,
                },
            )

    def bulk_delete_categories(
        self,
        tenant_id: UUID,
        category_ids: Iterable[UUID],
        actor_id: UUID,
    ) -> None:
        """
        Delete several item categories at once.

        Duplicate ids are collapsed.  An empty list is a no-op.

        Raises:
            ItemCategoriesNotFoundError: One or more ids are missing; nothing
                is changed and ``missing_ids`` lists them in request order.
        """
        ids = list(dict.fromkeys(category_ids))
        if not ids:
            return

        with LogContext.bind(tenant_id=tenant_id, actor_id=actor_id):
            models = self.session.execute(
                select(ItemCategoryModel).where(
                    ItemCategoryModel.tenant_id == tenant_id,
                    ItemCategoryModel.id.in_(ids),
                )
            ).scalars().all()

            found = {model.id for model in models}
            missing = [category_id for category_id in ids if category_id not in found]
            if missing:
                logger.info(
                    "item_categories_not_found",
                    extra={"missing_ids": [str(m) for m in missing]},
                )
                raise ItemCategoriesNotFoundError(missing)

            unassociated = self._unassociate_items(tenant_id, ids)
            for model in models:
                self.session.delete(model)
            self.session.flush()

            self._emit(
                EventName.ITEM_CATEGORY_BULK_DELETED,
                tenant_id,
                actor_id,
                {"category_ids": list(ids), "unassociated_items": unassociated},
            )
            logger.info(
                "item_categories_bulk_deleted",
                extra={
                    "category_ids": [str(i) for i in ids],
                    "unassociated_items": unassociated,
                },
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_category(self, tenant_id: UUID, category_id: UUID) -> ItemCategory:
        """
        Get one item category.

        Raises:
            ItemCategoryNotFoundError: Category does not exist in the tenant.
        """
        return self._get_model(tenant_id, category_id).to_dto()

    def list_categories(
        self,
        tenant_id: UUID,
        list_filter: ListFilter | None = None,
    ) -> ItemCategoriesList:
        """
        List item categories with the number of items in each.

        ``count`` is available as a sort column and a filter field in
        addition to the model's listable fields.
        """
        items_count = (
            select(func.count(ItemModel.id))
            .where(
                ItemModel.category_id == ItemCategoryModel.id,
                ItemModel.tenant_id == ItemCategoryModel.tenant_id,
            )
            .correlate(ItemCategoryModel)
            .scalar_subquery()
            .label("items_count")
        )
        query = select(ItemCategoryModel, items_count).where(
            ItemCategoryModel.tenant_id == tenant_id
        )

        dynamic = DynamicList(
            ItemCategoryModel,
            list_filter,
            limits=self._listing_limits,
            extra_columns={"count": items_count},
        )
        rows, meta = dynamic.fetch(self.session, query)

        return ItemCategoriesList(
            item_categories=tuple(model.to_dto(count=count) for model, count in rows),
            filter_meta=meta,
        )
