"""Tests for ItemService."""

from decimal import Decimal
from uuid import uuid4

import pytest

from ledger_kernel.domain.events import EventName
from ledger_kernel.exceptions import (
    CostAccountNotCogsError,
    InventoryAccountRequiredError,
    InvalidItemTypeError,
    ItemCategoryNotFoundError,
    ItemNameExistsError,
    ItemNotFoundError,
)
from ledger_kernel.selectors.dynamic_list import FilterComparator, FilterRole, ListFilter
from ledger_modules.items.models import ItemCategoryInput, ItemInput, ItemType


@pytest.fixture
def hardware(category_service, tenant_id, test_actor_id):
    return category_service.create_category(
        tenant_id, ItemCategoryInput(name="Hardware"), test_actor_id,
    )


class TestCreateItem:
    def test_inventory_item(self, item_service, standard_accounts, hardware, tenant_id, test_actor_id):
        item = item_service.create_item(
            tenant_id,
            ItemInput(
                name="Bolt",
                type=ItemType.INVENTORY,
                code="B-1",
                sell_price=Decimal("1.25"),
                cost_price=Decimal("0.40"),
                sell_account_id=standard_accounts["sales"].id,
                cost_account_id=standard_accounts["cogs"].id,
                inventory_account_id=standard_accounts["inventory"].id,
                category_id=hardware.id,
            ),
            test_actor_id,
        )

        assert item.type == ItemType.INVENTORY
        assert item.sell_price == Decimal("1.25")
        assert item.category_id == hardware.id
        assert item.active is True

    def test_emits_created_event(self, item_service, dispatcher, tenant_id, test_actor_id):
        item = item_service.create_item(tenant_id, ItemInput(name="Consulting"), test_actor_id)
        (event,) = dispatcher.pending
        assert event.name == EventName.ITEM_CREATED
        assert event.payload["item_id"] == item.id
        assert event.payload["category_id"] is None

    def test_duplicate_name(self, item_service, tenant_id, test_actor_id):
        item_service.create_item(tenant_id, ItemInput(name="Bolt"), test_actor_id)
        with pytest.raises(ItemNameExistsError):
            item_service.create_item(tenant_id, ItemInput(name="Bolt"), test_actor_id)

    def test_unknown_category(self, item_service, tenant_id, test_actor_id):
        with pytest.raises(ItemCategoryNotFoundError):
            item_service.create_item(
                tenant_id, ItemInput(name="Bolt", category_id=uuid4()), test_actor_id,
            )

    def test_other_tenant_category(
        self, item_service, hardware, other_tenant_id, test_actor_id,
    ):
        with pytest.raises(ItemCategoryNotFoundError):
            item_service.create_item(
                other_tenant_id, ItemInput(name="Bolt", category_id=hardware.id), test_actor_id,
            )

    def test_account_roles_validated(self, item_service, standard_accounts, tenant_id, test_actor_id):
        with pytest.raises(CostAccountNotCogsError):
            item_service.create_item(
                tenant_id,
                ItemInput(name="Bolt", cost_account_id=standard_accounts["cash"].id),
                test_actor_id,
            )

    def test_inventory_item_requires_inventory_account(self, item_service, tenant_id, test_actor_id):
        with pytest.raises(InventoryAccountRequiredError) as exc_info:
            item_service.create_item(
                tenant_id, ItemInput(name="Bolt", type=ItemType.INVENTORY), test_actor_id,
            )
        assert exc_info.value.item_name == "Bolt"

    def test_float_price_rejected(self, item_service, tenant_id, test_actor_id):
        with pytest.raises(TypeError):
            item_service.create_item(
                tenant_id, ItemInput(name="Bolt", sell_price=1.25), test_actor_id,
            )

    def test_unknown_type_rejected_before_write(self, item_service, dispatcher, tenant_id, test_actor_id):
        with pytest.raises(InvalidItemTypeError) as exc_info:
            item_service.create_item(
                tenant_id, ItemInput(name="Bolt", type="bogus"), test_actor_id,
            )
        assert exc_info.value.code == "INVALID_ITEM_TYPE"
        assert exc_info.value.item_type == "bogus"
        assert dispatcher.pending == ()
        assert item_service.list_items(tenant_id).filter_meta.total == 0

    def test_type_given_as_string(self, item_service, tenant_id, test_actor_id):
        item = item_service.create_item(
            tenant_id, ItemInput(name="Repair", type="non_inventory"), test_actor_id,
        )
        assert item.type == ItemType.NON_INVENTORY


class TestEditDeleteItem:
    def test_edit_replaces_fields(self, item_service, hardware, tenant_id, test_actor_id):
        item = item_service.create_item(
            tenant_id, ItemInput(name="Bolt", category_id=hardware.id, note="old"), test_actor_id,
        )
        edited = item_service.edit_item(
            tenant_id, item.id, ItemInput(name="Bolt M6", active=False), test_actor_id,
        )
        assert edited.name == "Bolt M6"
        assert edited.category_id is None
        assert edited.note is None
        assert edited.active is False

    def test_edit_keeps_own_name(self, item_service, tenant_id, test_actor_id):
        item = item_service.create_item(tenant_id, ItemInput(name="Bolt"), test_actor_id)
        edited = item_service.edit_item(
            tenant_id, item.id, ItemInput(name="Bolt", code="B-2"), test_actor_id,
        )
        assert edited.code == "B-2"

    def test_edit_missing(self, item_service, tenant_id, test_actor_id):
        with pytest.raises(ItemNotFoundError):
            item_service.edit_item(tenant_id, uuid4(), ItemInput(name="Bolt"), test_actor_id)

    def test_delete(self, item_service, dispatcher, tenant_id, test_actor_id):
        item = item_service.create_item(tenant_id, ItemInput(name="Bolt"), test_actor_id)
        dispatcher.discard()

        item_service.delete_item(tenant_id, item.id, test_actor_id)

        with pytest.raises(ItemNotFoundError):
            item_service.get_item(tenant_id, item.id)
        assert [e.name for e in dispatcher.pending] == [EventName.ITEM_DELETED]

    def test_delete_other_tenant(self, item_service, tenant_id, other_tenant_id, test_actor_id):
        item = item_service.create_item(tenant_id, ItemInput(name="Bolt"), test_actor_id)
        with pytest.raises(ItemNotFoundError):
            item_service.delete_item(other_tenant_id, item.id, test_actor_id)


class TestListItems:
    def test_filter_by_category(self, item_service, hardware, tenant_id, test_actor_id):
        item_service.create_item(
            tenant_id, ItemInput(name="Bolt", category_id=hardware.id), test_actor_id,
        )
        item_service.create_item(tenant_id, ItemInput(name="Consulting"), test_actor_id)

        result = item_service.list_items(
            tenant_id,
            ListFilter(
                filter_roles=(FilterRole("category_id", FilterComparator.EQUALS, hardware.id),),
            ),
        )

        assert [i.name for i in result.items] == ["Bolt"]
        assert result.filter_meta.total == 1

    def test_filter_uncategorized(self, item_service, hardware, tenant_id, test_actor_id):
        item_service.create_item(
            tenant_id, ItemInput(name="Bolt", category_id=hardware.id), test_actor_id,
        )
        item_service.create_item(tenant_id, ItemInput(name="Consulting"), test_actor_id)

        result = item_service.list_items(
            tenant_id,
            ListFilter(filter_roles=(FilterRole("category_id", FilterComparator.EMPTY),)),
        )
        assert [i.name for i in result.items] == ["Consulting"]

    def test_search_keyword(self, item_service, tenant_id, test_actor_id):
        item_service.create_item(tenant_id, ItemInput(name="Bolt", code="B-1"), test_actor_id)
        item_service.create_item(
            tenant_id, ItemInput(name="Anchor", note="pairs with a bolt"), test_actor_id,
        )
        item_service.create_item(tenant_id, ItemInput(name="Consulting"), test_actor_id)

        result = item_service.list_items(
            tenant_id, ListFilter(search_keyword="bolt", column_sort_by="name"),
        )

        assert [i.name for i in result.items] == ["Anchor", "Bolt"]
        assert result.filter_meta.search_keyword == "bolt"
        assert result.filter_meta.total == 2

    def test_search_by_code(self, item_service, tenant_id, test_actor_id):
        item_service.create_item(tenant_id, ItemInput(name="Bolt", code="B-1"), test_actor_id)
        item_service.create_item(tenant_id, ItemInput(name="Nut", code="N-1"), test_actor_id)

        result = item_service.list_items(tenant_id, ListFilter(search_keyword="n-1"))
        assert [i.name for i in result.items] == ["Nut"]
