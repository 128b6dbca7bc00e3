"""
Items Domain Models.

Frozen dataclasses for item categories and items: the inputs the services
accept and the DTOs they return.  No ORM imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ledger_kernel.selectors.dynamic_list import FilterMeta


class ItemType(str, Enum):
    """How an item is tracked."""

    SERVICE = "service"
    NON_INVENTORY = "non_inventory"
    INVENTORY = "inventory"


@dataclass(frozen=True)
class ItemCategoryInput:
    """
    Create/edit payload for an item category.

    Edit is a full replacement: an account id left as None clears the
    reference.
    """

    name: str
    description: str | None = None
    sell_account_id: UUID | None = None
    cost_account_id: UUID | None = None
    inventory_account_id: UUID | None = None


@dataclass(frozen=True)
class ItemCategory:
    """An item category as returned by the service layer."""

    id: UUID
    name: str
    description: str | None
    sell_account_id: UUID | None
    cost_account_id: UUID | None
    inventory_account_id: UUID | None
    user_id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None
    # Number of items associated with the category; only populated by list
    count: int | None = None


@dataclass(frozen=True)
class ItemCategoriesList:
    item_categories: tuple[ItemCategory, ...]
    filter_meta: FilterMeta


@dataclass(frozen=True)
class ItemInput:
    """Create/edit payload for an item (full replacement on edit)."""

    name: str
    type: ItemType = ItemType.SERVICE
    code: str | None = None
    sell_price: Decimal | None = None
    cost_price: Decimal | None = None
    sell_account_id: UUID | None = None
    cost_account_id: UUID | None = None
    inventory_account_id: UUID | None = None
    category_id: UUID | None = None
    active: bool = True
    note: str | None = None


@dataclass(frozen=True)
class Item:
    id: UUID
    name: str
    type: ItemType
    code: str | None
    sell_price: Decimal | None
    cost_price: Decimal | None
    sell_account_id: UUID | None
    cost_account_id: UUID | None
    inventory_account_id: UUID | None
    category_id: UUID | None
    active: bool
    note: str | None


@dataclass(frozen=True)
class ItemsList:
    items: tuple[Item, ...]
    filter_meta: FilterMeta
