"""
Items Module.

Handles item categories and items:
- category lifecycle with chart-of-accounts role validation
- items that reference categories and accounts
- listing with sort, search, filter roles and pagination
"""

from ledger_modules.items.category_service import ItemCategoryService
from ledger_modules.items.models import (
    Item,
    ItemCategoriesList,
    ItemCategory,
    ItemCategoryInput,
    ItemInput,
    ItemsList,
    ItemType,
)
from ledger_modules.items.service import ItemService
from ledger_modules.items.validators import AccountRoleValidator

__all__ = [
    "AccountRoleValidator",
    "Item",
    "ItemCategoriesList",
    "ItemCategory",
    "ItemCategoryInput",
    "ItemCategoryService",
    "ItemInput",
    "ItemService",
    "ItemsList",
    "ItemType",
]
