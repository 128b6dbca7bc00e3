"""
Module: ledger_modules.items.orm
Responsibility: SQLAlchemy ORM persistence models for the Items module --
    item categories and the items that reference them.

Architecture position: Modules > Items > ORM.  Inherits from TrackedBase and
    TenantScopedMixin (ledger_kernel.db.base).  Account references are foreign
    keys to the kernel ``accounts`` table.

Invariants enforced:
    - Category and item names are unique per tenant.
    - Prices use Decimal (Numeric(38,9)) -- NEVER float.
    - ItemModel.category_id is nullable; deleting a category clears it
      (handled by the service, never by a cascading delete).

Failure modes:
    - IntegrityError on duplicate (tenant_id, name) if the service-level
      uniqueness check is bypassed.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TenantScopedMixin, TrackedBase, UUIDString


class ItemCategoryModel(TenantScopedMixin, TrackedBase):
    """
    ORM model for item categories.

    Maps to: ledger_modules.items.models.ItemCategory (frozen dataclass).
    """

    __tablename__ = "items_categories"

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_item_category_tenant_name"),
    )

    LIST_FIELDS = {
        "name": "name",
        "description": "description",
        "sell_account_id": "sell_account_id",
        "cost_account_id": "cost_account_id",
        "inventory_account_id": "inventory_account_id",
        "created_at": "created_at",
    }
    SEARCH_FIELDS = ("name", "description")

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    sell_account_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("accounts.id"), nullable=True,
    )
    cost_account_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("accounts.id"), nullable=True,
    )
    inventory_account_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("accounts.id"), nullable=True,
    )

    # Last user to create or edit the category
    user_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    def to_dto(self, count: int | None = None):
        """Convert ORM model to frozen ItemCategory DTO."""
        from ledger_modules.items.models import ItemCategory
        return ItemCategory(
            id=self.id,
            name=self.name,
            description=self.description,
            sell_account_id=self.sell_account_id,
            cost_account_id=self.cost_account_id,
            inventory_account_id=self.inventory_account_id,
            user_id=self.user_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
            count=count,
        )

    def __repr__(self) -> str:
        return f"<ItemCategoryModel {self.name}>"


class ItemModel(TenantScopedMixin, TrackedBase):
    """
    ORM model for items (products and services).

    Maps to: ledger_modules.items.models.Item (frozen dataclass).
    """

    __tablename__ = "items"

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_item_tenant_name"),
        Index("idx_item_category", "category_id"),
        Index("idx_item_type", "type"),
    )

    LIST_FIELDS = {
        "name": "name",
        "type": "type",
        "code": "code",
        "sell_price": "sell_price",
        "cost_price": "cost_price",
        "category_id": "category_id",
        "active": "active",
        "created_at": "created_at",
    }
    SEARCH_FIELDS = ("name", "code", "note")

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # ItemType enum stored as string
    type: Mapped[str] = mapped_column(String(30), nullable=False)

    code: Mapped[str | None] = mapped_column(String(100), nullable=True)

    sell_price: Mapped[Decimal | None] = mapped_column(nullable=True)
    cost_price: Mapped[Decimal | None] = mapped_column(nullable=True)

    sell_account_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("accounts.id"), nullable=True,
    )
    cost_account_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("accounts.id"), nullable=True,
    )
    inventory_account_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("accounts.id"), nullable=True,
    )

    category_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("items_categories.id"), nullable=True,
    )

    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_dto(self):
        """Convert ORM model to frozen Item DTO."""
        from ledger_modules.items.models import Item, ItemType
        return Item(
            id=self.id,
            name=self.name,
            type=ItemType(self.type),
            code=self.code,
            sell_price=self.sell_price,
            cost_price=self.cost_price,
            sell_account_id=self.sell_account_id,
            cost_account_id=self.cost_account_id,
            inventory_account_id=self.inventory_account_id,
            category_id=self.category_id,
            active=self.active,
            note=self.note,
        )

    def __repr__(self) -> str:
        return f"<ItemModel {self.name} ({self.type})>"
