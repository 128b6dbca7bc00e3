"""
Declarative bases for every ledger table.

* ``Base`` gives each model a uuid4 primary key and the column type map
  (``Decimal`` as ``Numeric(38, 9)``, aware ``datetime``, UUIDs as text).
* ``TrackedBase`` adds who/when audit columns; ``created_by_id`` is
  required, so every row names the actor that created it.
* ``TenantScopedMixin`` adds the indexed, non-null ``tenant_id`` that every
  service and selector query filters on.

This module imports nothing from the rest of the kernel.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """``uuid.UUID`` stored as its 36-character text form on any backend."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
        UUID: UUIDString(),
        int: BigInteger,
    }

    id: Mapped[UUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """
    Audit columns.

    ``created_at``/``updated_at`` are filled by the database;
    ``updated_by_id`` stays empty until the first edit.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False,
    )
    created_by_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    updated_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)


class TenantScopedMixin:
    """Owning tenant.  Rows are only ever read back for the same tenant."""

    @declared_attr
    def tenant_id(cls) -> Mapped[UUID]:
        return mapped_column(UUIDString(), nullable=False, index=True)
