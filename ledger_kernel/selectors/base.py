"""
Read-side query objects.

Selectors take the caller's ``Session``, never write (no add, delete,
flush or commit) and return frozen dataclasses rather than live ORM rows,
except where a service explicitly asks for the row it is about to mutate.
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from ledger_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(Generic[ModelType]):
    """Shared session holder; ``model`` is the tenant-scoped table queried."""

    model: type[ModelType]

    def __init__(self, session: Session):
        self.session = session

    def _scoped(self, tenant_id: UUID) -> Select:
        """``SELECT model WHERE tenant_id = :tenant_id``."""
        return select(self.model).where(self.model.tenant_id == tenant_id)
