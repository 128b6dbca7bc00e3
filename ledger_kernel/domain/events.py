"""
Domain events -- immutable records of completed state changes.

Responsibility:
    Defines the event names emitted by the service layer and the frozen
    ``DomainEvent`` value object that carries them to subscribers.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Events are built by services
    (with the injected clock's timestamp) and delivered by
    ``ledger_kernel.services.event_dispatcher``.

Invariants enforced:
    - Events are immutable once built; the payload is deep-frozen.
    - ``occurred_at`` always comes from the injected Clock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping
from uuid import UUID, uuid4


class EventName(str, Enum):
    """Names of domain events emitted by the service layer."""

    ITEM_CATEGORY_CREATED = "item_category.created"
    ITEM_CATEGORY_EDITED = "item_category.edited"
    ITEM_CATEGORY_DELETED = "item_category.deleted"
    ITEM_CATEGORY_BULK_DELETED = "item_category.bulk_deleted"
    ITEM_CREATED = "item.created"
    ITEM_EDITED = "item.edited"
    ITEM_DELETED = "item.deleted"
    JOURNAL_CREATED = "journal.created"


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


@dataclass(frozen=True)
class DomainEvent:
    """
    A change that has happened inside one tenant.

    ``payload`` holds identifiers and the values subscribers need; it is
    frozen on construction so a subscriber cannot mutate what another
    subscriber sees.
    """

    name: EventName
    tenant_id: UUID
    actor_id: UUID
    occurred_at: datetime
    payload: Mapping[str, Any] = field(default_factory=dict)
    event_id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", EventName(self.name))
        object.__setattr__(self, "payload", _freeze(self.payload))

    def to_log_dict(self) -> dict[str, Any]:
        """Flatten the event into JSON-friendly log fields."""
        return {
            "event_id": str(self.event_id),
            "event_name": self.name.value,
            "tenant_id": str(self.tenant_id),
            "actor_id": str(self.actor_id),
            "occurred_at": self.occurred_at.isoformat(),
            "payload": _thaw(self.payload),
        }


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    if isinstance(value, UUID):
        return str(value)
    return value
