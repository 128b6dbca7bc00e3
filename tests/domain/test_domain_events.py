"""
Tests for DomainEvent (ledger_kernel/domain/events.py).

Events are immutable and their payload is deep-frozen so one subscriber
cannot change what the next one sees.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from ledger_kernel.domain.events import DomainEvent, EventName

OCCURRED = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def _event(**overrides) -> DomainEvent:
    fields = {
        "name": EventName.ITEM_CATEGORY_CREATED,
        "tenant_id": uuid4(),
        "actor_id": uuid4(),
        "occurred_at": OCCURRED,
        "payload": {"name": "Hardware"},
    }
    fields.update(overrides)
    return DomainEvent(**fields)


class TestDomainEvent:
    def test_name_coerced_from_string(self):
        event = _event(name="item_category.deleted")
        assert event.name is EventName.ITEM_CATEGORY_DELETED

    def test_unknown_name_rejected(self):
        with pytest.raises(ValueError):
            _event(name="item_category.renamed")

    def test_event_is_frozen(self):
        event = _event()
        with pytest.raises(FrozenInstanceError):
            event.name = EventName.ITEM_DELETED  # type: ignore[misc]

    def test_payload_is_read_only(self):
        event = _event(payload={"ids": [1, 2], "nested": {"a": 1}})
        with pytest.raises(TypeError):
            event.payload["extra"] = True  # type: ignore[index]
        with pytest.raises(TypeError):
            event.payload["nested"]["a"] = 2  # type: ignore[index]
        assert event.payload["ids"] == (1, 2)

    def test_payload_copied_from_caller(self):
        payload = {"name": "Hardware"}
        event = _event(payload=payload)
        payload["name"] = "Changed"
        assert event.payload["name"] == "Hardware"

    def test_event_ids_unique(self):
        assert _event().event_id != _event().event_id


class TestToLogDict:
    def test_flattens_identifiers(self):
        category_id = uuid4()
        event = _event(payload={"category_id": category_id, "ids": [category_id]})
        data = event.to_log_dict()

        assert data["event_name"] == "item_category.created"
        assert data["tenant_id"] == str(event.tenant_id)
        assert data["actor_id"] == str(event.actor_id)
        assert data["occurred_at"] == OCCURRED.isoformat()
        assert data["payload"] == {
            "category_id": str(category_id),
            "ids": [str(category_id)],
        }

    def test_payload_is_plain_dict(self):
        data = _event(payload={"nested": {"a": 1}}).to_log_dict()
        assert type(data["payload"]) is dict
        assert type(data["payload"]["nested"]) is dict
