"""
EventDispatcher -- outbound domain event queue and subscriber routing.

Responsibility:
    Collects the events that services enqueue during a unit of work and
    delivers them to subscribers only after the unit of work commits.  On
    rollback the queued events are discarded, so no subscriber ever hears
    about a change that was not persisted.

Architecture position:
    Kernel > Services.  Imported by BaseService; imports only domain/ and
    logging_config.

Invariants enforced:
    - Enqueue order is delivery order.
    - A failing subscriber never blocks delivery to the remaining
      subscribers; the failure is logged with its traceback.
    - publish() and discard() both leave the queue empty.

Failure modes:
    - Exceptions raised inside ``transactional_dispatch`` propagate after
      rollback and discard.
"""

from collections import defaultdict
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from ledger_kernel.domain.events import DomainEvent, EventName
from ledger_kernel.logging_config import get_logger

logger = get_logger("services.event_dispatcher")

EventHandler = Callable[[DomainEvent], None]


@dataclass
class PublishResult:
    """Outcome of one ``publish()`` call."""

    published: int = 0
    deliveries: int = 0
    failures: list[dict[str, str]] = field(default_factory=list)


class EventDispatcher:
    """
    In-process outbox with subscriber registry.

    Handlers subscribe either to a single event name or to every event
    (``name=None``).
    """

    def __init__(self) -> None:
        self._pending: list[DomainEvent] = []
        self._handlers: dict[EventName | None, list[EventHandler]] = defaultdict(list)

    def subscribe(self, handler: EventHandler, name: EventName | str | None = None) -> None:
        """Register a handler for one event name, or for all events."""
        key = EventName(name) if name is not None else None
        self._handlers[key].append(handler)

    def unsubscribe(self, handler: EventHandler, name: EventName | str | None = None) -> None:
        key = EventName(name) if name is not None else None
        if handler in self._handlers.get(key, []):
            self._handlers[key].remove(handler)

    def dispatch(self, event: DomainEvent) -> None:
        """Enqueue an event for delivery after commit."""
        self._pending.append(event)
        logger.debug(
            "event_enqueued",
            extra={"event_name": event.name.value, "event_id": str(event.event_id)},
        )

    @property
    def pending(self) -> tuple[DomainEvent, ...]:
        return tuple(self._pending)

    def publish(self) -> PublishResult:
        """Deliver all queued events to their subscribers and clear the queue."""
        events, self._pending = self._pending, []
        result = PublishResult()

        for event in events:
            handlers = [*self._handlers.get(event.name, []), *self._handlers.get(None, [])]
            for handler in handlers:
                handler_name = getattr(handler, "__qualname__", repr(handler))
                try:
                    handler(event)
                    result.deliveries += 1
                except Exception as exc:
                    result.failures.append(
                        {
                            "event_id": str(event.event_id),
                            "handler": handler_name,
                            "error_type": type(exc).__name__,
                        }
                    )
                    logger.exception(
                        "event_subscriber_failed",
                        extra={
                            "event_name": event.name.value,
                            "event_id": str(event.event_id),
                            "handler": handler_name,
                        },
                    )
            result.published += 1

        if events:
            logger.info(
                "events_published",
                extra={
                    "published": result.published,
                    "deliveries": result.deliveries,
                    "failed": len(result.failures),
                },
            )
        return result

    def discard(self) -> int:
        """Drop all queued events without delivering them."""
        count = len(self._pending)
        self._pending.clear()
        if count:
            logger.info("events_discarded", extra={"discarded": count})
        return count


class AuditLogSubscriber:
    """Writes every delivered event to the structured log."""

    def __init__(self, logger_name: str = "audit.events"):
        self._logger = get_logger(logger_name)

    def __call__(self, event: DomainEvent) -> None:
        self._logger.info("domain_event", extra=event.to_log_dict())


@contextmanager
def transactional_dispatch(
    session: Session,
    dispatcher: EventDispatcher,
) -> Iterator[Session]:
    """
    Commit the session and publish queued events, or roll back and discard.

    Usage:
        with transactional_dispatch(session, dispatcher):
            service.create_category(tenant_id, data, actor_id)
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        dispatcher.discard()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    dispatcher.publish()
