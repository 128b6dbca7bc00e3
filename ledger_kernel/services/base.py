"""
BaseService -- abstract base for all services.

Responsibility:
    Provides the common constructor and session-handling contract for every
    write-side service.  Concrete services receive a SQLAlchemy ``Session``
    and use ``session.flush()`` -- never ``session.commit()``.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.  Module services
    (``ledger_modules.*``) extend this class too.

Invariants enforced:
    - Transaction boundaries: services flush within the caller's transaction
      and never commit or rollback themselves.  The caller owns
      commit/rollback (``session_scope`` or ``transactional_dispatch``).
    - Events are only enqueued on the dispatcher; delivery happens after the
      caller commits.

Failure modes:
    - If a subclass commits, an enqueued event could be discarded for a
      change that was nevertheless persisted.
"""

from abc import ABC
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy.orm import Session

from ledger_kernel.db.base import Base
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.events import DomainEvent, EventName
from ledger_kernel.services.event_dispatcher import EventDispatcher

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for services.

    Contract:
        Accepts a SQLAlchemy ``Session`` from the caller and uses
        ``session.flush()`` to persist changes within the active transaction.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Does NOT provide query-only helpers -- those live in selectors.
    """

    def __init__(
        self,
        session: Session,
        dispatcher: EventDispatcher | None = None,
        clock: Clock | None = None,
    ):
        """
        Initialize the service.

        Args:
            session: SQLAlchemy session for database operations.
            dispatcher: Outbound event queue.  A private dispatcher with no
                subscribers is created when omitted.
            clock: Clock used to timestamp events.  Defaults to SystemClock.
        """
        self.session = session
        self.dispatcher = dispatcher if dispatcher is not None else EventDispatcher()
        self.clock = clock or SystemClock()

    def _emit(
        self,
        name: EventName,
        tenant_id: UUID,
        actor_id: UUID,
        payload: dict[str, Any],
    ) -> DomainEvent:
        event = DomainEvent(
            name=name,
            tenant_id=tenant_id,
            actor_id=actor_id,
            occurred_at=self.clock.now(),
            payload=payload,
        )
        self.dispatcher.dispatch(event)
        return event
