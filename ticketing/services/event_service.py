"""Event service - catalog and manager read operations.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from datetime import date
from decimal import Decimal

from ticketing.domain import Event, EventId, EventStatus, TicketBatch
from ticketing.domain.errors import EventNotFoundError, InvalidEventIdError
from ticketing.stores.interfaces import EventStore


def parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except ValueError as exc:
        raise InvalidEventIdError() from exc


def batches_on_sale(event: Event, today: date) -> list[TicketBatch]:
    """Batches whose sale window contains ``today``."""
    return [
        b
        for b in event.batches
        if b.sale_starts_on is not None
        and b.sale_ends_on is not None
        and b.sale_starts_on <= today <= b.sale_ends_on
    ]


def starting_price(event: Event) -> Decimal | None:
    """Lowest price a customer can pay, or None for free events."""
    if not event.is_paid:
        return None
    prices = [b.price.amount for b in event.batches if b.price is not None]
    if prices:
        return min(prices)
    return event.ticket_price


class EventService:
    """Service for event catalog operations."""

    def __init__(self, store: EventStore) -> None:
        self._store = store

    def list_public_events(self) -> list[Event]:
        """Return approved events."""
        return self._store.list_public_events()

    def get_public_event(self, event_id: str) -> Event:
        """Return an approved event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist or is not approved.
        """
        event = self._store.get_event(parse_event_id(event_id))
        if event is None or event.status is not EventStatus.APPROVED:
            raise EventNotFoundError(event_id)
        return event

    def list_manager_events(self, owner_id: int) -> list[Event]:
        return self._store.list_events_for_owner(owner_id)

    def get_owned_event(self, event_id: str, owner_id: int) -> Event:
        """Return one of the manager's own events.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist or belongs to someone else.
        """
        event = self._store.get_event(parse_event_id(event_id))
        if event is None or event.owner_id != owner_id:
            raise EventNotFoundError(event_id)
        return event
