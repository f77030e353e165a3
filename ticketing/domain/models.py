"""Domain models representing wizard and persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass, field
import datetime as dt
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ticketing.domain.value_objects import (
    CommissionRangeId,
    ContractId,
    EventId,
    Money,
    Percentage,
    Quantity,
)


class EventStatus(Enum):
    """Moderation status of a persisted event."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class TicketBatch:
    """A named block of tickets with its own price and sale window.

    Every field but the name may be missing while the manager is still
    filling the wizard in.
    """

    name: str
    quantity: Quantity | None = None
    price: Money | None = None
    sale_starts_on: dt.date | None = None
    sale_ends_on: dt.date | None = None

    def is_complete(self) -> bool:
        return bool(self.name.strip()) and None not in (
            self.quantity,
            self.price,
            self.sale_starts_on,
            self.sale_ends_on,
        )

    def is_populated(self) -> bool:
        """True when the manager entered anything beyond the default name."""
        return any(
            value is not None
            for value in (self.quantity, self.price, self.sale_starts_on, self.sale_ends_on)
        )


@dataclass(frozen=True)
class EventDraft:
    """In-memory state of the event form."""

    title: str = ""
    description: str = ""
    date: dt.date | None = None
    time: str = ""
    location: str = ""
    address: str = ""
    card_image_url: str = ""
    exposure_card_image_url: str = ""
    banner_image_url: str = ""
    min_age: int = 0
    category: str = ""
    capacity: Quantity | None = None
    duration: str = ""
    is_paid: bool = False
    ticket_price: Money | None = None
    accept_contract: bool = False
    contract_id: ContractId | None = None
    batches: tuple[TicketBatch, ...] = ()


@dataclass(frozen=True)
class CommissionContract:
    """Commission/terms document shown to organizers."""

    id: ContractId
    version: str
    title: str
    content: str
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime


@dataclass(frozen=True)
class CommissionRange:
    """Tier mapping a ticket-count interval to a percentage fee."""

    id: CommissionRangeId
    min_tickets: int
    max_tickets: int
    percentage: Percentage
    active: bool

    def contains(self, tickets: int) -> bool:
        return self.min_tickets <= tickets <= self.max_tickets

    def overlaps(self, min_tickets: int, max_tickets: int) -> bool:
        return self.min_tickets <= max_tickets and min_tickets <= self.max_tickets


@dataclass(frozen=True)
class CommissionRangeHistoryEntry:
    """Snapshot of a commission range taken whenever it changes."""

    id: UUID
    commission_range_id: CommissionRangeId
    min_tickets: int
    max_tickets: int
    percentage: Percentage
    changed_at: dt.datetime


@dataclass(frozen=True)
class Event:
    """Domain representation of a persisted Event."""

    id: EventId
    owner_id: int
    title: str
    description: str
    date: dt.date | None
    time: str
    location: str
    address: str
    card_image_url: str
    exposure_card_image_url: str
    banner_image_url: str
    min_age: int
    category: str
    capacity: int
    duration: str
    is_paid: bool
    ticket_price: Decimal | None
    status: EventStatus
    applied_percentage: Decimal | None
    commission_range_id: CommissionRangeId | None
    contract_version: str | None
    contract_accepted_at: dt.datetime | None
    created_at: dt.datetime
    updated_at: dt.datetime
    batches: tuple[TicketBatch, ...] = field(default=())


@dataclass(frozen=True)
class Address:
    """Result of a postal-code lookup."""

    postal_code: str
    street: str
    neighborhood: str
    city: str
    state: str
