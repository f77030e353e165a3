"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Single-row lookups that
have to find exactly one row raise NoRowsError; permission problems raise
StorePermissionError; anything else the backend reports raises BackendError.
"""

from abc import ABC, abstractmethod
from typing import Any

from ticketing.domain import (
    CommissionContract,
    CommissionRange,
    CommissionRangeHistoryEntry,
    CommissionRangeId,
    ContractId,
    Event,
    EventId,
    Percentage,
)

# Column name -> value, already coerced to storage types ("yyyy-MM-dd" dates,
# ints, Decimals).
Row = dict[str, Any]


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_public_events(self) -> list[Event]:
        """Return approved events ordered by date ascending."""
        ...

    @abstractmethod
    def list_events_for_owner(self, owner_id: int) -> list[Event]:
        """Return an owner's events ordered by created_at descending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event with its batches, or None if not found."""
        ...

    @abstractmethod
    def insert_event(self, owner_id: int, row: Row) -> EventId:
        """Insert an event row and return its new ID."""
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, row: Row) -> EventId:
        """Update an event row. Raises NoRowsError if it does not exist."""
        ...

    @abstractmethod
    def replace_batches(self, event_id: EventId, rows: list[Row]) -> None:
        """Swap the event's whole batch set for ``rows`` in one transaction."""
        ...


class ContractStore(ABC):
    """Interface for commission contract persistence."""

    @abstractmethod
    def get_single_active(self) -> CommissionContract:
        """Return the only active contract.

        Raises NoRowsError when zero or more than one contract is active.
        """
        ...

    @abstractmethod
    def get_latest(self) -> CommissionContract:
        """Return the most recently updated contract, active or not."""
        ...

    @abstractmethod
    def list_contracts(self) -> list[CommissionContract]:
        """Return all contracts, newest first."""
        ...

    @abstractmethod
    def get_contract(self, contract_id: ContractId) -> CommissionContract | None:
        ...

    @abstractmethod
    def version_exists(self, version: str, exclude: ContractId | None = None) -> bool:
        ...

    @abstractmethod
    def insert_contract(
        self, version: str, title: str, content: str, created_by: int | None
    ) -> CommissionContract:
        ...

    @abstractmethod
    def update_contract(
        self, contract_id: ContractId, version: str, title: str, content: str
    ) -> CommissionContract:
        ...

    @abstractmethod
    def set_active(self, contract_id: ContractId, active: bool) -> CommissionContract:
        """Toggle a contract. Activating one deactivates every other."""
        ...


class CommissionRangeStore(ABC):
    """Interface for commission tier persistence."""

    @abstractmethod
    def list_ranges(self, active_only: bool = False) -> list[CommissionRange]:
        """Return ranges ordered by min_tickets ascending."""
        ...

    @abstractmethod
    def get_range(self, range_id: CommissionRangeId) -> CommissionRange | None:
        ...

    @abstractmethod
    def insert_range(
        self, min_tickets: int, max_tickets: int, percentage: Percentage, active: bool
    ) -> CommissionRange:
        ...

    @abstractmethod
    def update_range(
        self,
        range_id: CommissionRangeId,
        min_tickets: int,
        max_tickets: int,
        percentage: Percentage,
    ) -> CommissionRange:
        ...

    @abstractmethod
    def set_active(self, range_id: CommissionRangeId, active: bool) -> CommissionRange:
        ...

    @abstractmethod
    def record_history(self, commission_range: CommissionRange) -> None:
        """Append a snapshot of ``commission_range`` to the history table."""
        ...

    @abstractmethod
    def list_history(self) -> list[CommissionRangeHistoryEntry]:
        """Return history entries, newest first."""
        ...


class EventListCache(ABC):
    """Cached list views and the per-event submission lock."""

    @abstractmethod
    def invalidate_public(self) -> None:
        ...

    @abstractmethod
    def invalidate_manager(self, owner_id: int) -> None:
        ...

    @abstractmethod
    def acquire_submission_lock(self, key: str) -> bool:
        """Return False if another submission already holds ``key``."""
        ...

    @abstractmethod
    def release_submission_lock(self, key: str) -> None:
        ...
