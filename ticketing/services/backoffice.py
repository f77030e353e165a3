"""Admin operations on contracts and commission tiers."""

import logging

from ticketing.domain import (
    CommissionContract,
    CommissionRange,
    CommissionRangeHistoryEntry,
    CommissionRangeId,
    ContractId,
    Percentage,
)
from ticketing.domain.errors import (
    CommissionRangeNotFoundError,
    CommissionRangeOverlapError,
    ContractNotFoundError,
    ContractVersionExistsError,
    IncompleteContractError,
    InvalidCommissionRangeError,
)
from ticketing.stores.interfaces import CommissionRangeStore, ContractStore

logger = logging.getLogger(__name__)


def _parse_id(cls, value: str, not_found):
    try:
        return cls.from_string(value)
    except ValueError as exc:
        raise not_found(value) from exc


class ContractAdminService:
    def __init__(self, store: ContractStore) -> None:
        self._store = store

    def list_contracts(self) -> list[CommissionContract]:
        return self._store.list_contracts()

    def create_contract(
        self, version: str, title: str, content: str, created_by: int | None
    ) -> CommissionContract:
        version, title = version.strip(), title.strip()
        if not version or not title or not content.strip():
            raise IncompleteContractError()
        if self._store.version_exists(version):
            raise ContractVersionExistsError(version)
        contract = self._store.insert_contract(version, title, content, created_by)
        logger.info("Contract %s created (version %s)", contract.id, version)
        return contract

    def update_contract(
        self, contract_id: str, version: str, title: str, content: str
    ) -> CommissionContract:
        cid = self._get(contract_id).id
        version, title = version.strip(), title.strip()
        if not version or not title or not content.strip():
            raise IncompleteContractError()
        if self._store.version_exists(version, exclude=cid):
            raise ContractVersionExistsError(version)
        return self._store.update_contract(cid, version, title, content)

    def set_active(self, contract_id: str, active: bool) -> CommissionContract:
        """Activating a contract deactivates whichever one was active before."""
        contract = self._store.set_active(self._get(contract_id).id, active)
        logger.info("Contract %s %s", contract.id, "activated" if active else "deactivated")
        return contract

    def _get(self, contract_id: str) -> CommissionContract:
        cid = _parse_id(ContractId, contract_id, ContractNotFoundError)
        contract = self._store.get_contract(cid)
        if contract is None:
            raise ContractNotFoundError(contract_id)
        return contract


class CommissionRangeService:
    """Commission tiers. Every change leaves a history snapshot."""

    def __init__(self, store: CommissionRangeStore) -> None:
        self._store = store

    def list_ranges(self) -> list[CommissionRange]:
        return self._store.list_ranges()

    def list_history(self) -> list[CommissionRangeHistoryEntry]:
        return self._store.list_history()

    def create_range(
        self, min_tickets: int, max_tickets: int, percentage: str | Percentage
    ) -> CommissionRange:
        rate = self._validate(min_tickets, max_tickets, percentage, exclude=None)
        created = self._store.insert_range(min_tickets, max_tickets, rate, active=True)
        self._store.record_history(created)
        return created

    def update_range(
        self, range_id: str, min_tickets: int, max_tickets: int, percentage: str | Percentage
    ) -> CommissionRange:
        current = self._get(range_id)
        rate = self._validate(min_tickets, max_tickets, percentage, exclude=current.id)
        self._store.record_history(current)
        return self._store.update_range(current.id, min_tickets, max_tickets, rate)

    def toggle_active(self, range_id: str) -> CommissionRange:
        current = self._get(range_id)
        if current.active:
            self._store.record_history(current)
        return self._store.set_active(current.id, not current.active)

    def _validate(
        self,
        min_tickets: int,
        max_tickets: int,
        percentage: str | Percentage,
        exclude: CommissionRangeId | None,
    ) -> Percentage:
        if min_tickets < 1 or max_tickets < 1:
            raise InvalidCommissionRangeError("Ticket bounds must be 1 or more.")
        if min_tickets > max_tickets:
            raise InvalidCommissionRangeError("The minimum cannot be greater than the maximum.")
        if isinstance(percentage, Percentage):
            rate = percentage
        else:
            try:
                rate = Percentage.parse(percentage)
            except ValueError as exc:
                raise InvalidCommissionRangeError(
                    "The commission rate must be between 0.01% and 100%."
                ) from exc
        for existing in self._store.list_ranges():
            if existing.id != exclude and existing.overlaps(min_tickets, max_tickets):
                raise CommissionRangeOverlapError()
        return rate

    def _get(self, range_id: str) -> CommissionRange:
        rid = _parse_id(CommissionRangeId, range_id, CommissionRangeNotFoundError)
        found = self._store.get_range(rid)
        if found is None:
            raise CommissionRangeNotFoundError(range_id)
        return found
