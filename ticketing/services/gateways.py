"""Read-only gateways for the active contract and commission ranges.

Both are loaded when the wizard opens and feed the contract step and the
submission rules.
"""

import logging

from ticketing import conf
from ticketing.domain import CommissionContract, CommissionRange
from ticketing.domain.errors import NoRowsError, StoreError, StorePermissionError
from ticketing.stores.interfaces import CommissionRangeStore, ContractStore

logger = logging.getLogger(__name__)

CONTRACT_PERMISSION_MESSAGE = "You do not have permission to read the platform contract."
NO_RANGES_HTML = "<p>No commission ranges configured.</p>"


class CommissionGateway:
    def __init__(self, contracts: ContractStore, ranges: CommissionRangeStore) -> None:
        self._contracts = contracts
        self._ranges = ranges

    def fetch_active_contract(self) -> CommissionContract | None:
        """Return the contract in force, or None when there is none.

        Tries the single active row first. When that misses (none or several
        active), falls back to the most recently updated contract.

        Raises:
            StorePermissionError: With a user-facing message when access is denied.
            StoreError: For any other backend failure.
        """
        try:
            return self._contracts.get_single_active()
        except NoRowsError:
            pass
        except StorePermissionError as exc:
            logger.error("Permission denied reading active contract: %s", exc.message)
            raise StorePermissionError(CONTRACT_PERMISSION_MESSAGE) from exc

        try:
            contract = self._contracts.get_latest()
        except NoRowsError:
            return None
        except StorePermissionError as exc:
            logger.error("Permission denied reading latest contract: %s", exc.message)
            raise StorePermissionError(CONTRACT_PERMISSION_MESSAGE) from exc

        logger.warning(
            "No single active contract found, using most recent contract %s (version %s)",
            contract.id,
            contract.version,
        )
        return contract

    def fetch_active_commission_ranges(self) -> list[CommissionRange]:
        """Active ranges ascending by min_tickets; [] if they cannot be read."""
        try:
            return self._ranges.list_ranges(active_only=True)
        except StoreError as exc:
            logger.error("Failed to load commission ranges: %s", exc.message)
            return []


def match_commission_range(
    ranges: list[CommissionRange], tickets: int
) -> CommissionRange | None:
    return next((r for r in ranges if r.contains(tickets)), None)


def commission_table_html(ranges: list[CommissionRange]) -> str:
    if not ranges:
        return NO_RANGES_HTML
    rows = "".join(
        f"<tr><td>{r.min_tickets} - {r.max_tickets}</td><td>{r.percentage.format()}%</td></tr>"
        for r in ranges
    )
    return (
        "<table><thead><tr><th>Tickets</th><th>Commission</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
    )


def render_contract(contract: CommissionContract, ranges: list[CommissionRange]) -> str:
    """Contract HTML with the commission table substituted at the placeholder."""
    return contract.content.replace(
        conf.CONTRACT_TABLE_PLACEHOLDER, commission_table_html(ranges)
    )
