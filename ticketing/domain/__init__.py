from ticketing.domain.models import (
    Address,
    CommissionContract,
    CommissionRange,
    CommissionRangeHistoryEntry,
    Event,
    EventDraft,
    EventStatus,
    TicketBatch,
)
from ticketing.domain.steps import Step
from ticketing.domain.value_objects import (
    CommissionRangeId,
    ContractId,
    EventId,
    Money,
    Percentage,
    PostalCode,
    Quantity,
)

__all__ = [
    "Address",
    "CommissionContract",
    "CommissionRange",
    "CommissionRangeHistoryEntry",
    "Event",
    "EventDraft",
    "EventStatus",
    "TicketBatch",
    "Step",
    "EventId",
    "ContractId",
    "CommissionRangeId",
    "Money",
    "Quantity",
    "Percentage",
    "PostalCode",
]
