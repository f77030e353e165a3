from ticketing.handlers.views import (
    AddressLookupView,
    BatchSyncView,
    CommissionRangeDetailView,
    CommissionRangeHistoryView,
    CommissionRangeListView,
    CommissionRangeToggleView,
    ContractActivationView,
    ContractDetailView,
    ContractListView,
    EventDetailView,
    EventListView,
    ManagerEventDraftView,
    ManagerEventListView,
    ManagerEventView,
    WizardStepView,
    WizardView,
)

__all__ = [
    "AddressLookupView",
    "BatchSyncView",
    "CommissionRangeDetailView",
    "CommissionRangeHistoryView",
    "CommissionRangeListView",
    "CommissionRangeToggleView",
    "ContractActivationView",
    "ContractDetailView",
    "ContractListView",
    "EventDetailView",
    "EventListView",
    "ManagerEventDraftView",
    "ManagerEventListView",
    "ManagerEventView",
    "WizardStepView",
    "WizardView",
]
