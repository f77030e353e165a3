from django.urls import path

from ticketing.handlers import (
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

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("manager/events", ManagerEventListView.as_view(), name="manager-event-list"),
    path("manager/events/<str:event_id>", ManagerEventView.as_view(), name="manager-event"),
    path(
        "manager/events/<str:event_id>/draft",
        ManagerEventDraftView.as_view(),
        name="manager-event-draft",
    ),
    path("manager/wizard", WizardView.as_view(), name="manager-wizard"),
    path("manager/wizard/step", WizardStepView.as_view(), name="manager-wizard-step"),
    path("manager/wizard/batches", BatchSyncView.as_view(), name="manager-wizard-batches"),
    path("address/<str:postal_code>", AddressLookupView.as_view(), name="address-lookup"),
    path("admin/contracts", ContractListView.as_view(), name="contract-list"),
    path("admin/contracts/<str:contract_id>", ContractDetailView.as_view(), name="contract-detail"),
    path(
        "admin/contracts/<str:contract_id>/activate",
        ContractActivationView.as_view(active=True),
        name="contract-activate",
    ),
    path(
        "admin/contracts/<str:contract_id>/deactivate",
        ContractActivationView.as_view(active=False),
        name="contract-deactivate",
    ),
    path(
        "admin/commission-ranges",
        CommissionRangeListView.as_view(),
        name="commission-range-list",
    ),
    path(
        "admin/commission-ranges/history",
        CommissionRangeHistoryView.as_view(),
        name="commission-range-history",
    ),
    path(
        "admin/commission-ranges/<str:range_id>",
        CommissionRangeDetailView.as_view(),
        name="commission-range-detail",
    ),
    path(
        "admin/commission-ranges/<str:range_id>/toggle",
        CommissionRangeToggleView.as_view(),
        name="commission-range-toggle",
    ),
]
