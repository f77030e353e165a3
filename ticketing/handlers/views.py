"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging
from datetime import date

from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView, exception_handler

from ticketing import conf
from ticketing.domain import EventDraft, steps
from ticketing.domain.errors import (
    DomainError,
    ErrorCode,
    ValidationFailedError,
    WizardError,
)
from ticketing.handlers.permissions import IsAdmin, IsManager
from ticketing.handlers.serializers import (
    AddressSerializer,
    BatchRowSerializer,
    BatchSyncSerializer,
    CommissionRangeHistorySerializer,
    CommissionRangeInputSerializer,
    CommissionRangeSerializer,
    ContractInputSerializer,
    ContractSerializer,
    DraftSaveSerializer,
    EventDetailSerializer,
    EventDraftSerializer,
    EventSerializer,
    ManagerEventSerializer,
    StepQuerySerializer,
    batch_from_attrs,
    flatten_errors,
)
from ticketing.services.address import AddressLookupService
from ticketing.services.backoffice import CommissionRangeService, ContractAdminService
from ticketing.services.event_service import EventService, parse_event_id
from ticketing.services.gateways import CommissionGateway, render_contract
from ticketing.services.notifications import CollectingNotifier
from ticketing.services.submission import EventSubmissionService
from ticketing.services.wizard import (
    SubmissionContext,
    WizardState,
    change_batch_count,
    draft_from_event,
    load_wizard_state,
)
from ticketing.stores.django_cache import (
    PUBLIC_EVENTS_KEY,
    DjangoEventListCache,
    manager_events_key,
    public_event_key,
)
from ticketing.stores.django_store import (
    DjangoCommissionRangeStore,
    DjangoContractStore,
    DjangoEventStore,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.SUBMISSION_BLOCKED: status.HTTP_409_CONFLICT,
    ErrorCode.SUBMISSION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.CONTRACT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONTRACT_VERSION_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.RANGE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.RANGE_OVERLAP: status.HTTP_409_CONFLICT,
    ErrorCode.ADDRESS_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ADDRESS_LOOKUP_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.NO_ROWS: status.HTTP_404_NOT_FOUND,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.BACKEND_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def error_response(
    exc: DomainError,
    notifier: CollectingNotifier | None = None,
    state: WizardState | None = None,
) -> Response:
    """Map a domain error to its HTTP status; anything unlisted is a 400."""
    body: dict = {"error": {"code": exc.code.value, "message": exc.message}}
    if isinstance(exc, ValidationFailedError):
        body["errors"] = exc.errors
    if state is not None:
        body["step"] = _step_body(state)
    if notifier is not None:
        body["notices"] = notifier.as_list()
    http_status = ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)
    if http_status >= 500:
        logger.warning("Request failed with %s: %s", exc.code.value, exc.message)
    return Response(body, status=http_status)


def domain_exception_handler(exc, context) -> Response | None:
    """DRF exception handler: domain errors that escape a view get the same shape."""
    if isinstance(exc, DomainError):
        return error_response(exc)
    return exception_handler(exc, context)


def _step_body(state: WizardState) -> dict:
    return {"index": state.step, "name": state.current_step.value}


def _is_draft(request: Request) -> bool:
    return request.query_params.get("draft", "").lower() in ("1", "true", "yes")


def _requested_step(request: Request) -> int:
    try:
        return int(request.query_params.get("step", 1))
    except (TypeError, ValueError):
        return 1


def _gateway() -> CommissionGateway:
    return CommissionGateway(DjangoContractStore(), DjangoCommissionRangeStore())


# Public catalog


class EventListView(APIView):
    """Handler for GET /api/events"""

    def get(self, request: Request) -> Response:
        data = cache.get(PUBLIC_EVENTS_KEY)
        if data is None:
            try:
                events = EventService(DjangoEventStore()).list_public_events()
            except DomainError as exc:
                return error_response(exc)
            data = EventSerializer(events, many=True).data
            cache.set(PUBLIC_EVENTS_KEY, data, conf.cache_timeout())
        return Response(data)


class EventDetailView(APIView):
    """Handler for GET /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            canonical_id = str(parse_event_id(event_id))
        except DomainError as exc:
            return error_response(exc)
        key = public_event_key(canonical_id)
        data = cache.get(key)
        if data is None:
            try:
                event = EventService(DjangoEventStore()).get_public_event(canonical_id)
            except DomainError as exc:
                return error_response(exc)
            data = EventDetailSerializer(event, context={"today": date.today()}).data
            cache.set(key, data, conf.cache_timeout())
        return Response(data)


# Manager back office


class ManagerEventListView(APIView):
    """Handler for GET/POST /api/manager/events"""

    permission_classes = [IsManager]

    def get(self, request: Request) -> Response:
        key = manager_events_key(request.user.id)
        data = cache.get(key)
        if data is None:
            try:
                events = EventService(DjangoEventStore()).list_manager_events(request.user.id)
            except DomainError as exc:
                return error_response(exc)
            data = ManagerEventSerializer(events, many=True).data
            cache.set(key, data, conf.cache_timeout())
        return Response(data)

    def post(self, request: Request) -> Response:
        return _save_event(request, event_id=None)


class ManagerEventView(APIView):
    """Handler for PUT /api/manager/events/{event_id}"""

    permission_classes = [IsManager]

    def put(self, request: Request, event_id: str) -> Response:
        return _save_event(request, event_id=event_id)


def _save_event(request: Request, event_id: str | None) -> Response:
    notifier = CollectingNotifier()
    state = load_wizard_state(_gateway(), notifier, step=_requested_step(request))
    draft_mode = _is_draft(request)

    try:
        target = parse_event_id(event_id) if event_id is not None else None
    except DomainError as exc:
        return error_response(exc, notifier)

    serializer_class = DraftSaveSerializer if draft_mode else EventDraftSerializer
    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        exc = ValidationFailedError(flatten_errors(serializer.errors))
        notifier.error(exc.message)
        state.jump_to(exc.step)
        return error_response(exc, notifier, state)

    draft = serializer.to_draft()
    context = SubmissionContext(owner_id=request.user.id, notifier=notifier, state=state)
    service = EventSubmissionService(DjangoEventStore(), DjangoEventListCache())
    try:
        if draft_mode:
            result = service.save_draft(draft, context, target)
        else:
            result = service.submit(draft, context, target)
    except WizardError as exc:
        return error_response(exc, notifier, state)
    except DomainError as exc:
        return error_response(exc, notifier)

    return Response(
        {
            "id": str(result.event_id),
            "status": result.status.value,
            "redirect": reverse(result.redirect_to),
            "notices": notifier.as_list(),
        },
        status=status.HTTP_201_CREATED if target is None else status.HTTP_200_OK,
    )


class ManagerEventDraftView(APIView):
    """Handler for GET /api/manager/events/{event_id}/draft

    Returns the form values for editing one of the manager's events.
    """

    permission_classes = [IsManager]

    def get(self, request: Request, event_id: str) -> Response:
        try:
            event = EventService(DjangoEventStore()).get_owned_event(event_id, request.user.id)
        except DomainError as exc:
            return error_response(exc)
        data = EventDraftSerializer(draft_from_event(event)).data
        data["contract_version"] = event.contract_version
        return Response(data)


class WizardView(APIView):
    """Handler for GET /api/manager/wizard

    Loads the active contract and commission ranges that open the wizard.
    """

    permission_classes = [IsManager]

    def get(self, request: Request) -> Response:
        notifier = CollectingNotifier()
        state = load_wizard_state(_gateway(), notifier, step=_requested_step(request))
        contract = None
        if state.contract is not None:
            contract = ContractSerializer(state.contract).data
            contract["rendered_content"] = render_contract(state.contract, state.ranges)
        return Response(
            {
                "contract": contract,
                "contract_loaded": state.contract_loaded,
                "commission_ranges": CommissionRangeSerializer(state.ranges, many=True).data,
                "steps": state.step_names,
                "step": _step_body(state),
                "notices": notifier.as_list(),
            }
        )


class WizardStepView(APIView):
    """Handler for GET /api/manager/wizard/step?step=N&has_contract=B"""

    permission_classes = [IsManager]

    def get(self, request: Request) -> Response:
        serializer = StepQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        has_contract = serializer.validated_data["has_contract"]
        step = steps.resolve(serializer.validated_data["step"], has_contract)
        return Response(
            {
                "name": step.value,
                "index": steps.index_of(step, has_contract),
                "steps": [s.value for s in steps.steps_for(has_contract)],
            }
        )


class BatchSyncView(APIView):
    """Handler for POST /api/manager/wizard/batches

    Resizes the batch list to ``count``. Removing rows that hold data is
    allowed but reported as a warning notice.
    """

    permission_classes = [IsManager]

    def post(self, request: Request) -> Response:
        serializer = BatchSyncSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attrs = serializer.validated_data

        notifier = CollectingNotifier()
        current = EventDraft(
            is_paid=attrs["is_paid"],
            batches=tuple(batch_from_attrs(b) for b in attrs.get("batches", [])),
        )
        resized = change_batch_count(current, attrs["count"], notifier)
        return Response(
            {
                "batches": BatchRowSerializer(resized.batches, many=True).data,
                "notices": notifier.as_list(),
            }
        )


class AddressLookupView(APIView):
    """Handler for GET /api/address/{postal_code}"""

    permission_classes = [IsManager]

    def get(self, request: Request, postal_code: str) -> Response:
        try:
            address = AddressLookupService().lookup(postal_code)
        except DomainError as exc:
            return error_response(exc)
        return Response(AddressSerializer(address).data)


# Admin: contracts and commission ranges


class ContractListView(APIView):
    """Handler for GET/POST /api/admin/contracts"""

    permission_classes = [IsAdmin]

    def get(self, request: Request) -> Response:
        contracts = ContractAdminService(DjangoContractStore()).list_contracts()
        return Response(ContractSerializer(contracts, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = ContractInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            contract = ContractAdminService(DjangoContractStore()).create_contract(
                created_by=request.user.id, **serializer.validated_data
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(ContractSerializer(contract).data, status=status.HTTP_201_CREATED)


class ContractDetailView(APIView):
    """Handler for PUT /api/admin/contracts/{contract_id}"""

    permission_classes = [IsAdmin]

    def put(self, request: Request, contract_id: str) -> Response:
        serializer = ContractInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            contract = ContractAdminService(DjangoContractStore()).update_contract(
                contract_id, **serializer.validated_data
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(ContractSerializer(contract).data)


class ContractActivationView(APIView):
    """Handler for POST /api/admin/contracts/{contract_id}/(activate|deactivate)"""

    permission_classes = [IsAdmin]
    active = True

    def post(self, request: Request, contract_id: str) -> Response:
        try:
            contract = ContractAdminService(DjangoContractStore()).set_active(
                contract_id, self.active
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(ContractSerializer(contract).data)


class CommissionRangeListView(APIView):
    """Handler for GET/POST /api/admin/commission-ranges"""

    permission_classes = [IsAdmin]

    def get(self, request: Request) -> Response:
        ranges = CommissionRangeService(DjangoCommissionRangeStore()).list_ranges()
        return Response(CommissionRangeSerializer(ranges, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = CommissionRangeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            created = CommissionRangeService(DjangoCommissionRangeStore()).create_range(
                **serializer.validated_data
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(CommissionRangeSerializer(created).data, status=status.HTTP_201_CREATED)


class CommissionRangeDetailView(APIView):
    """Handler for PUT /api/admin/commission-ranges/{range_id}"""

    permission_classes = [IsAdmin]

    def put(self, request: Request, range_id: str) -> Response:
        serializer = CommissionRangeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            updated = CommissionRangeService(DjangoCommissionRangeStore()).update_range(
                range_id, **serializer.validated_data
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(CommissionRangeSerializer(updated).data)


class CommissionRangeToggleView(APIView):
    """Handler for POST /api/admin/commission-ranges/{range_id}/toggle"""

    permission_classes = [IsAdmin]

    def post(self, request: Request, range_id: str) -> Response:
        try:
            toggled = CommissionRangeService(DjangoCommissionRangeStore()).toggle_active(range_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(CommissionRangeSerializer(toggled).data)


class CommissionRangeHistoryView(APIView):
    """Handler for GET /api/admin/commission-ranges/history"""

    permission_classes = [IsAdmin]

    def get(self, request: Request) -> Response:
        history = CommissionRangeService(DjangoCommissionRangeStore()).list_history()
        return Response(CommissionRangeHistorySerializer(history, many=True).data)
