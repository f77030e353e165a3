"""Saving the event wizard.

Rules that span several fields (contract acceptance, batch completeness)
are checked here, before anything is written. Each violation names the
wizard step the manager is sent back to.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from ticketing import conf
from ticketing.domain import Event, EventDraft, EventId, EventStatus
from ticketing.domain.errors import (
    BatchesRequiredError,
    ContractMissingError,
    ContractNotAcceptedError,
    DraftTitleRequiredError,
    EventNotFoundError,
    IncompleteBatchError,
    StoreError,
    SubmissionBlockedError,
    SubmissionFailedError,
    WizardError,
)
from ticketing.services.gateways import match_commission_range
from ticketing.services.wizard import SubmissionContext, WizardState
from ticketing.stores.interfaces import EventListCache, EventStore, Row

logger = logging.getLogger(__name__)

MANAGER_EVENT_LIST = "manager-event-list"
DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class SubmissionResult:
    event_id: EventId
    status: EventStatus
    redirect_to: str = MANAGER_EVENT_LIST


def check_publish_rules(draft: EventDraft, state: WizardState) -> None:
    """Raise the first WizardError a published event would break."""
    contract = state.contract
    if draft.is_paid:
        if contract is None:
            raise ContractMissingError()
        if not draft.accept_contract:
            raise ContractNotAcceptedError()
        if not draft.batches:
            raise BatchesRequiredError()
        for index, batch in enumerate(draft.batches):
            if not batch.is_complete():
                raise IncompleteBatchError(index, batch.name)
    elif contract is not None and not draft.accept_contract:
        raise ContractNotAcceptedError()

    # Acceptance of an older contract does not carry over.
    if contract is not None and draft.contract_id is not None and draft.contract_id != contract.id:
        raise ContractNotAcceptedError()


def check_draft_rules(draft: EventDraft) -> None:
    if not draft.title.strip():
        raise DraftTitleRequiredError()


def build_event_row(
    draft: EventDraft,
    state: WizardState,
    status: EventStatus,
    now: datetime,
    existing: Event | None = None,
) -> Row:
    contract = state.contract
    accepted = contract is not None and draft.accept_contract
    accepted_at = None
    if accepted:
        keep = (
            existing is not None
            and existing.contract_accepted_at is not None
            and existing.contract_version == contract.version
        )
        accepted_at = existing.contract_accepted_at if keep else now

    commission = None
    if draft.capacity is not None:
        commission = match_commission_range(state.ranges, draft.capacity.value)

    return {
        "title": draft.title,
        "description": draft.description,
        "date": draft.date.strftime(DATE_FORMAT) if draft.date else None,
        "time": draft.time,
        "location": draft.location,
        "address": draft.address,
        "image_url": draft.card_image_url,
        "exposure_card_image_url": draft.exposure_card_image_url,
        "banner_image_url": draft.banner_image_url,
        "min_age": int(draft.min_age),
        "category": draft.category,
        "capacity": draft.capacity.value if draft.capacity else 0,
        "duration": draft.duration,
        "is_paid": draft.is_paid,
        "ticket_price": (
            draft.ticket_price.amount if draft.is_paid and draft.ticket_price else None
        ),
        "status": status.value,
        "applied_percentage": commission.percentage.value if commission else None,
        "commission_range_id": str(commission.id) if commission else None,
        "contract_version": contract.version if accepted else None,
        "contract_accepted_at": accepted_at,
    }


def build_batch_rows(draft: EventDraft) -> list[Row]:
    return [
        {
            "name": b.name,
            "quantity": b.quantity.value,
            "price": b.price.amount,
            "sale_start_date": b.sale_starts_on.strftime(DATE_FORMAT),
            "sale_end_date": b.sale_ends_on.strftime(DATE_FORMAT),
        }
        for b in draft.batches
    ]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventSubmissionService:
    """Publishes or drafts an event from the wizard."""

    def __init__(
        self,
        events: EventStore,
        cache: EventListCache,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._events = events
        self._cache = cache
        self._clock = clock

    def submit(
        self, draft: EventDraft, context: SubmissionContext, event_id: EventId | None = None
    ) -> SubmissionResult:
        """Publish the draft: validate the cross-field rules, then save.

        Raises:
            SubmissionBlockedError: The contract has not loaded or a save is in flight.
            WizardError: A rule is broken; ``context.state.step`` is moved to it.
            EventNotFoundError: ``event_id`` is not one of the owner's events.
            StoreError: The store rejected a write. Nothing is rolled back
                except the batch replacement, which is atomic.
            SubmissionFailedError: Anything else went wrong.
        """
        return self._save(draft, context, event_id, publish=True)

    def save_draft(
        self, draft: EventDraft, context: SubmissionContext, event_id: EventId | None = None
    ) -> SubmissionResult:
        """Save whatever has been entered. Only the title is required."""
        return self._save(draft, context, event_id, publish=False)

    def _save(
        self,
        draft: EventDraft,
        context: SubmissionContext,
        event_id: EventId | None,
        publish: bool,
    ) -> SubmissionResult:
        state, notifier = context.state, context.notifier

        if not state.contract_loaded:
            blocked = SubmissionBlockedError("The platform contract is still loading.")
            notifier.error(blocked.message)
            raise blocked

        try:
            if publish:
                check_publish_rules(draft, state)
            else:
                check_draft_rules(draft)
        except WizardError as exc:
            notifier.error(exc.message)
            state.jump_to(exc.step)
            raise

        lock_key = f"events:submit:{context.owner_id}:{event_id or 'new'}"
        if state.is_saving or not self._cache.acquire_submission_lock(lock_key):
            blocked = SubmissionBlockedError("This event is already being saved.")
            notifier.error(blocked.message)
            raise blocked

        status = EventStatus(conf.INITIAL_MODERATION_STATUS) if publish else EventStatus.DRAFT
        state.is_saving = True
        notice_id = notifier.loading("Publishing event..." if publish else "Saving draft...")
        try:
            saved_id = self._persist(draft, context, event_id, status, with_batches=publish)
        except (StoreError, EventNotFoundError) as exc:
            logger.error("Failed to save event %s: %s", event_id or "(new)", exc.message)
            notifier.error(f"Failed to save event: {exc.message}")
            raise
        except Exception as exc:
            logger.exception("Unexpected error while saving event %s", event_id or "(new)")
            failed = SubmissionFailedError()
            notifier.error(failed.message)
            raise failed from exc
        finally:
            notifier.dismiss(notice_id)
            state.is_saving = False
            self._cache.release_submission_lock(lock_key)

        verb = "saved as draft" if not publish else ("updated" if event_id else "created")
        notifier.success(f'Event "{draft.title}" {verb}.')
        logger.info("Event %s %s by owner %s", saved_id, verb, context.owner_id)
        return SubmissionResult(event_id=saved_id, status=status)

    def _persist(
        self,
        draft: EventDraft,
        context: SubmissionContext,
        event_id: EventId | None,
        status: EventStatus,
        with_batches: bool,
    ) -> EventId:
        existing = None
        if event_id is not None:
            existing = self._events.get_event(event_id)
            if existing is None or existing.owner_id != context.owner_id:
                raise EventNotFoundError(str(event_id))

        row = build_event_row(draft, context.state, status, self._clock(), existing)
        if event_id is not None:
            saved_id = self._events.update_event(event_id, row)
        else:
            saved_id = self._events.insert_event(context.owner_id, row)

        if with_batches and draft.is_paid:
            self._events.replace_batches(saved_id, build_batch_rows(draft))

        self._cache.invalidate_manager(context.owner_id)
        self._cache.invalidate_public()
        return saved_id
