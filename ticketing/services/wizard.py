"""Request-scoped wizard state and the operations that drive it."""

from dataclasses import dataclass, field, replace

from ticketing.domain import (
    CommissionContract,
    CommissionRange,
    Event,
    EventDraft,
    Money,
    Quantity,
    Step,
)
from ticketing.domain import steps
from ticketing.domain.batches import populated_beyond, sync_batches
from ticketing.domain.errors import StoreError
from ticketing.services.gateways import CommissionGateway
from ticketing.services.notifications import NotificationPort


@dataclass
class WizardState:
    """Everything the wizard knows besides the form values themselves.

    HTTP handlers rebuild the state per request, so ``is_saving`` only guards
    callers that reuse one state object; across requests the submission lock
    in the list cache is what refuses a second save.
    """

    step: int = 1
    contract: CommissionContract | None = None
    ranges: list[CommissionRange] = field(default_factory=list)
    contract_loaded: bool = False
    is_saving: bool = False

    @property
    def has_contract(self) -> bool:
        return self.contract is not None

    @property
    def current_step(self) -> Step:
        return steps.resolve(self.step, self.has_contract)

    @property
    def step_names(self) -> list[str]:
        return [s.value for s in steps.steps_for(self.has_contract)]

    def jump_to(self, step: Step) -> None:
        self.step = steps.index_of(step, self.has_contract)


@dataclass
class SubmissionContext:
    owner_id: int
    notifier: NotificationPort
    state: WizardState


def load_wizard_state(
    gateway: CommissionGateway, notifier: NotificationPort, step: int = 1
) -> WizardState:
    """Load the active contract and commission ranges.

    A failed contract read leaves ``contract_loaded`` False, which keeps
    submission blocked.
    """
    state = WizardState(step=step)
    try:
        state.contract = gateway.fetch_active_contract()
        state.contract_loaded = True
    except StoreError as exc:
        notifier.error(exc.message)
    state.ranges = gateway.fetch_active_commission_ranges()
    return state


def draft_from_event(event: Event) -> EventDraft:
    """Form values for editing a persisted event."""
    return EventDraft(
        title=event.title,
        description=event.description,
        date=event.date,
        time=event.time,
        location=event.location,
        address=event.address,
        card_image_url=event.card_image_url,
        exposure_card_image_url=event.exposure_card_image_url,
        banner_image_url=event.banner_image_url,
        min_age=event.min_age,
        category=event.category,
        capacity=Quantity(event.capacity) if event.capacity > 0 else None,
        duration=event.duration,
        is_paid=event.is_paid,
        ticket_price=Money(event.ticket_price) if event.ticket_price is not None else None,
        accept_contract=event.contract_accepted_at is not None,
        batches=event.batches,
    )


def change_batch_count(
    draft: EventDraft, count: int, notifier: NotificationPort
) -> EventDraft:
    """Apply a new "number of batches" value; free events are left alone."""
    if not draft.is_paid:
        return draft
    dropped = populated_beyond(draft.batches, count)
    if dropped:
        names = ", ".join(draft.batches[i].name for i in dropped)
        notifier.warning(f"Batches removed with their data: {names}.")
    return replace(draft, batches=sync_batches(draft.batches, count))
