"""Wizard step resolution.

The contract step only exists when an active contract does; without one the
remaining steps shift down by one.
"""

from enum import Enum


class Step(Enum):
    CONTRACT = "contract"
    DETAILS = "details"
    MEDIA = "media"
    PRICING = "pricing"


_WITH_CONTRACT = (Step.CONTRACT, Step.DETAILS, Step.MEDIA, Step.PRICING)
_WITHOUT_CONTRACT = (Step.DETAILS, Step.MEDIA, Step.PRICING)

FIELD_STEPS: dict[str, Step] = {
    "accept_contract": Step.CONTRACT,
    "contract_id": Step.CONTRACT,
    "title": Step.DETAILS,
    "description": Step.DETAILS,
    "date": Step.DETAILS,
    "time": Step.DETAILS,
    "location": Step.DETAILS,
    "address": Step.DETAILS,
    "min_age": Step.DETAILS,
    "category": Step.DETAILS,
    "capacity": Step.DETAILS,
    "duration": Step.DETAILS,
    "card_image_url": Step.MEDIA,
    "exposure_card_image_url": Step.MEDIA,
    "banner_image_url": Step.MEDIA,
    "is_paid": Step.PRICING,
    "ticket_price": Step.PRICING,
    "batch_count": Step.PRICING,
    "batches": Step.PRICING,
}


def steps_for(has_contract: bool) -> tuple[Step, ...]:
    return _WITH_CONTRACT if has_contract else _WITHOUT_CONTRACT


def resolve(step: int, has_contract: bool) -> Step:
    """Map a 1-based step number to its named stage.

    Numbers outside the valid range fall back to the details step.
    """
    ordered = steps_for(has_contract)
    if 1 <= step <= len(ordered):
        return ordered[step - 1]
    return Step.DETAILS


def index_of(step: Step, has_contract: bool) -> int:
    """Inverse of resolve(). A contract step without a contract maps to details."""
    ordered = steps_for(has_contract)
    if step not in ordered:
        step = Step.DETAILS
    return ordered.index(step) + 1


def step_for_field(field_name: str) -> Step:
    """Return the step that renders a form field (``batches.0.price`` -> pricing)."""
    return FIELD_STEPS.get(field_name.split(".", 1)[0], Step.DETAILS)
