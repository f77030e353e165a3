"""Domain error codes for the ticketing module."""

from dataclasses import dataclass
from enum import Enum

from ticketing.domain.steps import Step, step_for_field


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    SUBMISSION_BLOCKED = "SUBMISSION_BLOCKED"
    CONTRACT_MISSING = "CONTRACT_MISSING"
    CONTRACT_NOT_ACCEPTED = "CONTRACT_NOT_ACCEPTED"
    BATCHES_REQUIRED = "BATCHES_REQUIRED"
    BATCH_INCOMPLETE = "BATCH_INCOMPLETE"
    DRAFT_TITLE_REQUIRED = "DRAFT_TITLE_REQUIRED"
    SUBMISSION_FAILED = "SUBMISSION_FAILED"
    CONTRACT_NOT_FOUND = "CONTRACT_NOT_FOUND"
    CONTRACT_VERSION_EXISTS = "CONTRACT_VERSION_EXISTS"
    CONTRACT_INCOMPLETE = "CONTRACT_INCOMPLETE"
    RANGE_NOT_FOUND = "RANGE_NOT_FOUND"
    RANGE_INVALID = "RANGE_INVALID"
    RANGE_OVERLAP = "RANGE_OVERLAP"
    INVALID_POSTAL_CODE = "INVALID_POSTAL_CODE"
    ADDRESS_NOT_FOUND = "ADDRESS_NOT_FOUND"
    ADDRESS_LOOKUP_FAILED = "ADDRESS_LOOKUP_FAILED"
    NO_ROWS = "NO_ROWS"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    BACKEND_ERROR = "BACKEND_ERROR"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


# Wizard rule violations. Each one names the step the form must jump to.


class WizardError(DomainError):
    """Raised when a submission breaks a rule; ``step`` is where to fix it."""

    def __init__(self, code: ErrorCode, message: str, step: Step) -> None:
        super().__init__(code=code, message=message)
        self.step = step


class ValidationFailedError(WizardError):
    """Raised when one or more form fields fail validation."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        field_name, messages = next(iter(errors.items()))
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message=messages[0],
            step=step_for_field(field_name),
        )
        self.errors = errors
        self.field = field_name


class SubmissionBlockedError(WizardError):
    """Raised while the contract is still loading or a save is in flight."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            code=ErrorCode.SUBMISSION_BLOCKED,
            message=reason,
            step=Step.DETAILS,
        )


class ContractMissingError(WizardError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CONTRACT_MISSING,
            message="No active contract found. Paid events cannot be published until one is available.",
            step=Step.PRICING,
        )


class ContractNotAcceptedError(WizardError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CONTRACT_NOT_ACCEPTED,
            message="You must accept the contract terms to continue.",
            step=Step.CONTRACT,
        )


class BatchesRequiredError(WizardError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.BATCHES_REQUIRED,
            message="Paid events need at least one ticket batch.",
            step=Step.PRICING,
        )


class IncompleteBatchError(WizardError):
    def __init__(self, index: int, name: str) -> None:
        super().__init__(
            code=ErrorCode.BATCH_INCOMPLETE,
            message=f"Fill in every field of batch {name or index + 1}.",
            step=Step.PRICING,
        )
        self.index = index


class DraftTitleRequiredError(WizardError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DRAFT_TITLE_REQUIRED,
            message="A title is required to save a draft.",
            step=Step.DETAILS,
        )


class SubmissionFailedError(DomainError):
    """Raised when saving fails for a reason other than a store error."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SUBMISSION_FAILED,
            message="Failed to save event: unexpected error.",
        )


# Back office


class ContractNotFoundError(DomainError):
    def __init__(self, contract_id: str) -> None:
        super().__init__(code=ErrorCode.CONTRACT_NOT_FOUND, message="Contract not found")
        self.contract_id = contract_id


class ContractVersionExistsError(DomainError):
    def __init__(self, version: str) -> None:
        super().__init__(
            code=ErrorCode.CONTRACT_VERSION_EXISTS,
            message="A contract with this version already exists.",
        )
        self.version = version


class IncompleteContractError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CONTRACT_INCOMPLETE,
            message="Version, title and content are all required.",
        )


class CommissionRangeNotFoundError(DomainError):
    def __init__(self, range_id: str) -> None:
        super().__init__(code=ErrorCode.RANGE_NOT_FOUND, message="Commission range not found")
        self.range_id = range_id


class InvalidCommissionRangeError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.RANGE_INVALID, message=message)


class CommissionRangeOverlapError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.RANGE_OVERLAP,
            message="This range overlaps an existing range.",
        )


# Address lookup


class InvalidPostalCodeError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_POSTAL_CODE,
            message="Invalid postal code (8 digits).",
        )


class AddressNotFoundError(DomainError):
    def __init__(self, postal_code: str) -> None:
        super().__init__(code=ErrorCode.ADDRESS_NOT_FOUND, message="Postal code not found.")
        self.postal_code = postal_code


class AddressLookupError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ADDRESS_LOOKUP_FAILED,
            message="Address lookup service is unavailable.",
        )


# Persistence gateway


class StoreError(DomainError):
    """Raised by stores; ``message`` is the backend's own message."""


class NoRowsError(StoreError):
    def __init__(self, message: str = "No rows found") -> None:
        super().__init__(code=ErrorCode.NO_ROWS, message=message)


class StorePermissionError(StoreError):
    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(code=ErrorCode.PERMISSION_DENIED, message=message)


class BackendError(StoreError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.BACKEND_ERROR, message=message)
