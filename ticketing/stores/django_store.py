"""Django ORM implementation of the stores.

Database errors are translated into StoreError subclasses so services never
see ORM exceptions.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date

from django.core.exceptions import PermissionDenied
from django.db import DatabaseError, transaction
from django.db.models import Prefetch

from ticketing import models
from ticketing.domain import (
    CommissionContract,
    CommissionRange,
    CommissionRangeHistoryEntry,
    CommissionRangeId,
    ContractId,
    Event,
    EventId,
    EventStatus,
    Money,
    Percentage,
    Quantity,
    TicketBatch,
)
from ticketing.domain.errors import BackendError, NoRowsError, StorePermissionError
from ticketing.stores.interfaces import (
    CommissionRangeStore,
    ContractStore,
    EventStore,
    Row,
)


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except PermissionDenied as exc:
        raise StorePermissionError(str(exc) or "Permission denied") from exc
    except DatabaseError as exc:
        raise BackendError(str(exc)) from exc


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _to_batch(row: models.EventBatch) -> TicketBatch:
    try:
        return TicketBatch(
            name=row.name,
            quantity=Quantity(row.quantity),
            price=Money(row.price),
            sale_starts_on=row.sale_start_date,
            sale_ends_on=row.sale_end_date,
        )
    except ValueError as exc:
        raise BackendError(f"Batch {row.pk} holds an invalid value: {exc}") from exc


def _to_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        owner_id=row.owner_id,
        title=row.title,
        description=row.description,
        date=row.date,
        time=row.time,
        location=row.location,
        address=row.address,
        card_image_url=row.image_url,
        exposure_card_image_url=row.exposure_card_image_url,
        banner_image_url=row.banner_image_url,
        min_age=row.min_age,
        category=row.category,
        capacity=row.capacity,
        duration=row.duration,
        is_paid=row.is_paid,
        ticket_price=row.ticket_price,
        status=EventStatus(row.status),
        applied_percentage=row.applied_percentage,
        commission_range_id=(
            CommissionRangeId(row.commission_range_id) if row.commission_range_id else None
        ),
        contract_version=row.contract_version,
        contract_accepted_at=row.contract_accepted_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
        batches=tuple(_to_batch(b) for b in row.batches.all()),
    )


def _event_fields(row: Row) -> dict:
    fields = dict(row)
    fields["date"] = _parse_date(fields.get("date"))
    if "commission_range_id" in fields and fields["commission_range_id"] is not None:
        fields["commission_range_id"] = str(fields["commission_range_id"])
    return fields


class DjangoEventStore(EventStore):
    """Event store backed by the Django ORM."""

    def _queryset(self):
        return models.Event.objects.prefetch_related(
            Prefetch("batches", queryset=models.EventBatch.objects.order_by("position"))
        )

    def list_public_events(self) -> list[Event]:
        with _translate_errors():
            rows = self._queryset().filter(status=EventStatus.APPROVED.value).order_by("date", "time")
            return [_to_event(r) for r in rows]

    def list_events_for_owner(self, owner_id: int) -> list[Event]:
        with _translate_errors():
            rows = self._queryset().filter(owner_id=owner_id).order_by("-created_at")
            return [_to_event(r) for r in rows]

    def get_event(self, event_id: EventId) -> Event | None:
        with _translate_errors():
            row = self._queryset().filter(id=event_id.value).first()
            return _to_event(row) if row else None

    def insert_event(self, owner_id: int, row: Row) -> EventId:
        with _translate_errors():
            created = models.Event.objects.create(owner_id=owner_id, **_event_fields(row))
            return EventId(created.id)

    def update_event(self, event_id: EventId, row: Row) -> EventId:
        with _translate_errors():
            instance = models.Event.objects.filter(id=event_id.value).first()
            if instance is None:
                raise NoRowsError(f"Event {event_id} not found")
            for name, value in _event_fields(row).items():
                setattr(instance, name, value)
            instance.save()
            return event_id

    def replace_batches(self, event_id: EventId, rows: list[Row]) -> None:
        with _translate_errors(), transaction.atomic():
            models.EventBatch.objects.filter(event_id=event_id.value).delete()
            models.EventBatch.objects.bulk_create(
                [
                    models.EventBatch(
                        event_id=event_id.value,
                        position=position,
                        name=r["name"],
                        quantity=r["quantity"],
                        price=r["price"],
                        sale_start_date=_parse_date(r["sale_start_date"]),
                        sale_end_date=_parse_date(r["sale_end_date"]),
                    )
                    for position, r in enumerate(rows)
                ]
            )


def _to_contract(row: models.EventContract) -> CommissionContract:
    return CommissionContract(
        id=ContractId(row.id),
        version=row.version,
        title=row.title,
        content=row.content,
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class DjangoContractStore(ContractStore):
    """Contract store backed by the Django ORM."""

    def get_single_active(self) -> CommissionContract:
        with _translate_errors():
            rows = list(models.EventContract.objects.filter(is_active=True)[:2])
        if len(rows) != 1:
            raise NoRowsError(f"Expected one active contract, found {len(rows)}")
        return _to_contract(rows[0])

    def get_latest(self) -> CommissionContract:
        with _translate_errors():
            row = models.EventContract.objects.order_by("-updated_at").first()
        if row is None:
            raise NoRowsError("No contracts found")
        return _to_contract(row)

    def list_contracts(self) -> list[CommissionContract]:
        with _translate_errors():
            return [_to_contract(r) for r in models.EventContract.objects.order_by("-created_at")]

    def get_contract(self, contract_id: ContractId) -> CommissionContract | None:
        with _translate_errors():
            row = models.EventContract.objects.filter(id=contract_id.value).first()
        return _to_contract(row) if row else None

    def version_exists(self, version: str, exclude: ContractId | None = None) -> bool:
        with _translate_errors():
            qs = models.EventContract.objects.filter(version=version)
            if exclude is not None:
                qs = qs.exclude(id=exclude.value)
            return qs.exists()

    def insert_contract(
        self, version: str, title: str, content: str, created_by: int | None
    ) -> CommissionContract:
        with _translate_errors():
            row = models.EventContract.objects.create(
                version=version, title=title, content=content, created_by_id=created_by
            )
        return _to_contract(row)

    def update_contract(
        self, contract_id: ContractId, version: str, title: str, content: str
    ) -> CommissionContract:
        with _translate_errors():
            row = models.EventContract.objects.filter(id=contract_id.value).first()
            if row is None:
                raise NoRowsError(f"Contract {contract_id} not found")
            row.version, row.title, row.content = version, title, content
            row.save()
        return _to_contract(row)

    def set_active(self, contract_id: ContractId, active: bool) -> CommissionContract:
        with _translate_errors(), transaction.atomic():
            row = models.EventContract.objects.select_for_update().filter(id=contract_id.value).first()
            if row is None:
                raise NoRowsError(f"Contract {contract_id} not found")
            if active:
                for other in models.EventContract.objects.filter(is_active=True).exclude(id=row.id):
                    other.is_active = False
                    other.save(update_fields=["is_active", "updated_at"])
            row.is_active = active
            row.save(update_fields=["is_active", "updated_at"])
        return _to_contract(row)


def _percentage(row: models.CommissionRange | models.CommissionRangeHistory) -> Percentage:
    try:
        return Percentage(row.percentage)
    except ValueError as exc:
        raise BackendError(f"Stored percentage {row.percentage} is invalid: {exc}") from exc


def _to_range(row: models.CommissionRange) -> CommissionRange:
    return CommissionRange(
        id=CommissionRangeId(row.id),
        min_tickets=row.min_tickets,
        max_tickets=row.max_tickets,
        percentage=_percentage(row),
        active=row.active,
    )


class DjangoCommissionRangeStore(CommissionRangeStore):
    """Commission range store backed by the Django ORM."""

    def list_ranges(self, active_only: bool = False) -> list[CommissionRange]:
        with _translate_errors():
            qs = models.CommissionRange.objects.order_by("min_tickets")
            if active_only:
                qs = qs.filter(active=True)
            return [_to_range(r) for r in qs]

    def get_range(self, range_id: CommissionRangeId) -> CommissionRange | None:
        with _translate_errors():
            row = models.CommissionRange.objects.filter(id=range_id.value).first()
        return _to_range(row) if row else None

    def insert_range(
        self, min_tickets: int, max_tickets: int, percentage: Percentage, active: bool
    ) -> CommissionRange:
        with _translate_errors():
            row = models.CommissionRange.objects.create(
                min_tickets=min_tickets,
                max_tickets=max_tickets,
                percentage=percentage.value,
                active=active,
            )
        return _to_range(row)

    def update_range(
        self,
        range_id: CommissionRangeId,
        min_tickets: int,
        max_tickets: int,
        percentage: Percentage,
    ) -> CommissionRange:
        with _translate_errors():
            row = models.CommissionRange.objects.filter(id=range_id.value).first()
            if row is None:
                raise NoRowsError(f"Commission range {range_id} not found")
            row.min_tickets, row.max_tickets, row.percentage = (
                min_tickets,
                max_tickets,
                percentage.value,
            )
            row.save()
        return _to_range(row)

    def set_active(self, range_id: CommissionRangeId, active: bool) -> CommissionRange:
        with _translate_errors():
            row = models.CommissionRange.objects.filter(id=range_id.value).first()
            if row is None:
                raise NoRowsError(f"Commission range {range_id} not found")
            row.active = active
            row.save(update_fields=["active", "updated_at"])
        return _to_range(row)

    def record_history(self, commission_range: CommissionRange) -> None:
        with _translate_errors():
            models.CommissionRangeHistory.objects.create(
                commission_range_id=commission_range.id.value,
                min_tickets=commission_range.min_tickets,
                max_tickets=commission_range.max_tickets,
                percentage=commission_range.percentage.value,
            )

    def list_history(self) -> list[CommissionRangeHistoryEntry]:
        with _translate_errors():
            rows = models.CommissionRangeHistory.objects.order_by("-changed_at")
            return [
                CommissionRangeHistoryEntry(
                    id=r.id,
                    commission_range_id=CommissionRangeId(r.commission_range_id),
                    min_tickets=r.min_tickets,
                    max_tickets=r.max_tickets,
                    percentage=_percentage(r),
                    changed_at=r.changed_at,
                )
                for r in rows
            ]
