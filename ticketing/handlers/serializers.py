"""Serializers: the event form's validation schema and API response shapes.

EventDraftSerializer holds the per-field rules of the wizard. Batches of a
free event are kept but not validated.
"""

from collections.abc import Mapping
from datetime import date

from rest_framework import serializers

from ticketing import conf
from ticketing.domain import ContractId, EventDraft, Money, Quantity, TicketBatch
from ticketing.services.event_service import batches_on_sale, starting_price

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class BlankAsNullMixin:
    """Treat an empty string like a missing value on nullable fields."""

    def validate_empty_values(self, data):
        if data == "" and self.allow_null:
            data = None
        return super().validate_empty_values(data)


class MoneyField(BlankAsNullMixin, serializers.Field):
    default_error_messages = {"invalid": "Enter an amount such as 10,00 or 10.00."}

    def to_internal_value(self, data) -> Money:
        if isinstance(data, bool):
            self.fail("invalid")
        try:
            return Money.parse(str(data))
        except ValueError:
            self.fail("invalid")

    def to_representation(self, value: Money) -> str:
        return value.format()


class QuantityField(BlankAsNullMixin, serializers.Field):
    default_error_messages = {"invalid": "Must be a whole number greater than zero."}

    def to_internal_value(self, data) -> Quantity:
        if isinstance(data, bool):
            self.fail("invalid")
        try:
            return Quantity.parse(str(data))
        except ValueError:
            self.fail("invalid")

    def to_representation(self, value: Quantity) -> str:
        return value.format()


class OptionalDateField(BlankAsNullMixin, serializers.DateField):
    pass


class BatchRowSerializer(serializers.Serializer):
    """One ticket batch as entered; any field but the name may be empty."""

    name = serializers.CharField(max_length=100, allow_blank=True, required=False, default="")
    quantity = QuantityField(required=False, allow_null=True)
    price = MoneyField(required=False, allow_null=True)
    sale_start_date = OptionalDateField(source="sale_starts_on", required=False, allow_null=True)
    sale_end_date = OptionalDateField(source="sale_ends_on", required=False, allow_null=True)


def batch_from_attrs(attrs: dict) -> TicketBatch:
    return TicketBatch(
        name=attrs.get("name", ""),
        quantity=attrs.get("quantity"),
        price=attrs.get("price"),
        sale_starts_on=attrs.get("sale_starts_on"),
        sale_ends_on=attrs.get("sale_ends_on"),
    )


def loose_batches(raw) -> tuple[TicketBatch, ...]:
    """Best-effort parse for rows that are kept but not validated."""
    if not isinstance(raw, list):
        return ()
    batches = []
    for row in raw:
        if not isinstance(row, dict):
            continue
        s = BatchRowSerializer(data=row)
        if s.is_valid():
            batches.append(batch_from_attrs(s.validated_data))
        else:
            batches.append(TicketBatch(name=str(row.get("name", ""))))
    return tuple(batches)


_REQUIRED_BATCH_FIELDS = {
    "quantity": "quantity",
    "price": "price",
    "sale_starts_on": "sale_start_date",
    "sale_ends_on": "sale_end_date",
}


class EventDraftSerializer(serializers.Serializer):
    """Validation schema for the event wizard."""

    title = serializers.CharField(
        min_length=conf.TITLE_MIN_LENGTH, max_length=conf.TITLE_MAX_LENGTH
    )
    description = serializers.CharField(
        min_length=conf.DESCRIPTION_MIN_LENGTH, max_length=conf.DESCRIPTION_MAX_LENGTH
    )
    date = serializers.DateField()
    time = serializers.RegexField(
        TIME_PATTERN, error_messages={"invalid": "Use the 24-hour HH:MM format."}
    )
    location = serializers.CharField(max_length=255)
    address = serializers.CharField(max_length=500)
    card_image_url = serializers.URLField(max_length=500)
    exposure_card_image_url = serializers.URLField(max_length=500)
    banner_image_url = serializers.URLField(max_length=500)
    min_age = serializers.IntegerField(min_value=0, max_value=conf.MAX_MIN_AGE)
    category = serializers.CharField(max_length=100)
    capacity = QuantityField()
    duration = serializers.CharField(max_length=50)
    is_paid = serializers.BooleanField(default=False)
    ticket_price = MoneyField(required=False, allow_null=True, default=None)
    accept_contract = serializers.BooleanField(default=False)
    contract_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    batches = BatchRowSerializer(many=True, required=False)
    batch_count = serializers.SerializerMethodField()

    def get_batch_count(self, draft: EventDraft) -> int:
        return len(draft.batches)

    def to_internal_value(self, data):
        if isinstance(data, Mapping) and "batches" in data and not _is_true(data.get("is_paid")):
            raw = data.get("batches")
            data = {k: v for k, v in data.items() if k != "batches"}
            attrs = super().to_internal_value(data)
            attrs["batches"] = loose_batches(raw)
            return attrs
        return super().to_internal_value(data)

    def validate(self, attrs):
        if not attrs.get("is_paid"):
            return attrs
        errors = []
        for row in attrs.get("batches", []):
            row_errors = {
                api_name: ["This field is required."]
                for key, api_name in _REQUIRED_BATCH_FIELDS.items()
                if row.get(key) is None
            }
            start, end = row.get("sale_starts_on"), row.get("sale_ends_on")
            if start and end and end < start:
                row_errors["sale_end_date"] = ["The sale end date cannot be before the start date."]
            errors.append(row_errors)
        if any(errors):
            raise serializers.ValidationError({"batches": errors})
        return attrs

    def to_draft(self) -> EventDraft:
        attrs = self.validated_data
        batches = attrs.get("batches", ())
        if not isinstance(batches, tuple):
            batches = tuple(batch_from_attrs(b) for b in batches)
        contract_id = attrs.get("contract_id")
        return EventDraft(
            title=attrs["title"],
            description=attrs["description"],
            date=attrs["date"],
            time=attrs["time"],
            location=attrs["location"],
            address=attrs["address"],
            card_image_url=attrs["card_image_url"],
            exposure_card_image_url=attrs["exposure_card_image_url"],
            banner_image_url=attrs["banner_image_url"],
            min_age=attrs["min_age"],
            category=attrs["category"],
            capacity=attrs["capacity"],
            duration=attrs["duration"],
            is_paid=attrs["is_paid"],
            ticket_price=attrs.get("ticket_price"),
            accept_contract=attrs["accept_contract"],
            contract_id=ContractId(contract_id) if contract_id else None,
            batches=batches,
        )


class DraftSaveSerializer(EventDraftSerializer):
    """Same fields as the wizard, none of them enforced.

    A draft may be saved half-filled: invalid values are dropped instead of
    rejected, and only the title is required (by the submission service).
    """

    def to_internal_value(self, data):
        if not isinstance(data, Mapping):
            raise serializers.ValidationError({"non_field_errors": ["Invalid data."]})
        attrs = {}
        for name, field in self.fields.items():
            if field.read_only or name == "batches" or name not in data:
                continue
            try:
                value = field.run_validation(data[name])
            except serializers.ValidationError:
                continue
            attrs[field.source] = value
        attrs["batches"] = loose_batches(data.get("batches"))
        return attrs

    def validate(self, attrs):
        return attrs

    def to_draft(self) -> EventDraft:
        attrs = self.validated_data
        contract_id = attrs.get("contract_id")
        return EventDraft(
            title=attrs.get("title", str(self.initial_data.get("title", ""))[: conf.TITLE_MAX_LENGTH]),
            description=attrs.get("description", ""),
            date=attrs.get("date"),
            time=attrs.get("time", ""),
            location=attrs.get("location", ""),
            address=attrs.get("address", ""),
            card_image_url=attrs.get("card_image_url", ""),
            exposure_card_image_url=attrs.get("exposure_card_image_url", ""),
            banner_image_url=attrs.get("banner_image_url", ""),
            min_age=attrs.get("min_age", 0),
            category=attrs.get("category", ""),
            capacity=attrs.get("capacity"),
            duration=attrs.get("duration", ""),
            is_paid=attrs.get("is_paid", False),
            ticket_price=attrs.get("ticket_price"),
            accept_contract=attrs.get("accept_contract", False),
            contract_id=ContractId(contract_id) if contract_id else None,
            batches=attrs["batches"],
        )


def _is_true(value) -> bool:
    return isinstance(value, str | int) and value in serializers.BooleanField.TRUE_VALUES


def flatten_errors(errors, prefix: str = "") -> dict[str, list[str]]:
    """``{"batches": [{}, {"price": [...]}]}`` -> ``{"batches.1.price": [...]}``."""
    flat: dict[str, list[str]] = {}
    for key, value in errors.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten_errors(value, f"{name}."))
        elif isinstance(value, list) and value and all(isinstance(v, dict) for v in value):
            for index, item in enumerate(value):
                if item:
                    flat.update(flatten_errors(item, f"{name}.{index}."))
        else:
            flat[name] = [str(v) for v in value]
    return flat


class BatchSyncSerializer(serializers.Serializer):
    is_paid = serializers.BooleanField(default=False)
    count = serializers.IntegerField(min_value=0, max_value=conf.MAX_BATCHES)
    batches = BatchRowSerializer(many=True, required=False)


class StepQuerySerializer(serializers.Serializer):
    step = serializers.IntegerField()
    has_contract = serializers.BooleanField(default=False)


# Responses


class EventSerializer(serializers.Serializer):
    """Public listing shape."""

    id = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    date = serializers.DateField()
    time = serializers.CharField()
    location = serializers.CharField()
    address = serializers.CharField()
    card_image_url = serializers.CharField()
    exposure_card_image_url = serializers.CharField()
    banner_image_url = serializers.CharField()
    min_age = serializers.IntegerField()
    category = serializers.CharField()
    capacity = serializers.IntegerField()
    duration = serializers.CharField()
    is_paid = serializers.BooleanField()
    starting_price = serializers.SerializerMethodField()

    def get_starting_price(self, event) -> str | None:
        price = starting_price(event)
        return f"{price:.2f}" if price is not None else None


class EventDetailSerializer(EventSerializer):
    batches = serializers.SerializerMethodField()

    def get_batches(self, event) -> list[dict]:
        today = self.context.get("today") or date.today()
        return BatchRowSerializer(batches_on_sale(event, today), many=True).data


class ManagerEventSerializer(EventSerializer):
    status = serializers.CharField(source="status.value")
    ticket_price = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    applied_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, allow_null=True
    )
    contract_version = serializers.CharField(allow_null=True)
    contract_accepted_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    batches = BatchRowSerializer(many=True)


class ContractSerializer(serializers.Serializer):
    id = serializers.CharField()
    version = serializers.CharField()
    title = serializers.CharField()
    content = serializers.CharField()
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class ContractInputSerializer(serializers.Serializer):
    version = serializers.CharField(max_length=50)
    title = serializers.CharField(max_length=255)
    content = serializers.CharField()


class CommissionRangeSerializer(serializers.Serializer):
    id = serializers.CharField()
    min_tickets = serializers.IntegerField()
    max_tickets = serializers.IntegerField()
    percentage = serializers.DecimalField(source="percentage.value", max_digits=5, decimal_places=2)
    active = serializers.BooleanField()


class CommissionRangeInputSerializer(serializers.Serializer):
    min_tickets = serializers.IntegerField(min_value=1)
    max_tickets = serializers.IntegerField(min_value=1)
    percentage = serializers.CharField(max_length=6)

    def validate(self, attrs):
        if attrs["min_tickets"] > attrs["max_tickets"]:
            raise serializers.ValidationError(
                {"max_tickets": ["The minimum must be less than or equal to the maximum."]}
            )
        return attrs


class CommissionRangeHistorySerializer(serializers.Serializer):
    id = serializers.CharField()
    commission_range_id = serializers.CharField()
    min_tickets = serializers.IntegerField()
    max_tickets = serializers.IntegerField()
    percentage = serializers.DecimalField(source="percentage.value", max_digits=5, decimal_places=2)
    changed_at = serializers.DateTimeField()


class AddressSerializer(serializers.Serializer):
    postal_code = serializers.CharField()
    street = serializers.CharField()
    neighborhood = serializers.CharField()
    city = serializers.CharField()
    state = serializers.CharField()
