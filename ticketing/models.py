"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
Table names match the collections the back office has always used.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

PERCENTAGE_VALIDATORS = [MinValueValidator(Decimal("0.01")), MaxValueValidator(Decimal("100"))]


class ManagerProfile(models.Model):
    """Role attached to a user account."""

    class Role(models.TextChoices):
        CUSTOMER = "customer", "Customer"
        MANAGER = "manager", "Manager"
        ADMIN = "admin", "Admin"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile"
    )
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CUSTOMER)
    company_name = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = "profiles"

    def __str__(self) -> str:
        return f"{self.user} ({self.role})"


class EventContract(models.Model):
    """Persistence model for commission contracts."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    version = models.CharField(max_length=50, unique=True)
    title = models.CharField(max_length=255)
    content = models.TextField()
    is_active = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "event_contracts"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.title} v{self.version}"


class CommissionRange(models.Model):
    """Persistence model for commission tiers."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    min_tickets = models.PositiveIntegerField()
    max_tickets = models.PositiveIntegerField()
    percentage = models.DecimalField(max_digits=5, decimal_places=2, validators=PERCENTAGE_VALIDATORS)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "commission_ranges"
        ordering = ["min_tickets"]

    def __str__(self) -> str:
        return f"{self.min_tickets}-{self.max_tickets}: {self.percentage}%"


class CommissionRangeHistory(models.Model):
    """Snapshot written whenever a commission range changes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    commission_range = models.ForeignKey(
        CommissionRange, on_delete=models.CASCADE, related_name="history"
    )
    min_tickets = models.PositiveIntegerField()
    max_tickets = models.PositiveIntegerField()
    percentage = models.DecimalField(max_digits=5, decimal_places=2, validators=PERCENTAGE_VALIDATORS)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "commission_ranges_history"
        ordering = ["-changed_at"]


class Event(models.Model):
    """Persistence model for events."""

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PENDING = "pending", "Pending review"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="events"
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    date = models.DateField(null=True, blank=True)
    time = models.CharField(max_length=5, blank=True)
    location = models.CharField(max_length=255, blank=True)
    address = models.CharField(max_length=500, blank=True)
    image_url = models.URLField(max_length=500, blank=True)
    exposure_card_image_url = models.URLField(max_length=500, blank=True)
    banner_image_url = models.URLField(max_length=500, blank=True)
    min_age = models.PositiveSmallIntegerField(default=0)
    category = models.CharField(max_length=100, blank=True)
    capacity = models.PositiveIntegerField(default=0)
    duration = models.CharField(max_length=50, blank=True)
    is_paid = models.BooleanField(default=False)
    ticket_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    applied_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True
    )
    commission_range = models.ForeignKey(
        CommissionRange, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    contract_version = models.CharField(max_length=50, null=True, blank=True)
    contract_accepted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "events"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="events_created_3b8a4c_idx"),
            models.Index(fields=["status", "date"], name="events_status_5d2e71_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class EventBatch(models.Model):
    """Persistence model for ticket batches."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="batches")
    position = models.PositiveSmallIntegerField(default=0)
    name = models.CharField(max_length=100)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("0"))])
    sale_start_date = models.DateField()
    sale_end_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "event_batches"
        ordering = ["position"]
        indexes = [
            models.Index(fields=["event", "position"], name="event_batch_event_i_8c1f02_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.price}"
