"""Integration tests for the public catalog and the manager event wizard.

Run with: pytest tests/test_event_catalog.py -v
"""

from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from ticketing import models
from tests.factories import batch_row, create_event, event_payload

CONTRACT_CONTENT = "<p>Terms</p>{{COMMISSION_TABLE}}"


@pytest.fixture
def active_contract() -> models.EventContract:
    return models.EventContract.objects.create(
        version="1.0", title="Platform terms", content=CONTRACT_CONTENT, is_active=True
    )


@pytest.fixture
def commission_ranges() -> list[models.CommissionRange]:
    return [
        models.CommissionRange.objects.create(min_tickets=1, max_tickets=100, percentage=Decimal("10")),
        models.CommissionRange.objects.create(min_tickets=101, max_tickets=500, percentage=Decimal("7.5")),
    ]


@pytest.mark.django_db
class TestEventList:
    """Tests for GET /api/events"""

    def test_list_events_returns_approved_only(self, api_client: APIClient, manager_user):
        """Pending, rejected and draft events are not public."""
        create_event(manager_user, title="Approved show")
        for status in ("pending", "rejected", "draft"):
            create_event(manager_user, title=f"{status} show", status=status)

        response = api_client.get("/api/events")

        assert response.status_code == 200
        assert [e["title"] for e in response.data] == ["Approved show"]

    def test_list_events_empty_catalog(self, api_client: APIClient):
        """Given no events, returns empty list."""
        response = api_client.get("/api/events")
        assert response.status_code == 200
        assert response.data == []

    def test_list_events_cached_response(self, api_client: APIClient, manager_user):
        """Given cached data, returns from cache."""
        event = create_event(manager_user, title="Original")
        api_client.get("/api/events")

        # update() bypasses the save signals.
        models.Event.objects.filter(pk=event.pk).update(title="Changed")
        response = api_client.get("/api/events")

        assert response.data[0]["title"] == "Original"

    def test_starting_price_is_cheapest_batch(self, api_client: APIClient, manager_user):
        today = date.today()
        create_event(
            manager_user,
            is_paid=True,
            ticket_price=Decimal("90"),
            batches=[
                batch_row("Lote 1", "70.00", today, today + timedelta(days=5)),
                batch_row("Lote 2", "45.50", today, today + timedelta(days=5)),
            ],
        )
        response = api_client.get("/api/events")
        assert response.data[0]["starting_price"] == "45.50"


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET /api/events/{id}"""

    def test_get_event_returns_batches_on_sale(self, api_client: APIClient, manager_user):
        """Only batches whose sale window contains today are listed."""
        today = date.today()
        event = create_event(
            manager_user,
            is_paid=True,
            batches=[
                batch_row("Early", "40.00", today - timedelta(days=30), today - timedelta(days=1)),
                batch_row("Current", "55.00", today - timedelta(days=1), today + timedelta(days=10)),
            ],
        )

        response = api_client.get(f"/api/events/{event.pk}")

        assert response.status_code == 200
        assert response.data["title"] == "Jazz na Praça"
        assert [b["name"] for b in response.data["batches"]] == ["Current"]
        assert response.data["batches"][0]["price"] == "55,00"

    def test_get_event_not_found(self, api_client: APIClient):
        """Given event does not exist, returns 404."""
        response = api_client.get(f"/api/events/{uuid4()}")
        assert response.status_code == 404
        assert response.data["error"]["code"] == "EVENT_NOT_FOUND"

    def test_get_event_invalid_id_format(self, api_client: APIClient):
        """Given invalid UUID, returns 400."""
        response = api_client.get("/api/events/not-a-uuid")
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_EVENT_ID"

    def test_pending_event_is_not_found(self, api_client: APIClient, manager_user):
        event = create_event(manager_user, status="pending")
        assert api_client.get(f"/api/events/{event.pk}").status_code == 404


@pytest.mark.django_db
class TestManagerAccess:
    def test_anonymous_is_rejected(self, api_client: APIClient):
        assert api_client.get("/api/manager/events").status_code == 403

    def test_customer_is_rejected(self, api_client: APIClient, django_user_model):
        customer = django_user_model.objects.create_user(username="customer", password="x")
        models.ManagerProfile.objects.create(user=customer, role="customer")
        api_client.force_authenticate(user=customer)
        assert api_client.get("/api/manager/events").status_code == 403

    def test_manager_sees_only_own_events(self, manager_client, manager_user, other_manager):
        create_event(manager_user, title="Mine", status="pending")
        create_event(other_manager, title="Theirs")

        response = manager_client.get("/api/manager/events")

        assert response.status_code == 200
        assert [e["title"] for e in response.data] == ["Mine"]
        assert response.data[0]["status"] == "pending"


@pytest.mark.django_db
class TestEventSubmission:
    """Tests for POST/PUT /api/manager/events"""

    def test_create_paid_event(self, manager_client, manager_user, active_contract, commission_ranges):
        response = manager_client.post("/api/manager/events", event_payload(), format="json")

        assert response.status_code == 201
        assert response.data["status"] == "pending"
        assert response.data["redirect"] == "/api/manager/events"
        assert response.data["notices"] == [
            {"level": "success", "message": 'Event "Jazz na Praça" created.'}
        ]

        event = models.Event.objects.get(pk=response.data["id"])
        assert event.owner == manager_user
        assert event.date == date(2030, 5, 10)
        assert event.ticket_price == Decimal("12.50")
        assert event.capacity == 150
        assert event.applied_percentage == Decimal("7.50")
        assert event.commission_range_id == commission_ranges[1].pk
        assert event.contract_version == "1.0"
        assert event.contract_accepted_at is not None
        assert [(b.position, b.name, b.price) for b in event.batches.all()] == [
            (0, "Lote 1", Decimal("50.00")),
            (1, "Lote 2", Decimal("70.50")),
        ]

    def test_field_error_jumps_to_its_step(self, manager_client, active_contract):
        response = manager_client.post(
            "/api/manager/events", event_payload(title="ab"), format="json"
        )

        assert response.status_code == 400
        assert response.data["error"]["code"] == "VALIDATION_FAILED"
        assert "title" in response.data["errors"]
        assert response.data["step"] == {"index": 2, "name": "details"}
        assert response.data["notices"][0]["level"] == "error"

    def test_batch_field_error_jumps_to_pricing(self, manager_client, active_contract):
        payload = event_payload()
        payload["batches"][1]["price"] = "abc"

        response = manager_client.post("/api/manager/events", payload, format="json")

        assert response.status_code == 400
        assert "batches.1.price" in response.data["errors"]
        assert response.data["step"] == {"index": 4, "name": "pricing"}

    def test_missing_batch_date_is_rejected(self, manager_client, active_contract):
        payload = event_payload()
        payload["batches"][0]["sale_end_date"] = ""

        response = manager_client.post("/api/manager/events", payload, format="json")

        assert response.status_code == 400
        assert "batches.0.sale_end_date" in response.data["errors"]

    @pytest.mark.parametrize("body", [5, "text", ["title"]])
    def test_non_object_body_is_a_validation_error(self, manager_client, active_contract, body):
        response = manager_client.post("/api/manager/events", body, format="json")

        assert response.status_code == 400
        assert response.data["error"]["code"] == "VALIDATION_FAILED"
        assert response.data["step"]["name"] == "details"
        assert not models.Event.objects.exists()

    def test_unaccepted_contract_is_rejected_before_saving(self, manager_client, active_contract):
        response = manager_client.post(
            "/api/manager/events", event_payload(accept_contract=False), format="json"
        )

        assert response.status_code == 400
        assert response.data["error"]["code"] == "CONTRACT_NOT_ACCEPTED"
        assert response.data["step"] == {"index": 1, "name": "contract"}
        assert not models.Event.objects.exists()

    def test_paid_event_without_contract_is_rejected(self, manager_client):
        response = manager_client.post("/api/manager/events", event_payload(), format="json")

        assert response.status_code == 400
        assert response.data["error"]["code"] == "CONTRACT_MISSING"
        assert response.data["step"] == {"index": 3, "name": "pricing"}

    def test_paid_event_without_batches_is_rejected(self, manager_client, active_contract):
        response = manager_client.post(
            "/api/manager/events", event_payload(batches=[]), format="json"
        )
        assert response.data["error"]["code"] == "BATCHES_REQUIRED"
        assert not models.Event.objects.exists()

    def test_free_event_without_contract_succeeds(self, manager_client):
        payload = event_payload(is_paid=False, accept_contract=False, ticket_price=None)
        payload["batches"] = [{"name": "Lote 1", "price": "not validated"}]

        response = manager_client.post("/api/manager/events", payload, format="json")

        assert response.status_code == 201
        event = models.Event.objects.get(pk=response.data["id"])
        assert not event.is_paid
        assert event.ticket_price is None
        assert not event.batches.exists()

    def test_concurrent_save_is_blocked(self, manager_client, manager_user, active_contract):
        cache.add(f"events:submit:{manager_user.id}:new", 1)

        response = manager_client.post("/api/manager/events", event_payload(), format="json")

        assert response.status_code == 409
        assert response.data["error"]["code"] == "SUBMISSION_BLOCKED"

    def test_update_replaces_batches(self, manager_client, active_contract):
        created = manager_client.post("/api/manager/events", event_payload(), format="json")
        payload = event_payload(title="Jazz na Praça II")
        payload["batches"] = payload["batches"][:1]

        response = manager_client.put(
            f"/api/manager/events/{created.data['id']}", payload, format="json"
        )

        assert response.status_code == 200
        assert response.data["notices"][0]["message"] == 'Event "Jazz na Praça II" updated.'
        event = models.Event.objects.get(pk=created.data["id"])
        assert event.title == "Jazz na Praça II"
        assert [b.name for b in event.batches.all()] == ["Lote 1"]

    def test_update_of_another_managers_event(self, manager_client, other_manager, active_contract):
        event = create_event(other_manager)
        response = manager_client.put(f"/api/manager/events/{event.pk}", event_payload(), format="json")
        assert response.status_code == 404

    def test_round_trip_through_the_form(self, manager_client, active_contract, commission_ranges):
        """Loading an event and saving it unchanged keeps every stored value."""
        created = manager_client.post("/api/manager/events", event_payload(), format="json")
        event_id = created.data["id"]
        before = models.Event.objects.get(pk=event_id)
        batches_before = list(
            before.batches.values_list("name", "quantity", "price", "sale_start_date", "sale_end_date")
        )

        form = manager_client.get(f"/api/manager/events/{event_id}/draft")
        assert form.data["ticket_price"] == "12,50"
        assert form.data["batch_count"] == 2
        response = manager_client.put(f"/api/manager/events/{event_id}", form.data, format="json")

        assert response.status_code == 200
        after = models.Event.objects.get(pk=event_id)
        for field in (
            "title", "description", "date", "time", "location", "address", "image_url",
            "exposure_card_image_url", "banner_image_url", "min_age", "category", "capacity",
            "duration", "is_paid", "ticket_price", "applied_percentage", "commission_range_id",
            "contract_version", "contract_accepted_at", "status",
        ):
            assert getattr(after, field) == getattr(before, field), field
        assert list(
            after.batches.values_list("name", "quantity", "price", "sale_start_date", "sale_end_date")
        ) == batches_before


@pytest.mark.django_db
class TestDraftSave:
    def test_draft_with_only_a_title(self, manager_client, active_contract):
        response = manager_client.post(
            "/api/manager/events?draft=1", {"title": "Half done", "date": "not a date"}, format="json"
        )

        assert response.status_code == 201
        assert response.data["status"] == "draft"
        event = models.Event.objects.get(pk=response.data["id"])
        assert event.title == "Half done"
        assert event.date is None

    def test_draft_without_title(self, manager_client, active_contract):
        response = manager_client.post("/api/manager/events?draft=1", {"title": ""}, format="json")
        assert response.status_code == 400
        assert response.data["error"]["code"] == "DRAFT_TITLE_REQUIRED"


@pytest.mark.django_db
class TestWizard:
    def test_wizard_renders_contract_with_commission_table(
        self, manager_client, active_contract, commission_ranges
    ):
        response = manager_client.get("/api/manager/wizard")

        assert response.status_code == 200
        assert response.data["contract_loaded"] is True
        assert response.data["steps"] == ["contract", "details", "media", "pricing"]
        assert "<td>101 - 500</td><td>7,50%</td>" in response.data["contract"]["rendered_content"]
        assert [r["min_tickets"] for r in response.data["commission_ranges"]] == [1, 101]

    def test_invalid_stored_range_degrades_to_no_ranges(self, manager_client, active_contract):
        models.CommissionRange.objects.create(min_tickets=1, max_tickets=10, percentage=Decimal("0"))

        response = manager_client.get("/api/manager/wizard")

        assert response.status_code == 200
        assert response.data["commission_ranges"] == []
        assert "No commission ranges configured." in response.data["contract"]["rendered_content"]

    def test_wizard_without_contract(self, manager_client):
        response = manager_client.get("/api/manager/wizard")
        assert response.data["contract"] is None
        assert response.data["steps"] == ["details", "media", "pricing"]

    @pytest.mark.parametrize(
        "query,expected",
        [
            ("step=1&has_contract=true", "contract"),
            ("step=1&has_contract=false", "details"),
            ("step=3&has_contract=false", "pricing"),
            ("step=9&has_contract=true", "details"),
            ("step=0&has_contract=false", "details"),
        ],
    )
    def test_step_resolution(self, manager_client, query, expected):
        response = manager_client.get(f"/api/manager/wizard/step?{query}")
        assert response.status_code == 200
        assert response.data["name"] == expected

    def test_batches_grow(self, manager_client):
        response = manager_client.post(
            "/api/manager/wizard/batches",
            {"is_paid": True, "count": 3, "batches": [{"name": "VIP", "price": "10,00"}]},
            format="json",
        )

        assert response.status_code == 200
        assert [b["name"] for b in response.data["batches"]] == ["VIP", "Lote 2", "Lote 3"]
        assert response.data["batches"][0]["price"] == "10,00"
        assert response.data["batches"][1]["price"] is None

    def test_batches_shrink_warns(self, manager_client):
        rows = [{"name": "Lote 1"}, {"name": "Lote 2", "quantity": "10"}, {"name": "Lote 3"}]
        response = manager_client.post(
            "/api/manager/wizard/batches",
            {"is_paid": True, "count": 1, "batches": rows},
            format="json",
        )

        assert [b["name"] for b in response.data["batches"]] == ["Lote 1"]
        assert response.data["notices"] == [
            {"level": "warning", "message": "Batches removed with their data: Lote 2."}
        ]

    def test_batches_untouched_for_free_event(self, manager_client):
        response = manager_client.post(
            "/api/manager/wizard/batches",
            {"is_paid": False, "count": 3, "batches": [{"name": "Lote 1"}]},
            format="json",
        )
        assert len(response.data["batches"]) == 1


class FakeViaCepResponse:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


@pytest.mark.django_db
class TestAddressLookup:
    def test_lookup(self, manager_client, monkeypatch):
        payload = {"logradouro": "Praça da Sé", "bairro": "Sé", "localidade": "São Paulo", "uf": "SP"}
        monkeypatch.setattr(
            "requests.Session.get", lambda self, url, timeout=None: FakeViaCepResponse(payload)
        )

        response = manager_client.get("/api/address/01001000")

        assert response.status_code == 200
        assert response.data == {
            "postal_code": "01001-000",
            "street": "Praça da Sé",
            "neighborhood": "Sé",
            "city": "São Paulo",
            "state": "SP",
        }

    def test_unknown_code(self, manager_client, monkeypatch):
        monkeypatch.setattr(
            "requests.Session.get", lambda self, url, timeout=None: FakeViaCepResponse({"erro": True})
        )
        assert manager_client.get("/api/address/99999999").status_code == 404

    def test_invalid_code(self, manager_client):
        response = manager_client.get("/api/address/123")
        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_POSTAL_CODE"


@pytest.mark.django_db
class TestContractAdmin:
    """Tests for /api/admin/contracts"""

    def test_manager_cannot_manage_contracts(self, manager_client):
        assert manager_client.get("/api/admin/contracts").status_code == 403

    def test_create_and_activate(self, admin_api_client, active_contract):
        created = admin_api_client.post(
            "/api/admin/contracts",
            {"version": "2.0", "title": "New terms", "content": CONTRACT_CONTENT},
            format="json",
        )
        assert created.status_code == 201
        assert created.data["is_active"] is False

        response = admin_api_client.post(f"/api/admin/contracts/{created.data['id']}/activate")

        assert response.status_code == 200
        assert list(
            models.EventContract.objects.filter(is_active=True).values_list("version", flat=True)
        ) == ["2.0"]

    def test_duplicate_version(self, admin_api_client, active_contract):
        response = admin_api_client.post(
            "/api/admin/contracts",
            {"version": "1.0", "title": "Again", "content": "x"},
            format="json",
        )
        assert response.status_code == 409

    def test_update_and_deactivate(self, admin_api_client, active_contract):
        url = f"/api/admin/contracts/{active_contract.pk}"
        response = admin_api_client.put(
            url, {"version": "1.1", "title": "Terms", "content": "<p>v1.1</p>"}, format="json"
        )
        assert response.data["version"] == "1.1"

        response = admin_api_client.post(f"{url}/deactivate")
        assert response.data["is_active"] is False

    def test_unknown_contract(self, admin_api_client):
        response = admin_api_client.post(f"/api/admin/contracts/{uuid4()}/activate")
        assert response.status_code == 404


@pytest.mark.django_db
class TestCommissionRangeAdmin:
    """Tests for /api/admin/commission-ranges"""

    def test_create_with_comma_percentage(self, admin_api_client, commission_ranges):
        response = admin_api_client.post(
            "/api/admin/commission-ranges",
            {"min_tickets": 501, "max_tickets": 1000, "percentage": "5,5"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["percentage"] == "5.50"
        assert models.CommissionRangeHistory.objects.count() == 1

    def test_overlap(self, admin_api_client, commission_ranges):
        response = admin_api_client.post(
            "/api/admin/commission-ranges",
            {"min_tickets": 50, "max_tickets": 150, "percentage": "5"},
            format="json",
        )
        assert response.status_code == 409
        assert response.data["error"]["code"] == "RANGE_OVERLAP"

    def test_min_greater_than_max(self, admin_api_client):
        response = admin_api_client.post(
            "/api/admin/commission-ranges",
            {"min_tickets": 10, "max_tickets": 5, "percentage": "5"},
            format="json",
        )
        assert response.status_code == 400

    def test_toggle_and_history(self, admin_api_client, commission_ranges):
        tier = commission_ranges[0]

        response = admin_api_client.post(f"/api/admin/commission-ranges/{tier.pk}/toggle")
        assert response.data["active"] is False

        history = admin_api_client.get("/api/admin/commission-ranges/history")
        assert history.status_code == 200
        assert [(h["min_tickets"], h["max_tickets"]) for h in history.data] == [(1, 100)]

    def test_update(self, admin_api_client, commission_ranges):
        tier = commission_ranges[0]
        response = admin_api_client.put(
            f"/api/admin/commission-ranges/{tier.pk}",
            {"min_tickets": 1, "max_tickets": 80, "percentage": "12"},
            format="json",
        )
        assert response.status_code == 200
        assert response.data["max_tickets"] == 80
