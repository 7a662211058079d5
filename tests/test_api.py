"""API tests against the FastAPI app with the test database session."""
from __future__ import annotations

from datetime import date
from typing import AsyncGenerator
from uuid import uuid4

import httpx
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.api.dependencies import get_email_dispatcher, get_today
from beverage_portal.config import Settings
from beverage_portal.database import get_session
from beverage_portal.main import app
from beverage_portal.services.order_notifications import EmailDispatcher

TODAY = date(2024, 6, 3)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[httpx.AsyncClient, None]:
    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_today] = lambda: TODAY
    app.dependency_overrides[get_email_dispatcher] = lambda: EmailDispatcher(
        Settings(email_enabled=False)
    )
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class TestHealth:
    async def test_healthz(self, client: httpx.AsyncClient):
        response = await client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestRestaurantsApi:
    async def test_create_and_list(self, client: httpx.AsyncClient):
        response = await client.post(
            "/api/v1/restaurants", json={"name": "Pier 9", "code": "R009"}
        )
        assert response.status_code == 201

        listed = await client.get("/api/v1/restaurants")
        assert [r["code"] for r in listed.json()] == ["R009"]

    async def test_duplicate_code_conflicts(self, client: httpx.AsyncClient, sample_restaurant):
        response = await client.post(
            "/api/v1/restaurants", json={"name": "Copy", "code": sample_restaurant.code}
        )

        assert response.status_code == 409

    async def test_toggle_active(self, client: httpx.AsyncClient, sample_restaurant):
        response = await client.post(f"/api/v1/restaurants/{sample_restaurant.id}/toggle-active")

        assert response.status_code == 200
        assert response.json()["is_active"] is False

    async def test_unknown_restaurant(self, client: httpx.AsyncClient):
        response = await client.get(f"/api/v1/restaurants/{uuid4()}")

        assert response.status_code == 404


class TestProductsApi:
    async def test_lists_active_products(self, client: httpx.AsyncClient, sample_products):
        response = await client.get("/api/v1/products")

        assert response.status_code == 200
        assert [p["code"] for p in response.json()] == ["CARB-001", "WATR-001"]

    async def test_create_rejects_negative_price(self, client: httpx.AsyncClient):
        response = await client.post(
            "/api/v1/products",
            json={"code": "X-1", "name": "X", "category": "Misc", "price_per_stack": "-1"},
        )

        assert response.status_code == 422


class TestDeliveryScheduleApi:
    async def test_default_schedule_when_none_saved(
        self, client: httpx.AsyncClient, sample_restaurant
    ):
        response = await client.get(f"/api/v1/restaurants/{sample_restaurant.id}/delivery-schedule")

        body = response.json()
        assert response.status_code == 200
        assert body["is_default"] is True
        assert body["allowed_weekdays"] == [1, 2, 3, 4, 5]
        assert (body["min_lead_days"], body["max_lead_days"]) == (1, 14)

    async def test_save_and_read_dates(self, client: httpx.AsyncClient, sample_restaurant):
        url = f"/api/v1/restaurants/{sample_restaurant.id}"
        saved = await client.put(
            f"{url}/delivery-schedule",
            json={
                "allowed_weekdays": [1, 2, 3, 4, 5],
                "min_lead_days": 1,
                "max_lead_days": 6,
                "blocked_dates": ["2024-06-05"],
            },
        )
        assert saved.status_code == 200
        assert saved.json()["is_default"] is False

        response = await client.get(f"{url}/delivery-dates")

        body = response.json()
        assert body["reference_date"] == "2024-06-03"
        assert body["dates"] == ["2024-06-04", "2024-06-06", "2024-06-07"]
        assert body["available"] is True
        assert body["earliest"] == "2024-06-04"

    async def test_invalid_schedule_reported_with_field(
        self, client: httpx.AsyncClient, sample_restaurant
    ):
        response = await client.put(
            f"/api/v1/restaurants/{sample_restaurant.id}/delivery-schedule",
            json={"allowed_weekdays": [1], "min_lead_days": 9, "max_lead_days": 2},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "min_lead_days"

    async def test_no_dates_is_not_an_error(self, client: httpx.AsyncClient, sample_restaurant):
        url = f"/api/v1/restaurants/{sample_restaurant.id}"
        await client.put(
            f"{url}/delivery-schedule",
            json={"allowed_weekdays": [], "min_lead_days": 0, "max_lead_days": 30},
        )

        response = await client.get(f"{url}/delivery-dates")

        assert response.status_code == 200
        assert response.json()["dates"] == []
        assert response.json()["available"] is False
        assert response.json()["earliest"] is None

    async def test_explicit_reference_date(
        self, client: httpx.AsyncClient, sample_restaurant, sample_schedule
    ):
        response = await client.get(
            f"/api/v1/restaurants/{sample_restaurant.id}/delivery-dates",
            params={"reference_date": "2024-06-10"},
        )

        # Tue/Thu, 2-10 days ahead of Monday 06-10
        assert response.json()["dates"] == ["2024-06-13", "2024-06-18", "2024-06-20"]

    async def test_unknown_restaurant(self, client: httpx.AsyncClient):
        response = await client.get(f"/api/v1/restaurants/{uuid4()}/delivery-dates")

        assert response.status_code == 404

    async def test_apply_template_to_all(
        self, client: httpx.AsyncClient, sample_restaurants, sample_schedule
    ):
        grill, harbour, _ = sample_restaurants

        response = await client.post(
            "/api/v1/delivery-schedules/apply-template",
            json={"source_restaurant_id": str(grill.id)},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["succeeded"] == [str(harbour.id)]
        assert body["skipped"] == [str(grill.id)]
        assert body["all_succeeded"] is True

        copied = await client.get(f"/api/v1/restaurants/{harbour.id}/delivery-schedule")
        assert copied.json()["allowed_weekdays"] == [2, 4]
        assert copied.json()["is_default"] is False

        listed = await client.get("/api/v1/delivery-schedules")
        assert len(listed.json()) == 2


async def submit_order(client, restaurant, products, delivery_date="2024-06-11"):
    return await client.post(
        "/api/v1/orders",
        json={
            "restaurant_id": str(restaurant.id),
            "delivery_date": delivery_date,
            "items": [{"product_id": str(products[0].id), "quantity": 2}],
            "created_by": "manager@grill.example.com",
        },
    )


class TestOrdersApi:
    async def test_submit_and_confirm(
        self, client: httpx.AsyncClient, sample_restaurant, sample_products, sample_schedule
    ):
        created = await submit_order(client, sample_restaurant, sample_products)
        assert created.status_code == 201
        order = created.json()
        assert order["status"] == "pending"
        assert order["email_sent"] is False
        assert len(order["items"]) == 1

        confirmed = await client.post(
            f"/api/v1/orders/{order['id']}/status",
            json={"status": "confirmed", "actor": "admin"},
        )
        assert confirmed.status_code == 200
        assert confirmed.json()["confirmed_by"] == "admin"

        back = await client.post(
            f"/api/v1/orders/{order['id']}/status",
            json={"status": "pending", "actor": "admin"},
        )
        assert back.status_code == 409

    async def test_ineligible_date_lists_alternatives(
        self, client: httpx.AsyncClient, sample_restaurant, sample_products, sample_schedule
    ):
        response = await submit_order(
            client, sample_restaurant, sample_products, delivery_date="2024-06-06"
        )

        assert response.status_code == 422
        assert response.json()["detail"]["eligible_dates"] == ["2024-06-11", "2024-06-13"]

    async def test_zero_quantity_rejected(
        self, client: httpx.AsyncClient, sample_restaurant, sample_products
    ):
        response = await client.post(
            "/api/v1/orders",
            json={
                "restaurant_id": str(sample_restaurant.id),
                "delivery_date": "2024-06-04",
                "items": [{"product_id": str(sample_products[0].id), "quantity": 0}],
                "created_by": "manager",
            },
        )

        assert response.status_code == 422

    async def test_list_dashboard_and_detail(
        self, client: httpx.AsyncClient, sample_restaurant, sample_products, sample_schedule
    ):
        created = (await submit_order(client, sample_restaurant, sample_products)).json()

        listed = await client.get("/api/v1/orders", params={"status": "pending"})
        assert [o["id"] for o in listed.json()] == [created["id"]]

        dashboard = await client.get("/api/v1/orders/dashboard")
        assert dashboard.status_code == 200
        assert dashboard.json()["pending_orders"] == 1

        detail = await client.get(f"/api/v1/orders/{created['id']}")
        assert detail.json()["items"][0]["product_code"] == "CARB-001"

        missing = await client.get(f"/api/v1/orders/{uuid4()}")
        assert missing.status_code == 404


class TestReportsApi:
    async def test_defaults_to_current_month(self, client: httpx.AsyncClient):
        response = await client.get("/api/v1/reports/summary")

        body = response.json()
        assert response.status_code == 200
        assert body["date_from"] == "2024-06-01"
        assert body["date_to"] == "2024-06-30"
        assert body["total_orders"] == 0

    async def test_inverted_range_rejected(self, client: httpx.AsyncClient):
        response = await client.get(
            "/api/v1/reports/summary",
            params={"date_from": "2024-06-30", "date_to": "2024-06-01"},
        )

        assert response.status_code == 422


class TestEmailSettingsApi:
    async def test_save_and_read(self, client: httpx.AsyncClient):
        saved = await client.put(
            "/api/v1/email-settings",
            json={
                "primary_recipients": ["orders@portal.example.com"],
                "cc_recipients": [],
                "supplier_recipient": "dispatch@supplier.example.com",
                "updated_by": "admin",
            },
        )
        assert saved.status_code == 200

        response = await client.get("/api/v1/email-settings")

        body = response.json()
        assert body["is_default"] is False
        assert body["primary_recipients"] == ["orders@portal.example.com"]
        assert body["supplier_recipient"] == "dispatch@supplier.example.com"

    async def test_invalid_address_rejected(self, client: httpx.AsyncClient):
        response = await client.put(
            "/api/v1/email-settings",
            json={"primary_recipients": ["not-an-address"]},
        )

        assert response.status_code == 422

    async def test_primary_required(self, client: httpx.AsyncClient):
        response = await client.put("/api/v1/email-settings", json={"primary_recipients": []})

        assert response.status_code == 422


class TestDeleteApi:
    """Hard delete of restaurants and products that nothing refers to."""

    async def test_delete_restaurant_with_schedule(
        self, client: httpx.AsyncClient, sample_restaurant, sample_schedule
    ):
        response = await client.delete(f"/api/v1/restaurants/{sample_restaurant.id}")
        assert response.status_code == 204

        assert (await client.get(f"/api/v1/restaurants/{sample_restaurant.id}")).status_code == 404
        assert (await client.get("/api/v1/delivery-schedules")).json() == []

    async def test_delete_restaurant_with_orders_conflicts(
        self, client: httpx.AsyncClient, sample_restaurant, sample_products, sample_schedule
    ):
        await submit_order(client, sample_restaurant, sample_products)

        response = await client.delete(f"/api/v1/restaurants/{sample_restaurant.id}")

        assert response.status_code == 409
        assert (await client.get(f"/api/v1/restaurants/{sample_restaurant.id}")).status_code == 200

    async def test_delete_unknown_restaurant(self, client: httpx.AsyncClient):
        response = await client.delete(f"/api/v1/restaurants/{uuid4()}")

        assert response.status_code == 404

    async def test_delete_unused_product(self, client: httpx.AsyncClient, sample_products):
        water = sample_products[1]

        response = await client.delete(f"/api/v1/products/{water.id}")
        assert response.status_code == 204

        listed = await client.get("/api/v1/products", params={"active_only": False})
        assert [p["code"] for p in listed.json()] == ["CARB-001", "ENRG-001"]

    async def test_delete_ordered_product_conflicts(
        self, client: httpx.AsyncClient, sample_restaurant, sample_products, sample_schedule
    ):
        await submit_order(client, sample_restaurant, sample_products)

        response = await client.delete(f"/api/v1/products/{sample_products[0].id}")

        assert response.status_code == 409

    async def test_delete_unknown_product(self, client: httpx.AsyncClient):
        response = await client.delete(f"/api/v1/products/{uuid4()}")

        assert response.status_code == 404


class TestInputValidation:
    async def test_restaurant_email_must_be_an_address(self, client: httpx.AsyncClient):
        response = await client.post(
            "/api/v1/restaurants",
            json={"name": "Pier 9", "code": "R009", "email": "not-an-email"},
        )

        assert response.status_code == 422

    async def test_restaurant_email_accepted(self, client: httpx.AsyncClient):
        response = await client.post(
            "/api/v1/restaurants",
            json={"name": "Pier 9", "code": "R009", "email": "kitchen@pier9.example.com"},
        )

        assert response.status_code == 201
        assert response.json()["email"] == "kitchen@pier9.example.com"

    async def test_recipient_with_malformed_domain_rejected(self, client: httpx.AsyncClient):
        response = await client.put(
            "/api/v1/email-settings",
            json={"primary_recipients": ["orders@example..com"]},
        )

        assert response.status_code == 422

    async def test_boolean_lead_days_rejected(self, client: httpx.AsyncClient, sample_restaurant):
        response = await client.put(
            f"/api/v1/restaurants/{sample_restaurant.id}/delivery-schedule",
            json={"allowed_weekdays": [1], "min_lead_days": True, "max_lead_days": 5},
        )

        assert response.status_code == 422
