"""Integration tests for Subscription, Order and Generation API endpoints"""

import pytest
import pytest_asyncio
from datetime import timedelta
from decimal import Decimal
from httpx import AsyncClient

from config import ApplicationConfig
from src.app.services.clock import business_today
from tests.fixtures.factories import ADDRESS, make_product


@pytest.fixture(autouse=True)
def api_config(monkeypatch):
    monkeypatch.setattr(ApplicationConfig, "PLATFORM_FEE", "5")
    monkeypatch.setattr(ApplicationConfig, "DELIVERY_FEE", "0")
    monkeypatch.setattr(ApplicationConfig, "GENERATION_CONCURRENCY", 1)
    monkeypatch.setattr(ApplicationConfig, "SUBSCRIPTION_GENERATION_ENABLED", True)


@pytest_asyncio.fixture
async def catalog(db_session):
    db_session.add(make_product())
    db_session.add(make_product("prod_ghee", name="Ghee 500ml", in_stock=False))
    db_session.add(make_product("prod_paneer", name="Paneer 200g", allow_subscription=False))
    await db_session.commit()


def subscription_payload(**overrides):
    payload = {
        "user_id": "user_api_1",
        "items": [{"product_id": "prod_milk", "quantity": 2}],
        "frequency": "daily",
        "start_date": "2024-03-01",
        "delivery_address": ADDRESS,
    }
    payload.update(overrides)
    return payload


class TestSubscriptionAPIIntegration:
    """Integration test suite for subscription endpoints"""

    @pytest.mark.asyncio
    async def test_create_accept_and_fetch(self, client: AsyncClient, catalog):
        """
        Given a subscribable product
        When a subscription is created and accepted
        Then it moves from pending to active
        """
        # Act
        created = await client.post("/api/subscriptions", json=subscription_payload())
        subscription_id = created.json()["id"]
        accepted = await client.post(f"/api/subscriptions/{subscription_id}/accept")
        fetched = await client.get(f"/api/subscriptions/{subscription_id}")

        # Assert
        assert created.status_code == 201
        assert created.json()["status"] == "pending"
        assert accepted.status_code == 200
        assert accepted.json()["status"] == "active"
        assert fetched.json()["delivery_address"]["city"] == "Bengaluru"

    @pytest.mark.asyncio
    async def test_unsubscribable_product_returns_409(self, client: AsyncClient, catalog):
        response = await client.post(
            "/api/subscriptions",
            json=subscription_payload(items=[{"product_id": "prod_paneer", "quantity": 1}]),
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "PRODUCT_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_validation_error(self, client: AsyncClient):
        response = await client.post(
            "/api/subscriptions",
            json=subscription_payload(items=[{"product_id": "prod_milk", "quantity": 0}]),
        )

        assert response.status_code == 422  # Pydantic validation error

    @pytest.mark.asyncio
    async def test_pause_rules(self, client: AsyncClient, catalog):
        created = await client.post("/api/subscriptions", json=subscription_payload())
        subscription_id = created.json()["id"]
        tomorrow = business_today() + timedelta(days=1)

        pending_pause = await client.post(
            f"/api/subscriptions/{subscription_id}/pause",
            json={"paused_until": (tomorrow + timedelta(days=5)).isoformat()},
        )
        await client.post(f"/api/subscriptions/{subscription_id}/accept")
        too_soon = await client.post(
            f"/api/subscriptions/{subscription_id}/pause", json={"paused_until": tomorrow.isoformat()}
        )
        paused = await client.post(
            f"/api/subscriptions/{subscription_id}/pause",
            json={"paused_until": (tomorrow + timedelta(days=5)).isoformat()},
        )

        assert pending_pause.status_code == 409
        assert pending_pause.json()["error"]["code"] == "INVALID_TRANSITION"
        assert too_soon.status_code == 400
        assert too_soon.json()["error"]["code"] == "INVALID_PAUSE_DATE"
        assert paused.status_code == 200
        assert paused.json()["status"] == "paused"

    @pytest.mark.asyncio
    async def test_unknown_subscription_returns_404(self, client: AsyncClient):
        response = await client.post("/api/subscriptions/missing/cancel")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SUBSCRIPTION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_bulk_accept_then_list_for_user(self, client: AsyncClient, catalog):
        """
        Given two pending subscriptions for one customer
        When they are accepted in bulk together with an unknown id
        Then both become active and the unknown id is reported as failed
        """
        # Arrange
        first = await client.post("/api/subscriptions", json=subscription_payload(user_id="user_api_2"))
        second = await client.post(
            "/api/subscriptions", json=subscription_payload(user_id="user_api_2", frequency="weekly")
        )
        ids = [first.json()["id"], second.json()["id"]]

        # Act
        bulk = await client.post("/api/subscriptions/bulk-accept", json={"subscription_ids": ids + ["missing"]})
        active = await client.get("/api/subscriptions/user/user_api_2", params={"status": "active"})
        other_user = await client.get("/api/subscriptions/user/user_api_3")

        # Assert
        assert bulk.status_code == 200
        assert sorted(bulk.json()["succeeded"]) == sorted(ids)
        assert bulk.json()["failed"] == [
            {"id": "missing", "code": "SUBSCRIPTION_NOT_FOUND", "reason": "Subscription missing not found"}
        ]
        assert active.json()["total_count"] == 2
        assert {s["id"] for s in active.json()["subscriptions"]} == set(ids)
        assert other_user.json()["total_count"] == 0

    @pytest.mark.asyncio
    async def test_replace_items(self, client: AsyncClient, catalog):
        created = await client.post("/api/subscriptions", json=subscription_payload())
        subscription_id = created.json()["id"]

        replaced = await client.put(
            f"/api/subscriptions/{subscription_id}/items",
            json={"items": [{"product_id": "prod_ghee", "quantity": 1}]},
        )
        unsubscribable = await client.put(
            f"/api/subscriptions/{subscription_id}/items",
            json={"items": [{"product_id": "prod_paneer", "quantity": 1}]},
        )
        fetched = await client.get(f"/api/subscriptions/{subscription_id}")

        assert replaced.status_code == 200
        assert replaced.json()["items"] == [{"product_id": "prod_ghee", "quantity": 1}]
        assert replaced.json()["status"] == "pending"
        assert unsubscribable.status_code == 409
        assert unsubscribable.json()["error"]["code"] == "PRODUCT_UNAVAILABLE"
        assert fetched.json()["items"] == [{"product_id": "prod_ghee", "quantity": 1}]

    @pytest.mark.asyncio
    async def test_cancelled_subscription_items_return_409(self, client: AsyncClient, catalog):
        created = await client.post("/api/subscriptions", json=subscription_payload())
        subscription_id = created.json()["id"]
        await client.post(f"/api/subscriptions/{subscription_id}/cancel")

        response = await client.put(
            f"/api/subscriptions/{subscription_id}/items",
            json={"items": [{"product_id": "prod_milk", "quantity": 1}]},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "SUBSCRIPTION_CLOSED"

    @pytest.mark.asyncio
    async def test_duplicate_items_return_422(self, client: AsyncClient):
        response = await client.put(
            "/api/subscriptions/sub_1/items",
            json={"items": [{"product_id": "prod_milk", "quantity": 1}, {"product_id": "prod_milk", "quantity": 2}]},
        )

        assert response.status_code == 422


class TestOrderAPIIntegration:
    """Integration test suite for checkout and delivery endpoints"""

    @pytest.mark.asyncio
    async def test_place_order_with_fees(self, client: AsyncClient, catalog):
        response = await client.post(
            "/api/orders",
            json={
                "user_id": "user_api_1",
                "items": [{"product_id": "prod_milk", "quantity": 2}],
                "delivery_address": ADDRESS,
                "payment_reference": "pay_29QQoUBi66xm2f",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "one_time"
        assert Decimal(data["total_amount"]) == Decimal("241.00")
        assert data["scheduled_delivery_date"] == (business_today() + timedelta(days=1)).isoformat()
        assert data["order_number"].startswith(f"ORD-{business_today().year}-")

    @pytest.mark.asyncio
    async def test_out_of_stock_returns_409(self, client: AsyncClient, catalog):
        response = await client.post(
            "/api/orders",
            json={
                "user_id": "user_api_1",
                "items": [{"product_id": "prod_ghee", "quantity": 1}],
                "delivery_address": ADDRESS,
            },
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_status_lifecycle(self, client: AsyncClient, catalog):
        created = await client.post(
            "/api/orders",
            json={
                "user_id": "user_api_1",
                "items": [{"product_id": "prod_milk", "quantity": 1}],
                "delivery_address": ADDRESS,
            },
        )
        order_id = created.json()["id"]

        confirmed = await client.post(f"/api/orders/{order_id}/status", json={"status": "confirmed"})
        skipped = await client.post(f"/api/orders/{order_id}/status", json={"status": "delivered"})

        assert confirmed.json()["status"] == "confirmed"
        assert skipped.status_code == 409
        assert skipped.json()["error"]["code"] == "INVALID_TRANSITION"

    @pytest.mark.asyncio
    async def test_unknown_order_returns_404(self, client: AsyncClient):
        response = await client.get("/api/orders/missing")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_user_history_status_queue_and_bulk_status(self, client: AsyncClient, catalog):
        """
        Given two placed orders for one customer
        When one is confirmed and all are dispatched in bulk
        Then only the confirmed order moves and the listings reflect it
        """
        # Arrange
        order_ids = []
        for _ in range(2):
            created = await client.post(
                "/api/orders",
                json={
                    "user_id": "user_api_4",
                    "items": [{"product_id": "prod_milk", "quantity": 1}],
                    "delivery_address": ADDRESS,
                },
            )
            order_ids.append(created.json()["id"])
        await client.post(f"/api/orders/{order_ids[0]}/status", json={"status": "confirmed"})

        # Act
        bulk = await client.post(
            "/api/orders/bulk-status", json={"order_ids": order_ids, "status": "out_for_delivery"}
        )
        history = await client.get("/api/orders/user/user_api_4")
        pending = await client.get("/api/orders/by-status/pending")

        # Assert
        assert bulk.status_code == 200
        assert bulk.json()["succeeded"] == [order_ids[0]]
        assert [(f["id"], f["code"]) for f in bulk.json()["failed"]] == [(order_ids[1], "INVALID_TRANSITION")]
        assert history.json()["total_count"] == 2
        assert {o["status"] for o in history.json()["orders"]} == {"out_for_delivery", "pending"}
        assert [o["id"] for o in pending.json()["orders"]] == [order_ids[1]]

    @pytest.mark.asyncio
    async def test_unknown_status_queue_returns_422(self, client: AsyncClient):
        response = await client.get("/api/orders/by-status/lost")

        assert response.status_code == 422


class TestGenerationAPIIntegration:
    """Integration test suite for the generation trigger"""

    @pytest.mark.asyncio
    async def test_generate_then_list_delivery_sheet(self, client: AsyncClient, catalog):
        """
        Given an accepted daily subscription
        When generation is triggered twice for the same date
        Then one order exists and the second run reports it as skipped
        """
        created = await client.post("/api/subscriptions", json=subscription_payload())
        await client.post(f"/api/subscriptions/{created.json()['id']}/accept")

        first = await client.post("/api/subscription-orders/generate", json={"reference_date": "2024-03-05"})
        second = await client.post("/api/subscription-orders/generate", json={"reference_date": "2024-03-05"})
        sheet = await client.get("/api/orders", params={"scheduled_date": "2024-03-05", "status": "pending"})

        assert first.status_code == 200
        assert first.json()["created"] == 1
        assert second.json()["created"] == 0
        assert second.json()["skipped"] == 1
        assert sheet.json()["total_count"] == 1
        order = sheet.json()["orders"][0]
        assert order["type"] == "subscription"
        assert order["order_number"] == "ORD-2024-00001"
        assert Decimal(order["total_amount"]) == Decimal("236.00")

    @pytest.mark.asyncio
    async def test_generation_disabled_returns_503(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(ApplicationConfig, "SUBSCRIPTION_GENERATION_ENABLED", False)

        response = await client.post("/api/subscription-orders/generate")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "GENERATION_DISABLED"
