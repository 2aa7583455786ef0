"""
Tests for the orders REST endpoints.
"""

import pytest

from tests.conftest import CUSTOMER_ID, STAFF_ID, _bearer


def _order_body(restaurant_id: int, dish_id: int, **overrides) -> dict:
    body = {
        "restaurant_id": restaurant_id,
        "order_type": "takeout",
        "payment_method": "card",
        "items": [
            {
                "dish_id": dish_id,
                "quantity": 2,
                "customizations": [{"name": "Size", "option": "Large", "price_cents": 150}],
            }
        ],
    }
    body.update(overrides)
    return body


@pytest.fixture
def order_body(seed_restaurant, seed_dishes):
    def _make(**overrides) -> dict:
        return _order_body(seed_restaurant.id, seed_dishes["burger"].id, **overrides)

    return _make


@pytest.fixture
def created_order(client, order_body, customer_headers):
    response = client.post("/api/orders", json=order_body(), headers=customer_headers)
    assert response.status_code == 201, response.json()
    return response.json()


class TestCreateOrderEndpoint:
    """POST /api/orders"""

    def test_create_order(self, client, order_body, customer_headers):
        response = client.post("/api/orders", json=order_body(), headers=customer_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["customer_id"] == CUSTOMER_ID
        assert data["order_number"].startswith("ORD")
        assert data["subtotal_cents"] == 2748
        assert data["tax_cents"] == 234
        assert data["service_charge_cents"] == 275
        assert data["total_cents"] == 3257
        assert data["payment_method"] == "card"
        assert data["items"][0]["customizations"][0]["option"] == "Large"
        assert [h["notes"] for h in data["status_history"]] == ["Order placed"]

    def test_requires_token(self, client, order_body):
        response = client.post("/api/orders", json=order_body())

        assert response.status_code == 401

    def test_rejects_invalid_token(self, client, order_body):
        response = client.post(
            "/api/orders",
            json=order_body(),
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401

    def test_unknown_dish_is_bad_request(self, client, seed_restaurant, customer_headers):
        body = _order_body(seed_restaurant.id, 9999)

        response = client.post("/api/orders", json=body, headers=customer_headers)

        assert response.status_code == 400
        assert "Dish 9999" in response.json()["detail"]

    def test_out_of_stock_is_conflict(self, client, seed_restaurant, seed_dishes, customer_headers):
        body = _order_body(seed_restaurant.id, seed_dishes["soup"].id)

        response = client.post("/api/orders", json=body, headers=customer_headers)

        assert response.status_code == 409
        assert "Soup" in response.json()["detail"]

    def test_zero_quantity_is_bad_request(self, client, order_body, seed_dishes, customer_headers):
        body = order_body(items=[{"dish_id": seed_dishes["burger"].id, "quantity": 0}])

        response = client.post("/api/orders", json=body, headers=customer_headers)

        assert response.status_code == 400

    def test_unknown_order_type_is_unprocessable(self, client, order_body, customer_headers):
        response = client.post(
            "/api/orders", json=order_body(order_type="drive_through"), headers=customer_headers
        )

        assert response.status_code == 422

    def test_occupied_table_is_conflict(
        self, client, db_session, order_body, seed_table, customer_headers
    ):
        seed_table.status = "occupied"
        db_session.commit()

        response = client.post(
            "/api/orders",
            json=order_body(order_type="dine_in", table_id=seed_table.id),
            headers=customer_headers,
        )

        assert response.status_code == 409

    def test_non_json_body_rejected(self, client, customer_headers):
        response = client.post(
            "/api/orders",
            content="restaurant_id=1",
            headers={**customer_headers, "Content-Type": "text/plain"},
        )

        assert response.status_code == 415


class TestReadOrderEndpoints:
    """GET /api/orders and GET /api/orders/{id}"""

    def test_get_own_order(self, client, created_order, customer_headers):
        response = client.get(f"/api/orders/{created_order['id']}", headers=customer_headers)

        assert response.status_code == 200
        assert response.json()["order_number"] == created_order["order_number"]

    def test_other_customer_cannot_view(self, client, created_order, other_customer_headers):
        response = client.get(f"/api/orders/{created_order['id']}", headers=other_customer_headers)

        assert response.status_code == 403

    def test_staff_can_view(self, client, created_order, staff_headers):
        response = client.get(f"/api/orders/{created_order['id']}", headers=staff_headers)

        assert response.status_code == 200

    def test_unknown_order(self, client, customer_headers):
        response = client.get("/api/orders/9999", headers=customer_headers)

        assert response.status_code == 404

    def test_list_newest_first_with_pagination(self, client, order_body, customer_headers):
        numbers = [
            client.post("/api/orders", json=order_body(), headers=customer_headers).json()["order_number"]
            for _ in range(3)
        ]

        response = client.get("/api/orders?limit=2", headers=customer_headers)

        assert response.status_code == 200
        data = response.json()
        assert [o["order_number"] for o in data["items"]] == [numbers[2], numbers[1]]
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["has_next"] is True

    def test_customer_only_sees_own_orders(self, client, created_order, other_customer_headers):
        response = client.get("/api/orders", headers=other_customer_headers)

        assert response.json()["items"] == []

    def test_staff_filters_by_status(self, client, created_order, staff_headers, seed_restaurant):
        pending = client.get(
            f"/api/orders?restaurant_id={seed_restaurant.id}&status=pending", headers=staff_headers
        )
        completed = client.get("/api/orders?status=completed", headers=staff_headers)

        assert pending.json()["pagination"]["total"] == 1
        assert completed.json()["pagination"]["total"] == 0


class TestOrderLifecycleEndpoints:
    """Status, cancel and review endpoints."""

    def test_staff_updates_status(self, client, created_order, staff_headers):
        response = client.put(
            f"/api/orders/{created_order['id']}/status",
            json={"status": "confirmed", "notes": "Accepted"},
            headers=staff_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"
        assert len(response.json()["status_history"]) == 2

    def test_customer_cannot_update_status(self, client, created_order, customer_headers):
        response = client.put(
            f"/api/orders/{created_order['id']}/status",
            json={"status": "confirmed"},
            headers=customer_headers,
        )

        assert response.status_code == 403

    def test_strict_policy_rejects_skip(self, client, created_order, staff_headers, monkeypatch):
        from shared.config.settings import settings

        monkeypatch.setattr(settings, "order_transition_policy", "strict")

        response = client.put(
            f"/api/orders/{created_order['id']}/status",
            json={"status": "completed"},
            headers=staff_headers,
        )

        assert response.status_code == 400

    def test_cancel_with_reason(self, client, created_order, customer_headers):
        response = client.put(
            f"/api/orders/{created_order['id']}/cancel",
            json={"reason": "Too slow"},
            headers=customer_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["cancellation_reason"] == "Too slow"

    def test_cancel_without_body(self, client, created_order, customer_headers):
        response = client.put(f"/api/orders/{created_order['id']}/cancel", headers=customer_headers)

        assert response.status_code == 200

    def test_cancel_completed_order_rejected(self, client, created_order, staff_headers):
        client.put(
            f"/api/orders/{created_order['id']}/status",
            json={"status": "completed"},
            headers=staff_headers,
        )

        response = client.put(f"/api/orders/{created_order['id']}/cancel", headers=staff_headers)

        assert response.status_code == 400

    def test_review_flow(self, client, created_order, staff_headers, customer_headers):
        client.put(
            f"/api/orders/{created_order['id']}/status",
            json={"status": "completed"},
            headers=staff_headers,
        )

        response = client.post(
            f"/api/orders/{created_order['id']}/review",
            json={"rating": 4, "review": "Tasty"},
            headers=customer_headers,
        )

        assert response.status_code == 200
        assert response.json()["rating"] == 4
        assert response.json()["review_date"] is not None

    def test_review_by_other_customer_forbidden(
        self, client, created_order, staff_headers, other_customer_headers
    ):
        client.put(
            f"/api/orders/{created_order['id']}/status",
            json={"status": "completed"},
            headers=staff_headers,
        )

        response = client.post(
            f"/api/orders/{created_order['id']}/review",
            json={"rating": 4},
            headers=other_customer_headers,
        )

        assert response.status_code == 403

    def test_review_pending_order_rejected(self, client, created_order, customer_headers):
        response = client.post(
            f"/api/orders/{created_order['id']}/review",
            json={"rating": 5},
            headers=customer_headers,
        )

        assert response.status_code == 400

    def test_other_customer_cannot_cancel(
        self, client, created_order, customer_headers, other_customer_headers
    ):
        response = client.put(
            f"/api/orders/{created_order['id']}/cancel", headers=other_customer_headers
        )

        assert response.status_code == 403
        order = client.get(f"/api/orders/{created_order['id']}", headers=customer_headers).json()
        assert order["status"] == "pending"

    def test_staff_can_cancel(self, client, created_order, staff_headers):
        response = client.put(f"/api/orders/{created_order['id']}/cancel", headers=staff_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"


class TestRestaurantScoping:
    """Staff only act on orders of the restaurant in their token."""

    def test_foreign_owner_cannot_update_status(
        self, client, created_order, customer_headers, foreign_owner_headers
    ):
        response = client.put(
            f"/api/orders/{created_order['id']}/status",
            json={"status": "rejected"},
            headers=foreign_owner_headers,
        )

        assert response.status_code == 403
        order = client.get(f"/api/orders/{created_order['id']}", headers=customer_headers).json()
        assert order["status"] == "pending"

    def test_foreign_owner_cannot_cancel(self, client, created_order, foreign_owner_headers):
        response = client.put(
            f"/api/orders/{created_order['id']}/cancel", headers=foreign_owner_headers
        )

        assert response.status_code == 403

    def test_foreign_owner_cannot_view(self, client, created_order, foreign_owner_headers):
        response = client.get(f"/api/orders/{created_order['id']}", headers=foreign_owner_headers)

        assert response.status_code == 403

    def test_foreign_owner_cannot_list_other_restaurant(
        self, client, created_order, seed_restaurant, foreign_owner_headers
    ):
        response = client.get(
            f"/api/orders?restaurant_id={seed_restaurant.id}", headers=foreign_owner_headers
        )

        assert response.status_code == 403

    def test_staff_list_defaults_to_own_restaurant(
        self, client, created_order, staff_headers, foreign_owner_headers
    ):
        ours = client.get("/api/orders", headers=staff_headers)
        theirs = client.get("/api/orders", headers=foreign_owner_headers)

        assert ours.json()["pagination"]["total"] == 1
        assert theirs.json()["pagination"]["total"] == 0

    def test_staff_without_restaurant_claim_cannot_list(self, client, created_order):
        response = client.get("/api/orders", headers=_bearer(STAFF_ID, "staff"))

        assert response.status_code == 403

    def test_super_admin_reaches_every_restaurant(
        self, client, created_order, seed_restaurant, super_admin_headers
    ):
        updated = client.put(
            f"/api/orders/{created_order['id']}/status",
            json={"status": "confirmed"},
            headers=super_admin_headers,
        )
        listed = client.get(
            f"/api/orders?restaurant_id={seed_restaurant.id}", headers=super_admin_headers
        )

        assert updated.status_code == 200
        assert updated.json()["status"] == "confirmed"
        assert listed.json()["pagination"]["total"] == 1
