"""Integration tests for the Storefront API endpoints."""

from fastapi.testclient import TestClient

from factories import ADDRESS, add_product


def _get_test_client():
    """Build a minimal FastAPI test client with the storefront routes."""
    from fastapi import FastAPI

    from storefront.api import register_exception_handlers, routers

    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)


def _as(user_id):
    return {"X-User-Id": user_id}


def _checkout(client, user_id="user-1", quantity=2, stock=5, **order_fields):
    product_id = add_product(price=10.0, stock=stock)
    client.post("/customers", json={"name": "Ada", "email": f"{user_id}@example.com"}, headers=_as(user_id))
    client.post("/cart/items", json={"product_id": product_id, "quantity": quantity}, headers=_as(user_id))
    body = {"shipping_address": ADDRESS, "payment_method": "card", **order_fields}
    return product_id, client.post("/orders", json=body, headers=_as(user_id))


class TestAuthentication:
    def test_missing_user_header(self):
        client = _get_test_client()
        resp = client.get("/cart")
        assert resp.status_code == 401
        assert resp.json() == {"message": "Authentication required"}


class TestProductsAPI:
    def test_create_and_fetch_product(self):
        client = _get_test_client()
        resp = client.post(
            "/products",
            json={"name": "Mug", "description": "Stoneware", "price": 12.0, "discount_price": 9.0, "stock": 3},
            headers=_as("admin"),
        )
        assert resp.status_code == 201

        product = client.get(f"/products/{resp.json()['product_id']}").json()
        assert product["selling_price"] == 9.0
        assert product["stock"] == 3

    def test_unknown_product(self):
        resp = _get_test_client().get("/products/missing")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Product not found"}

    def test_restock(self):
        client = _get_test_client()
        product_id = add_product(stock=1)
        resp = client.put(f"/products/{product_id}/restock", json={"quantity": 4}, headers=_as("admin"))
        assert resp.status_code == 200
        assert client.get(f"/products/{product_id}").json()["stock"] == 5


class TestCartAPI:
    def test_empty_cart(self):
        resp = _get_test_client().get("/cart", headers=_as("user-1"))
        assert resp.status_code == 200
        assert resp.json() == {"customer_id": "user-1", "items": [], "total_amount": 0.0}

    def test_add_update_remove(self):
        client = _get_test_client()
        product_id = add_product(price=10.0)

        added = client.post("/cart/items", json={"product_id": product_id, "quantity": 2}, headers=_as("user-1"))
        assert added.status_code == 201
        assert added.json()["total_amount"] == 20.0
        item_id = added.json()["items"][0]["id"]

        updated = client.put(f"/cart/items/{item_id}", json={"quantity": 3}, headers=_as("user-1"))
        assert updated.json()["total_amount"] == 30.0

        removed = client.delete(f"/cart/items/{item_id}", headers=_as("user-1"))
        assert removed.json()["items"] == []

    def test_invalid_quantity(self):
        client = _get_test_client()
        product_id = add_product()
        resp = client.post("/cart/items", json={"product_id": product_id, "quantity": 0}, headers=_as("user-1"))
        assert resp.status_code == 400
        assert "quantity" in resp.json()["message"]

    def test_clear_cart(self):
        client = _get_test_client()
        product_id = add_product()
        client.post("/cart/items", json={"product_id": product_id}, headers=_as("user-1"))

        resp = client.delete("/cart", headers=_as("user-1"))
        assert resp.status_code == 200
        assert resp.json()["items"] == []


class TestOrdersAPI:
    def test_place_order(self):
        client = _get_test_client()
        product_id, resp = _checkout(client)

        assert resp.status_code == 201
        order = resp.json()
        assert order["total_amount"] == 20.0
        assert order["status"] == "pending"
        assert order["payment_status"] == "pending"
        assert order["shipping_address"]["city"] == "Springfield"
        assert client.get(f"/products/{product_id}").json()["stock"] == 3
        assert client.get("/cart", headers=_as("user-1")).json()["items"] == []

    def test_order_lines_carry_product(self):
        client = _get_test_client()
        product_id, placed = _checkout(client)
        order_id = placed.json()["id"]
        expected = {"id": product_id, "name": "Mug", "price": 10.0, "discount_price": None, "is_active": True}

        line = placed.json()["items"][0]
        assert line["product_id"] == product_id
        assert line["product"] == expected
        assert line["price"] == 10.0

        paid = {"payment_status": "completed"}
        responses = [
            client.get(f"/orders/{order_id}", headers=_as("user-1")).json(),
            client.get("/orders", headers=_as("user-1")).json()["orders"][0],
            client.put(f"/orders/{order_id}/status", json={"status": "processing"}, headers=_as("user-1")).json(),
            client.put(f"/orders/{order_id}/payment", json=paid, headers=_as("user-1")).json(),
        ]
        for order in responses:
            assert order["items"][0]["product"] == expected

    def test_empty_cart(self):
        client = _get_test_client()
        resp = client.post(
            "/orders",
            json={"shipping_address": ADDRESS, "payment_method": "card"},
            headers=_as("user-1"),
        )
        assert resp.status_code == 400
        assert resp.json() == {"message": "Cart is empty"}

    def test_insufficient_stock(self):
        client = _get_test_client()
        _, resp = _checkout(client, quantity=4, stock=3)
        assert resp.status_code == 400
        assert resp.json()["message"].startswith("Insufficient stock for")

    def test_missing_address_field(self):
        client = _get_test_client()
        resp = client.post(
            "/orders",
            json={"shipping_address": {"street": "1 Road"}, "payment_method": "card"},
            headers=_as("user-1"),
        )
        assert resp.status_code == 400

    def test_note_over_limit(self):
        client = _get_test_client()
        _, resp = _checkout(client, note="x" * 101)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Note must be at most 100 characters"}

    def test_list_orders_with_status_counts(self):
        client = _get_test_client()
        _checkout(client)

        resp = client.get("/orders", headers=_as("user-1"))
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 1
        assert body["page"] == 1
        assert body["pages"] == 1
        assert body["status_counts"] == {
            "pending": 1,
            "processing": 0,
            "shipped": 0,
            "delivered": 0,
            "cancelled": 0,
        }

    def test_list_orders_by_date(self):
        client = _get_test_client()
        _checkout(client)

        params = {"start_date": "2000-01-01", "end_date": "2000-01-02"}
        resp = client.get("/orders", params=params, headers=_as("user-1"))
        assert resp.json()["total"] == 0

    def test_invalid_date(self):
        resp = _get_test_client().get("/orders", params={"start_date": "yesterday"}, headers=_as("user-1"))
        assert resp.status_code == 400

    def test_get_order_scoped_to_owner(self):
        client = _get_test_client()
        _, placed = _checkout(client)
        order_id = placed.json()["id"]

        assert client.get(f"/orders/{order_id}", headers=_as("user-1")).status_code == 200
        other = client.get(f"/orders/{order_id}", headers=_as("user-2"))
        assert other.status_code == 404
        assert other.json() == {"message": "Order not found"}

    def test_update_status(self):
        client = _get_test_client()
        _, placed = _checkout(client)
        order_id = placed.json()["id"]

        resp = client.put(f"/orders/{order_id}/status", json={"status": "shipped"}, headers=_as("user-1"))
        assert resp.status_code == 200
        assert resp.json()["status"] == "shipped"

    def test_update_status_invalid(self):
        client = _get_test_client()
        _, placed = _checkout(client)
        order_id = placed.json()["id"]

        resp = client.put(f"/orders/{order_id}/status", json={"status": "lost"}, headers=_as("user-1"))
        assert resp.status_code == 400
        assert resp.json()["message"].startswith("Invalid status 'lost'")

    def test_update_status_not_owner(self):
        client = _get_test_client()
        _, placed = _checkout(client)
        order_id = placed.json()["id"]

        resp = client.put(f"/orders/{order_id}/status", json={"status": "shipped"}, headers=_as("user-2"))
        assert resp.status_code == 404

    def test_update_payment(self):
        client = _get_test_client()
        _, placed = _checkout(client)
        order_id = placed.json()["id"]

        body = {"payment_status": "completed"}
        resp = client.put(f"/orders/{order_id}/payment", json=body, headers=_as("user-1"))
        assert resp.status_code == 200
        assert resp.json()["payment_status"] == "completed"

    def test_update_payment_unknown_order(self):
        resp = _get_test_client().put(
            "/orders/missing/payment", json={"payment_status": "completed"}, headers=_as("user-1")
        )
        assert resp.status_code == 404


class TestNotificationsAPI:
    def test_order_notification_listed(self):
        client = _get_test_client()
        _, placed = _checkout(client)

        body = client.get("/notifications", headers=_as("user-1")).json()
        assert body["total"] == 1
        assert body["unread_count"] == 1
        notification = body["notifications"][0]
        assert notification["notification_type"] == "order"
        assert notification["data"] == {"order_id": placed.json()["id"], "type": "order_placed"}

    def test_filter_by_type(self):
        client = _get_test_client()
        _checkout(client)

        body = client.get("/notifications", params={"type": "promotion"}, headers=_as("user-1")).json()
        assert body["total"] == 0
        assert body["unread_count"] == 1

    def test_mark_read_and_read_all(self):
        client = _get_test_client()
        _checkout(client)
        notification_id = client.get("/notifications", headers=_as("user-1")).json()["notifications"][0]["id"]

        resp = client.put(f"/notifications/{notification_id}", headers=_as("user-1"))
        assert resp.status_code == 200
        assert resp.json()["is_read"] is True

        resp = client.put("/notifications/read-all", headers=_as("user-1"))
        assert resp.json() == {"message": "0 notifications marked as read"}

    def test_mark_read_not_owner(self):
        client = _get_test_client()
        _checkout(client)
        notification_id = client.get("/notifications", headers=_as("user-1")).json()["notifications"][0]["id"]

        resp = client.put(f"/notifications/{notification_id}", headers=_as("user-2"))
        assert resp.status_code == 404

    def test_delete(self):
        client = _get_test_client()
        _checkout(client)
        notification_id = client.get("/notifications", headers=_as("user-1")).json()["notifications"][0]["id"]

        assert client.delete(f"/notifications/{notification_id}", headers=_as("user-2")).status_code == 404
        resp = client.delete(f"/notifications/{notification_id}", headers=_as("user-1"))
        assert resp.status_code == 200
        assert client.get("/notifications", headers=_as("user-1")).json()["total"] == 0
        assert client.delete(f"/notifications/{notification_id}", headers=_as("user-1")).status_code == 404


class TestCustomersAPI:
    def test_register_and_update_token(self, push_adapter):
        client = _get_test_client()
        resp = client.post("/customers", json={"name": "Ada", "email": "ada@example.com"}, headers=_as("user-1"))
        assert resp.status_code == 201
        assert resp.json() == {"customer_id": "user-1"}

        resp = client.post("/customers/me/fcm-token", json={"fcm_token": "device-1"}, headers=_as("user-1"))
        assert resp.status_code == 200

        product_id = add_product(stock=2)
        client.post("/cart/items", json={"product_id": product_id}, headers=_as("user-1"))
        client.post("/orders", json={"shipping_address": ADDRESS, "payment_method": "card"}, headers=_as("user-1"))

        assert push_adapter.sent_pushes[0]["title"] == "Order Placed Successfully"

    def test_token_for_unknown_user(self):
        resp = _get_test_client().post("/customers/me/fcm-token", json={"fcm_token": "t"}, headers=_as("ghost"))
        assert resp.status_code == 404
        assert resp.json() == {"message": "User not found"}
