from decimal import Decimal

from conftest import delivery_details, order_status


def test_create_order(client, catalog, register_user, place_order):
    user = register_user("jan")
    order = place_order(user["id"], catalog["products"][0], total="25.00", quantity=2)

    assert order["status"] == "pending"
    assert order["order_code"].startswith("D-")
    assert order["courier_id"] is None
    assert Decimal(str(order["total_amount"])) == Decimal("25.00")

    [item] = order["items"]
    assert item["product_name"] == "Ibuprofen 200mg"
    assert item["quantity"] == 2
    assert Decimal(str(item["unit_price"])) == Decimal("12.50")
    assert Decimal(str(item["total_price"])) == Decimal("25.00")


def test_create_order_for_missing_product_writes_nothing(client, db, catalog, register_user):
    user = register_user("jan")
    resp = client.post(
        "/api/orders/create",
        json={**delivery_details(user["id"]), "product_id": 9999, "quantity": 1, "total_amount": "10.00"},
    )
    assert resp.status_code == 404
    assert client.get("/api/orders", params={"user_id": user["id"]}).json()["orders"] == []


def test_create_order_validates_input(client, catalog, register_user):
    user = register_user("jan")
    payload = {**delivery_details(user["id"]), "product_id": catalog["products"][0], "quantity": 1}

    assert client.post("/api/orders/create", json={**payload, "total_amount": "0"}).status_code == 400
    assert client.post("/api/orders/create", json={**payload, "total_amount": "5", "delivery_address": ""}).status_code == 400


def test_order_codes_are_unique(client, catalog, register_user, place_order):
    user = register_user("jan")
    codes = {place_order(user["id"], catalog["products"][0])["order_code"] for _ in range(3)}
    assert len(codes) == 3


def test_get_order_is_owner_only(client, catalog, register_user, place_order):
    owner = register_user("jan")
    other = register_user("ewa")
    order = place_order(owner["id"], catalog["products"][0])

    resp = client.get(f"/api/orders/{order['id']}", params={"user_id": owner["id"]})
    assert resp.status_code == 200
    assert resp.json()["order"]["id"] == order["id"]

    resp = client.get(f"/api/orders/{order['id']}", params={"user_id": other["id"]})
    assert resp.status_code == 403
    resp = client.get("/api/orders/9999", params={"user_id": owner["id"]})
    assert resp.status_code == 404


def test_list_orders(client, catalog, register_user, place_order):
    jan = register_user("jan")
    ewa = register_user("ewa")
    place_order(jan["id"], catalog["products"][0])
    place_order(jan["id"], catalog["products"][1])
    place_order(ewa["id"], catalog["products"][2])

    orders = client.get("/api/orders", params={"user_id": jan["id"]}).json()["orders"]
    assert len(orders) == 2
    assert {o["user_id"] for o in orders} == {jan["id"]}


def test_checkout_builds_order_from_cart(client, catalog, register_user):
    user = register_user("jan")
    ibuprofen, paracetamol, _ = catalog["products"]
    client.post("/api/cart/add", json={"user_id": user["id"], "product_id": ibuprofen, "quantity": 2})
    client.post("/api/cart/add", json={"user_id": user["id"], "product_id": paracetamol, "quantity": 1})

    resp = client.post("/api/orders/checkout", json=delivery_details(user["id"]))
    assert resp.status_code == 200
    order = resp.json()["order"]

    assert Decimal(str(order["total_amount"])) == Decimal("33.99")
    assert sorted(i["product_name"] for i in order["items"]) == ["Ibuprofen 200mg", "Paracetamol 500mg"]
    assert client.get("/api/cart", params={"user_id": user["id"]}).json()["items"] == []


def test_checkout_empty_cart(client, register_user):
    user = register_user("jan")
    resp = client.post("/api/orders/checkout", json=delivery_details(user["id"]))
    assert resp.status_code == 400
    assert resp.json()["error"] == "Koszyk jest pusty"


def test_customer_withdraws_pending_order(client, db, catalog, register_user, place_order):
    owner = register_user("jan")
    other = register_user("ewa")
    order = place_order(owner["id"], catalog["products"][0])

    resp = client.post(f"/api/orders/{order['id']}/cancel", json={"user_id": other["id"]})
    assert resp.status_code == 403

    resp = client.post(f"/api/orders/{order['id']}/cancel", json={"user_id": owner["id"]})
    assert resp.status_code == 200
    assert resp.json()["order"]["status"] == "cancelled"
    assert resp.json()["order"]["cancelled_at"] is not None
    assert order_status(db, order["id"]) == "cancelled"

    resp = client.post(f"/api/orders/{order['id']}/cancel", json={"user_id": owner["id"]})
    assert resp.status_code == 400

    resp = client.post("/api/orders/9999/cancel", json={"user_id": owner["id"]})
    assert resp.status_code == 404


def test_create_order_rejects_amounts_the_column_cannot_hold(client, catalog, register_user):
    user = register_user("jan")
    payload = {**delivery_details(user["id"]), "product_id": catalog["products"][0], "quantity": 1}

    for amount in ("1e30", "100000000.00", "12.345"):
        resp = client.post("/api/orders/create", json={**payload, "total_amount": amount})
        assert resp.status_code == 400, amount

    resp = client.post("/api/orders/create", json={**payload, "total_amount": "99999999.99"})
    assert resp.status_code == 200


def test_create_order_rejects_huge_quantity(client, catalog, register_user):
    user = register_user("jan")
    payload = {**delivery_details(user["id"]), "product_id": catalog["products"][0], "total_amount": "10.00"}
    resp = client.post("/api/orders/create", json={**payload, "quantity": 10**12})
    assert resp.status_code == 400


def test_checkout_total_over_limit(client, db, catalog, register_user):
    from pharmacy.data.models import ProductModel

    expensive = ProductModel(name="Sprzęt medyczny", price=Decimal("99999999.00"), stock_quantity=1)
    db.add(expensive)
    db.commit()

    user = register_user("jan")
    client.post("/api/cart/add", json={"user_id": user["id"], "product_id": expensive.id, "quantity": 2})

    resp = client.post("/api/orders/checkout", json=delivery_details(user["id"]))
    assert resp.status_code == 400
    # koszyk zostaje nienaruszony
    assert len(client.get("/api/cart", params={"user_id": user["id"]}).json()["items"]) == 1


def test_order_codes_do_not_repeat():
    from pharmacy.services.order_service import generate_order_code

    codes = {generate_order_code() for _ in range(200)}
    assert len(codes) == 200
