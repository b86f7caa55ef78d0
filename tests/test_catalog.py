from decimal import Decimal


def test_list_categories(client, catalog):
    resp = client.get("/api/categories")
    assert resp.status_code == 200
    names = [c["name"] for c in resp.json()["categories"]]
    assert names == sorted(names)
    assert set(names) == {"Przeciwbólowe", "Witaminy"}


def test_products_pagination(client, catalog):
    first = client.get("/api/products", params={"page": 1, "limit": 2}).json()
    second = client.get("/api/products", params={"page": 2, "limit": 2}).json()

    assert first["total"] == 3
    assert first["totalPages"] == 2
    assert len(first["products"]) == 2
    assert len(second["products"]) == 1

    ids = {p["id"] for p in first["products"]} | {p["id"] for p in second["products"]}
    assert ids == set(catalog["products"])


def test_products_limit_is_capped(client, catalog):
    body = client.get("/api/products", params={"limit": 1000}).json()
    assert body["limit"] == 100


def test_products_filters(client, catalog):
    body = client.get("/api/products", params={"category": "Witaminy"}).json()
    assert [p["name"] for p in body["products"]] == ["Witamina C 1000"]
    assert body["products"][0]["category_name"] == "Witaminy"

    body = client.get("/api/products", params={"category": "all"}).json()
    assert body["total"] == 3

    body = client.get("/api/products", params={"category_id": catalog["categories"]["painkillers"]}).json()
    assert body["total"] == 2

    body = client.get("/api/products", params={"new": "true"}).json()
    assert [p["name"] for p in body["products"]] == ["Paracetamol 500mg"]


def test_search_combined_with_popular_counts_consistently(client, catalog):
    body = client.get("/api/products", params={"search": "lek", "popular": "true", "limit": 1}).json()
    # "lek" pasuje do dwoch opisow, ale tylko ibuprofen jest popularny
    assert body["total"] == 1
    assert body["totalPages"] == 1
    assert body["products"][0]["name"] == "Ibuprofen 200mg"


def test_search_matches_manufacturer(client, catalog):
    body = client.get("/api/products", params={"search": "olimp"}).json()
    assert [p["name"] for p in body["products"]] == ["Witamina C 1000"]


def test_get_product(client, catalog):
    product_id = catalog["products"][0]
    resp = client.get(f"/api/products/{product_id}")
    assert resp.status_code == 200
    product = resp.json()["product"]
    assert product["name"] == "Ibuprofen 200mg"
    assert Decimal(str(product["price"])) == Decimal("12.50")


def test_get_missing_product(client, catalog):
    resp = client.get("/api/products/9999")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_admin_creates_product(client, catalog, register_user, make_admin):
    user = register_user("admin")
    payload = {
        "user_id": user["id"],
        "name": "Magnez B6",
        "category_id": catalog["categories"]["vitamins"],
        "price": "15.00",
        "stock_quantity": 10,
        "in_stock": True,
    }

    assert client.post("/api/admin/products", json=payload).status_code == 403

    make_admin(user["id"])
    resp = client.post("/api/admin/products", json=payload)
    assert resp.status_code == 200
    product = resp.json()["product"]
    assert product["category_name"] == "Witaminy"
    assert Decimal(str(product["price"])) == Decimal("15.00")

    resp = client.post("/api/admin/products", json={**payload, "category_id": 999})
    assert resp.status_code == 400


def test_admin_product_price_must_fit(client, catalog, register_user, make_admin):
    user = register_user("admin")
    make_admin(user["id"])
    payload = {
        "user_id": user["id"],
        "name": "Magnez B6",
        "category_id": catalog["categories"]["vitamins"],
        "price": "1e30",
        "stock_quantity": 10,
    }
    assert client.post("/api/admin/products", json=payload).status_code == 400
    assert client.post("/api/admin/products", json={**payload, "price": "15.00", "old_price": "1.999"}).status_code == 400
