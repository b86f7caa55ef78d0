import os

# konfiguracja musi byc ustawiona przed importem pakietu
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["TELEGRAM_BOT_TOKEN"] = ""
os.environ["TELEGRAM_CHAT_ID"] = ""
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import pharmacy.data.models  # noqa: F401
from pharmacy.api import create_app
from pharmacy.data.database import Base, SessionLocal, engine
from pharmacy.data.models import CategoryModel, DeliveryOrderModel, ProductModel, UserModel
from pharmacy.services.google_client import GoogleIdentity, get_google_client


class FakeGoogleClient:
    """Zamiast weryfikacji Google: 'good-<sub>' jest poprawnym tokenem."""

    def verify(self, token: str):
        if not token.startswith("good-"):
            return None
        sub = token[len("good-"):]
        return GoogleIdentity(
            sub=sub,
            email=f"{sub}@gmail.com",
            email_verified=True,
            name="Anna Nowak",
            given_name="Anna",
            family_name="Nowak",
            picture="https://example.com/a.png",
        )


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    app = create_app()
    app.dependency_overrides[get_google_client] = FakeGoogleClient
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register_user(client):
    def _register(username="jan", email=None, password="secret123", **extra):
        resp = client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
                **extra,
            },
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["user"]

    return _register


@pytest.fixture
def catalog(db):
    """Dwie kategorie i trzy produkty."""
    painkillers = CategoryModel(name="Przeciwbólowe")
    vitamins = CategoryModel(name="Witaminy")
    db.add_all([painkillers, vitamins])
    db.flush()

    products = [
        ProductModel(
            name="Ibuprofen 200mg",
            description="Lek przeciwbólowy",
            manufacturer="Polpharma",
            price=Decimal("12.50"),
            category_id=painkillers.id,
            stock_quantity=100,
            is_popular=True,
        ),
        ProductModel(
            name="Paracetamol 500mg",
            description="Lek przeciwgorączkowy",
            manufacturer="Hasco",
            price=Decimal("8.99"),
            category_id=painkillers.id,
            stock_quantity=50,
            is_new=True,
        ),
        ProductModel(
            name="Witamina C 1000",
            description="Suplement diety",
            manufacturer="Olimp",
            price=Decimal("19.90"),
            category_id=vitamins.id,
            stock_quantity=30,
            is_popular=True,
        ),
    ]
    db.add_all(products)
    db.commit()
    return {
        "categories": {"painkillers": painkillers.id, "vitamins": vitamins.id},
        "products": [p.id for p in products],
    }


@pytest.fixture
def make_admin(db):
    def _make(user_id: int):
        user = db.get(UserModel, user_id)
        user.is_admin = True
        db.commit()

    return _make


def delivery_details(user_id: int) -> dict:
    return {
        "user_id": user_id,
        "customer_name": "Jan Kowalski",
        "customer_phone": "+48 600 100 200",
        "delivery_address": "ul. Marszałkowska 1, Warszawa",
        "customer_notes": "domofon 12",
        "payment_method": "cash",
    }


@pytest.fixture
def place_order(client):
    def _place(user_id: int, product_id: int, total="25.00", quantity=2):
        resp = client.post(
            "/api/orders/create",
            json={
                **delivery_details(user_id),
                "product_id": product_id,
                "quantity": quantity,
                "total_amount": total,
            },
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["order"]

    return _place


@pytest.fixture
def register_courier(client, register_user):
    def _register(username="kurier"):
        user = register_user(username)
        resp = client.post(
            "/api/courier/register",
            json={
                "user_id": user["id"],
                "first_name": username.capitalize(),
                "last_name": "Szybki",
                "phone": "+48 500 000 000",
                "email": f"{username}@couriers.example.com",
                "vehicle_type": "bicycle",
            },
        )
        assert resp.status_code == 200, resp.text
        return user, resp.json()["courier"]

    return _register


def order_status(db, order_id: int) -> str:
    db.expire_all()
    return db.get(DeliveryOrderModel, order_id).status
