def test_register_and_login(client, register_user):
    user = register_user("jan", first_name="Jan", last_name="Kowalski", phone="123")
    assert user["username"] == "jan"
    assert user["full_name"] == "Jan Kowalski"
    assert "password" not in user

    resp = client.post("/api/auth/login", json={"username": "jan@example.com", "password": "secret123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["user"]["id"] == user["id"]
    assert body["user"]["login_count"] == 1
    assert body["user"]["last_login"] is not None


def test_register_duplicate(client, register_user):
    register_user("jan")
    resp = client.post(
        "/api/auth/register",
        json={"username": "jan", "email": "other@example.com", "password": "secret123"},
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_register_short_password(client):
    resp = client.post(
        "/api/auth/register",
        json={"username": "jan", "email": "jan@example.com", "password": "123"},
    )
    assert resp.status_code == 400
    assert "password" in resp.json()["error"]


def test_login_wrong_password(client, register_user):
    register_user("jan")
    resp = client.post("/api/auth/login", json={"username": "jan", "password": "zlehaslo"})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Nieprawidłowy login lub hasło"}


def test_me(client, register_user):
    user = register_user("jan")

    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", params={"user_id": 999}).status_code == 404

    resp = client.get("/api/auth/me", headers={"user-id": str(user["id"])})
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == "jan@example.com"


def test_google_sign_in_creates_then_logs_in(client):
    resp = client.post("/api/auth/google", json={"token": "good-anna"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["created"] is True
    assert body["requires_additional_info"] is True
    assert body["user"]["username"] == "anna_google"
    assert body["user"]["google_id"] == "anna"
    assert body["user"]["email_verified"] is True

    resp = client.post("/api/auth/google", json={"token": "good-anna"})
    body = resp.json()
    assert body["created"] is False
    assert body["requires_additional_info"] is False
    assert body["user"]["login_count"] == 2


def test_google_sign_in_links_existing_email(client, register_user):
    user = register_user("anna", email="anna@gmail.com")
    resp = client.post("/api/auth/google", json={"token": "good-anna"})
    body = resp.json()
    assert body["created"] is False
    assert body["user"]["id"] == user["id"]
    assert body["user"]["google_id"] == "anna"


def test_google_invalid_token(client):
    resp = client.post("/api/auth/google", json={"token": "forged"})
    assert resp.status_code == 401


def test_google_register_upserts(client):
    payload = {"google_id": "g-1", "email": "ola@gmail.com", "first_name": "Ola"}
    resp = client.post("/api/auth/google/register", json=payload)
    assert resp.status_code == 200
    created = resp.json()["user"]
    assert created["username"] == "ola_google"

    resp = client.post("/api/auth/google/register", json={**payload, "phone": "555"})
    updated = resp.json()["user"]
    assert updated["id"] == created["id"]
    assert updated["phone"] == "555"


def test_google_username_collision(client, register_user):
    register_user("anna_google", email="someone@example.com")
    resp = client.post("/api/auth/google", json={"token": "good-anna"})
    assert resp.json()["user"]["username"] == "anna_google2"


def test_register_race_on_unique_username_is_conflict(client, register_user, monkeypatch):
    from pharmacy.repos.user_repo import UserRepo

    register_user("jan")
    # drugie zadanie nie widzi jeszcze konta zalozonego przez pierwsze
    monkeypatch.setattr(UserRepo, "find_by_username_or_email", lambda self, username, email: None)

    resp = client.post(
        "/api/auth/register",
        json={"username": "jan", "email": "jan@example.com", "password": "secret123"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Użytkownik z takim loginem lub emailem już istnieje"

    # sesja po rollbacku dalej dziala
    assert client.post("/api/auth/login", json={"username": "jan", "password": "secret123"}).status_code == 200


def test_google_account_race_is_conflict(client, register_user, monkeypatch):
    from pharmacy.repos.user_repo import UserRepo

    register_user("anna", email="anna@gmail.com")
    monkeypatch.setattr(UserRepo, "find_by_google", lambda self, google_id, email: None)

    resp = client.post("/api/auth/google", json={"token": "good-anna"})
    assert resp.status_code == 400
