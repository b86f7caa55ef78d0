def test_update_profile(client, register_user):
    user = register_user("jan")
    resp = client.put(
        "/api/user/update-profile",
        json={"user_id": user["id"], "first_name": "Jan", "last_name": "Nowak", "phone": "600"},
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["last_name"] == "Nowak"
    assert resp.json()["user"]["phone"] == "600"


def test_update_profile_unknown_user(client):
    resp = client.put("/api/user/update-profile", json={"user_id": 42, "first_name": "X"})
    assert resp.status_code == 404


def test_change_password(client, register_user):
    user = register_user("jan")

    resp = client.post(
        "/api/user/change-password",
        json={"user_id": user["id"], "current_password": "zle", "new_password": "nowehaslo"},
    )
    assert resp.status_code == 400

    resp = client.post(
        "/api/user/change-password",
        json={"user_id": user["id"], "current_password": "secret123", "new_password": "nowehaslo"},
    )
    assert resp.status_code == 200

    assert client.post("/api/auth/login", json={"username": "jan", "password": "secret123"}).status_code == 401
    assert client.post("/api/auth/login", json={"username": "jan", "password": "nowehaslo"}).status_code == 200


def test_upload_avatar(client, register_user):
    user = register_user("jan")
    resp = client.post(
        "/api/user/upload-avatar",
        json={"user_id": user["id"], "avatar": "data:image/png;base64,AAAA"},
    )
    assert resp.status_code == 200
    assert resp.json()["avatar_url"] == "data:image/png;base64,AAAA"

    me = client.get("/api/auth/me", params={"user_id": user["id"]}).json()["user"]
    assert me["avatar"] == "data:image/png;base64,AAAA"
