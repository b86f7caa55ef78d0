def test_welcome_message_in_inbox(client, register_courier):
    marek, _ = register_courier("marek")

    messages = client.get("/api/courier/messages", params={"user_id": marek["id"]}).json()["messages"]
    assert len(messages) == 1
    welcome = messages[0]
    assert welcome["subject"] == "Witamy!"
    assert welcome["is_read"] is False

    resp = client.post(f"/api/courier/messages/{welcome['id']}/read", json={"user_id": marek["id"]})
    assert resp.status_code == 200
    messages = client.get("/api/courier/messages", params={"user_id": marek["id"]}).json()["messages"]
    assert messages[0]["is_read"] is True


def test_cannot_read_someone_elses_message(client, register_courier):
    marek, _ = register_courier("marek")
    adam, _ = register_courier("adam")
    message_id = client.get("/api/courier/messages", params={"user_id": marek["id"]}).json()["messages"][0]["id"]

    resp = client.post(f"/api/courier/messages/{message_id}/read", json={"user_id": adam["id"]})
    assert resp.status_code == 404


def test_support_chat_conversation(client, register_courier):
    marek, _ = register_courier("marek")

    chats = client.get("/api/courier/chats", params={"user_id": marek["id"]}).json()["chats"]
    assert len(chats) == 1
    chat = chats[0]
    assert chat["participant_type"] == "support"
    assert chat["unread_count"] == 0

    resp = client.post(f"/api/courier/chats/{chat['id']}/messages", json={"user_id": marek["id"], "message": "Dzień dobry"})
    assert resp.status_code == 200
    sent = resp.json()["chat_message"]
    assert sent["sender_type"] == "courier"
    assert sent["sender_name"] == "Marek"

    client.post(f"/api/courier/chats/{chat['id']}/messages", json={"user_id": marek["id"], "message": "Mam pytanie"})

    transcript = client.get(f"/api/courier/chats/{chat['id']}/messages", params={"user_id": marek["id"]}).json()["messages"]
    assert [m["message"] for m in transcript] == ["Dzień dobry", "Mam pytanie"]

    chat = client.get("/api/courier/chats", params={"user_id": marek["id"]}).json()["chats"][0]
    assert chat["last_message"] == "Mam pytanie"
    assert chat["unread_count"] == 2

    resp = client.post(f"/api/courier/chats/{chat['id']}/read", json={"user_id": marek["id"]})
    assert resp.status_code == 200
    chat = client.get("/api/courier/chats", params={"user_id": marek["id"]}).json()["chats"][0]
    assert chat["unread_count"] == 0
    transcript = client.get(f"/api/courier/chats/{chat['id']}/messages", params={"user_id": marek["id"]}).json()["messages"]
    assert all(m["is_read"] for m in transcript)


def test_chats_are_private(client, register_courier):
    marek, _ = register_courier("marek")
    adam, _ = register_courier("adam")
    chat_id = client.get("/api/courier/chats", params={"user_id": marek["id"]}).json()["chats"][0]["id"]

    resp = client.get(f"/api/courier/chats/{chat_id}/messages", params={"user_id": adam["id"]})
    assert resp.status_code == 404
    resp = client.post(f"/api/courier/chats/{chat_id}/messages", json={"user_id": adam["id"], "message": "hej"})
    assert resp.status_code == 404


def test_empty_chat_message_rejected(client, register_courier):
    marek, _ = register_courier("marek")
    chat_id = client.get("/api/courier/chats", params={"user_id": marek["id"]}).json()["chats"][0]["id"]
    resp = client.post(f"/api/courier/chats/{chat_id}/messages", json={"user_id": marek["id"], "message": ""})
    assert resp.status_code == 400
