from unittest import mock

from pharmacy.services.notification_service import (
    NotificationService,
    format_admin_message,
    send_telegram_message_task,
)
from pharmacy.services.telegram_client import TelegramClient


def test_health(client, catalog):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["tables"]["products"] == 3
    assert "timestamp" in body


def test_config(client):
    resp = client.get("/api/config")
    assert resp.json() == {"success": True, "message": None, "googleClientId": "test-client-id"}


def test_unknown_endpoint(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Endpoint not found"}


def test_telegram_demo_mode(client, register_user):
    user = register_user("jan")
    resp = client.post("/api/telegram/send-message", json={"message": "Pomocy", "user_id": user["id"]})
    assert resp.status_code == 200
    body = resp.json()
    assert body["demo"] is True
    assert body["queued"] is False


def test_telegram_empty_message(client):
    resp = client.post("/api/telegram/send-message", json={"message": ""})
    assert resp.status_code == 400


def test_telegram_test_without_configuration(client):
    resp = client.get("/api/telegram/test")
    assert resp.status_code == 200
    assert resp.json()["success"] is False


def test_admin_message_is_queued_when_configured():
    client = TelegramClient(bot_token="token", chat_id="42")
    service = NotificationService(client)
    with mock.patch.object(send_telegram_message_task, "delay") as delay:
        assert service.send_admin_message("hej") is True
    delay.assert_called_once_with("hej")


def test_queue_failure_does_not_raise():
    service = NotificationService(TelegramClient(bot_token="token", chat_id="42"))
    with mock.patch.object(send_telegram_message_task, "delay", side_effect=ConnectionError("broker down")):
        assert service.send_admin_message("hej") is True


def test_format_admin_message():
    text = format_admin_message("Potrzebna pomoc", "👤 Użytkownik: Jan", "🚴 Kurier niezarejestrowany")
    assert "Potrzebna pomoc" in text
    assert "👤 Użytkownik: Jan" in text


def test_telegram_client_posts_to_bot_api():
    client = TelegramClient(bot_token="token", chat_id="42")
    response = mock.Mock(ok=True)
    response.json.return_value = {"ok": True, "result": {"message_id": 7}}
    with mock.patch("pharmacy.services.telegram_client.requests.post", return_value=response) as post:
        data = client.send_message("hej")

    assert data["result"]["message_id"] == 7
    url = post.call_args.args[0]
    assert url.endswith("/bottoken/sendMessage")
    assert post.call_args.kwargs["json"]["chat_id"] == "42"


def test_user_text_is_escaped_for_markdown():
    from types import SimpleNamespace

    from pharmacy.services.notification_service import format_order_message
    from pharmacy.services.telegram_client import escape_markdown

    assert escape_markdown("a_b*c`d[e") == "a\\_b\\*c\\`d\\[e"

    order = SimpleNamespace(
        order_code="D-1",
        customer_name="jan_kowalski",
        customer_phone="600",
        delivery_address="ul. *Gwiazdy* 5",
        total_amount="10.00",
        items=[SimpleNamespace(product_name="Witamina_C", quantity=1)],
    )
    text = format_order_message(order)
    assert "jan\\_kowalski" in text
    assert "ul. \\*Gwiazdy\\* 5" in text
    assert "Witamina\\_C x1" in text
    # wlasne formatowanie zostaje
    assert text.startswith("🛒 *Nowe zamówienie*")

    admin = format_admin_message("pilne_!", "👤 Użytkownik: a_b", "🚴 Kurier niezarejestrowany")
    assert "pilne\\_!" in admin
    assert "a\\_b" in admin
