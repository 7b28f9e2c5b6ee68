import pytest
import requests

from rentbook.errors import ExternalServiceError, PreconditionFailed
from rentbook.whatsapp import (
    ConsoleTransport,
    GatewayTransport,
    SessionState,
    WhatsAppSession,
    build_transport,
)

BASE = "http://gateway.local"


class FakeResponse:
    def __init__(self, payload=None, status=200):
        self.payload = payload
        self.status_code = status

    @property
    def content(self):
        return b"{}" if self.payload is not None else b""

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class FakeHttp:
    """Stands in for requests.Session; replies by (method, path)."""

    def __init__(self, replies=None):
        self.replies = replies or {}
        self.calls = []

    def request(self, method, url, headers=None, timeout=None, **kwargs):
        path = url[len(BASE):]
        self.calls.append({"method": method, "path": path, "json": kwargs.get("json"), "headers": headers})
        reply = self.replies.get((method, path), FakeResponse({}))
        if isinstance(reply, Exception):
            raise reply
        return reply


class BrokenTransport(ConsoleTransport):
    def send_message(self, chat_id, text):
        raise ConnectionError("socket closed")


def test_session_state_machine():
    session = WhatsAppSession(ConsoleTransport())
    assert session.state is SessionState.UNAUTHENTICATED

    session.on_qr("data:image/png;base64,QR")
    assert session.state is SessionState.AWAITING_SCAN
    assert session.has_qr and not session.is_ready

    session.on_ready()
    assert session.is_ready
    assert session.qr_code is None

    session.on_disconnected("NAVIGATION")
    assert session.state is SessionState.DISCONNECTED
    assert not session.is_ready

    session.on_ready()
    session.on_auth_failure("bad creds")
    assert session.state is SessionState.DISCONNECTED


def test_send_requires_ready():
    session = WhatsAppSession(ConsoleTransport())
    with pytest.raises(PreconditionFailed):
        session.send_message("919876543210@c.us", "hello")


def test_transport_errors_become_external_service_errors():
    session = WhatsAppSession(BrokenTransport())
    session.start()
    with pytest.raises(ExternalServiceError):
        session.send_message("919876543210@c.us", "hello")


def test_start_is_idempotent_and_logout_resets():
    transport = ConsoleTransport()
    session = WhatsAppSession(transport)
    session.start()
    session.start()
    assert session.is_ready

    session.logout()
    assert session.state is SessionState.UNAUTHENTICATED
    assert not session.has_qr

    session.start()
    assert session.is_ready


def test_gateway_initialize_reports_qr():
    http = FakeHttp({
        ("GET", "/api/sessions/default"): FakeResponse({"name": "default", "status": "SCAN_QR_CODE"}),
        ("GET", "/api/default/auth/qr"): FakeResponse({"mimetype": "image/png", "data": "iVBOR"}),
    })
    transport = GatewayTransport(BASE, api_key="secret", http=http)
    session = WhatsAppSession(transport)
    session.start()

    assert session.state is SessionState.AWAITING_SCAN
    assert session.qr_code == "data:image/png;base64,iVBOR"
    assert http.calls[0]["path"] == "/api/sessions/start"
    assert http.calls[0]["json"] == {"name": "default"}
    assert http.calls[0]["headers"]["X-Api-Key"] == "secret"


def test_gateway_webhook_events_drive_session():
    http = FakeHttp({("GET", "/api/sessions/default"): FakeResponse({"status": "STARTING"})})
    transport = GatewayTransport(BASE, http=http)
    session = WhatsAppSession(transport)
    session.start()
    assert session.state is SessionState.UNAUTHENTICATED

    transport.handle_event({"event": "session.status", "session": "default", "payload": {"status": "WORKING"}})
    assert session.is_ready

    transport.handle_event({"event": "message", "payload": {"status": "STOPPED"}})
    assert session.is_ready

    transport.handle_event({"event": "session.status", "session": "other", "payload": {"status": "STOPPED"}})
    assert session.is_ready

    transport.handle_event({"event": "session.status", "session": "default", "payload": {"status": "FAILED"}})
    assert session.state is SessionState.DISCONNECTED


def test_gateway_send_and_logout():
    http = FakeHttp({("GET", "/api/sessions/default"): FakeResponse({"status": "WORKING"})})
    transport = GatewayTransport(BASE + "/", http=http)
    session = WhatsAppSession(transport)
    session.start()

    session.send_message("919876543210@c.us", "Dear Ravi")
    assert http.calls[-1] == {
        "method": "POST",
        "path": "/api/sendText",
        "json": {"session": "default", "chatId": "919876543210@c.us", "text": "Dear Ravi"},
        "headers": {"Accept": "application/json"},
    }

    session.logout()
    assert http.calls[-1]["path"] == "/api/sessions/default/logout"
    assert not session.is_ready


def test_gateway_http_failure():
    http = FakeHttp({
        ("GET", "/api/sessions/default"): FakeResponse({"status": "WORKING"}),
        ("POST", "/api/sendText"): FakeResponse({"error": "boom"}, status=500),
    })
    session = WhatsAppSession(GatewayTransport(BASE, http=http))
    session.start()
    with pytest.raises(ExternalServiceError):
        session.send_message("919876543210@c.us", "hi")

    http.replies[("POST", "/api/sendText")] = requests.ConnectionError("refused")
    with pytest.raises(ExternalServiceError):
        session.send_message("919876543210@c.us", "hi")


def test_build_transport():
    assert isinstance(build_transport({"WHATSAPP_TRANSPORT": "console"}), ConsoleTransport)
    gateway = build_transport({
        "WHATSAPP_TRANSPORT": "gateway",
        "WHATSAPP_GATEWAY_URL": BASE,
        "WHATSAPP_GATEWAY_SESSION": "landlord",
    })
    assert isinstance(gateway, GatewayTransport)
    assert gateway.session_name == "landlord"
    with pytest.raises(ValueError):
        build_transport({"WHATSAPP_TRANSPORT": "carrier-pigeon"})


def test_webhook_route_forwards_events(tmp_path):
    from rentbook import create_app
    from rentbook.config import TestingConfig

    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path)

    http = FakeHttp({("GET", "/api/sessions/default"): FakeResponse({"status": "STARTING"})})
    transport = GatewayTransport(BASE, http=http)
    app = create_app(Config, transport=transport)
    session = app.extensions["whatsapp"]
    session.start()

    resp = app.test_client().post("/api/whatsapp/webhook", json={
        "event": "session.status", "session": "default", "payload": {"status": "WORKING"},
    })
    assert resp.status_code == 204
    assert session.is_ready
