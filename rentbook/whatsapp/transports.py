import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

import requests

from ..errors import ExternalServiceError

log = logging.getLogger(__name__)


class BaseTransport(ABC):
    """Abstract base class for WhatsApp transports."""

    name = "base"

    @abstractmethod
    def initialize(self, session) -> None:
        """Start the client; report progress through `session` callbacks."""

    @abstractmethod
    def send_message(self, chat_id: str, text: str) -> Dict[str, Any]:
        """Deliver `text` to `chat_id` (``<number>@c.us``)."""

    @abstractmethod
    def destroy(self) -> None:
        """Tear down the linked device session."""

    def handle_event(self, payload: Dict[str, Any]) -> None:
        """Process an event pushed by the transport (webhook)."""


class GatewayTransport(BaseTransport):
    """
    WhatsApp Web session hosted by an HTTP gateway (WAHA-compatible API).

    The gateway owns the browser session. Status changes arrive either from
    the initial status poll or through ``session.status`` webhook events.
    """

    name = "gateway"

    def __init__(self, base_url: str, session_name: str = "default",
                 api_key: str | None = None, timeout: float = 15, http=None):
        self.base_url = base_url.rstrip("/")
        self.session_name = session_name
        self.api_key = api_key
        self.timeout = timeout
        self.http = http or requests.Session()
        self._session = None

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        headers.setdefault("Accept", "application/json")
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        try:
            resp = self.http.request(
                method, f"{self.base_url}{path}",
                headers=headers, timeout=self.timeout, **kwargs
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise ExternalServiceError(f"WhatsApp gateway request failed: {e}") from e
        return resp.json() if resp.content else {}

    def initialize(self, session) -> None:
        self._session = session
        self._request("POST", "/api/sessions/start", json={"name": self.session_name})
        info = self._request("GET", f"/api/sessions/{self.session_name}")
        self._dispatch_status(info.get("status"))

    def handle_event(self, payload: Dict[str, Any]) -> None:
        if payload.get("event") != "session.status":
            return
        if payload.get("session") not in (None, self.session_name):
            return
        self._dispatch_status((payload.get("payload") or {}).get("status"))

    def _dispatch_status(self, status) -> None:
        if self._session is None:
            log.warning("Ignoring gateway status %s before initialize", status)
            return
        log.debug("Gateway session %s status %s", self.session_name, status)
        if status == "WORKING":
            self._session.on_ready()
        elif status == "SCAN_QR_CODE":
            self._session.on_qr(self.fetch_qr())
        elif status == "FAILED":
            self._session.on_auth_failure(status)
        elif status == "STOPPED":
            self._session.on_disconnected(status)

    def fetch_qr(self) -> str:
        """Current pairing QR code as a PNG data URL."""
        data = self._request("GET", f"/api/{self.session_name}/auth/qr")
        return f"data:{data.get('mimetype', 'image/png')};base64,{data['data']}"

    def send_message(self, chat_id: str, text: str) -> Dict[str, Any]:
        return self._request("POST", "/api/sendText", json={
            "session": self.session_name,
            "chatId": chat_id,
            "text": text,
        })

    def destroy(self) -> None:
        self._request("POST", f"/api/sessions/{self.session_name}/logout")
        self._session = None


class ConsoleTransport(BaseTransport):
    """Logs messages instead of delivering them; ready once initialized."""

    name = "console"

    def __init__(self):
        self.outbox = []

    def initialize(self, session) -> None:
        session.on_ready()

    def send_message(self, chat_id: str, text: str) -> Dict[str, Any]:
        log.info("[WHATSAPP - CONSOLE] To: %s | Body: %s", chat_id, text[:120])
        self.outbox.append((chat_id, text))
        return {"id": f"console-{len(self.outbox)}"}

    def destroy(self) -> None:
        pass


TRANSPORTS: dict[str, type[BaseTransport]] = {
    "gateway": GatewayTransport,
    "console": ConsoleTransport,
}


def build_transport(config) -> BaseTransport:
    """Factory function selecting the transport named by WHATSAPP_TRANSPORT."""
    name = (config.get("WHATSAPP_TRANSPORT") or "gateway").lower()
    if name not in TRANSPORTS:
        raise ValueError(f"Unsupported WhatsApp transport: {name}")
    if name == "gateway":
        return GatewayTransport(
            config["WHATSAPP_GATEWAY_URL"],
            session_name=config.get("WHATSAPP_GATEWAY_SESSION", "default"),
            api_key=config.get("WHATSAPP_GATEWAY_API_KEY"),
            timeout=config.get("WHATSAPP_GATEWAY_TIMEOUT", 15),
        )
    return TRANSPORTS[name]()
