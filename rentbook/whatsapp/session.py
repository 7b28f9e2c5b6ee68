import logging
import threading
from enum import Enum

from ..errors import ExternalServiceError, PreconditionFailed

log = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AWAITING_SCAN = "awaiting_scan"
    READY = "ready"
    DISCONNECTED = "disconnected"


class WhatsAppSession:
    """
    Application-owned WhatsApp session.

    Wraps a transport and tracks what its events report: the pending pairing
    QR code and whether the linked device is ready to send. State changes only
    through the ``on_*`` callbacks, which the transport invokes.
    """

    def __init__(self, transport):
        self.transport = transport
        self._lock = threading.Lock()
        self._state = SessionState.UNAUTHENTICATED
        self._qr_code = None
        self._started = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == SessionState.READY

    @property
    def qr_code(self):
        return self._qr_code

    @property
    def has_qr(self) -> bool:
        return self._qr_code is not None

    def status(self) -> dict:
        return {
            "is_ready": self.is_ready,
            "has_qr": self.has_qr,
            "state": self._state.value,
            "transport": self.transport.name,
        }

    def start(self):
        with self._lock:
            if self._started:
                return
            self._started = True
        log.info("Initializing WhatsApp transport %s", self.transport.name)
        try:
            self.transport.initialize(self)
        except Exception:
            with self._lock:
                self._started = False
            raise

    # --- transport callbacks --------------------------------------------------
    def on_qr(self, qr_code):
        with self._lock:
            self._qr_code = qr_code
            self._state = SessionState.AWAITING_SCAN
        log.info("QR code generated for WhatsApp authentication")

    def on_ready(self):
        with self._lock:
            self._qr_code = None
            self._state = SessionState.READY
        log.info("WhatsApp client is ready")

    def on_disconnected(self, reason=None):
        with self._lock:
            self._state = SessionState.DISCONNECTED
        log.warning("WhatsApp client disconnected: %s", reason)

    def on_auth_failure(self, message=None):
        with self._lock:
            self._state = SessionState.DISCONNECTED
        log.error("WhatsApp authentication failed: %s", message)

    # --- operations -----------------------------------------------------------
    def send_message(self, chat_id, text):
        if not self.is_ready:
            raise PreconditionFailed("WhatsApp client is not ready")
        try:
            return self.transport.send_message(chat_id, text)
        except ExternalServiceError:
            raise
        except Exception as e:
            raise ExternalServiceError(f"Failed to send WhatsApp message: {e}") from e

    def logout(self):
        with self._lock:
            started = self._started
        if started:
            self.transport.destroy()
        with self._lock:
            self._started = False
            self._qr_code = None
            self._state = SessionState.UNAUTHENTICATED
        log.info("WhatsApp client logged out")
