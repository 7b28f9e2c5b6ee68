from .session import SessionState, WhatsAppSession
from .transports import BaseTransport, ConsoleTransport, GatewayTransport, build_transport

__all__ = [
    "SessionState",
    "WhatsAppSession",
    "BaseTransport",
    "ConsoleTransport",
    "GatewayTransport",
    "build_transport",
]
