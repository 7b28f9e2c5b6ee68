# rentbook/__init__.py
from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Optional

from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from .errors import register_error_handlers
from .extensions import cors, db, migrate
from .models import register_model_hooks
from .whatsapp import WhatsAppSession, build_transport


# --- Config ------------------------------------------------------------------
def _get_allowed_origins(app: Flask) -> list[str]:
    """Allowed CORS origins from config; includes the local dashboard defaults."""
    default = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    # Support comma-separated list in env
    extra = app.config.get("CORS_ALLOWED_ORIGINS") or ""
    extra_list = [o.strip() for o in extra.split(",") if o.strip()]
    return sorted(set(default + extra_list))


def _configure_logging(app: Flask) -> None:
    """JSON logs to stdout."""
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='{"ts":"%(asctime)s","level":"%(levelname)s","msg":"%(message)s","name":"%(name)s"}',
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _configure_cors(app: Flask) -> None:
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": _get_allowed_origins(app)}},
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        max_age=86400,
    )


def _configure_proxy(app: Flask) -> None:
    """Respect X-Forwarded-* from the reverse proxy."""
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore


def _load_config(app: Flask, config_object) -> None:
    if config_object is None:
        config_object = os.getenv("CONFIG_CLASS", "rentbook.config.Config")
    if isinstance(config_object, str):
        # load "package.ClassName"
        module, _, cls = config_object.rpartition(".")
        config_object = getattr(__import__(module, fromlist=[cls]), cls)
    if hasattr(config_object, "check"):
        config_object.check()
    app.config.from_object(config_object)


def _init_extensions(app: Flask) -> None:
    db.init_app(app)
    migrate.init_app(app, db)
    register_model_hooks()


def _init_whatsapp(app: Flask, transport=None) -> None:
    """One WhatsApp session per application, shared by all requests."""
    session = WhatsAppSession(transport or build_transport(app.config))
    app.extensions["whatsapp"] = session
    if app.config.get("WHATSAPP_AUTOSTART"):
        try:
            session.start()
        except Exception as e:
            app.logger.exception("WhatsApp transport failed to start: %s", e)


def _register_blueprints(app: Flask) -> None:
    """Register all API blueprints under /api."""
    from .routes import reports, rent, tenants, uploads, whatsapp

    prefix = app.config["API_PREFIX"]
    for module in (tenants, rent, reports):
        app.register_blueprint(module.bp, url_prefix=prefix)
        app.logger.debug("Registered blueprint %s at %s", module.bp.name, prefix)
    app.register_blueprint(whatsapp.bp, url_prefix=f"{prefix}/whatsapp")
    app.register_blueprint(uploads.bp)


def _register_cli(app: Flask) -> None:
    from .cli import register_commands

    register_commands(app)


# --- Application Factory ------------------------------------------------------
def create_app(config_object: Optional[str | Any] = None, transport=None) -> Flask:
    """
    Standard Flask application factory.

    `config_object` may be:
      - a config class
      - dotted path to a config class (e.g., "rentbook.config.ProductionConfig")
      - None (then CONFIG_CLASS env or rentbook.config.Config)

    `transport` overrides the WhatsApp transport chosen by WHATSAPP_TRANSPORT.
    """
    app = Flask(__name__, instance_relative_config=True)
    _load_config(app, config_object)
    app.config.setdefault("API_PREFIX", "/api")

    # Core middleware/logging/CORS
    _configure_logging(app)
    _configure_proxy(app)
    _configure_cors(app)

    _init_extensions(app)
    _init_whatsapp(app, transport)
    _register_blueprints(app)
    _register_cli(app)
    register_error_handlers(app)

    @app.get(app.config["API_PREFIX"] + "/health")
    def health():
        return jsonify(
            {
                "status": "ok",
                "time": datetime.utcnow().isoformat() + "Z",
                "service": "rentbook",
            }
        ), 200

    return app
