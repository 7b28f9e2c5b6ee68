import os

BASE_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    # Secret key for sessions
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-please-change")

    # Database connection
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", "sqlite:///" + os.path.join(BASE_DIR, "rentbook.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    API_PREFIX = "/api"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "")

    # Uploaded KYC documents and photos
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", os.path.join(BASE_DIR, "uploads"))
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5MB
    ALLOWED_UPLOAD_EXTENSIONS = {"jpeg", "jpg", "png", "pdf"}

    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 1000

    # WhatsApp transport
    WHATSAPP_TRANSPORT = os.environ.get("WHATSAPP_TRANSPORT", "gateway")  # gateway, console
    WHATSAPP_GATEWAY_URL = os.environ.get("WHATSAPP_GATEWAY_URL", "http://localhost:3000")
    WHATSAPP_GATEWAY_SESSION = os.environ.get("WHATSAPP_GATEWAY_SESSION", "default")
    WHATSAPP_GATEWAY_API_KEY = os.environ.get("WHATSAPP_GATEWAY_API_KEY")
    WHATSAPP_GATEWAY_TIMEOUT = float(os.environ.get("WHATSAPP_GATEWAY_TIMEOUT", "15"))
    WHATSAPP_COUNTRY_CODE = os.environ.get("WHATSAPP_COUNTRY_CODE", "91")
    WHATSAPP_AUTOSTART = _env_bool("WHATSAPP_AUTOSTART", "true")


class DevelopmentConfig(Config):
    DEBUG = True
    WHATSAPP_TRANSPORT = os.environ.get("WHATSAPP_TRANSPORT", "console")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WHATSAPP_TRANSPORT = "console"
    WHATSAPP_AUTOSTART = False


class ProductionConfig(Config):
    FLASK_DEBUG = False

    @classmethod
    def check(cls):
        # Secret key and database are REQUIRED in production
        for name in ("SECRET_KEY", "DATABASE_URL"):
            if not os.environ.get(name):
                raise ValueError(f"{name} environment variable must be set")
