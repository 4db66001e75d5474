import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("TIPSY_CONFIG", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _get(key, default=None):
    """Environment variable first, then env.yaml, then default"""
    return os.environ.get(key, data.get(key, default))


def _flag(key, default):
    value = _get(key, default)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _list(key, default):
    value = _get(key, default)
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value)


class ApplicationConfig:
    DB_URI = _get("DB_URI", "sqlite+aiosqlite:///./tipsy.db")
    DB_POOL_TIMEOUT = int(_get("DB_POOL_TIMEOUT", 5))
    DB_CREATE_TABLES = _flag("DB_CREATE_TABLES", True)
    API_PORT = int(_get("API_PORT", 3001))
    API_HOST = _get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _list("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = _flag("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = _get("LOG_LEVEL", "INFO")
    # No default: the app refuses to start without a signing secret
    JWT_SECRET = _get("JWT_SECRET")
    JWT_EXPIRES_IN_SECONDS = int(_get("JWT_EXPIRES_IN_SECONDS", 7 * 24 * 3600))
    RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED", True)
    RATE_LIMIT_TRUST_FORWARDED = _flag("RATE_LIMIT_TRUST_FORWARDED", False)
    FRONTEND_URL = _get("FRONTEND_URL", "http://localhost:5173")
    SMTP_HOST = _get("SMTP_HOST", "")
    SMTP_PORT = int(_get("SMTP_PORT", 465))
    SMTP_SECURE = _flag("SMTP_SECURE", True)
    SMTP_USER = _get("SMTP_USER", "")
    SMTP_PASS = _get("SMTP_PASS", "")
    SMTP_FROM = _get("SMTP_FROM", "tipsy@localhost")
