import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./quote_lines.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Quote line editor timing (seconds)
    SEARCH_DEBOUNCE_SECONDS = float(data.get("SEARCH_DEBOUNCE_SECONDS", 0.3))
    DISCOUNT_RESYNC_DELAY_SECONDS = float(data.get("DISCOUNT_RESYNC_DELAY_SECONDS", 0.1))

    # Catalog search
    SEARCH_RESULT_LIMIT = int(data.get("SEARCH_RESULT_LIMIT", 20))

    # Optional webhook receiving every user notification
    NOTIFICATION_WEBHOOK = data.get("NOTIFICATION_WEBHOOK", None)
