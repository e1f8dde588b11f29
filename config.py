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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./dairy.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    API_RELOAD = bool(data.get("API_RELOAD", False))

    # All calendar-date arithmetic (due dates, pause windows) happens in this zone
    BUSINESS_TIMEZONE = data.get("BUSINESS_TIMEZONE", "Asia/Kolkata")

    # Checkout fees in rupees (one-time orders only)
    PLATFORM_FEE = data.get("PLATFORM_FEE", "5")
    DELIVERY_FEE = data.get("DELIVERY_FEE", "0")

    # Subscription Order Generation
    SUBSCRIPTION_GENERATION_ENABLED = bool(data.get("SUBSCRIPTION_GENERATION_ENABLED", True))
    GENERATION_CONCURRENCY = data.get("GENERATION_CONCURRENCY", 8)
    GENERATION_SUBSCRIPTION_TIMEOUT_SECONDS = data.get("GENERATION_SUBSCRIPTION_TIMEOUT_SECONDS", 30.0)
    PRODUCT_LOOKUP_TIMEOUT_SECONDS = data.get("PRODUCT_LOOKUP_TIMEOUT_SECONDS", 10.0)
    GENERATION_MAX_REPORTED_ERRORS = data.get("GENERATION_MAX_REPORTED_ERRORS", 50)
    GENERATION_RUN_HOUR = data.get("GENERATION_RUN_HOUR", 5)  # Local hour after which the daily run fires
    GENERATION_NOTIFICATION_WEBHOOK = data.get("GENERATION_NOTIFICATION_WEBHOOK", None)
