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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./authcore.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Rate limiting (forgot/reset password)
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    RATE_LIMIT_BACKEND = data.get("RATE_LIMIT_BACKEND", "memory")
    RATE_LIMIT_PERMITS = int(data.get("RATE_LIMIT_PERMITS", 5))
    RATE_LIMIT_WINDOW_SECONDS = int(data.get("RATE_LIMIT_WINDOW_SECONDS", 60))
    RATE_LIMIT_FALLBACK_KEY = data.get("RATE_LIMIT_FALLBACK_KEY", "global")

    # Sessions
    SESSION_SECRET = data.get("SESSION_SECRET", "dev-session-secret-change-in-production")
    SESSION_ENCRYPTION_KEY = data.get(
        "SESSION_ENCRYPTION_KEY", "dev-encryption-key-change-in-production"
    )
    SESSION_TTL_DAYS = int(data.get("SESSION_TTL_DAYS", 7))
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "authcore_session")
    SESSION_COOKIE_SECURE = bool(data.get("SESSION_COOKIE_SECURE", True))

    # Reset codes
    RESET_CODE_SECRET = data.get("RESET_CODE_SECRET", "dev-reset-secret-change-in-production")
    RESET_CODE_DIGITS = int(data.get("RESET_CODE_DIGITS", 6))
    RESET_CODE_STEP_SECONDS = int(data.get("RESET_CODE_STEP_SECONDS", 300))
    RESET_CODE_TTL_MINUTES = int(data.get("RESET_CODE_TTL_MINUTES", 5))

    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))

    # Outbound mail
    NOTIFIER_BACKEND = data.get("NOTIFIER_BACKEND", "log")
    NOTIFIER_TIMEOUT_SECONDS = float(data.get("NOTIFIER_TIMEOUT_SECONDS", 10))
    SENDGRID_API_KEY = data.get("SENDGRID_API_KEY", "")
    SENDER_EMAIL = data.get("SENDER_EMAIL", "no-reply@example.com")
    SENDER_NAME = data.get("SENDER_NAME", "Account Service")
