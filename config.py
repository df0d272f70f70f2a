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
    APP_NAME = data.get("APP_NAME", "DenoLite")
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./app.db")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Access tokens for the authenticated account routes
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ACCESS_TOKEN_MINUTES = data.get("ACCESS_TOKEN_MINUTES", 240)

    # One-time codes. OTP_SECRET has no default: the app refuses to start without it.
    OTP_SECRET = data.get("OTP_SECRET", "")
    OTP_CODE_TTL_MINUTES = data.get("OTP_CODE_TTL_MINUTES", 15)
    OTP_MAX_ATTEMPTS = data.get("OTP_MAX_ATTEMPTS", 5)
    OTP_RESEND_COOLDOWN_SECONDS = data.get("OTP_RESEND_COOLDOWN_SECONDS", 60)
    OTP_RESEND_WINDOW_MINUTES = data.get("OTP_RESEND_WINDOW_MINUTES", 60)
    OTP_MAX_SENDS_PER_WINDOW = data.get("OTP_MAX_SENDS_PER_WINDOW", 5)
    PASSWORD_MIN_LENGTH = data.get("PASSWORD_MIN_LENGTH", 6)

    # Mail relay. Delivery failures are logged, never fatal.
    SMTP_HOST = data.get("SMTP_HOST", "localhost")
    SMTP_PORT = data.get("SMTP_PORT", 1025)
    SMTP_USERNAME = data.get("SMTP_USERNAME")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD")
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", False))
    SMTP_FROM_EMAIL = data.get("SMTP_FROM_EMAIL", "no-reply@denolite.local")
    SMTP_FROM_NAME = data.get("SMTP_FROM_NAME", "DenoLite")
    SMTP_TIMEOUT_SECONDS = data.get("SMTP_TIMEOUT_SECONDS", 15)
