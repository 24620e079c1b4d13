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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./scribe_auth.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Tokens and sessions
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_TTL_HOURS = int(data.get("ACCESS_TOKEN_TTL_HOURS", 24))
    SESSION_TTL_HOURS = int(data.get("SESSION_TTL_HOURS", 24))
    REMEMBER_ME_TTL_DAYS = int(data.get("REMEMBER_ME_TTL_DAYS", 7))

    # Verification codes
    EMAIL_VERIFICATION_TTL_HOURS = int(data.get("EMAIL_VERIFICATION_TTL_HOURS", 24))
    PHONE_CODE_TTL_MINUTES = int(data.get("PHONE_CODE_TTL_MINUTES", 10))
    PASSWORD_RESET_TTL_MINUTES = int(data.get("PASSWORD_RESET_TTL_MINUTES", 60))

    TOTP_ISSUER = data.get("TOTP_ISSUER", "SCRIBE AI")
    PHONE_PLACEHOLDER_EMAIL_DOMAIN = data.get(
        "PHONE_PLACEHOLDER_EMAIL_DOMAIN", "phone.scribeai.com"
    )
    APP_BASE_URL = data.get("APP_BASE_URL", "https://app.scribeai.com")

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS = float(data.get("HTTP_TIMEOUT_SECONDS", 10))

    # Social login
    GOOGLE_CLIENT_ID = data.get("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET = data.get("GOOGLE_CLIENT_SECRET", "")
    GITHUB_CLIENT_ID = data.get("GITHUB_CLIENT_ID", "")
    GITHUB_CLIENT_SECRET = data.get("GITHUB_CLIENT_SECRET", "")
    MICROSOFT_CLIENT_ID = data.get("MICROSOFT_CLIENT_ID", "")
    MICROSOFT_CLIENT_SECRET = data.get("MICROSOFT_CLIENT_SECRET", "")

    # Email (Resend)
    RESEND_API_KEY = data.get("RESEND_API_KEY", "")
    EMAIL_FROM_ADDRESS = data.get("EMAIL_FROM_ADDRESS", "SCRIBE AI <no-reply@scribeai.com>")

    # SMS (Twilio)
    TWILIO_ACCOUNT_SID = data.get("TWILIO_ACCOUNT_SID", "")
    TWILIO_AUTH_TOKEN = data.get("TWILIO_AUTH_TOKEN", "")
    TWILIO_PHONE_NUMBER = data.get("TWILIO_PHONE_NUMBER", "")
