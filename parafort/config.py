import os


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    # Security
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret_key_change_in_production")
    CRON_SECRET = os.getenv("CRON_SECRET")
    RATELIMIT_ENABLED = _env_bool("RATELIMIT_ENABLED", True)

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL")
    DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "1800"))  # 30 min

    # OpenAI
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")

    # Gemini
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

    # State data verification
    VERIFICATION_DELAY_SECONDS = float(os.getenv("VERIFICATION_DELAY_SECONDS", "0.5"))
    VERIFICATION_FEE_TOLERANCE = float(os.getenv("VERIFICATION_FEE_TOLERANCE", "5"))
    VERIFICATION_MIN_VALIDATED_RATE = float(os.getenv("VERIFICATION_MIN_VALIDATED_RATE", "0.8"))
    VERIFICATION_OUTPUT_DIR = os.getenv("VERIFICATION_OUTPUT_DIR", ".")

config = Config()
