from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./qaznedr.db"
    SECRET_KEY: str = "dev-insecure-key-change-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    LOG_LEVEL: str = "INFO"

    # Locales: the single source the registry is built from
    SUPPORTED_LOCALES: list[str] = ["ru", "kz", "en", "zh"]
    DEFAULT_LOCALE: str = "ru"
    LOCALE_LABELS: dict[str, str] = {
        "ru": "Русский",
        "kz": "Қазақша",
        "en": "English",
        "zh": "中文",
    }
    LOCALES_DIR: str | None = None  # defaults to the bundled app/locales
    LOCALE_COOKIE_NAME: str = "locale"
    LOCALE_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 365
    DICTIONARY_FETCH_TIMEOUT: float = 5.0

    # CSRF double-submit cookie
    CSRF_COOKIE_NAME: str = "qaznedr-csrf-token"
    CSRF_HEADER_NAME: str = "X-CSRF-Token"
    CSRF_COOKIE_MAX_AGE: int = 60 * 60 * 24

    # Rate limiting
    LOGIN_RATE_LIMIT_WINDOW: int = 60
    LOGIN_RATE_LIMIT_ATTEMPTS: int = 5
    REGISTER_RATE_LIMIT_ATTEMPTS: int = 5


settings = Settings()
