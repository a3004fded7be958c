from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration using Pydantic BaseSettings.
    Values are loaded from environment variables and an optional .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Clinic Booking API"
    PROJECT_DESCRIPTION: str = "Clinic schedules, slot availability and appointment booking"
    VERSION: str = "0.1.0"

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("clinic_booking", description="Database name")
    DB_USER: str = Field("postgres", description="Database user")
    DB_PASSWORD: str | None = Field(None, description="Database password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")
    DATABASE_URL_OVERRIDE: str | None = Field(
        None, description="Full async SQLAlchemy URL, overrides the DB_* settings (e.g. sqlite+aiosqlite)"
    )

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(20, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(30, description="Pool max overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections after N seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Seconds to wait for a pooled connection")

    # Redis Settings (notification fan-out)
    REDIS_HOST: str = Field("localhost", description="Redis host")
    REDIS_PORT: int = Field(6379, description="Redis port")
    REDIS_DB: int = Field(0, description="Redis database")
    REDIS_PASSWORD: str | None = Field(None, description="Redis password")

    # Notifications
    NOTIFICATIONS_BACKEND: str = Field("redis", description="Room fan-out backend: 'redis' or 'memory'")

    # JWT Settings (tokens are issued by the auth service)
    JWT_SECRET_KEY: str = Field("change-me", description="Secret key used to verify JWTs")
    JWT_ALGORITHM: str = Field("HS256", description="JWT signing algorithm")

    # Scheduling
    DEFAULT_SLOT_DURATION: int = Field(30, description="Slot duration in minutes when none is given")
    SCHEDULE_VALIDITY_DAYS: int = Field(365, description="Default validity window for new schedule entries")
    DEFAULT_PATIENT_NAME: str = Field("New Patient", description="Placeholder name for lazily created patients")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    LOG_FORMAT: str = Field("colored", description="Log format: 'colored', 'json' or 'plain'")
    LOG_FILE: str | None = Field(None, description="Optional JSON log file")

    # Application Settings
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")
    CORS_ORIGINS: list[str] = Field(default_factory=list, description="Allowed CORS origins outside debug")

    # Sentry Configuration
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN for error tracking")

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @field_validator("DEFAULT_SLOT_DURATION")
    @classmethod
    def validate_slot_duration(cls, v):
        if v <= 0:
            raise ValueError("DEFAULT_SLOT_DURATION must be positive")
        return v

    @field_validator("NOTIFICATIONS_BACKEND")
    @classmethod
    def validate_notifications_backend(cls, v):
        v = v.lower()
        if v not in ("redis", "memory"):
            raise ValueError("NOTIFICATIONS_BACKEND must be 'redis' or 'memory'")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("colored", "json", "plain"):
            raise ValueError("LOG_FORMAT must be 'colored', 'json' or 'plain'")
        return v

    @computed_field
    @property
    def database_url(self) -> str:
        """Synchronous PostgreSQL URL (used by Alembic)."""
        if self.DB_PASSWORD:
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"postgresql://{self.DB_USER}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def redis_url(self) -> str:
        """Redis connection URL."""
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"


_settings_instance = None


def get_settings() -> Settings:
    """
    Return a cached Settings instance.
    Avoids reading the environment more than once.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached instance so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
