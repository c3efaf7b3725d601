"""Application settings and configuration.

This module defines all configuration options for the askboard application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="askboard", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./askboard.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT settings for tokens minted by the identity service
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Roles granted pin permission and question-cap exemption
    privileged_roles: list[str] = Field(
        default=["admin", "me", "og"],
        alias="PRIVILEGED_ROLES",
    )

    # Board rules
    daily_question_limit: int = Field(default=5, ge=0, alias="DAILY_QUESTION_LIMIT")

    # Change notifier
    notifier_queue_size: int = Field(default=256, alias="NOTIFIER_QUEUE_SIZE")
    notifier_redis_enabled: bool = Field(default=False, alias="NOTIFIER_REDIS_ENABLED")
    notifier_channel_prefix: str = Field(
        default="askboard:question",
        alias="NOTIFIER_CHANNEL_PREFIX",
    )
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")
    redis_connect_timeout: float = Field(default=2.0, gt=0, alias="REDIS_CONNECT_TIMEOUT")
    redis_socket_timeout: float = Field(default=2.0, gt=0, alias="REDIS_SOCKET_TIMEOUT")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return the database URL with an explicit psycopg 3 driver for Postgres.

        Bare ``postgres://`` and ``postgresql://`` URLs would otherwise select
        psycopg2, which is not installed.
        """
        url = self.effective_database_url
        for prefix in ("postgresql+asyncpg://", "postgresql://", "postgres://"):
            if url.startswith(prefix):
                return "postgresql+psycopg://" + url[len(prefix):]
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
