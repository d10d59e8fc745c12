"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (e.g. SECRET_KEY, DATABASE_URL for
postgres) and scoring weights are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_WEIGHT_SUM_TOLERANCE = 1e-6


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required (secret_key, database_url when backend is postgres,
    scoring weights summing to 1.0).
    """

    # App
    app_name: str = "catalog-search"
    app_version: str = "1.0.0"
    debug: bool = False

    # Storage backend: "memory" (in-process index and stores) or "postgres"
    database_backend: str = "memory"
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None
    # Memory backend only: JSON file with entities and principals to load at startup.
    seed_data_path: str | None = None

    # Security (tokens are issued elsewhere; we only verify them)
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # Relevance scoring
    score_weight_textual: float = 0.5
    score_weight_recency: float = 0.2
    score_weight_popularity: float = 0.15
    score_weight_quality: float = 0.15
    recency_half_life_days: float = 30.0
    recency_max_age_days: float = 730.0
    popularity_window_days: int = 30
    popularity_refresh_seconds: int = 60
    # Upper bound on candidates pulled from the index per search.
    max_candidates: int = 1000

    # Analytics
    analytics_queue_size: int = 10_000
    analytics_retention_days: int = 90

    # Per-identity rate limits (limits library notation)
    search_rate_limit: str = "60/minute"
    suggestion_rate_limit: str = "120/minute"
    saved_search_write_limit: str = "10/minute"
    click_ip_rate_limit: str = "600/minute"
    rate_limit_storage_uri: str = "memory://"

    # Redis cache (popularity snapshot sharing)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    cache_ttl_popularity: int = 300

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def score_weights(self) -> tuple[float, float, float, float]:
        """Return (textual, recency, popularity, quality) weights."""
        return (
            self.score_weight_textual,
            self.score_weight_recency,
            self.score_weight_popularity,
            self.score_weight_quality,
        )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env, backend choice and scoring weights."""
        if self.database_backend == "postgres":
            if not self.database_url:
                raise ValueError(
                    "DATABASE_URL is required when database_backend is 'postgres'. "
                    "Set in environment or .env file."
                )
        elif self.database_backend != "memory":
            raise ValueError(
                f"database_backend must be 'memory' or 'postgres', got: {self.database_backend!r}"
            )
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required to verify access tokens. "
                "Generate with: openssl rand -hex 32."
            )
        weights = self.score_weights
        if any(w < 0 for w in weights):
            raise ValueError("Scoring weights must be non-negative")
        if abs(sum(weights) - 1.0) > _WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Scoring weights must sum to 1.0, got {sum(weights):.6f}")
        if self.recency_half_life_days <= 0:
            raise ValueError("recency_half_life_days must be positive")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
