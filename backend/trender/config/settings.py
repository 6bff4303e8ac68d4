"""
Application settings

Loaded from environment variables (and an optional .env file) with pydantic-settings
"""
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings"""

    # ========== Basics ==========
    env: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Debug mode")
    app_name: str = Field(default="Trender", description="Application name")
    api_prefix: str = Field(default="", description="Prefix for API routes")

    # ========== Database ==========
    # A single connection string carrying host/port/database/credentials/sslmode
    database_url: Optional[str] = Field(default=None, description="PostgreSQL connection string")
    db_pool_size: int = Field(default=20, description="Maximum pooled connections")
    db_pool_timeout: float = Field(default=2.0, description="Seconds to wait for a pooled connection")
    db_pool_recycle: int = Field(default=30, description="Seconds before an idle connection is recycled")
    db_connect_timeout: float = Field(default=5.0, description="Seconds to establish a new connection")
    db_echo: bool = Field(default=False, description="Echo SQL statements")

    # ========== Bucketing ==========
    bucket_size_minutes: int = Field(default=15, description="Width of a metric bucket in minutes")
    bucket_timezone: str = Field(default="UTC", description="Timezone whose wall clock defines bucket boundaries")

    # ========== Hacker News feed ==========
    hn_api_url: str = Field(
        default="https://hn.algolia.com/api/v1/search?tags=front_page",
        description="Front page search endpoint"
    )
    hn_user_agent: str = Field(default="TrenderAI-HN-Ingestion/1.0", description="User-Agent sent to the feed")
    fetch_timeout_seconds: float = Field(default=10.0, description="Feed request timeout")
    fetch_max_attempts: int = Field(default=1, ge=1, description="Feed request attempts (1 disables retry)")

    # ========== Celery ==========
    celery_broker_url: str = Field(default="redis://localhost:6379/1", description="Celery broker")
    celery_result_backend: str = Field(default="redis://localhost:6379/2", description="Celery result backend")
    ingest_schedule_minutes: int = Field(default=15, description="Interval between scheduled ingestion runs")

    # ========== Observability ==========
    log_level: str = Field(default="INFO", description="Log level")
    metrics_enabled: bool = Field(default=True, description="Expose Prometheus metrics")

    # ========== HTTP ==========
    allowed_origins: str = Field(default="http://localhost:3000", description="Allowed CORS origins")

    @property
    def allowed_origins_list(self) -> List[str]:
        """Allowed CORS origins as a list"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
