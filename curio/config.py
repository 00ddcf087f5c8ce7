from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

class Settings(BaseSettings):

    api_host: str = Field(default="localhost", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Debug mode")

    # Authentication Configuration
    authentication_enabled: bool = Field(default=True, description="Require an admin Firebase token on admin endpoints")
    pipeline_api_key: Optional[str] = Field(
        default=None,
        description="Shared key the AI pipeline and external schedulers send as X-API-Key (unset = open)"
    )

    firebase_service_account_path: str = Field(default="firebase-service-account.json", description="Firebase service account JSON file path")
    firebase_project_id: str = Field(default="curio-6b4c5", description="Firebase project ID")
    firebase_secret_name: str = Field(default="firebase-service-account", description="Secret Manager secret holding the service account")

    allowed_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:3000",
            "https://curio-6b4c5.web.app",
            "https://curio-6b4c5.firebaseapp.com",
        ],
        description="Allowed CORS origins",
        validation_alias=AliasChoices("CORS_ALLOWED_ORIGINS", "ALLOWED_ORIGINS"),
    )

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")

    # Feed Ingestion
    feed_fetch_concurrency: int = Field(default=10, ge=1, description="Maximum feeds fetched at the same time")
    feed_request_timeout_seconds: float = Field(default=30.0, description="HTTP timeout for a single feed request")
    feed_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; CurioFeedFetcher/0.1; +https://curio-6b4c5.web.app)",
        description="User-Agent sent when fetching feeds"
    )
    default_article_title: str = Field(default="No Title", description="Title used when a feed item has none")
    default_source_name: str = Field(default="Unknown", description="Source name used when a feed has no name")

    # Raw Article Retention
    raw_article_retention_days: int = Field(default=30, description="Raw articles older than this are deleted")
    cleanup_batch_size: int = Field(default=500, ge=1, le=500, description="Deletes per write batch")
    raw_article_query_limit: int = Field(default=50, ge=1, description="Maximum raw articles returned to the AI pipeline")

    # Processed Article Fan-out
    fanout_batch_size: int = Field(default=100, ge=1, le=500, description="Writes per batch when fanning out processed articles")
    embedding_dimensions: int = Field(default=384, description="Expected length of summary_embedding")

    # Scheduling
    scheduler_enabled: bool = Field(default=False, description="Run the fetch and cleanup jobs inside the API process")
    fetch_interval_minutes: int = Field(default=60, description="Minutes between feed fetch runs")
    fetch_job_timeout_seconds: int = Field(default=1800, description="Execution budget of one feed fetch run")
    cleanup_job_timeout_seconds: int = Field(default=540, description="Execution budget of one cleanup run")
    cleanup_hour_utc: int = Field(default=0, ge=0, le=23, description="Hour of day (UTC) the cleanup job runs")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value):
        if value is None:
            return value
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    class Config:
        env_file = [".env", ".env.local"]  # .env.local takes precedence over .env
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
