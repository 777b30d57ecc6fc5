"""
Configuration management using Pydantic BaseSettings.
All values can be overridden via DEVGRAPH_* environment variables or a .env file.
"""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Storage ────────────────────────────────────────────────────────────
    database_path: str = "devgraph.json"
    session_path: str = ".devgraph_session"

    # ── Interest catalog ───────────────────────────────────────────────────
    # One tag per line; falls back to default_interests when unset
    interests_path: Optional[str] = None
    default_interests: list[str] = [
        "python",
        "c",
        "rust",
        "go",
        "javascript",
        "java",
        "machine-learning",
        "data-science",
        "web",
        "mobile",
        "databases",
        "devops",
        "cloud",
        "security",
        "games",
        "open-source",
    ]

    # ── User directory ─────────────────────────────────────────────────────
    directory_initial_buckets: int = 64

    # ── Feed / recommendations ─────────────────────────────────────────────
    feed_capacity: int = 500             # max posts held by one feed build
    feed_page_size: int = 20             # posts shown by the CLI
    recommendation_limit: int = 10       # suggestions shown per source

    # ── Demo data ──────────────────────────────────────────────────────────
    max_generated_users: int = 50_000

    # ── Observability ──────────────────────────────────────────────────────
    log_level: str = "INFO"
    otel_exporter_otlp_endpoint: str = ""   # empty → no span export
    service_name: str = "devgraph"
    environment: str = "development"
    metrics_textfile: Optional[str] = None

    class Config:
        env_prefix = "DEVGRAPH_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
