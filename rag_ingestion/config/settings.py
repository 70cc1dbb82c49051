from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "rag_ingestion"
    db_username: str = "rag_ingestion"
    db_password: str = "secret"

    max_file_size_bytes: int = 100 * 1024 * 1024
    large_file_threshold_bytes: int = 50 * 1024 * 1024
    quarantine_bucket: str = "rag-document-quarantine"
    quarantine_prefix: str = "quarantine"
    validated_by: str = "validation-handler"
    rejected_retention_days: int = 30

    object_store_backend: str = "s3"
    local_store_root: str = "/app/objects"
    aws_region: str = "us-east-1"

    event_publisher: str = "eventbridge"
    event_bus_name: str = "default"
    event_source: str = "rag.document-ingestion"

    ingestion_status_endpoint: str = "http://localhost:8001"
    processing_status_endpoint: str = "http://localhost:8002"
    embedding_status_endpoint: str = "http://localhost:8003"
    vector_storage_status_endpoint: str = "http://localhost:8004"
    status_auth_token: str = ""
    status_timeout_seconds: float = 10.0

    stage_poll_interval_seconds: float = 2.0
    stage_max_attempts: int = 60
    watch_initial_delay_seconds: float = 3.0
    watch_max_attempts: int = 50
    watch_max_consecutive_errors: int = 3
