from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "geokml"
    db_username: str = "geokml"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_connect_timeout_seconds: float = 10.0

    worker_poll_timeout_seconds: float = 0.5
    worker_error_backoff_seconds: float = 0.5

    ws_default_user_id: str = "anonymous"

    api_host: str = "0.0.0.0"
    api_port: int = 8080
