from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # mongodb://host:port/dbname, or memory:// for the in-process backend
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = []
    control_number_prefix: str = "RFU4A"  # Leading segment of every control number, e.g. RFU4A-MC-260218-01
    allocation_attempts: int = 5  # Reset-and-retry budget when a stored sequence collides on record creation
    storage_timeout_ms: int = 10000  # Applied to server selection and every MongoDB operation
    # Build metadata injected during Docker build via environment variables
    git_commit_hash: str = "unknown"
    git_commit_date: str = "unknown"
    build_time: str = "unknown"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "DOCTRACK_",
        "extra": "ignore",
    }
