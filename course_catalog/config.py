import logging

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Object store
    s3_bucket_name: str
    aws_region: str = "us-east-1"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    s3_endpoint_url: str | None = None

    # Catalog
    catalog_ttl_seconds: int = 30 * 60
    url_expiry_seconds: int = 3600
    pregenerated_url_expiry_seconds: int = 24 * 3600
    snapshot_path: str | None = "pre-generated-urls.json"
    warm_on_startup: bool = True

    # Prefix for subtitle proxy references; empty means relative URLs
    public_base_url: str = ""

    # Server
    host: str = "127.0.0.1"
    port: int = 3001
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:3001"]
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


def configure_logging(level: str) -> None:
    """Install a single stream handler on the root logger."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
