# app/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./filedrop.db"

    # "s3" for any S3-compatible bucket, "local" keeps blobs under storage_dir
    storage_backend: Literal["s3", "local"] = "s3"
    storage_dir: str = "./storage"

    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "us-east-1"
    aws_s3_bucket_name: str = "filedrop"
    aws_endpoint_url: str | None = None  # MinIO / R2

    # Base of the shareable links; falls back to the request URL when empty
    public_base_url: str = ""

    # Signs session tokens; no default
    auth_secret: str
    auth_token_ttl_hours: int = 24 * 7

    log_level: str = "INFO"
    log_json: bool = True

    # Tell pydantic-settings to load from .env at project root
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore any extra stuff in .env
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
