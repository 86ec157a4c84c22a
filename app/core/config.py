"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app and the operator scripts
share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

import os

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class TokenSettings(BaseSettings):
    """Lifetimes and constant claim values used when minting tokens."""

    model_config = SettingsConfigDict(env_prefix="OAUTH_", extra="ignore")

    client_token_ttl_seconds: int = Field(4 * 60 * 60, gt=0)
    access_token_ttl_seconds: int = Field(7200, gt=0)
    refresh_token_ttl_seconds: int = Field(28800, gt=0)
    exchange_code_ttl_seconds: int = Field(28800, gt=0)
    token_prefix: str = "eg1~"
    signing_secret: Optional[str] = Field(
        None,
        description=(
            "Stable HMAC secret. When omitted a random runner id is used and "
            "every token is invalidated on restart."
        ),
    )
    issuer_service: str = "glyph"
    client_service: str = "prod-fn"
    app_name: str = "fortnite"


class StorageSettings(BaseSettings):
    """Document store selection."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_", extra="ignore")

    backend: Literal["sqlite", "dynamodb"] = "sqlite"
    sqlite_path: str = "data/glyph.db"


class AWSSettings(BaseSettings):
    """Settings for the DynamoDB document store."""

    model_config = SettingsConfigDict(extra="ignore")

    region_name: str = Field("us-east-1", validation_alias="AWS_REGION")
    dynamodb_table_name: Optional[str] = Field(
        None,
        validation_alias="DYNAMODB_TABLE_NAME",
        description="Table holding users and credentials; TTL attribute is `ttl`.",
    )
    dynamodb_owner_index: str = Field(
        "owner-index",
        validation_alias="DYNAMODB_OWNER_INDEX",
        description="GSI keyed on `owner` (`<collection>#<account_id>`), projecting ALL.",
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(extra="ignore")

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    tokens: TokenSettings = Field(default_factory=TokenSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    aws: AWSSettings = Field(default_factory=AWSSettings)

    @model_validator(mode="after")
    def _require_table_for_dynamodb(self) -> "AppSettings":
        if self.storage.backend == "dynamodb" and not self.aws.dynamodb_table_name:
            raise ValueError(
                "DYNAMODB_TABLE_NAME is required when STORAGE_BACKEND=dynamodb"
            )
        return self


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "AWSSettings",
    "StorageSettings",
    "TokenSettings",
    "get_settings",
]
