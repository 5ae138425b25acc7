"""
Configuration settings for the Conductor producer service.

Uses Pydantic Settings to load environment variables for the store connection,
logging, and catalog/DDL behaviour. QuestDB exposes its PostgreSQL wire
endpoint on port 8812 with `admin`/`quest` credentials by default.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PartitionUnit = Literal["NONE", "HOUR", "DAY", "WEEK", "MONTH", "YEAR"]


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(8812, alias="DB_PORT")
    db_user: str = Field("admin", alias="DB_USER")
    db_password: str = Field("quest", alias="DB_PASSWORD")
    db_name: str = Field("qdb", alias="DB_NAME")
    pool_min_size: int = Field(1, alias="POOL_MIN_SIZE")
    pool_max_size: int = Field(10, alias="POOL_MAX_SIZE")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Catalog and generated DDL
    catalog_table: str = Field("producers", alias="CATALOG_TABLE")
    partition_by: Optional[PartitionUnit] = Field(None, alias="PARTITION_BY")
    strict_identifiers: bool = Field(False, alias="STRICT_IDENTIFIERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["PartitionUnit", "Settings", "get_settings"]
