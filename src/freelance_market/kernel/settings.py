"""
Marketplace settings

Runtime configuration with validated defaults. Values can be overridden
from MARKET_* environment variables for deployments and the CLI.
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class MarketplaceSettings(BaseModel):
    """
    Runtime configuration for services, storage and logging
    """

    db_path: Path = Field(
        default=Path(".market.db"),
        description="SQLite database file",
    )

    default_rank_by: str = Field(
        default="composite",
        description="Ranking strategy used when a listing names none",
    )

    default_page_size: int = Field(
        default=20,
        ge=1,
        description="Projects per page when a search gives no limit",
    )

    max_page_size: int = Field(
        default=100,
        ge=1,
        description="Upper bound on projects per page",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum log level",
    )

    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console output",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @field_validator("default_rank_by")
    @classmethod
    def normalize_rank_by(cls, v: str) -> str:
        return v.strip().lower()

    @model_validator(mode="after")
    def validate_page_sizes(self) -> "MarketplaceSettings":
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size {self.default_page_size} exceeds "
                f"max_page_size {self.max_page_size}"
            )
        return self

    @classmethod
    def from_env(cls) -> "MarketplaceSettings":
        """Build settings from MARKET_* environment variables, falling back to defaults"""
        env_map = {
            "db_path": "MARKET_DB_PATH",
            "default_rank_by": "MARKET_RANK_BY",
            "default_page_size": "MARKET_PAGE_SIZE",
            "max_page_size": "MARKET_MAX_PAGE_SIZE",
            "log_level": "MARKET_LOG_LEVEL",
            "json_logs": "MARKET_JSON_LOGS",
        }
        values = {
            field: os.environ[var] for field, var in env_map.items() if var in os.environ
        }
        return cls(**values)
