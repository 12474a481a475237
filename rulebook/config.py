"""
Configuration management for the rulebook.

This module provides centralized configuration for:
- History storage location and retention
- Logging settings
"""

import os
from pathlib import Path
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class HistoryConfig(BaseModel):
    """Configuration for the per-rule history store."""

    base_path: str = Field(
        default=".", description="Project root containing the rules/ directory"
    )
    history_dir: str = Field(
        default=".history", description="History directory name inside rules/"
    )
    max_entries: int = Field(
        default=50, gt=0, description="Maximum history entries retained per rule"
    )

    @property
    def history_path(self) -> Path:
        """Get absolute path to the history directory."""
        return (Path(self.base_path) / "rules" / self.history_dir).resolve()


class LogConfig(BaseModel):
    """Configuration for logging system."""

    level: LogLevel = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[component]}</cyan> - "
        "<level>{message}</level>",
        description="Log message format",
    )
    rotation: str = Field(default="10 MB", description="Log file rotation size")
    retention: str = Field(default="1 month", description="Log file retention period")
    log_dir: str = Field(default="logs", description="Directory for log files")
    enable_file_logging: bool = Field(
        default=False, description="Whether to enable file logging"
    )
    enable_console_logging: bool = Field(
        default=True, description="Whether to enable console logging"
    )


class Config(BaseModel):
    """Main configuration object for the rulebook."""

    history: HistoryConfig = Field(default_factory=HistoryConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        return cls(
            history=HistoryConfig(
                base_path=os.getenv("RULEBOOK_BASE_PATH", "."),
                history_dir=os.getenv("RULEBOOK_HISTORY_DIR", ".history"),
                max_entries=int(os.getenv("RULEBOOK_HISTORY_MAX_ENTRIES", "50")),
            ),
            logging=LogConfig(
                level=cast(LogLevel, os.getenv("RULEBOOK_LOG_LEVEL", "INFO").upper()),
                log_dir=os.getenv("RULEBOOK_LOG_DIR", "logs"),
                enable_file_logging=os.getenv("RULEBOOK_LOG_TO_FILE", "false").lower()
                in ("true", "1", "yes"),
            ),
        )


# Global configuration instance
config = Config.from_env()
