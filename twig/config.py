"""
Configuration management for twig.

This module provides centralized configuration for the engine:
- Repository layout and naming defaults
- Commit authorship
- Logging settings
"""

import os
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class RepositoryConfig(BaseModel):
    """Configuration for repository layout and commit defaults."""

    meta_dir: str = Field(
        default=".twig",
        min_length=1,
        description="Name of the metadata directory inside the working tree",
    )
    default_branch: str = Field(
        default="master", min_length=1, description="Branch created by init"
    )
    author: str = Field(
        default="twig", description="Author recorded on new commits"
    )
    min_abbrev_length: int = Field(
        default=4,
        ge=1,
        le=40,
        description="Shortest commit id prefix accepted in place of a full id",
    )


class LogConfig(BaseModel):
    """Configuration for logging system."""

    level: LogLevel = Field(default="WARNING", description="Logging level")
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
    """Main configuration object for twig."""

    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        return cls(
            repository=RepositoryConfig(
                meta_dir=os.getenv("TWIG_META_DIR", ".twig"),
                default_branch=os.getenv("TWIG_DEFAULT_BRANCH", "master"),
                author=os.getenv("TWIG_AUTHOR", "twig"),
                min_abbrev_length=int(os.getenv("TWIG_MIN_ABBREV_LENGTH", "4")),
            ),
            logging=LogConfig(
                level=cast(LogLevel, os.getenv("TWIG_LOG_LEVEL", "WARNING")),
                log_dir=os.getenv("TWIG_LOG_DIR", "logs"),
                enable_file_logging=os.getenv("TWIG_LOG_TO_FILE", "false").lower()
                in ("1", "true", "yes"),
            ),
        )
