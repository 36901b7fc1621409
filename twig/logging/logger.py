"""
Logging infrastructure for twig.

Provides structured logging with:
- Component-specific context (objects, graph, refs, merge, ...)
- Optional rotating file output
- Structured helpers for repository operations and ref movements
"""

import sys
from pathlib import Path
from typing import Optional, Any
from loguru import logger

from twig.config import LogConfig


class TwigLogger:
    """
    Logger setup for the twig engine.

    Console output goes to stderr so it never mixes with command output on
    stdout. File logging is opt-in.
    """

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        rotation: str = "10 MB",
        retention: str = "1 month",
        level: str = "WARNING",
        format_string: Optional[str] = None,
        enable_file_logging: bool = False,
        enable_console_logging: bool = True,
    ):
        """
        Initialize the twig logger.

        Args:
            log_dir: Directory for log files
            rotation: When to rotate log files
            retention: How long to keep old logs
            level: Default log level
            format_string: Custom format string
            enable_file_logging: Whether to log to files
            enable_console_logging: Whether to log to stderr
        """
        self.log_dir = log_dir or Path("logs")
        self.rotation = rotation
        self.retention = retention
        self.level = level

        self.format_string = format_string or (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[component]}</cyan> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )

        # Every record needs a component for the format string
        logger.configure(extra={"component": "system"})
        logger.remove()

        if enable_console_logging:
            logger.add(
                sys.stderr,
                format=self.format_string,
                level=level,
                colorize=True,
            )

        if enable_file_logging:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            logger.add(
                self.log_dir / "twig.log",
                format=self.format_string,
                level=self.level,
                rotation=self.rotation,
                retention=self.retention,
                compression="zip",
            )

        self.logger = logger.bind(component="system")

    @classmethod
    def from_config(cls, log_config: LogConfig) -> "TwigLogger":
        """Build a logger from a LogConfig."""
        return cls(
            log_dir=Path(log_config.log_dir),
            rotation=log_config.rotation,
            retention=log_config.retention,
            level=log_config.level,
            format_string=log_config.format,
            enable_file_logging=log_config.enable_file_logging,
            enable_console_logging=log_config.enable_console_logging,
        )


def get_twig_logger(component: str = "system") -> Any:
    """
    Get a component-specific logger.

    Example:
        >>> log = get_twig_logger("refs")
        >>> log.debug("Branch moved", branch="master")
    """
    return logger.bind(component=component)


def log_operation(logger_instance: Any, operation: str, **kwargs: Any) -> None:
    """
    Log a repository operation event.

    Args:
        logger_instance: Logger to use
        operation: Operation name, optionally suffixed (e.g., "commit_complete")
        **kwargs: Additional context
    """
    logger_instance.debug(
        "Repository operation: {operation}",
        operation=operation,
        **kwargs,
    )


def log_ref_update(
    logger_instance: Any, ref: str, old_id: Optional[str], new_id: str
) -> None:
    """Log a branch or HEAD movement."""
    logger_instance.info(
        "{ref}: {old_short} -> {new_short}",
        ref=ref,
        old_short=(old_id or "none")[:7],
        new_short=new_id[:7],
        old_id=old_id,
        new_id=new_id,
    )


def initialize_logging(log_config: Optional[LogConfig] = None) -> TwigLogger:
    """
    Initialize the twig logging system.

    This should be called once at application startup.

    Args:
        log_config: Logging settings (defaults to LogConfig())

    Returns:
        Configured TwigLogger instance
    """
    return TwigLogger.from_config(log_config or LogConfig())
