"""
Logging infrastructure for twig.

Provides loguru-based structured logging and decorators for tracking
repository operations.
"""

from .logger import (
    TwigLogger,
    get_twig_logger,
    initialize_logging,
    log_operation,
    log_ref_update,
)

from .decorators import (
    track_operation,
    performance_monitor,
)

__all__ = [
    # Logger
    "TwigLogger",
    "get_twig_logger",
    "initialize_logging",
    "log_operation",
    "log_ref_update",
    # Decorators
    "track_operation",
    "performance_monitor",
]
