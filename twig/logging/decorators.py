"""
Decorators for automatic logging of repository operations.

These decorators enable traceability without cluttering the engine code.
"""

import functools
import inspect
import time
from typing import Callable, Any
from .logger import get_twig_logger, log_operation


def track_operation(operation_type: str) -> Callable:
    """
    Decorator to track a repository operation.

    Logs the call with its (truncated) arguments, then its completion or the
    error that aborted it. Errors are re-raised unchanged.

    Args:
        operation_type: Name of the operation (e.g., "commit", "merge")

    Example:
        >>> @track_operation("add")
        ... def add(self, name: str):
        ...     ...
    """

    def decorator(func: Callable) -> Callable:
        sig = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log = get_twig_logger("repository")

            bound_args = sig.bind(*args, **kwargs)
            bound_args.apply_defaults()
            arguments = {
                k: str(v)[:100] for k, v in bound_args.arguments.items() if k != "self"
            }

            log_operation(log, operation_type, function=func.__name__, arguments=arguments)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log_operation(
                    log,
                    f"{operation_type}_error",
                    function=func.__name__,
                    error=str(e),
                    error_type=type(e).__name__,
                    success=False,
                )
                raise

            log_operation(
                log,
                f"{operation_type}_complete",
                function=func.__name__,
                success=True,
            )
            return result

        return wrapper

    return decorator


def performance_monitor(threshold_ms: float = 1000.0) -> Callable:
    """
    Decorator to monitor function performance.

    Logs warning if execution exceeds threshold.

    Args:
        threshold_ms: Warning threshold in milliseconds

    Example:
        >>> @performance_monitor(threshold_ms=500)
        ... def merge_base(a, b):
        ...     ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log = get_twig_logger("system")

            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                if elapsed_ms > threshold_ms:
                    log.warning(
                        "Performance threshold exceeded: {function}",
                        function=func.__name__,
                        elapsed_ms=elapsed_ms,
                        threshold_ms=threshold_ms,
                    )
                else:
                    log.debug(
                        "Function executed: {function}",
                        function=func.__name__,
                        elapsed_ms=elapsed_ms,
                    )

        return wrapper

    return decorator
