# Shared utilities and helpers

from .errors import (
    InvariantViolationError,
    StateError,
    StateParseError,
    StateReadError,
)
from .telemetry import (
    PerformanceTimer,
    get_logger,
    log_operation,
    setup_logging,
)

__all__ = [
    "InvariantViolationError",
    "PerformanceTimer",
    "StateError",
    "StateParseError",
    "StateReadError",
    "get_logger",
    "log_operation",
    "setup_logging",
]
