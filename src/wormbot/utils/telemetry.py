"""Telemetry utilities for logging, metrics, and tracing.

This module provides the observability plumbing used by the state loader:
- Structured logging (JSON or console rendering)
- Prometheus metrics for snapshot loads
- OpenTelemetry spans (no-op unless the host application installs a provider)
- A performance timer tying the three together
"""

import logging
import time
from typing import Any

import structlog
from opentelemetry import trace
from prometheus_client import Counter, Histogram

# Prometheus metrics
OPERATION_COUNTER = Counter(
    "wormbot_operations_total",
    "Total number of operations",
    ["operation", "status"],
)

OPERATION_LATENCY = Histogram(
    "wormbot_operation_duration_seconds",
    "Operation latency in seconds",
    ["operation"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.02, 0.05, 0.1, 0.2, 0.5, 1.0],
)

STATE_LOADS = Counter(
    "wormbot_state_loads_total",
    "Total number of game state loads",
    ["status"],
)

STATE_BYTES = Histogram(
    "wormbot_state_size_bytes",
    "Size of loaded game state documents",
    buckets=[1_000, 10_000, 50_000, 100_000, 500_000, 1_000_000, 5_000_000],
)


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Initialize structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" for machine-readable lines, "text" for the console
    """
    logging.basicConfig(format="%(message)s", level=log_level.upper())

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "text":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_tracer(name: str) -> trace.Tracer:
    """Get OpenTelemetry tracer for a component.

    Args:
        name: Tracer name (typically module name)

    Returns:
        Tracer instance
    """
    return trace.get_tracer(name)


def get_logger(name: str, **context: Any) -> Any:
    """Get a structured logger with optional context.

    Args:
        name: Logger name
        **context: Additional context to bind to logger

    Returns:
        Bound logger with context
    """
    logger = structlog.get_logger(name)
    if context:
        logger = logger.bind(**context)
    return logger


def log_operation(
    logger: Any,
    operation: str,
    status: str = "success",
    source: str | None = None,
    current_round: int | None = None,
    latency_ms: float | None = None,
    **extra_context: Any,
) -> None:
    """Log an operation with standardized fields for observability.

    Args:
        logger: Structured logger instance
        operation: Operation name
        status: Operation status (success, error, warning)
        source: State source (file path or "<memory>")
        current_round: Game round of the loaded snapshot
        latency_ms: Operation latency in milliseconds
        **extra_context: Additional context fields
    """
    log_data = {
        "operation": operation,
        "status": status,
        **extra_context,
    }

    if source is not None:
        log_data["source"] = source
    if current_round is not None:
        log_data["current_round"] = current_round
    if latency_ms is not None:
        log_data["latency_ms"] = latency_ms

    if status == "error":
        logger.error("Operation completed", **log_data)
    elif status == "warning":
        logger.warning("Operation completed", **log_data)
    else:
        logger.info("Operation completed", **log_data)


class PerformanceTimer:
    """Context manager for measuring operation performance.

    Records metrics, logs timing information, and creates a tracing span.
    Extra log fields can be attached while the block runs via
    :meth:`add_context`.
    """

    def __init__(
        self,
        operation: str,
        source: str | None = None,
        logger: structlog.BoundLogger | None = None,
        record_metrics: bool = True,
        create_span: bool = True,
        tracer_name: str = "wormbot.performance",
    ):
        self.operation = operation
        self.source = source
        self.logger = logger or get_logger("wormbot.performance")
        self.record_metrics = record_metrics
        self.create_span = create_span
        self.tracer = get_tracer(tracer_name) if create_span else None
        self.span: trace.Span | None = None
        self.start_time: float | None = None
        self.end_time: float | None = None
        self.context: dict[str, Any] = {}

    def add_context(self, **context: Any) -> None:
        self.context.update(context)

    def __enter__(self) -> "PerformanceTimer":
        self.start_time = time.perf_counter()

        if self.create_span and self.tracer:
            self.span = self.tracer.start_span(self.operation)
            if self.source:
                self.span.set_attribute("source", self.source)

        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.end_time = time.perf_counter()
        duration = self.end_time - (self.start_time or 0)

        status = "error" if exc_type else "success"

        if self.record_metrics:
            OPERATION_COUNTER.labels(operation=self.operation, status=status).inc()
            OPERATION_LATENCY.labels(operation=self.operation).observe(duration)

        if self.span:
            self.span.set_attribute("duration_seconds", duration)
            self.span.set_attribute("status", status)

            if exc_type:
                self.span.set_status(trace.Status(trace.StatusCode.ERROR, str(exc_val)))
                self.span.record_exception(exc_val)
            else:
                self.span.set_status(trace.Status(trace.StatusCode.OK))

            self.span.end()

        if exc_type:
            self.context.setdefault("error", str(exc_val))
            self.context.setdefault("error_type", exc_type.__name__)

        log_operation(
            self.logger,
            self.operation,
            status=status,
            source=self.source,
            latency_ms=duration * 1000,
            **self.context,
        )

    @property
    def duration(self) -> float | None:
        """Get operation duration in seconds."""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return None


def record_state_load(status: str, size_bytes: int | None = None) -> None:
    """Record the outcome of a state load.

    Args:
        status: "success", "read_error" or "parse_error"
        size_bytes: Size of the document read, when it was read
    """
    STATE_LOADS.labels(status=status).inc()
    if size_bytes is not None:
        STATE_BYTES.observe(size_bytes)
