"""Structured error types for state loading.

Loading a snapshot can fail in two recoverable ways: the source cannot be
read, or its content does not match the snapshot schema. Both derive from
:class:`StateError`.

:class:`InvariantViolationError` is deliberately outside that hierarchy. It
signals an internally inconsistent snapshot or a mismatched query and is
raised by the convenience accessors on ``State``.
"""

from pathlib import Path
from typing import Any


class StateError(Exception):
    """Base exception for recoverable state loading errors."""

    def __init__(self, message: str, source: str | None = None):
        """Initialize state error.

        Args:
            message: Error message
            source: Name of the source being loaded (file path or "<memory>")
        """
        super().__init__(message)
        self.message = message
        self.source = source

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "source": self.source,
        }


class StateReadError(StateError):
    """Error raised when the snapshot source cannot be read.

    The underlying ``OSError`` is kept as ``__cause__`` and ``cause``.
    """

    def __init__(self, path: str | Path, cause: OSError):
        """Initialize read error.

        Args:
            path: Path that could not be read
            cause: Underlying I/O error
        """
        self.path = str(path)
        self.cause = cause

        reason = cause.strerror or str(cause)
        message = f"Cannot read state file {self.path}: {reason}"

        super().__init__(message, source=self.path)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["cause"] = type(self.cause).__name__
        return data


class StateParseError(StateError):
    """Error raised when snapshot content is malformed or off-schema.

    Covers invalid JSON, invalid UTF-8, missing required fields, wrong value
    types and unknown enumeration tokens.
    """

    def __init__(
        self,
        errors: list[str],
        field_paths: list[str] | None = None,
        source: str | None = None,
    ):
        """Initialize parse error.

        Args:
            errors: Human-readable problem descriptions
            field_paths: Dotted paths of the offending fields, where known
            source: Name of the source being parsed
        """
        self.errors = errors
        self.field_paths = field_paths or []

        where = f" in {source}" if source else ""
        count = len(errors)
        plural = "problem" if count == 1 else "problems"
        message = f"Invalid game state{where} ({count} {plural}): " + "; ".join(
            errors
        )

        super().__init__(message, source=source)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        data["field_paths"] = self.field_paths
        return data


class InvariantViolationError(AssertionError):
    """A snapshot contradicts itself or a query does not fit the snapshot.

    Not a subclass of :class:`StateError`: callers handling load failures
    must not swallow a data-integrity bug by accident.
    """
