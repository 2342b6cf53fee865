"""Exception types raised by the shipdash client and tools."""

from __future__ import annotations

from typing import Any, Optional


class ShipdashError(Exception):
    """Base class for shipdash errors."""


class ValidationError(ShipdashError, ValueError):
    """Raised when a request is malformed; no upstream calls are made."""


class UpstreamError(ShipdashError):
    """A single call to the shipping API failed.

    Parameters
    ----------
    message
        Server-provided message when available, otherwise the transport error.
    status_code
        HTTP status of the failed response, or ``None`` for transport failures.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PartialBatchFailure(ShipdashError):
    """At least one order in a tag batch failed.

    ``report`` holds the full batch report, successes included.
    """

    def __init__(self, report: Any) -> None:
        message = report.get("error") if isinstance(report, dict) else None
        super().__init__(message or "Tag batch failed")
        self.report = report


__all__ = ["PartialBatchFailure", "ShipdashError", "UpstreamError", "ValidationError"]
