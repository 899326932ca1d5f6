"""Error types for the gNMI client.

Every failure the client reports is a GNMIError subclass. The CLI maps them
to exit codes: usage and validation errors print the usage text first,
transport and protocol errors are logged and end the process.
"""
from typing import Any, Optional


class GNMIError(Exception):
    """Base class for client errors.

    Attributes:
        error_code: Short category string ("usage", "validation", ...).
        message: Human-readable message.
        details: Optional structured context (path, status code, ...).
    """

    error_code = "internal"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class UsageError(GNMIError):
    """Malformed command grammar. Always terminal, printed with usage text."""

    error_code = "usage"


class ValidationError(GNMIError):
    """Malformed path or value content."""

    error_code = "validation"


class PathParseError(ValidationError):
    """A path element could not be parsed into name and keys."""

    def __init__(self, element: str, reason: str):
        super().__init__(
            f"failed to parse path element {element!r}: {reason}",
            details={"element": element, "reason": reason},
        )
        self.element = element
        self.reason = reason


class TransportError(GNMIError):
    """RPC call or channel failure."""

    error_code = "transport"

    def __init__(
        self,
        message: str,
        status: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.status = status
        if status:
            self.details.setdefault("status", status)


class ProtocolError(GNMIError):
    """Error reported by the target inside an otherwise successful exchange."""

    error_code = "protocol"
