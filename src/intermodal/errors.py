"""
intermodal error types.
"""

from typing import Any, Optional


class IntermodalError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class DecodeError(IntermodalError):
    """A blob could not be decoded into the requested shape."""

    def __init__(self, message: str, code: str = "decode_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class UnknownPayloadError(IntermodalError):
    """No payload type is registered for a manifest's kind/version."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("unknown_payload", message, details)
