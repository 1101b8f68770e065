"""
Relay error taxonomy.

Client-correctable failures carry field-level detail; everything else is
reported to clients as an opaque message and logged in full for operators.
"""

from typing import Any, Dict, List, Optional


class RelayError(Exception):
    """Base class for all relay errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(RelayError):
    """Request failed validation. Maps to HTTP 400."""

    def __init__(self, message: str = "Invalid request data",
                 errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class SessionNotFoundError(RelayError):
    """Session does not exist in the store."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class DuplicateSessionError(RelayError):
    """Session already exists in the store."""

    def __init__(self, session_id: str):
        super().__init__(f"Session already exists: {session_id}")
        self.session_id = session_id


class UpstreamError(RelayError):
    """Upstream language-model provider failed or returned no usable reply."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message


class UpstreamTimeoutError(UpstreamError):
    """Upstream run did not reach a terminal state within the poll bound."""


class UpstreamConfigurationError(UpstreamError):
    """Upstream credential or assistant identity is not configured."""


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Reduce pydantic error dicts to a JSON-safe loc/msg/type list."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in errors
    ]
