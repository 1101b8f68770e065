"""Core module - contains the chat relay and the error taxonomy."""

from .errors import (
    RelayError,
    InvalidRequestError,
    SessionNotFoundError,
    DuplicateSessionError,
    UpstreamError,
    UpstreamTimeoutError,
    UpstreamConfigurationError,
)

__all__ = [
    'RelayError', 'InvalidRequestError', 'SessionNotFoundError', 'DuplicateSessionError',
    'UpstreamError', 'UpstreamTimeoutError', 'UpstreamConfigurationError',
]
