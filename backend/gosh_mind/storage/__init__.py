"""Storage module - provides interface and implementations for session history."""

from .interface import SessionStoreInterface
from .memory_storage import InMemorySessionStore

__all__ = ['SessionStoreInterface', 'InMemorySessionStore']
