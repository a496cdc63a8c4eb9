"""
Custom exception classes for the record store
"""

from __future__ import annotations


class RecordStoreError(Exception):
    """Base exception for the record store"""
    pass


class ConfigurationError(RecordStoreError, ValueError):
    """Raised when configuration is invalid"""
    pass


class DatabaseError(RecordStoreError):
    """Raised when a MongoDB operation failed and the caller asked for an exception"""
    pass


class RecordNotFoundError(RecordStoreError):
    """Raised when a record is not found"""
    pass
