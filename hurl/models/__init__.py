"""
Models package for Hurl.

Exports all SQLAlchemy models for database operations.
"""

from .record import Record

__all__ = [
    "Record",
]
