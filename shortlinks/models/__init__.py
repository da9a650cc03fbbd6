"""
Data models for the short-link service.

This module imports and exports all SQLModel models used in the application.
"""

# First import SQLModel itself to ensure metadata is initialized
from sqlmodel import SQLModel

from shortlinks.models.shortlink import (
    HASH_COLUMN_LENGTH,
    ShortLink,
    ShortLinkBase,
    ShortLinkCreate,
)

__all__ = [
    "HASH_COLUMN_LENGTH",
    "ShortLink",
    "ShortLinkBase",
    "ShortLinkCreate",
]
