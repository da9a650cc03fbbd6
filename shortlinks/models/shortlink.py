"""Short-link data models.

This module defines the ShortLink model for storing the mapping between
short codes and site paths.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Index, String
from sqlmodel import Field, SQLModel

# Width of the hash column; also the hard ceiling for disambiguation.
HASH_COLUMN_LENGTH = 32


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class ShortLinkBase(SQLModel):
    """Base model for short-link data."""

    path: str = Field(
        description="Original path with the site's base URL stripped"
    )


class ShortLink(ShortLinkBase, table=True):
    """
    Short-link model for storing shortened paths in the database.

    ``hash`` is the public short code. It is optional because the sequential
    strategy can only compute it once the row has been assigned an ``id``;
    every row handed back to a caller has it set.
    """

    __tablename__ = "shortlinks"

    id: Optional[int] = Field(default=None, primary_key=True)
    hash: Optional[str] = Field(
        default=None,
        sa_column=Column(String(HASH_COLUMN_LENGTH), unique=True, nullable=True),
        description="Unique short code exposed in short URLs",
    )
    created: datetime = Field(
        default_factory=utc_now,
        description="Timestamp when this short link was created"
    )

    __table_args__ = (
        Index("ix_shortlinks_created", "created"),
    )

    @property
    def is_finalized(self) -> bool:
        """Whether the row has been assigned its short code."""
        return self.hash is not None


class ShortLinkCreate(ShortLinkBase):
    """Schema for creating a new short link."""
    hash: Optional[str] = Field(default=None, max_length=HASH_COLUMN_LENGTH)
    created: Optional[datetime] = None
