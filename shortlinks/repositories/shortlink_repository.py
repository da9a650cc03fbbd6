"""Short-link repository.

This module provides the ShortLinkRepository class for database operations related
to ShortLink models. It is the store the shortener engine reads and writes through.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from shortlinks.models.shortlink import ShortLink, ShortLinkCreate
from shortlinks.repositories.base import BaseRepository, RepositoryError

LIKE_ESCAPE = "\\"


class ShortLinkRepository(BaseRepository[ShortLink, ShortLinkCreate]):
    """
    Repository for ShortLink model database operations.

    Lookups are exact and case-sensitive on ``hash``. Writes only flush;
    callers wrap them in a transaction.
    """

    def __init__(self):
        """Initialize the repository with the ShortLink model type."""
        super().__init__(ShortLink)

    async def find_by_hash(self, db: AsyncSession, code: str) -> List[ShortLink]:
        """
        Find every row whose hash equals ``code``.

        A list is returned so that callers can tell "none" from "more than one".

        Raises:
            RepositoryError: On database errors
        """
        return await self.find_by(db, hash=code)

    async def get_by_hash(self, db: AsyncSession, code: str) -> Optional[ShortLink]:
        """
        Find a single short link by its hash.

        Returns:
            The first matching ShortLink, or None
        """
        matches = await self.find_by_hash(db, code)
        return matches[0] if matches else None

    async def find_by_hash_prefix(
        self,
        db: AsyncSession,
        prefix: str,
        limit: int = 100
    ) -> List[ShortLink]:
        """
        Find short links whose hash starts with ``prefix``.

        Rows are ordered shortest hash first, then alphabetically, so the
        links that were disambiguated from a common prefix line up in the
        order they widened.

        Args:
            db: Database session
            prefix: Leading characters of the hash (LIKE wildcards are escaped)
            limit: Maximum number of rows to return

        Raises:
            RepositoryError: On database errors
        """
        escaped = (
            prefix.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
            .replace("%", LIKE_ESCAPE + "%")
            .replace("_", LIKE_ESCAPE + "_")
        )
        try:
            query = (
                select(ShortLink)
                .where(ShortLink.hash.like(escaped + "%", escape=LIKE_ESCAPE))
                .order_by(func.length(ShortLink.hash), ShortLink.hash)
                .limit(limit)
            )
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving short links by hash prefix: {e}") from e

    async def create_shortlink(
        self,
        db: AsyncSession,
        path: str,
        hash: Optional[str] = None,
        created: Optional[datetime] = None
    ) -> ShortLink:
        """
        Insert a new short link row.

        Without ``hash`` the row is left unfinalized; its ``id`` is still
        assigned by the flush so a hash can be derived from it.

        Args:
            db: Database session
            path: Path with the site's base URL stripped
            hash: Short code, or None to assign it later with set_hash
            created: Creation timestamp (defaults to now)

        Returns:
            The created ShortLink with its id populated

        Raises:
            DuplicateEntityError: If the hash is already taken
            RepositoryError: On other database errors
        """
        data = ShortLinkCreate(path=path, hash=hash, created=created)
        return await self.create(db, data)

    async def set_hash(self, db: AsyncSession, link: ShortLink, hash: str) -> ShortLink:
        """
        Assign (or overwrite) the hash of an existing row and flush it.

        Raises:
            DuplicateEntityError: If the hash is already taken
            RepositoryError: On other database errors
        """
        return await self.update(db, link, {"hash": hash})
