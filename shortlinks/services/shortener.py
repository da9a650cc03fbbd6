"""Short-link service for the short-link application.

This module contains the ShortenerEngine class which maps site URLs to short
codes and resolves short codes back to site URLs.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from shortlinks.core.config import Settings
from shortlinks.db.base import get_session
from shortlinks.models.shortlink import HASH_COLUMN_LENGTH
from shortlinks.repositories.base import RepositoryError
from shortlinks.repositories.shortlink_repository import ShortLinkRepository
from shortlinks.services.exceptions import (
    ShortlinkAmbiguousError,
    ShortlinkNotFoundError,
    ShortlinkPersistenceError,
)
from shortlinks.services.strategies import ShortCodeStrategy, build_strategy

logger = logging.getLogger(__name__)

SHORT_ROUTE = "/short/"


class ShortenerEngine:
    """
    Database-backed URL shortener.

    The engine keeps no per-call state: every call opens its own session from
    ``session_factory`` and closes it when done, so one instance can serve
    concurrent requests. Uniqueness is enforced by the store.
    """

    def __init__(
        self,
        base_url: str,
        salt: str,
        hash_algorithm: str = "md5",
        preferred_hash_length: int = 9,
        max_hash_length: int = HASH_COLUMN_LENGTH,
        max_conflict_retries: int = 3,
        repository: Optional[ShortLinkRepository] = None,
        session_factory: Optional[async_sessionmaker] = None,
    ):
        """
        Initialize the shortener.

        Args:
            base_url: Base URL of the site; stripped on shorten, prepended on resolve
            salt: Secret mixed into path digests
            hash_algorithm: hashlib algorithm name, or ``base62`` for sequential codes
            preferred_hash_length: Digest characters tried first
            max_hash_length: Longest code disambiguation may produce
            max_conflict_retries: Concurrent insert conflicts tolerated per call
            repository: Store for short links
            session_factory: Factory for database sessions (defaults to the shared one)

        Raises:
            UnsupportedHashAlgorithmError: If ``hash_algorithm`` cannot be used
            ValueError: If the hash lengths are inconsistent or wider than the hash column
        """
        if max_hash_length > HASH_COLUMN_LENGTH:
            raise ValueError(
                f"max_hash_length ({max_hash_length}) exceeds the hash column width "
                f"({HASH_COLUMN_LENGTH})"
            )
        if preferred_hash_length > max_hash_length:
            raise ValueError(
                f"preferred_hash_length ({preferred_hash_length}) exceeds "
                f"max_hash_length ({max_hash_length})"
            )
        self.base_url = base_url
        self.repository = repository or ShortLinkRepository()
        self.session_factory = session_factory
        self.strategy: ShortCodeStrategy = build_strategy(
            self.repository,
            hash_algorithm,
            salt=salt,
            preferred_length=preferred_hash_length,
            max_length=max_hash_length,
            max_conflict_retries=max_conflict_retries,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        repository: Optional[ShortLinkRepository] = None,
        session_factory: Optional[async_sessionmaker] = None,
    ) -> "ShortenerEngine":
        """Build an engine from application settings."""
        return cls(
            base_url=settings.BASE_URL,
            salt=settings.SHORTLINK_SALT,
            hash_algorithm=settings.SHORTLINK_HASH_ALGORITHM,
            preferred_hash_length=settings.SHORTLINK_PREFERRED_HASH_LENGTH,
            max_hash_length=settings.SHORTLINK_MAX_HASH_LENGTH,
            max_conflict_retries=settings.SHORTLINK_MAX_CONFLICT_RETRIES,
            repository=repository,
            session_factory=session_factory,
        )

    def strip_base_url(self, url: str) -> str:
        """Return ``url`` relative to the site, i.e. without the base URL prefix."""
        if self.base_url and url.startswith(self.base_url):
            return url[len(self.base_url):]
        return url

    def short_url(self, code: str) -> str:
        return f"{self.base_url}{SHORT_ROUTE}{code}"

    async def shorten_to_code(self, url: str) -> str:
        """
        Store ``url`` if needed and return its short code.

        Raises:
            DisambiguationExhaustedError: If no unique code fits in the maximum length
            ShortlinkPersistenceError: If the store fails
        """
        path = self.strip_base_url(url)
        async with get_session(self.session_factory) as db:
            code = await self.strategy.generate(db, path)
        logger.info(f"Shortened {path} to {code} using {self.strategy.name}")
        return code

    async def shorten(self, url: str) -> str:
        """
        Generate and store a short URL for ``url``.

        Args:
            url: Full URL on this site

        Returns:
            str: ``base_url + "/short/" + code``
        """
        return self.short_url(await self.shorten_to_code(url))

    async def resolve_path(self, code: str) -> str:
        """
        Return the stored path for ``code``.

        Raises:
            ShortlinkNotFoundError: If no row has this code
            ShortlinkAmbiguousError: If more than one row has this code
            ShortlinkPersistenceError: If the store fails
        """
        async with get_session(self.session_factory) as db:
            try:
                matches = await self.repository.find_by_hash(db, code)
            except RepositoryError as e:
                logger.error(f"Could not look up shortlink {code}: {e}")
                raise ShortlinkPersistenceError(f"Could not look up shortlink {code}: {e}") from e

        if not matches:
            raise ShortlinkNotFoundError(code)
        if len(matches) > 1:
            logger.error(f"Shortlink {code} matches {len(matches)} rows")
            raise ShortlinkAmbiguousError(code, len(matches))
        return matches[0].path

    async def resolve(self, code: str) -> str:
        """
        Resolve a short code to the full URL it was created from.

        Args:
            code: Short code taken from a short URL

        Returns:
            str: ``base_url + path``
        """
        return self.base_url + await self.resolve_path(code)
