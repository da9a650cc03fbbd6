"""Short code generation strategies.

The strategy is chosen once per deployment from the configured hash
algorithm: ``base62`` selects SequentialStrategy, anything else selects
ContentHashStrategy with that digest algorithm.
"""

import logging
from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.db.session import db_transaction, transaction
from shortlinks.models.shortlink import HASH_COLUMN_LENGTH, utc_now
from shortlinks.repositories.base import DuplicateEntityError, RepositoryError
from shortlinks.repositories.shortlink_repository import ShortLinkRepository
from shortlinks.services import codec
from shortlinks.services.exceptions import (
    DisambiguationExhaustedError,
    ShortlinkPersistenceError,
    UnsupportedHashAlgorithmError,
)

logger = logging.getLogger(__name__)

PAD_CHARACTER = "_"


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies."""

    name: str = ""

    def __init__(self, repository: ShortLinkRepository):
        self.repository = repository

    @abstractmethod
    async def generate(self, db: AsyncSession, path: str) -> str:
        """
        Return the short code for ``path``, writing a row if needed.

        Args:
            db: Database session owned by the caller
            path: Path with the site's base URL stripped

        Returns:
            The stored short code
        """


class SequentialStrategy(ShortCodeStrategy):
    """
    Encode the store-assigned row id as base62.

    Every call allocates a new row. Ids are unique, so codes never collide
    and no disambiguation is needed.
    """

    name = codec.BASE62_ALGORITHM

    async def generate(self, db: AsyncSession, path: str) -> str:
        try:
            code = await self._allocate(db, path)
        except RepositoryError as e:
            logger.error(f"Could not save shortlink: {e}")
            raise ShortlinkPersistenceError(f"Could not save shortlink for {path}: {e}", path=path) from e
        return code

    @db_transaction(db_param_name="db")
    async def _allocate(self, db: AsyncSession, path: str) -> str:
        # The id only exists after the first flush, so the hash is a second write.
        link = await self.repository.create_shortlink(db, path=path, created=utc_now())
        link = await self.repository.set_hash(db, link, codec.encode_base62(link.id))
        return link.hash


class ContentHashStrategy(ShortCodeStrategy):
    """
    Derive the code from a salted digest of the path.

    The first ``preferred_length`` digest characters are tried first. When
    that prefix already belongs to a different path, the candidate grows one
    character at a time until it is free or matches the same path.
    """

    def __init__(
        self,
        repository: ShortLinkRepository,
        salt: str,
        algorithm: str = "md5",
        preferred_length: int = 9,
        max_length: int = HASH_COLUMN_LENGTH,
        max_conflict_retries: int = 3,
    ):
        super().__init__(repository)
        if not codec.is_supported_algorithm(algorithm) or algorithm == codec.BASE62_ALGORITHM:
            raise UnsupportedHashAlgorithmError(algorithm)
        if preferred_length < 1:
            raise ValueError(f"preferred_length must be positive, got {preferred_length}")
        if max_length > HASH_COLUMN_LENGTH:
            raise ValueError(
                f"max_length {max_length} is wider than the hash column ({HASH_COLUMN_LENGTH})"
            )
        self.name = algorithm
        self.salt = salt
        self.algorithm = algorithm
        self.preferred_length = preferred_length
        self.max_length = max_length
        self.max_conflict_retries = max_conflict_retries

    def digest(self, path: str) -> str:
        return codec.digest(path, self.salt, self.algorithm)

    def candidate(self, full_digest: str, length: int) -> str:
        """Take ``length`` digest characters, padding short digests with ``_``."""
        return full_digest[:length].ljust(length, PAD_CHARACTER)

    async def generate(self, db: AsyncSession, path: str) -> str:
        return await self.save_and_shorten(db, path, self.digest(path), self.preferred_length)

    async def save_and_shorten(
        self,
        db: AsyncSession,
        path: str,
        full_digest: str,
        length: int
    ) -> str:
        """
        Find or store the shortest usable prefix of ``full_digest``.

        Args:
            db: Database session
            path: Path the code should point to
            full_digest: Complete digest of the path
            length: Number of digest characters to start from

        Returns:
            The short code stored for ``path``

        Raises:
            DisambiguationExhaustedError: If ``length`` grows past ``max_length``
            ShortlinkPersistenceError: If the store fails
        """
        conflicts = 0
        while True:
            if length > self.max_length:
                raise DisambiguationExhaustedError(path, self.max_length)

            short_hash = self.candidate(full_digest, length)
            try:
                existing = await self.repository.get_by_hash(db, short_hash)
            except RepositoryError as e:
                raise ShortlinkPersistenceError(
                    f"Could not look up shortlink {short_hash}: {e}", path=path
                ) from e

            if existing is None:
                try:
                    async with transaction(db):
                        await self.repository.create_shortlink(
                            db, path=path, hash=short_hash, created=utc_now()
                        )
                    return short_hash
                except DuplicateEntityError as e:
                    # Another writer stored this hash between our lookup and insert.
                    conflicts += 1
                    if conflicts > self.max_conflict_retries:
                        logger.error(f"Could not save shortlink: {e}")
                        raise ShortlinkPersistenceError(
                            f"Could not save shortlink {short_hash}: {e}", path=path
                        ) from e
                    logger.info(f"Hash {short_hash} was taken concurrently; re-checking")
                    continue
                except RepositoryError as e:
                    logger.error(f"Could not save shortlink: {e}")
                    raise ShortlinkPersistenceError(
                        f"Could not save shortlink {short_hash}: {e}", path=path
                    ) from e

            if existing.path == path:
                return short_hash

            logger.debug(f"Hash collision on {short_hash}; widening to {length + 1} characters")
            length += 1


def build_strategy(
    repository: ShortLinkRepository,
    algorithm: str,
    salt: str = "",
    preferred_length: int = 9,
    max_length: int = HASH_COLUMN_LENGTH,
    max_conflict_retries: int = 3,
) -> ShortCodeStrategy:
    """
    Select the strategy for a deployment.

    Raises:
        UnsupportedHashAlgorithmError: If ``algorithm`` is neither ``base62`` nor a usable digest
    """
    if algorithm == codec.BASE62_ALGORITHM:
        return SequentialStrategy(repository)
    return ContentHashStrategy(
        repository,
        salt=salt,
        algorithm=algorithm,
        preferred_length=preferred_length,
        max_length=max_length,
        max_conflict_retries=max_conflict_retries,
    )
