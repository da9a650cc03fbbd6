"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from shortlinks.core.config import Settings
from shortlinks.services import codec


class TestSettings:
    """Settings validation and derived values."""

    def test_defaults(self):
        config = Settings()

        assert config.SHORTLINK_PREFERRED_HASH_LENGTH == 9
        assert config.SHORTLINK_MAX_HASH_LENGTH == 32
        assert config.SHORTLINK_MAX_CONFLICT_RETRIES == 3

    def test_base_url_trailing_slash_removed(self):
        assert Settings(BASE_URL="http://foo//").BASE_URL == "http://foo"

    @pytest.mark.parametrize("algorithm", ["md5", "sha1", "sha512", "base62"])
    def test_supported_algorithms(self, algorithm):
        assert Settings(SHORTLINK_HASH_ALGORITHM=algorithm).SHORTLINK_HASH_ALGORITHM == algorithm

    @pytest.mark.parametrize("algorithm", ["not-a-hash", "shake_128"])
    def test_unsupported_algorithms(self, algorithm):
        with pytest.raises(ValidationError):
            Settings(SHORTLINK_HASH_ALGORITHM=algorithm)

    @pytest.mark.parametrize("algorithm", ["md5", "sha3_256", "base62", "shake_256", "whirlpool-x"])
    def test_algorithm_check_matches_codec(self, algorithm):
        if codec.is_supported_algorithm(algorithm):
            assert Settings(SHORTLINK_HASH_ALGORITHM=algorithm).SHORTLINK_HASH_ALGORITHM == algorithm
        else:
            with pytest.raises(ValidationError):
                Settings(SHORTLINK_HASH_ALGORITHM=algorithm)

    def test_preferred_length_cannot_exceed_max(self):
        with pytest.raises(ValidationError):
            Settings(SHORTLINK_PREFERRED_HASH_LENGTH=20, SHORTLINK_MAX_HASH_LENGTH=10)

    @pytest.mark.parametrize("length", [33, 64])
    def test_max_length_limited_to_hash_column(self, length):
        with pytest.raises(ValidationError):
            Settings(SHORTLINK_MAX_HASH_LENGTH=length)

    def test_preferred_length_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(SHORTLINK_PREFERRED_HASH_LENGTH=0)

    def test_database_uri_defaults_to_sqlite(self):
        config = Settings(DATABASE_URL=None, POSTGRES_SERVER=None, SQLITE_PATH="links.db")
        assert config.SQLALCHEMY_DATABASE_URI == "sqlite+aiosqlite:///links.db"

    def test_database_uri_postgres(self):
        config = Settings(
            DATABASE_URL=None,
            POSTGRES_SERVER="db",
            POSTGRES_USER="app",
            POSTGRES_PASSWORD="secret",
            POSTGRES_DB="links",
        )
        assert config.SQLALCHEMY_DATABASE_URI == "postgresql+asyncpg://app:secret@db:5432/links"

    def test_database_url_override(self):
        config = Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:", POSTGRES_SERVER="db")
        assert config.SQLALCHEMY_DATABASE_URI == "sqlite+aiosqlite:///:memory:"
