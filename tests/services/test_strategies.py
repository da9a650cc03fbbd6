"""Tests for short code strategy selection and candidate building."""

import pytest

from shortlinks.repositories.shortlink_repository import ShortLinkRepository
from shortlinks.services.exceptions import UnsupportedHashAlgorithmError
from shortlinks.services.strategies import (
    ContentHashStrategy,
    SequentialStrategy,
    build_strategy,
)


@pytest.mark.service
class TestBuildStrategy:
    """Strategy is picked once from the configured algorithm."""

    def test_base62_selects_sequential(self):
        strategy = build_strategy(ShortLinkRepository(), "base62")
        assert isinstance(strategy, SequentialStrategy)
        assert strategy.name == "base62"

    @pytest.mark.parametrize("algorithm", ["md5", "sha1", "sha256"])
    def test_digest_selects_content_hash(self, algorithm):
        strategy = build_strategy(ShortLinkRepository(), algorithm, salt="s")
        assert isinstance(strategy, ContentHashStrategy)
        assert strategy.algorithm == algorithm
        assert strategy.name == algorithm

    def test_settings_are_passed_through(self):
        strategy = build_strategy(
            ShortLinkRepository(), "md5", salt="s",
            preferred_length=5, max_length=12, max_conflict_retries=1,
        )
        assert strategy.salt == "s"
        assert strategy.preferred_length == 5
        assert strategy.max_length == 12
        assert strategy.max_conflict_retries == 1

    def test_unknown_algorithm(self):
        with pytest.raises(UnsupportedHashAlgorithmError):
            build_strategy(ShortLinkRepository(), "crc-1")

    def test_content_hash_rejects_base62(self):
        with pytest.raises(UnsupportedHashAlgorithmError):
            ContentHashStrategy(ShortLinkRepository(), salt="s", algorithm="base62")

    def test_content_hash_rejects_empty_preferred_length(self):
        with pytest.raises(ValueError):
            ContentHashStrategy(ShortLinkRepository(), salt="s", preferred_length=0)


@pytest.mark.service
class TestCandidate:
    """Candidate codes are digest prefixes, padded when the digest runs out."""

    @pytest.fixture
    def strategy(self):
        return ContentHashStrategy(ShortLinkRepository(), salt="RAnD0mVuFindSa!t")

    def test_prefix(self, strategy):
        assert strategy.candidate("a1e7812e2d6e98c1", 9) == "a1e7812e2"
        assert strategy.candidate("a1e7812e2d6e98c1", 10) == "a1e7812e2d"

    def test_short_digest_is_padded(self, strategy):
        assert strategy.candidate("abc", 5) == "abc__"

    def test_candidate_length_is_exact(self, strategy):
        for length in range(1, 40):
            assert len(strategy.candidate("0123456789abcdef", length)) == length

    def test_digest_uses_salt(self, strategy):
        assert strategy.digest("/bar").startswith("a1e7812e2")
