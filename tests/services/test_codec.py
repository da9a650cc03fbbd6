"""Tests for the short code encoding helpers."""

import hashlib

import pytest

from shortlinks.services import codec
from shortlinks.services.exceptions import UnsupportedHashAlgorithmError

SALT = "RAnD0mVuFindSa!t"


class TestDigest:
    """Salted path digests."""

    def test_known_md5_digest(self):
        assert codec.digest("/bar", SALT).startswith("a1e7812e2")

    def test_digest_is_path_plus_salt(self):
        expected = hashlib.sha256(("/bar" + SALT).encode("utf-8")).hexdigest()
        assert codec.digest("/bar", SALT, "sha256") == expected

    def test_digest_is_deterministic(self):
        assert codec.digest("/Record/123", SALT) == codec.digest("/Record/123", SALT)

    def test_salt_changes_digest(self):
        assert codec.digest("/bar", SALT) != codec.digest("/bar", "other salt")

    def test_digest_is_lowercase_hex(self):
        value = codec.digest("/Search/Results?lookfor=ä", SALT, "sha1")
        assert len(value) == 40
        assert set(value) <= set("0123456789abcdef")

    def test_unknown_algorithm(self):
        with pytest.raises(UnsupportedHashAlgorithmError) as excinfo:
            codec.digest("/bar", SALT, "not-a-hash")
        assert excinfo.value.algorithm == "not-a-hash"

    def test_variable_length_algorithm_rejected(self):
        with pytest.raises(UnsupportedHashAlgorithmError):
            codec.digest("/bar", SALT, "shake_128")

    @pytest.mark.parametrize("algorithm,expected", [
        ("md5", True),
        ("sha256", True),
        ("base62", True),
        ("shake_256", False),
        ("bogus", False),
    ])
    def test_is_supported_algorithm(self, algorithm, expected):
        assert codec.is_supported_algorithm(algorithm) is expected


class TestBase62:
    """Base62 encoding of row ids."""

    @pytest.mark.parametrize("number,expected", [
        (0, "0"),
        (1, "1"),
        (2, "2"),
        (9, "9"),
        (10, "A"),
        (35, "Z"),
        (36, "a"),
        (61, "z"),
        (62, "10"),
        (3843, "zz"),
        (3844, "100"),
    ])
    def test_encode(self, number, expected):
        assert codec.encode_base62(number) == expected

    def test_alphabet(self):
        assert len(codec.BASE62_ALPHABET) == 62
        assert codec.BASE62_ALPHABET == "".join(sorted(codec.BASE62_ALPHABET))

    def test_negative_number(self):
        with pytest.raises(ValueError):
            codec.encode_base62(-1)

    def test_no_leading_zeros(self):
        for number in (1, 61, 62, 12345, 10 ** 12):
            assert not codec.encode_base62(number).startswith("0")

    def test_decode_inverts_encode(self):
        for number in (0, 1, 61, 62, 999, 238327, 2 ** 40):
            assert codec.decode_base62(codec.encode_base62(number)) == number

    def test_same_length_codes_sort_numerically(self):
        codes = [codec.encode_base62(n) for n in range(62, 400)]
        assert codes == sorted(codes)

    @pytest.mark.parametrize("code", ["", "ab-c", "a_"])
    def test_decode_invalid(self, code):
        with pytest.raises(ValueError):
            codec.decode_base62(code)
