"""Pure encoding helpers for short codes.

Two encodings are used: a salted digest of the path (content-hash strategy)
and base62 of the row id (sequential strategy).
"""

import hashlib
import string

from shortlinks.services.exceptions import UnsupportedHashAlgorithmError

BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
BASE62_ALGORITHM = "base62"

_BASE62_INDEX = {char: index for index, char in enumerate(BASE62_ALPHABET)}


def is_supported_algorithm(algorithm: str) -> bool:
    """Check whether ``algorithm`` names the base62 selector or a fixed-length hashlib digest."""
    if algorithm == BASE62_ALGORITHM:
        return True
    try:
        return hashlib.new(algorithm).digest_size > 0
    except (ValueError, TypeError):
        return False


def digest(path: str, salt: str, algorithm: str = "md5") -> str:
    """
    Hash ``path`` concatenated with ``salt``.

    Args:
        path: Path to hash
        salt: Deployment secret appended to the path
        algorithm: Any fixed-length algorithm known to hashlib

    Returns:
        str: Lowercase hexadecimal digest

    Raises:
        UnsupportedHashAlgorithmError: If hashlib cannot provide a fixed-length digest
    """
    try:
        hasher = hashlib.new(algorithm)
    except (ValueError, TypeError) as e:
        raise UnsupportedHashAlgorithmError(algorithm) from e
    if not hasher.digest_size:
        raise UnsupportedHashAlgorithmError(algorithm, "variable-length digests are not supported")

    hasher.update((path + salt).encode("utf-8"))
    return hasher.hexdigest()


def encode_base62(number: int) -> str:
    """
    Convert a non-negative integer to base62 using ``0-9A-Za-z``.

    There are no leading zeros, so longer codes always mean larger numbers
    and codes of the same length sort in numeric order.
    """
    if number < 0:
        raise ValueError(f"Cannot base62-encode a negative number: {number}")
    if number == 0:
        return BASE62_ALPHABET[0]

    chars = []
    while number:
        number, remainder = divmod(number, 62)
        chars.append(BASE62_ALPHABET[remainder])
    return "".join(reversed(chars))


def decode_base62(code: str) -> int:
    """Convert a base62 string produced by encode_base62 back to an integer."""
    if not code:
        raise ValueError("Cannot base62-decode an empty string")

    number = 0
    for char in code:
        try:
            number = number * 62 + _BASE62_INDEX[char]
        except KeyError:
            raise ValueError(f"Invalid base62 character {char!r} in {code!r}") from None
    return number
