"""Exceptions for the short-link service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class ShortlinkError(ServiceError):
    """Base exception for short-link errors."""
    pass


class UnsupportedHashAlgorithmError(ShortlinkError):
    """The configured hash algorithm cannot be used to build short codes."""

    def __init__(self, algorithm: str, reason: str = "unsupported hash algorithm"):
        self.algorithm = algorithm
        super().__init__(f"Cannot use '{algorithm}' for short links: {reason}")


class ShortlinkCreationError(ShortlinkError):
    """Error occurred while creating a short link."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class DisambiguationExhaustedError(ShortlinkCreationError):
    """No unique hash could be found within the maximum hash length."""

    def __init__(self, path: str, max_length: int):
        self.max_length = max_length
        super().__init__(
            f"Could not generate unique hash under {max_length} characters in length.",
            path=path,
        )


class ShortlinkPersistenceError(ShortlinkCreationError):
    """The store failed while a short link was being written."""
    pass


class ShortlinkResolutionError(ShortlinkError):
    """A short code could not be mapped back to exactly one path."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Shortlink could not be resolved: {code}")


class ShortlinkNotFoundError(ShortlinkResolutionError):
    """No short link is stored under the code."""
    pass


class ShortlinkAmbiguousError(ShortlinkResolutionError):
    """More than one short link is stored under the code."""

    def __init__(self, code: str, matches: int):
        self.matches = matches
        super().__init__(code)
