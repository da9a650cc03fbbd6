"""Core module for the short-link service."""

from shortlinks.core.config import settings
from shortlinks.core.logging import setup_logging

__all__ = ["settings", "setup_logging"]
