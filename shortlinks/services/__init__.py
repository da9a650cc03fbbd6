"""Service layer for the short-link service.

This package contains the shortener engine (``shortener``), its code
generation strategies (``strategies``) and the pure encoding helpers they
share (``codec``).

Submodules are imported directly. ``shortlinks.core.config`` depends on
``codec``, so this package must not import the engine at load time.
"""
