"""Packconv exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Phase-level failures propagate; item-level failures are logged and skipped.
"""

from __future__ import annotations


class PackError(Exception):
    """Base exception for all packconv failures."""


class PackConfigError(PackError):
    """Raised for invalid runtime configuration."""


class MalformedKeyError(PackError):
    """Raised when a key violates the compound-key grammar."""


class MissingKeyError(PackError):
    """Raised when a file-tree document lacks its original store key."""


class SourceNotFoundError(PackError):
    """Raised when a store file or source tree to convert is absent."""


class InvalidPackNameError(PackError):
    """Raised for pack identifiers that are not registered."""


class PackStoreError(PackError):
    """Raised for whole-phase filesystem or parse failures."""


class PackDependencyError(PackError):
    """Raised when an optional runtime dependency is missing."""
