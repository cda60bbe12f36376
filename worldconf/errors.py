"""Configuration error classes.

All config-related exceptions for fast-fail behavior. The engine raises;
only the process entry point decides to terminate.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileError(ConfigError):
    """Raised when the configuration file is missing, unreadable or malformed."""

    pass


class ConfigStructureError(ConfigError):
    """Base for errors in the shape of the file (sections and key names)."""

    pass


class UnknownSectionError(ConfigStructureError):
    """Raised when a section name matches no known section or prefix."""

    pass


class InvalidSectionIdError(ConfigStructureError):
    """Raised when a per-instance section has a malformed numeric suffix."""

    pass


class DuplicateSectionError(ConfigStructureError):
    """Raised when two sections resolve to the same role and ID."""

    pass


class UnknownKeyError(ConfigStructureError):
    """Raised when a section contains a key its role does not recognize."""

    pass


class ValidationError(ConfigError):
    """Raised when a config value fails validation."""

    pass


class BackendValidationError(ValidationError):
    """Raised when a storage or kvdb config is inconsistent with its type."""

    pass
