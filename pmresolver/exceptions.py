"""Shared exception classes for pmresolver."""


class PMError(Exception):
    """Base exception for pmresolver errors."""


class InvalidCandidateError(PMError):
    """Raised when a package manager name is not one of the supported candidates."""


class NoPackageManagerAvailableError(PMError):
    """Raised when no source names a package manager and none is installed."""


class ConfigReadMalformedError(PMError):
    """Raised when a preference file or manifest exists but cannot be parsed."""


class PreferenceWriteError(PMError):
    """Raised when a preference file cannot be written."""
