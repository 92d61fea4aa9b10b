"""pmresolver: pick the package manager for a JavaScript project."""

from pmresolver.core import PackageManager
from pmresolver.exceptions import (
    ConfigReadMalformedError,
    InvalidCandidateError,
    NoPackageManagerAvailableError,
    PMError,
    PreferenceWriteError,
)
from pmresolver.preferences import PreferenceScope, set_preference
from pmresolver.resolver import DetectionReport, Source, SourceResult, detect, resolve

__version__ = "0.3.0"

__all__ = [
    "PackageManager",
    "PreferenceScope",
    "Source",
    "SourceResult",
    "DetectionReport",
    "resolve",
    "detect",
    "set_preference",
    "PMError",
    "InvalidCandidateError",
    "NoPackageManagerAvailableError",
    "ConfigReadMalformedError",
    "PreferenceWriteError",
]
