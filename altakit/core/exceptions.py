"""
Centralized exception hierarchy for altakit.

Parse and validation errors are raised immediately and are fatal to the
call. Warnings are logged, never raised.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class AltaKitError(Exception):
    """Base exception for all altakit errors."""

    pass


class ConfigError(AltaKitError):
    """Configuration parsing or validation error."""

    pass


class InternalError(AltaKitError):
    """A trusted collaborator produced output violating its contract."""

    pass


# ============================================================================
# Input Exceptions
# ============================================================================


class VersionParseError(AltaKitError, ValueError):
    """Malformed version, prefix or commit string."""

    pass


class InvalidInputError(VersionParseError):
    """Version or commit constraint given to the checker is malformed."""

    pass


class PlatformError(AltaKitError, ValueError):
    """System or architecture name outside the recognized set."""

    pass


# ============================================================================
# Fetch Exceptions
# ============================================================================


class FetchError(AltaKitError):
    """Base exception for compiler fetch errors."""

    pass


class InvalidDestinationError(FetchError):
    """Destination path exists and is not a directory."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Destination exists and is not a directory: {path}")


class NoVersionsAvailableError(FetchError):
    """Release manifest holds no usable versions."""

    pass


class VersionNotFoundError(FetchError):
    """No manifest entry matches the requested version prefix."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(f"No released version matches '{prefix}'")


class ManifestError(FetchError):
    """Release manifest is not a JSON array of version strings."""

    pass


class ArchiveNotFoundError(FetchError):
    """Remote archive does not exist (HTTP 404)."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Archive not found: {url}")


class TransportError(FetchError):
    """Network request failed or returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ExtractionError(FetchError):
    """Archive could not be expanded."""

    pass
