"""Error types shared across the apartment tracker."""


class DirotError(Exception):
    """Base class for all application errors."""


class StoreError(DirotError):
    """A query or mutation against the record store failed."""


class UploadError(DirotError):
    """A binary upload failed."""


class ExternalServiceError(DirotError):
    """An AI, email or scraper collaborator failed."""


class ValidationError(DirotError, ValueError):
    """Input was rejected before any network call was made."""


class AuthError(DirotError):
    """A mutating call was made without a valid access token."""


__all__ = [
    "AuthError",
    "DirotError",
    "ExternalServiceError",
    "StoreError",
    "UploadError",
    "ValidationError",
]
