"""Exception hierarchy for LingoDeck."""


class LingoDeckError(Exception):
    """Base exception for all LingoDeck errors."""


class CredentialMissingError(LingoDeckError):
    """Raised when the Google Cloud API key is not configured."""

    def __init__(self, variable: str = "GOOGLE_CLOUD_API_KEY"):
        self.variable = variable
        super().__init__(
            f"Google Cloud API key not found. Please set {variable} in your .env file."
        )


class VendorError(LingoDeckError):
    """Raised when a Google Cloud request fails or returns an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class StorageError(LingoDeckError):
    """Raised when a progress store write cannot be completed."""


class StoreNotOpenError(StorageError):
    """Raised when a progress store is used before open() succeeded."""
