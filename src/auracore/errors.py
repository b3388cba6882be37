"""Exception types for AuraCore.

Storage raises these; the tool layer converts them into failure envelopes
so nothing reaches the MCP transport as an unhandled fault.
"""


class AuracoreError(Exception):
    """Base class for AuraCore errors."""

    pass


class NotInitializedError(AuracoreError):
    """Store used before open() completed."""

    def __init__(self, message: str = "Database not initialized. Call open() first.") -> None:
        super().__init__(message)


class NotFoundError(AuracoreError):
    """A record required to exist by id or key was not found."""

    pass


class ValidationError(AuracoreError):
    """Input rejected before reaching storage."""

    pass


class StorageError(AuracoreError):
    """Underlying read, write or serialize failure."""

    pass
