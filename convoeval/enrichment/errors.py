from __future__ import annotations


class StorageError(RuntimeError):
    """Raised when a storage boundary call fails (transport, auth or query)."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message or f"{operation} failed")
