"""Error kinds surfaced by the metrics engine.

Callers map each kind to their own response: ``ValidationError`` for bad
input, ``NotFoundError`` for a missing lookup target, ``StoreError`` for any
persistence failure. Nothing here is retried.
"""


class DeskMetricsError(Exception):
    """Base exception for metrics engine errors."""

    pass


class ValidationError(DeskMetricsError, ValueError):
    """Arguments rejected before any store query ran."""

    pass


class NotFoundError(DeskMetricsError):
    """Requested record does not exist."""

    pass


class StoreError(DeskMetricsError):
    """A store query failed; the whole operation is aborted."""

    def __init__(self, store: str, operation: str, message: str):
        super().__init__(f"{store}.{operation} failed: {message}")
        self.store = store
        self.operation = operation
