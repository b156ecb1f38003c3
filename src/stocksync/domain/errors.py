"""Error taxonomy shared by the reconciliation core and its adapters."""

from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for failures raised while talking to the catalog."""


class TransportError(SyncError):
    """A call could not reach the catalog or came back as a failed request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(SyncError):
    """The catalog answered with a payload whose shape we cannot interpret."""


class ActivationError(SyncError):
    """The catalog refused to stock an item at the requested location."""

    def __init__(self, message: str, *, item_id: str) -> None:
        super().__init__(message)
        self.item_id = item_id
