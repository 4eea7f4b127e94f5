"""
Custom exceptions for the land registry service.

The gateway raises ``GatewayError`` for any backend failure. Repositories
translate it into one of the record operation errors, which are terminal
for the call that raised them.
"""

from typing import Any, Dict, Optional


class RegistryServiceException(Exception):
    """Base exception for all land registry service errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class GatewayError(RegistryServiceException):
    """
    Raised by the remote data gateway when the backend rejects a call.

    Whatever the backend client raises is normalized into this shape, so
    callers can always rely on ``message`` being present.
    """


class RecordOperationError(RegistryServiceException):
    """Base class for failures of a repository operation."""

    operation = "Operation"

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.kind = kind
        details = dict(details or {})
        if kind:
            details.setdefault("kind", kind)
        super().__init__(message, details)


class FetchError(RecordOperationError):
    """Raised when records cannot be listed."""

    operation = "Fetch"


class UploadError(RecordOperationError):
    """Raised when the object store rejects a document upload."""

    operation = "Upload"


class AddressResolutionError(RecordOperationError):
    """Raised when no public address can be produced for an uploaded document."""

    operation = "Address resolution"


class InsertError(RecordOperationError):
    """Raised when the record row cannot be inserted."""

    operation = "Insert"


class UpdateError(RecordOperationError):
    """Raised when no row matches the id or the status update is rejected."""

    operation = "Update"

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        not_found: bool = False,
    ):
        self.not_found = not_found
        super().__init__(message, kind, details)


class DeleteError(RecordOperationError):
    """Raised when a record row cannot be deleted."""

    operation = "Delete"


class InvalidInputError(RegistryServiceException, ValueError):
    """
    Raised when caller-supplied fields or a requested status are invalid.

    Raised before any gateway call, so nothing has been written.
    """
