"""
Remote data gateway.

Defines the contract the repositories consume from the backend and its
Supabase implementation. The object store is a single Supabase Storage
bucket; the relational store is Supabase Postgres reached through
PostgREST. Both are driven by one async client handle.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

import httpx
from postgrest.exceptions import APIError
from storage3.utils import StorageException
from supabase import AsyncClient

from .exceptions import GatewayError
from .logging_config import get_logger
from .models import RecordId

logger = get_logger(__name__)

BACKEND_ERRORS = (APIError, StorageException, httpx.HTTPError)


class IRemoteGateway(ABC):
    """
    Abstract gateway to the object store and relational store.

    Every method is a suspension point and raises ``GatewayError`` when
    the backend reports a failure.
    """

    @abstractmethod
    async def upload_object(
        self, path: str, content: bytes, content_type: Optional[str] = None
    ) -> None:
        """Write ``content`` to ``path`` in the object store."""

    @abstractmethod
    async def resolve_object_address(self, path: str) -> str:
        """Return a publicly dereferenceable URL for the object at ``path``."""

    @abstractmethod
    async def delete_object(self, path: str) -> None:
        """Delete the object at ``path``."""

    @abstractmethod
    async def insert_row(self, table: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored, identity included."""

    @abstractmethod
    async def update_row(
        self, table: str, record_id: RecordId, fields: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Update the row matched by id and return it as stored."""

    @abstractmethod
    async def delete_row(self, table: str, record_id: RecordId) -> None:
        """Delete the row matched by id."""

    @abstractmethod
    async def select_rows(
        self, table: str, order_by: str = "created_at", descending: bool = True
    ) -> List[Dict[str, Any]]:
        """Return every row of ``table`` in the requested order."""


def _error_message(exc: Exception) -> str:
    message = getattr(exc, "message", None)
    if message:
        return str(message)
    return str(exc) or exc.__class__.__name__


def _normalize(exc: Exception, operation: str, **context: Any) -> GatewayError:
    details: Dict[str, Any] = {"operation": operation, **context}
    code = getattr(exc, "code", None)
    if code:
        details["code"] = code
    return GatewayError(_error_message(exc), details)


class SupabaseGateway(IRemoteGateway):
    """
    Gateway backed by the async Supabase client.

    Backend exceptions are converted into ``GatewayError`` here so the
    repositories never see client-specific error shapes.
    """

    def __init__(self, client: AsyncClient, bucket: str = "documents"):
        """
        Initialize the gateway.

        Args:
            client: Async Supabase client handle
            bucket: Storage bucket holding uploaded documents
        """
        self.client = client
        self.bucket = bucket

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    async def upload_object(
        self, path: str, content: bytes, content_type: Optional[str] = None
    ) -> None:
        file_options = {"content-type": content_type} if content_type else None
        try:
            await self._bucket().upload(path, content, file_options)
        except BACKEND_ERRORS as e:
            raise _normalize(e, "upload", path=path) from e
        logger.debug("object_uploaded", bucket=self.bucket, path=path, size=len(content))

    async def resolve_object_address(self, path: str) -> str:
        try:
            url = await self._bucket().get_public_url(path)
        except BACKEND_ERRORS as e:
            raise _normalize(e, "resolve", path=path) from e
        if not url:
            raise GatewayError(
                "Could not get public URL for the document.",
                {"operation": "resolve", "path": path},
            )
        return url

    async def delete_object(self, path: str) -> None:
        try:
            await self._bucket().remove([path])
        except BACKEND_ERRORS as e:
            raise _normalize(e, "delete_object", path=path) from e

    async def insert_row(self, table: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            response = await self.client.table(table).insert(dict(fields)).execute()
        except BACKEND_ERRORS as e:
            raise _normalize(e, "insert", table=table) from e
        if not response.data:
            raise GatewayError(
                "Insert returned no row", {"operation": "insert", "table": table}
            )
        return response.data[0]

    async def update_row(
        self, table: str, record_id: RecordId, fields: Mapping[str, Any]
    ) -> Dict[str, Any]:
        try:
            response = await (
                self.client.table(table).update(dict(fields)).eq("id", record_id).execute()
            )
        except BACKEND_ERRORS as e:
            raise _normalize(e, "update", table=table, id=record_id) from e
        if not response.data:
            raise GatewayError(
                f"No row with id {record_id}",
                {"operation": "update", "table": table, "id": record_id, "code": "not_found"},
            )
        return response.data[0]

    async def delete_row(self, table: str, record_id: RecordId) -> None:
        try:
            await self.client.table(table).delete().eq("id", record_id).execute()
        except BACKEND_ERRORS as e:
            raise _normalize(e, "delete", table=table, id=record_id) from e

    async def select_rows(
        self, table: str, order_by: str = "created_at", descending: bool = True
    ) -> List[Dict[str, Any]]:
        try:
            response = await (
                self.client.table(table).select("*").order(order_by, desc=descending).execute()
            )
        except BACKEND_ERRORS as e:
            raise _normalize(e, "select", table=table) from e
        return list(response.data or [])
