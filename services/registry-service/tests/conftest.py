"""
Land Registry Service Tests - Test Configuration.

Provides an in-memory gateway standing in for Supabase, plus stores,
repositories and sample data.
"""

import asyncio
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import pytest

# Set test environment variables BEFORE importing app modules
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_JSON", "false")

from land_registry.exceptions import GatewayError  # noqa: E402
from land_registry.gateway import IRemoteGateway  # noqa: E402
from land_registry.models import DocumentFile, RecordId  # noqa: E402
from land_registry.notifications import CollectingNotifier  # noqa: E402
from land_registry.repositories.record_repository import (  # noqa: E402
    LandRepository,
    TransferRepository,
)
from land_registry.store import RecordStore  # noqa: E402

PUBLIC_BASE_URL = "https://store"
EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeGateway(IRemoteGateway):
    """
    In-memory object store and relational store.

    Every call is recorded in ``calls`` as ``(operation, argument)`` and
    yields to the event loop once, like a real network round trip.
    Failures are armed per operation with ``fail()``.
    """

    def __init__(self) -> None:
        self.objects: Dict[str, bytes] = {}
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, Any]] = []
        self.failures: Dict[str, GatewayError] = {}
        self.empty_address = False
        self.on_call: Optional[Callable[[str], None]] = None
        self._next_id = 1
        self._clock = 0

    def fail(self, operation: str, message: str, **details: Any) -> None:
        self.failures[operation] = GatewayError(message, {"operation": operation, **details})

    def calls_to(self, operation: str) -> List[Any]:
        return [arg for op, arg in self.calls if op == operation]

    def seed(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        row = {"created_at": self._timestamp(), **row}
        self.tables.setdefault(table, []).append(row)
        self._next_id = max(self._next_id, int(row["id"]) + 1)
        return row

    def _timestamp(self) -> str:
        self._clock += 1
        return (EPOCH + timedelta(seconds=self._clock)).isoformat()

    async def _enter(self, operation: str, argument: Any) -> None:
        self.calls.append((operation, argument))
        if self.on_call:
            self.on_call(operation)
        await asyncio.sleep(0)
        if operation in self.failures:
            raise self.failures[operation]

    async def upload_object(
        self, path: str, content: bytes, content_type: Optional[str] = None
    ) -> None:
        await self._enter("upload_object", path)
        self.objects[path] = content

    async def resolve_object_address(self, path: str) -> str:
        await self._enter("resolve_object_address", path)
        if self.empty_address:
            return ""
        return f"{PUBLIC_BASE_URL}/{path}"

    async def delete_object(self, path: str) -> None:
        await self._enter("delete_object", path)
        self.objects.pop(path, None)

    async def insert_row(self, table: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        await self._enter("insert_row", dict(fields))
        row = {"id": self._next_id, **fields, "created_at": self._timestamp()}
        self._next_id += 1
        self.tables.setdefault(table, []).append(row)
        return dict(row)

    async def update_row(
        self, table: str, record_id: RecordId, fields: Mapping[str, Any]
    ) -> Dict[str, Any]:
        await self._enter("update_row", (record_id, dict(fields)))
        for row in self.tables.get(table, []):
            if row["id"] == record_id:
                row.update(fields)
                row["updated_at"] = self._timestamp()
                return dict(row)
        raise GatewayError(
            f"No row with id {record_id}", {"operation": "update", "code": "not_found"}
        )

    async def delete_row(self, table: str, record_id: RecordId) -> None:
        await self._enter("delete_row", record_id)
        self.tables[table] = [
            row for row in self.tables.get(table, []) if row["id"] != record_id
        ]

    async def select_rows(
        self, table: str, order_by: str = "created_at", descending: bool = True
    ) -> List[Dict[str, Any]]:
        await self._enter("select_rows", table)
        rows = sorted(
            self.tables.get(table, []), key=lambda row: row[order_by], reverse=descending
        )
        return [dict(row) for row in rows]


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def land_store() -> RecordStore:
    return RecordStore("land")


@pytest.fixture
def transfer_store() -> RecordStore:
    return RecordStore("transfer")


@pytest.fixture
def land_repository(gateway, land_store, notifier) -> LandRepository:
    return LandRepository(gateway, land_store, notifier)


@pytest.fixture
def transfer_repository(gateway, transfer_store, notifier) -> TransferRepository:
    return TransferRepository(gateway, transfer_store, notifier)


@pytest.fixture
def land_fields() -> Dict[str, Any]:
    return {"parcel_id": "P-100", "size": 5.2, "ownership_type": "freehold"}


@pytest.fixture
def transfer_fields() -> Dict[str, Any]:
    return {"recipient_name": "Ada Obi", "parcel_id": "P-100"}


@pytest.fixture
def deed() -> DocumentFile:
    return DocumentFile(filename="deed.pdf", content=b"%PDF-1.4 deed")


@pytest.fixture
def contract() -> DocumentFile:
    return DocumentFile(filename="contract.docx", content=b"PK contract")


@pytest.fixture
def land_row() -> Dict[str, Any]:
    return {
        "id": 1,
        "parcel_id": "P-100",
        "size": 5.2,
        "ownership_type": "freehold",
        "supporting_documents": f"{PUBLIC_BASE_URL}/land-documents/1.pdf",
        "status": "pending",
    }


@pytest.fixture
def api_client(gateway, notifier):
    """Test client for an app wired to the in-memory gateway."""
    from fastapi.testclient import TestClient
    from land_registry.app import create_app

    app = create_app(gateway=gateway, notifier=notifier)
    with TestClient(app) as test_client:
        yield test_client
