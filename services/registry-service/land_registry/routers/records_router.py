"""
Record router.

Exposes the four repository operations for every entity kind under
``/api/v1/{kind}`` where kind is ``lands`` or ``transfers``. Responses
are read from the repository's store; the router never mutates it.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel
from starlette.datastructures import UploadFile

from ..dependencies import get_repository
from ..models import DocumentFile
from ..repositories.record_repository import RecordRepository
from ..store import StoreSnapshot

router = APIRouter(prefix="/api/v1", tags=["records"])

DOCUMENT_FIELD = "document"


class SnapshotResponse(BaseModel):
    """Store snapshot as seen by readers."""

    records: List[Dict[str, Any]]
    count: int
    loading: bool
    error: Optional[str] = None


class StatusUpdate(BaseModel):
    status: str


def _snapshot_response(snapshot: StoreSnapshot) -> SnapshotResponse:
    return SnapshotResponse(
        records=[record.model_dump(mode="json") for record in snapshot.records],
        count=snapshot.count,
        loading=snapshot.loading,
        error=snapshot.error,
    )


@router.get("/{kind}", response_model=SnapshotResponse)
async def list_records(repository: RecordRepository = Depends(get_repository)):
    """Refresh the store from the backend and return it."""
    await repository.list()
    return _snapshot_response(repository.store.snapshot())


@router.get("/{kind}/snapshot", response_model=SnapshotResponse)
async def get_snapshot(repository: RecordRepository = Depends(get_repository)):
    """Return the cached records without contacting the backend."""
    return _snapshot_response(repository.store.snapshot())


@router.post("/{kind}", status_code=status.HTTP_201_CREATED)
async def submit_record(
    request: Request, repository: RecordRepository = Depends(get_repository)
):
    """
    Submit a new record.

    Expects a multipart form with the kind's domain fields and the
    supporting document under ``document``.
    """
    form = await request.form()
    upload = form.get(DOCUMENT_FIELD)
    if not isinstance(upload, UploadFile) or not upload.filename:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="A supporting document is required",
        )

    document = DocumentFile(
        filename=upload.filename,
        content=await upload.read(),
        content_type=upload.content_type,
    )
    fields = {key: value for key, value in form.items() if key != DOCUMENT_FIELD}

    record = await repository.submit(fields, document)
    return record.model_dump(mode="json")


@router.patch("/{kind}/{record_id}/status")
async def change_status(
    record_id: int,
    update: StatusUpdate,
    repository: RecordRepository = Depends(get_repository),
):
    """Move a record to a new status."""
    record = await repository.change_status(record_id, update.status)
    return record.model_dump(mode="json")


@router.delete("/{kind}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_record(
    record_id: int, repository: RecordRepository = Depends(get_repository)
):
    """Delete a record."""
    await repository.remove(record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
