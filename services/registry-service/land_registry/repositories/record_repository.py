"""
Record repositories.

A repository turns a domain intent (list, submit, change status, remove)
into gateway calls and reconciles the outcome into its ``RecordStore``.

Submitting is a two-store operation: the document is uploaded to the
object store first and its public URL is written in the same insert as
the rest of the row. When the insert fails the uploaded object is
deleted again (best effort). Failures of that compensating delete are
logged and swallowed, and a failed address resolution leaves the
uploaded object in place; orphaned objects are reconciled out of band.
"""

import time
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ValidationError

from ..exceptions import (
    AddressResolutionError,
    DeleteError,
    FetchError,
    GatewayError,
    InsertError,
    InvalidInputError,
    RecordOperationError,
    UpdateError,
    UploadError,
)
from ..gateway import IRemoteGateway
from ..logging_config import get_logger
from ..metrics import track_compensation, track_operation
from ..models import LAND, TRANSFER, BaseRecord, DocumentFile, RecordId, RecordKind
from ..notifications import LoggingNotifier, Notifier
from ..store import RecordStore

logger = get_logger(__name__)

INITIAL_STATUS = "pending"


class RecordRepository:
    """
    Repository for one entity kind.

    Subclasses only pick the ``kind``. The store is passed in by the
    caller and is mutated exclusively on the success paths below, plus
    the error slot on failures.
    """

    kind: RecordKind

    def __init__(
        self,
        gateway: IRemoteGateway,
        store: RecordStore,
        notifier: Optional[Notifier] = None,
        table: Optional[str] = None,
    ):
        """
        Initialize the repository.

        Args:
            gateway: Remote data gateway
            store: Store reflecting this kind's records
            notifier: Sink for user-facing notifications (logs by default)
            table: Relational table, defaults to the kind's table
        """
        self.gateway = gateway
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self.table = table or self.kind.table

    @contextmanager
    def _measure(self, operation: str) -> Iterator[None]:
        started = time.perf_counter()
        outcome = "error"
        try:
            yield
            outcome = "success"
        finally:
            track_operation(
                self.kind.name, operation, outcome, time.perf_counter() - started
            )

    def _fail(self, error: RecordOperationError, message_key: str) -> RecordOperationError:
        """Record a terminal failure in the store and notify the user."""
        self.store.set_error(error.message)
        self.notifier.error(f"{self.kind.messages[message_key]}: {error.message}")
        logger.error(
            "record_operation_failed",
            kind=self.kind.name,
            operation=error.operation,
            error=error.message,
        )
        return error

    def _succeed(self, message_key: str) -> None:
        self.store.clear_error()
        self.notifier.success(self.kind.messages[message_key])

    def _to_record(self, row: Mapping[str, Any]) -> BaseRecord:
        """
        Validate a backend row into the kind's record model.

        Raises:
            GatewayError: If the row does not match the record model
        """
        try:
            return self.kind.record_model.model_validate(row)
        except ValidationError as e:
            fields = sorted(
                {".".join(str(part) for part in error["loc"]) for error in e.errors()}
            )
            raise GatewayError(
                f"Invalid {self.kind.name} row returned: {', '.join(fields)}",
                {"code": "invalid_row", "fields": fields, "id": row.get("id")},
            ) from e

    def _validate_submission(
        self, fields: Union[BaseModel, Mapping[str, Any]]
    ) -> BaseModel:
        try:
            return self.kind.submission_model.model_validate(
                fields.model_dump() if isinstance(fields, BaseModel) else dict(fields)
            )
        except ValidationError as e:
            raise InvalidInputError(
                str(e), {"kind": self.kind.name, "errors": e.error_count()}
            ) from e

    def _validate_status(self, status: str) -> str:
        try:
            return self.kind.status_enum(status).value
        except ValueError as e:
            allowed = [member.value for member in self.kind.status_enum]
            raise InvalidInputError(
                f"Unknown {self.kind.name} status: {status}",
                {"kind": self.kind.name, "allowed": allowed},
            ) from e

    @property
    def pending(self) -> List[BaseRecord]:
        """Cached records still awaiting a decision."""
        return self.store.with_status(INITIAL_STATUS)

    @property
    def terminal(self) -> List[BaseRecord]:
        """Cached records in the final status of this kind."""
        return self.store.with_status(self.kind.terminal_status)

    def build_storage_path(self, document: DocumentFile) -> str:
        """
        Derive a unique object path for a document.

        Format: ``<prefix>/<time_ns>-<random hex>[.<ext>]``. The random part
        keeps concurrent submissions apart even on coarse clocks.
        """
        name = f"{time.time_ns()}-{uuid4().hex[:8]}"
        if document.extension:
            name = f"{name}.{document.extension}"
        return f"{self.kind.storage_prefix}/{name}"

    def clear_error(self) -> None:
        self.store.clear_error()

    async def list(self) -> List[BaseRecord]:
        """
        Fetch all records of this kind, newest first.

        The store's sequence is replaced only when the fetch succeeds.

        Raises:
            FetchError: If the relational store rejects the query
        """
        with self.store.track_call(), self._measure("list"):
            try:
                rows = await self.gateway.select_rows(
                    self.table, order_by="created_at", descending=True
                )
                records = [self._to_record(row) for row in rows]
            except GatewayError as e:
                raise self._fail(
                    FetchError(e.message, self.kind.name, e.details), "list_failed"
                ) from e

            self.store.replace_all(records)
            self._succeed("listed")
            logger.info("records_listed", kind=self.kind.name, count=len(records))
            return records

    async def submit(
        self,
        fields: Union[BaseModel, Mapping[str, Any]],
        document: DocumentFile,
    ) -> BaseRecord:
        """
        Upload the supporting document and insert a new ``pending`` record.

        Args:
            fields: Domain fields, as the kind's submission model or a mapping
            document: The supporting document

        Returns:
            The record as stored, identity included

        Raises:
            InvalidInputError: If the domain fields are invalid (nothing is called)
            UploadError: If the object store rejects the upload
            AddressResolutionError: If no public URL can be resolved
            InsertError: If the insert fails (the upload is rolled back) or
                the inserted row is invalid (the upload is kept)
        """
        submission = self._validate_submission(fields)

        with self.store.track_call(), self._measure("submit"):
            path = self.build_storage_path(document)

            try:
                await self.gateway.upload_object(
                    path, document.content, document.resolved_content_type
                )
            except GatewayError as e:
                raise self._fail(
                    UploadError(
                        f"File upload failed: {e.message}",
                        self.kind.name,
                        {**e.details, "path": path},
                    ),
                    "submit_failed",
                ) from e

            try:
                url = await self.gateway.resolve_object_address(path)
            except GatewayError as e:
                raise self._fail(
                    AddressResolutionError(
                        f"Could not get public URL for the document: {e.message}",
                        self.kind.name,
                        {**e.details, "path": path},
                    ),
                    "submit_failed",
                ) from e
            if not url:
                raise self._fail(
                    AddressResolutionError(
                        "Could not get public URL for the document.",
                        self.kind.name,
                        {"path": path},
                    ),
                    "submit_failed",
                )

            payload = {
                **submission.model_dump(),
                self.kind.document_field: url,
                "status": INITIAL_STATUS,
            }
            try:
                row = await self.gateway.insert_row(self.table, payload)
            except GatewayError as e:
                await self._compensate_upload(path)
                raise self._fail(
                    InsertError(
                        f"Database error: {e.message}",
                        self.kind.name,
                        {**e.details, "path": path},
                    ),
                    "submit_failed",
                ) from e

            try:
                record = self._to_record(row)
            except GatewayError as e:
                # The row exists and references the object, so no rollback
                raise self._fail(
                    InsertError(
                        f"Database error: {e.message}",
                        self.kind.name,
                        {**e.details, "path": path},
                    ),
                    "submit_failed",
                ) from e

            self.store.prepend(record)
            self._succeed("submitted")
            logger.info(
                "record_submitted", kind=self.kind.name, id=record.id, path=path
            )
            return record

    async def _compensate_upload(self, path: str) -> None:
        """Delete an uploaded document whose record could not be inserted."""
        try:
            await self.gateway.delete_object(path)
        except Exception as e:
            # Not surfaced: the insert failure is the error the caller sees
            logger.warning(
                "compensation_failed", kind=self.kind.name, path=path, error=str(e)
            )
            track_compensation(self.kind.name, "failed")
            return
        logger.info("compensation_succeeded", kind=self.kind.name, path=path)
        track_compensation(self.kind.name, "succeeded")

    async def change_status(self, record_id: RecordId, status: str) -> BaseRecord:
        """
        Set the status of one record.

        The row returned by the relational store replaces the cached record
        at its current index; no fields are merged client side.

        Raises:
            InvalidInputError: If ``status`` is not a status of this kind
            UpdateError: If no row matches, the update is rejected or the
                returned row is invalid
        """
        new_status = self._validate_status(status)

        with self.store.track_call(), self._measure("change_status"):
            try:
                row = await self.gateway.update_row(
                    self.table, record_id, {"status": new_status}
                )
                record = self._to_record(row)
            except GatewayError as e:
                raise self._fail(
                    UpdateError(
                        e.message,
                        self.kind.name,
                        {**e.details, "id": record_id},
                        not_found=e.details.get("code") == "not_found",
                    ),
                    "status_change_failed",
                ) from e

            self.store.replace_by_id(record)
            self._succeed("status_changed")
            logger.info(
                "record_status_changed",
                kind=self.kind.name,
                id=record_id,
                status=new_status,
            )
            return record

    async def remove(self, record_id: RecordId) -> None:
        """
        Delete one record.

        Removing an id the store does not hold leaves the sequence as is.

        Raises:
            DeleteError: If the relational store rejects the delete
        """
        with self.store.track_call(), self._measure("remove"):
            try:
                await self.gateway.delete_row(self.table, record_id)
            except GatewayError as e:
                raise self._fail(
                    DeleteError(e.message, self.kind.name, {**e.details, "id": record_id}),
                    "remove_failed",
                ) from e

            self.store.remove_by_id(record_id)
            self._succeed("removed")
            logger.info("record_removed", kind=self.kind.name, id=record_id)


class LandRepository(RecordRepository):
    """Repository for land registrations."""

    kind = LAND


class TransferRepository(RecordRepository):
    """Repository for ownership transfers."""

    kind = TRANSFER
