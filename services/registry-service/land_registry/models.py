"""
Data models for land registry records.

Records are validated from rows returned by the relational store, so
fields the backend adds (defaults, triggers) are kept as returned.
Submissions carry only the fields a caller may set; the document
reference and status are filled in by the repository.
"""

import mimetypes
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import ClassVar, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

RecordId = Union[int, str]


class LandStatus(str, Enum):
    """Lifecycle states of a land registration."""

    PENDING = "pending"
    APPROVED = "approved"


class TransferStatus(str, Enum):
    """Lifecycle states of an ownership transfer."""

    PENDING = "pending"
    COMPLETED = "completed"


class BaseRecord(BaseModel):
    """Fields shared by every persisted record."""

    model_config = ConfigDict(extra="allow")

    document_field: ClassVar[str] = ""

    id: RecordId
    parcel_id: str
    created_at: Optional[datetime] = None

    @property
    def document_url(self) -> str:
        """Public address of the supporting document."""
        return getattr(self, self.document_field)


class LandRecord(BaseRecord):
    """A registered land parcel."""

    document_field: ClassVar[str] = "supporting_documents"

    size: float
    ownership_type: str
    supporting_documents: str = Field(min_length=1)
    status: LandStatus


class TransferRecord(BaseRecord):
    """An ownership transfer of a parcel to a recipient."""

    document_field: ClassVar[str] = "contract_document"

    recipient_name: str
    contract_document: str = Field(min_length=1)
    status: TransferStatus


class LandSubmission(BaseModel):
    """Caller-supplied fields for a new land registration."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    parcel_id: str = Field(min_length=1)
    size: float = Field(gt=0)
    ownership_type: str = Field(min_length=1)


class TransferSubmission(BaseModel):
    """Caller-supplied fields for a new ownership transfer."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    recipient_name: str = Field(min_length=1)
    parcel_id: str = Field(min_length=1)


@dataclass(frozen=True)
class DocumentFile:
    """
    An uploaded document held in memory for the duration of one submission.

    Attributes:
        filename: File name as uploaded, used for the storage extension
        content: Raw file bytes
        content_type: MIME type; guessed from the file name when omitted
    """

    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> Optional[str]:
        """Last suffix of the file name without the dot, if any."""
        suffix = Path(self.filename).suffix
        return suffix[1:].lower() if len(suffix) > 1 else None

    @property
    def resolved_content_type(self) -> str:
        if self.content_type:
            return self.content_type
        guessed, _ = mimetypes.guess_type(self.filename)
        return guessed or "application/octet-stream"


@dataclass(frozen=True)
class RecordKind:
    """
    Static description of one entity kind handled by a repository.

    Attributes:
        name: Short kind name used in logs, metrics and errors
        table: Default relational table
        storage_prefix: Folder inside the bucket for uploaded documents
        record_model: Model validated from backend rows
        submission_model: Model accepted by submit
        status_enum: Closed set of statuses
        terminal_status: Status that ends the workflow for this kind
        messages: User-facing notification texts
    """

    name: str
    table: str
    storage_prefix: str
    record_model: Type[BaseRecord]
    submission_model: Type[BaseModel]
    status_enum: Type[Enum]
    terminal_status: str
    messages: Dict[str, str]

    @property
    def document_field(self) -> str:
        return self.record_model.document_field


LAND = RecordKind(
    name="land",
    table="land",
    storage_prefix="land-documents",
    record_model=LandRecord,
    submission_model=LandSubmission,
    status_enum=LandStatus,
    terminal_status=LandStatus.APPROVED.value,
    messages={
        "listed": "Land records loaded",
        "list_failed": "Failed to load land records",
        "submitted": "Land registration submitted successfully!",
        "submit_failed": "Registration failed",
        "status_changed": "Land status updated successfully!",
        "status_change_failed": "Status update failed",
        "removed": "Land record deleted successfully!",
        "remove_failed": "Delete failed",
    },
)

TRANSFER = RecordKind(
    name="transfer",
    table="transfers",
    storage_prefix="transfer-contracts",
    record_model=TransferRecord,
    submission_model=TransferSubmission,
    status_enum=TransferStatus,
    terminal_status=TransferStatus.COMPLETED.value,
    messages={
        "listed": "Transfers loaded",
        "list_failed": "Failed to load transfers",
        "submitted": "Land transfer initiated successfully!",
        "submit_failed": "Transfer failed",
        "status_changed": "Transfer status updated successfully!",
        "status_change_failed": "Status update failed",
        "removed": "Transfer record deleted successfully!",
        "remove_failed": "Delete failed",
    },
)
