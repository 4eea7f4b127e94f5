"""
Tests for record models, submissions and documents.
"""

import pytest
from land_registry.models import (
    LAND,
    TRANSFER,
    DocumentFile,
    LandRecord,
    LandSubmission,
    TransferRecord,
    TransferSubmission,
)
from pydantic import ValidationError


class TestRecords:
    def test_land_record_from_row(self, land_row):
        record = LandRecord.model_validate(
            {**land_row, "created_at": "2024-05-01T10:00:00+00:00", "owner_note": "x"}
        )

        assert record.status == "pending"
        assert record.document_url == land_row["supporting_documents"]
        assert record.created_at.year == 2024
        # Columns unknown to the model are kept
        assert record.model_dump()["owner_note"] == "x"

    def test_land_record_requires_document(self, land_row):
        with pytest.raises(ValidationError):
            LandRecord.model_validate({**land_row, "supporting_documents": ""})

    def test_land_record_rejects_transfer_status(self, land_row):
        with pytest.raises(ValidationError):
            LandRecord.model_validate({**land_row, "status": "completed"})

    def test_transfer_record(self):
        record = TransferRecord.model_validate(
            {
                "id": 4,
                "recipient_name": "Ada Obi",
                "parcel_id": "P-100",
                "contract_document": "https://store/transfer-contracts/4.pdf",
                "status": "completed",
            }
        )

        assert record.document_url.endswith("/4.pdf")
        assert record.model_dump(mode="json")["status"] == "completed"


class TestSubmissions:
    def test_land_submission_coerces_form_values(self):
        submission = LandSubmission.model_validate(
            {"parcel_id": " P-100 ", "size": "5.2", "ownership_type": "freehold"}
        )

        assert submission.parcel_id == "P-100"
        assert submission.size == 5.2

    @pytest.mark.parametrize("size", [0, -1])
    def test_land_submission_rejects_non_positive_size(self, size):
        with pytest.raises(ValidationError):
            LandSubmission(parcel_id="P-1", size=size, ownership_type="freehold")

    def test_transfer_submission_rejects_document_field(self):
        with pytest.raises(ValidationError):
            TransferSubmission.model_validate(
                {"recipient_name": "A", "parcel_id": "P", "contract_document": "u"}
            )


class TestDocumentFile:
    def test_extension_and_content_type(self):
        document = DocumentFile(filename="Deed.PDF", content=b"x")

        assert document.extension == "pdf"
        assert document.resolved_content_type == "application/pdf"

    def test_no_extension(self):
        document = DocumentFile(filename="deed", content=b"x")

        assert document.extension is None
        assert document.resolved_content_type == "application/octet-stream"

    def test_explicit_content_type_wins(self):
        document = DocumentFile(filename="scan.bin", content=b"x", content_type="image/png")

        assert document.resolved_content_type == "image/png"


class TestRecordKinds:
    def test_kind_settings(self):
        assert LAND.document_field == "supporting_documents"
        assert TRANSFER.document_field == "contract_document"
        assert LAND.terminal_status == "approved"
        assert TRANSFER.terminal_status == "completed"
        assert LAND.storage_prefix == "land-documents"
        assert TRANSFER.table == "transfers"
