"""
Tests for custom exception classes.
"""

from land_registry.exceptions import (
    AddressResolutionError,
    DeleteError,
    FetchError,
    GatewayError,
    InsertError,
    InvalidInputError,
    RecordOperationError,
    RegistryServiceException,
    UpdateError,
    UploadError,
)


def test_base_exception_defaults() -> None:
    exc = RegistryServiceException("Test error")

    assert exc.message == "Test error"
    assert exc.details == {}
    assert str(exc) == "Test error"


def test_gateway_error_carries_details() -> None:
    exc = GatewayError("quota exceeded", {"operation": "upload"})

    assert isinstance(exc, RegistryServiceException)
    assert exc.details["operation"] == "upload"


def test_operation_errors_record_kind() -> None:
    exc = InsertError("Database error: duplicate parcel_id", "land", {"path": "p"})

    assert exc.kind == "land"
    assert exc.details == {"path": "p", "kind": "land"}
    assert exc.operation == "Insert"


def test_taxonomy() -> None:
    for error_class in (
        FetchError,
        UploadError,
        AddressResolutionError,
        InsertError,
        UpdateError,
        DeleteError,
    ):
        assert issubclass(error_class, RecordOperationError)
        assert not issubclass(error_class, GatewayError)


def test_update_error_not_found_flag() -> None:
    assert UpdateError("No row with id 9", "land", not_found=True).not_found is True
    assert UpdateError("rejected").not_found is False


def test_invalid_input_error_is_value_error() -> None:
    exc = InvalidInputError("Unknown land status: sold", {"kind": "land"})

    assert isinstance(exc, ValueError)
    assert isinstance(exc, RegistryServiceException)
    assert not isinstance(exc, RecordOperationError)
