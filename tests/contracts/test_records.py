# tests/contracts/test_records.py
"""Tests for record value types."""

import pytest

from limelock.contracts.errors import MalformedResponseError
from limelock.contracts.records import FetchedRecord, IntegrityResult, TransportResponse


class TestTransportResponse:
    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_2xx_is_ok(self, status: int) -> None:
        assert TransportResponse(status_code=status, body=None).ok is True

    @pytest.mark.parametrize("status", [199, 301, 400, 401, 404, 500])
    def test_other_statuses_not_ok(self, status: int) -> None:
        assert TransportResponse(status_code=status, body=None).ok is False


class TestFetchedRecordFromResponse:
    """Parsing fetch response bodies."""

    def test_parses_required_fields(self) -> None:
        body = {"data": "68656c6c6f", "filename": "x.txt", "integrity": True}
        record = FetchedRecord.from_response(body)

        assert record.data == "68656c6c6f"
        assert record.filename == "x.txt"
        assert record.integrity is True
        assert record.content_hash is None
        assert record.raw is body

    def test_hash_field_lowercased(self) -> None:
        record = FetchedRecord.from_response({"data": "", "integrity": True, "hash": "ABCDEF"})
        assert record.content_hash == "abcdef"

    def test_missing_integrity_is_false(self) -> None:
        assert FetchedRecord.from_response({"data": "00", "filename": "f"}).integrity is False

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, True),
            (False, False),
            (1, True),
            (0, False),
            ("true", True),
            ("TRUE", True),
            ("1", True),
            ("false", False),
            ("", False),
            (None, False),
            ([True], False),
        ],
    )
    def test_integrity_is_boolean_like(self, value: object, expected: bool) -> None:
        record = FetchedRecord.from_response({"data": "00", "integrity": value})
        assert record.integrity is expected

    def test_missing_filename_is_none(self) -> None:
        assert FetchedRecord.from_response({"data": "00", "integrity": True}).filename is None

    def test_non_object_body_rejected(self) -> None:
        with pytest.raises(MalformedResponseError, match="not a JSON object"):
            FetchedRecord.from_response("Internal error")

    def test_missing_data_rejected(self) -> None:
        with pytest.raises(MalformedResponseError, match="'data'"):
            FetchedRecord.from_response({"filename": "x.txt", "integrity": True})

    def test_non_string_data_rejected(self) -> None:
        with pytest.raises(MalformedResponseError):
            FetchedRecord.from_response({"data": [1, 2], "integrity": True})


class TestFetchedRecordPayload:
    def test_decodes_hex(self) -> None:
        record = FetchedRecord(data="68656c6c6f", filename="x.txt", integrity=True)
        assert record.payload() == b"hello"

    def test_empty_payload(self) -> None:
        assert FetchedRecord(data="", filename=None, integrity=True).payload() == b""

    def test_invalid_hex_raises(self) -> None:
        record = FetchedRecord(data="not hex", filename="x.txt", integrity=True)
        with pytest.raises(MalformedResponseError, match="not valid hex"):
            record.payload()


class TestIntegrityResult:
    def test_truthiness_follows_ok(self) -> None:
        assert IntegrityResult(ok=True, reason="fine", remote_flag=True)
        assert not IntegrityResult(ok=False, reason="bad", remote_flag=False)
