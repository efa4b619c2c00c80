"""Tests for the ticket ID file reader."""

import pytest

from services.export.ticket_ids import parse_ticket_ids, read_ticket_ids, validate_ticket_id
from shared.errors import InputFileError, TicketIdFormatError


class TestValidateTicketId:
    def test_accepts_eight_digits(self):
        assert validate_ticket_id("12345678", 1) == "12345678"

    @pytest.mark.parametrize("value", ["1234567", "abcdefgh", "", "123456789", "1234567a"])
    def test_rejects_malformed(self, value):
        with pytest.raises(TicketIdFormatError) as exc_info:
            validate_ticket_id(value, 4)
        assert exc_info.value.line_number == 4
        assert "line 4" in str(exc_info.value)


class TestParseTicketIds:
    def test_windows_line_endings(self):
        assert parse_ticket_ids("12345678\r\n87654321\r\n") == ["12345678", "87654321"]

    def test_unix_line_endings_and_blank_lines(self):
        assert parse_ticket_ids("\n12345678\n\n87654321\n\n") == ["12345678", "87654321"]

    def test_duplicates_are_kept(self):
        assert parse_ticket_ids("12345678\n12345678\n") == ["12345678", "12345678"]

    def test_bad_line_reports_line_number(self):
        with pytest.raises(TicketIdFormatError) as exc_info:
            parse_ticket_ids("12345678\n\n1234567\n", source="tickets.txt")
        assert exc_info.value.line_number == 3
        assert exc_info.value.value == "1234567"
        assert "tickets.txt, line 3" in str(exc_info.value)

    @pytest.mark.parametrize("separator", ["\x0c", "\x0b", "\x1c", "\x85", " "])
    def test_only_newlines_break_lines(self, separator):
        with pytest.raises(TicketIdFormatError) as exc_info:
            parse_ticket_ids(f"12345678\n1234{separator}5678\n87654321\n")
        assert exc_info.value.line_number == 2
        assert exc_info.value.value == f"1234{separator}5678"

    @pytest.mark.parametrize("text", ["", "\r\n\r\n", "   \n"])
    def test_no_ids_is_an_error(self, text):
        with pytest.raises(InputFileError):
            parse_ticket_ids(text)


class TestReadTicketIds:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "tickets.txt"
        path.write_text("12345678\r\n87654321\r\n", encoding="utf-8")
        assert read_ticket_ids(path) == ["12345678", "87654321"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputFileError, match="not found"):
            read_ticket_ids(tmp_path / "missing.txt")

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "tickets.txt"
        path.write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(InputFileError):
            read_ticket_ids(path)
