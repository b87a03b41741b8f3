"""Tests for report date parsing"""
from datetime import date, datetime

from app.core.builders.date_utils import (
    EPOCH,
    calendar_key,
    extract_date_from_text,
    parse_report_date,
)


class TestParseReportDate:
    """Test date parsing for column ordering"""

    def test_ddmmyyyy(self):
        """Should parse DD.MM.YYYY"""
        assert parse_report_date("15.01.2024") == datetime(2024, 1, 15)

    def test_yyyymmdd(self):
        """Should parse YYYY-MM-DD"""
        assert parse_report_date("2024-01-15") == datetime(2024, 1, 15)

    def test_pattern_inside_text(self):
        """Should find the date inside surrounding text"""
        assert parse_report_date("Дата взятия: 03.02.2025 09:14") == datetime(2025, 2, 3)

    def test_none_and_empty_are_epoch(self):
        """Missing dates sort first"""
        assert parse_report_date(None) == EPOCH
        assert parse_report_date("") == EPOCH
        assert parse_report_date("   ") == EPOCH

    def test_garbage_is_epoch(self):
        """Unreadable strings fall back to the epoch"""
        assert parse_report_date("not a date") == EPOCH

    def test_invalid_calendar_date_is_epoch(self):
        """31 February matches the pattern but is not a real day"""
        assert parse_report_date("31.02.2024") == EPOCH

    def test_iso_timestamp_fallback(self):
        """Should parse ISO timestamps via the generic parser"""
        assert parse_report_date("2024-03-05T10:30:00").date() == date(2024, 3, 5)

    def test_day_first_slash_format(self):
        """Should try day-first slash format"""
        assert parse_report_date("05/03/2024") == datetime(2024, 3, 5)

    def test_date_objects_pass_through(self):
        """Should accept date and datetime values"""
        assert parse_report_date(date(2024, 1, 2)) == datetime(2024, 1, 2)
        assert parse_report_date(datetime(2024, 1, 2, 8, 0)) == datetime(2024, 1, 2, 8, 0)


class TestCalendarKey:
    """Test calendar day keys used for same-day merging"""

    def test_same_day_different_formats(self):
        """Different spellings of one day share a key"""
        assert calendar_key("15.01.2024") == calendar_key("2024-01-15") == date(2024, 1, 15)

    def test_unparseable_has_no_key(self):
        """Unreadable or empty strings have no calendar day"""
        assert calendar_key("unknown") is None
        assert calendar_key(None) is None
        assert calendar_key("") is None


class TestExtractDateFromText:
    """Test date recovery from OCR text"""

    def test_labelled_date(self):
        """Should prefer a labelled date"""
        text = "Пациент: Иванов\nДата: 12.03.2024\nПринято 01.01.2020"
        assert extract_date_from_text(text) == "12.03.2024"

    def test_labelled_two_digit_year(self):
        """Two-digit years get the 20xx century"""
        assert extract_date_from_text("Date: 12-03-24") == "12.03.2024"

    def test_bare_date(self):
        """Should fall back to any DD.MM.YYYY"""
        assert extract_date_from_text("результат от 07.11.2023 г.") == "07.11.2023"

    def test_russian_month_name(self):
        """Should read Russian month names"""
        assert extract_date_from_text("Анализ от 6 февраля 2026 года") == "06.02.2026"

    def test_nothing_found(self):
        """Should return None without a date"""
        assert extract_date_from_text("Гемоглобин 135 г/л") is None
        assert extract_date_from_text("") is None
        assert extract_date_from_text(None) is None
