"""Tests for API request/response models"""
import pytest
from pydantic import ValidationError

from app.api.schemas import (
    ChatRequest,
    CompareRequest,
    ExportPdfRequest,
    NormalizeRequest,
    ReportPayload,
)
from app.core.models.report import TestStatus


class TestReportPayload:

    def test_to_snapshot(self):
        payload = ReportPayload(**{
            "tests": [{"test_name": "ALT", "value": "32", "unit": "U/L", "status": "high"}],
            "patient_info": {"date": "01.02.2024", "name": "null"},
            "fileName": "feb.pdf",
        })
        snapshot = payload.to_snapshot()

        assert snapshot.source_file_name == "feb.pdf"
        assert snapshot.date == "01.02.2024"
        assert snapshot.patient_info.name is None
        assert snapshot.tests[0].status == TestStatus.HIGH

    def test_snake_case_file_name(self):
        assert ReportPayload(file_name="a.pdf").file_name == "a.pdf"

    def test_unknown_fields_ignored(self):
        payload = ReportPayload(**{"tests": [], "summary": {"total": 0}})
        assert payload.tests == []


class TestRequestValidation:

    def test_chat_requires_message(self):
        with pytest.raises(ValidationError):
            ChatRequest(message="")

    def test_normalize_accepts_camel_case(self):
        assert NormalizeRequest(testNames=["A"]).test_names == ["A"]
        assert NormalizeRequest(test_names=["B"]).test_names == ["B"]

    def test_normalize_rejects_empty(self):
        with pytest.raises(ValidationError):
            NormalizeRequest(testNames=[])

    def test_compare_requires_reports(self):
        with pytest.raises(ValidationError):
            CompareRequest(reports=[])

    def test_export_pdf_defaults(self):
        request = ExportPdfRequest(html="<p>x</p>")
        assert request.filename == "report.pdf"
        with pytest.raises(ValidationError):
            ExportPdfRequest(html="  ")
