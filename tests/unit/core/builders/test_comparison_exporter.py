"""Tests for comparison CSV, JSON and table exports"""
import json
from datetime import datetime

import pytest

from app.core.builders.comparison_exporter import (
    CSV_BOM,
    format_csv_cell,
    parse_json_export,
    to_csv,
    to_json,
    to_json_dict,
    to_table,
)
from app.core.exceptions import ExportError
from app.core.models.comparison import Trend
from app.core.models.report import PatientInfo, ReportSnapshot, TestObservation, TestStatus
from app.core.reconciliation.engine import ReconciliationEngine


def build_matrix():
    january = ReportSnapshot(
        tests=[
            TestObservation(name="Hemoglobin (Hb)", value=13.0, unit="g/dL",
                            reference_range="12-16", category="Общий анализ крови"),
            TestObservation(name="ALT", value=60, unit="U/L", reference_range="0-40",
                            status=TestStatus.HIGH, category="Функция печени"),
        ],
        patient_info=PatientInfo(name="Иванова", age="42", gender="female", date="01.01.2024"),
        source_file_name="jan.pdf",
    )
    february = ReportSnapshot(
        tests=[
            TestObservation(name="Hemoglobin (HGB)", value=10.0, unit="g/dL",
                            reference_range="12-16", status=TestStatus.LOW,
                            category="Общий анализ крови"),
        ],
        patient_info=PatientInfo(date="15.02.2024"),
        source_file_name="feb.pdf",
    )
    mapping = {"Hemoglobin (Hb)": "Гемоглобин", "Hemoglobin (HGB)": "Гемоглобин"}
    return ReconciliationEngine().build_matrix([february, january], mapping)


class TestCsvExport:
    """Test semicolon CSV export"""

    def test_format_cell(self):
        """Absent, normal and abnormal cells"""
        assert format_csv_cell(None) == "-"
        assert format_csv_cell(TestObservation(name="x", value=13.0)) == "13"
        assert format_csv_cell(TestObservation(name="x", value=4.5)) == "4.5"
        assert format_csv_cell(TestObservation(name="x", value=60, status=TestStatus.HIGH)) == "60 (↑)"
        assert format_csv_cell(TestObservation(name="x", value="3,2", status=TestStatus.LOW)) == "3,2 (↓)"

    def test_csv_layout(self):
        """BOM, header with date labels, one row per canonical test"""
        csv_text = to_csv(build_matrix())

        assert csv_text.startswith(CSV_BOM)
        lines = csv_text[len(CSV_BOM):].strip("\n").split("\n")
        assert lines[0] == "Test;Reference;Unit;01.01.2024;15.02.2024"
        assert lines[1] == "Гемоглобин;12-16;g/dL;13;10 (↓)"
        assert lines[2] == "ALT;0-40;U/L;60 (↑);-"

    def test_csv_category_filter(self):
        """Only selected categories are exported"""
        csv_text = to_csv(build_matrix(), ["Функция печени"])
        lines = csv_text[len(CSV_BOM):].strip("\n").split("\n")
        assert len(lines) == 2
        assert lines[1].startswith("ALT;")


class TestJsonExport:
    """Test JSON export and reading it back"""

    def test_json_schema(self):
        """Top-level counts and per-value entries"""
        data = to_json_dict(build_matrix(), export_date=datetime(2024, 3, 1, 12, 0))

        assert data["exportDate"] == "2024-03-01T12:00:00"
        assert data["totalTests"] == 2
        assert data["totalDates"] == 2
        assert data["dates"] == ["01.01.2024", "15.02.2024"]

        hemoglobin = data["tests"][0]
        assert hemoglobin["name"] == "Гемоглобин"
        assert hemoglobin["alternativeNames"] == ["Hemoglobin (Hb)", "Hemoglobin (HGB)"]
        assert hemoglobin["values"][1] == {
            "date": "15.02.2024",
            "value": 10.0,
            "unit": "g/dL",
            "status": "Low",
            "normalRange": "12-16",
            "trend": "down",
        }

        alt_feb = data["tests"][1]["values"][1]
        assert alt_feb["value"] is None
        assert alt_feb["status"] is None
        assert alt_feb["trend"] == "none"

    def test_round_trip_matches_matrix(self):
        """Values, statuses and trends survive export and import"""
        matrix = build_matrix()
        data = parse_json_export(to_json(matrix))

        for test in data["tests"]:
            for idx, value in enumerate(test["values"]):
                observation = matrix.lookup(test["name"], idx)
                if observation is None:
                    assert value["value"] is None
                else:
                    assert value["value"] == observation.value
                    assert value["status"] == observation.status.value
                assert value["trend"] is matrix.trend(test["name"], idx)

    def test_non_ascii_preserved(self):
        """Cyrillic text is written as-is"""
        assert "Гемоглобин" in to_json(build_matrix())

    @pytest.mark.parametrize("text", [
        "not json",
        json.dumps({"dates": []}),
        json.dumps({"tests": []}),
        json.dumps({"dates": ["a"], "tests": [{"name": "x", "values": []}]}),
        json.dumps({"dates": ["a"], "tests": [{"name": "x", "values": [{"trend": "sideways"}]}]}),
    ])
    def test_parse_rejects_malformed(self, text):
        """Malformed exports raise ExportError"""
        with pytest.raises(ExportError):
            parse_json_export(text)


class TestTablePayload:
    """Test the interactive table payload"""

    def test_table(self):
        """Columns, rows and normalization flags"""
        table = to_table(build_matrix())

        assert [c["label"] for c in table["columns"]] == ["01.01.2024", "15.02.2024"]
        assert table["columns"][0]["fileNames"] == ["jan.pdf"]
        assert table["columns"][0]["reportIndices"] == [1]

        hemoglobin, alt = table["rows"]
        assert hemoglobin["hasAbnormal"] is True
        assert hemoglobin["cells"][1]["trend"] == Trend.DOWN.value
        assert alt["cells"][1] == {"absent": True, "trend": "none"}

        assert table["categories"] == ["Общий анализ крови", "Функция печени"]
        assert table["normalized"] is True
        assert table["normalizationError"] is None
        assert table["patientInfo"]["name"] == "Иванова"
        assert table["mapping"]["Hemoglobin (HGB)"] == "Гемоглобин"
