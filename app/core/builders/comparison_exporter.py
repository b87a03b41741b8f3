"""
Comparison matrix exports: CSV, JSON and the interactive table payload.

All functions are pure over a ComparisonMatrix plus an optional category
selection; absent cells never raise.
"""
import csv
import io
import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from app.core.exceptions import ExportError
from app.core.models.comparison import CanonicalTest, ComparisonMatrix, Trend
from app.core.models.report import TestObservation

logger = logging.getLogger(__name__)

CSV_DELIMITER = ";"
CSV_BOM = "\ufeff"
CSV_MISSING = "-"
CSV_HEADER = ["Test", "Reference", "Unit"]


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_csv_cell(observation: Optional[TestObservation]) -> str:
    """`value`, `value (↑)`, `value (↓)` or `-` when absent."""
    if observation is None:
        return CSV_MISSING
    text = _format_value(observation.value)
    if observation.is_abnormal:
        return f"{text} ({observation.status.marker})"
    return text


def to_csv(matrix: ComparisonMatrix, categories: Optional[Iterable[str]] = None) -> str:
    """
    Export the matrix as semicolon-delimited CSV with a UTF-8 BOM.

    Args:
        matrix: Comparison matrix
        categories: Category selection (None or empty keeps all tests)

    Returns:
        CSV text starting with the BOM
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=CSV_DELIMITER, lineterminator="\n")
    writer.writerow(CSV_HEADER + [c.label for c in matrix.date_columns])

    for test in matrix.filter_by_categories(categories):
        cells = [
            format_csv_cell(matrix.lookup(test.canonical_name, idx))
            for idx in range(len(matrix.date_columns))
        ]
        writer.writerow([test.canonical_name, test.reference_range, test.unit] + cells)

    return CSV_BOM + buffer.getvalue()


def _value_entry(matrix: ComparisonMatrix, test: CanonicalTest, idx: int) -> Dict[str, Any]:
    column = matrix.date_columns[idx]
    observation = matrix.lookup(test.canonical_name, idx)
    trend = matrix.trend(test.canonical_name, idx)

    if observation is None:
        return {
            "date": column.label,
            "value": None,
            "unit": "",
            "status": None,
            "normalRange": "",
            "trend": trend.value,
        }
    return {
        "date": column.label,
        "value": observation.value,
        "unit": observation.unit,
        "status": observation.status.value,
        "normalRange": observation.reference_range,
        "trend": trend.value,
    }


def to_json_dict(
    matrix: ComparisonMatrix,
    categories: Optional[Iterable[str]] = None,
    export_date: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Structured dump of the matrix including per-column trends."""
    tests = matrix.filter_by_categories(categories)
    dates = [c.label for c in matrix.date_columns]

    return {
        "exportDate": (export_date or datetime.now()).isoformat(),
        "totalTests": len(tests),
        "totalDates": len(dates),
        "dates": dates,
        "tests": [
            {
                "name": test.canonical_name,
                "category": test.category,
                "unit": test.unit,
                "normalRange": test.reference_range,
                "alternativeNames": test.alternative_names,
                "values": [
                    _value_entry(matrix, test, idx)
                    for idx in range(len(matrix.date_columns))
                ],
            }
            for test in tests
        ],
    }


def to_json(matrix: ComparisonMatrix, categories: Optional[Iterable[str]] = None) -> str:
    return json.dumps(to_json_dict(matrix, categories), ensure_ascii=False, indent=2)


def parse_json_export(text: str) -> Dict[str, Any]:
    """
    Read a JSON export back.

    Trend strings are converted to Trend members so the result can be
    compared against a live matrix.

    Raises:
        ExportError: If the text is not a comparison export
    """
    try:
        data = json.loads(text.lstrip(CSV_BOM))
    except json.JSONDecodeError as e:
        raise ExportError(f"Invalid JSON export: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("tests"), list):
        raise ExportError("JSON export has no tests list")

    dates = data.get("dates")
    if not isinstance(dates, list):
        raise ExportError("JSON export has no dates list")

    for test in data["tests"]:
        values = test.get("values") or []
        if len(values) != len(dates):
            raise ExportError(
                f"Test '{test.get('name')}' has {len(values)} values for {len(dates)} dates"
            )
        for value in values:
            try:
                value["trend"] = Trend(value.get("trend", "none"))
            except ValueError as e:
                raise ExportError(f"Unknown trend in export: {value.get('trend')}") from e

    return data


def to_table(matrix: ComparisonMatrix, categories: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """Payload for the interactive comparison table."""
    columns = [
        {
            "label": c.label,
            "date": c.raw_date,
            "reportIndices": list(c.member_report_indices),
            "fileNames": list(c.file_names),
        }
        for c in matrix.date_columns
    ]

    rows = []
    for test in matrix.filter_by_categories(categories):
        cells = []
        for idx in range(len(matrix.date_columns)):
            observation = matrix.lookup(test.canonical_name, idx)
            trend = matrix.trend(test.canonical_name, idx)
            if observation is None:
                cells.append({"absent": True, "trend": trend.value})
            else:
                cells.append({
                    "absent": False,
                    "value": observation.value,
                    "unit": observation.unit,
                    "status": observation.status.value,
                    "trend": trend.value,
                })
        rows.append({
            "name": test.canonical_name,
            "category": test.category,
            "unit": test.unit,
            "normalRange": test.reference_range,
            "alternativeNames": test.alternative_names,
            "hasAbnormal": matrix.has_abnormal(test.canonical_name),
            "cells": cells,
        })

    patient = matrix.first_patient
    return {
        "columns": columns,
        "rows": rows,
        "categories": matrix.categories(),
        "mapping": dict(matrix.mapping),
        "normalized": matrix.normalized,
        "normalizationError": str(matrix.normalization_error) if matrix.normalization_error else None,
        "patientInfo": patient.to_dict() if patient else None,
    }
