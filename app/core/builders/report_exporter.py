"""Single-report CSV and JSON exports."""
import csv
import io
import json
from typing import Any, Dict

from app.core.models.report import ReportSnapshot

REPORT_CSV_HEADER = ["Test Name", "Value", "Unit", "Normal Range", "Status", "Category"]


def report_to_csv(report: ReportSnapshot) -> str:
    """Comma-delimited CSV with every cell quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    buffer.write(",".join(REPORT_CSV_HEADER) + "\n")
    for test in report.tests:
        writer.writerow([
            test.name,
            "" if test.value is None else str(test.value),
            test.unit,
            test.reference_range,
            test.status.value,
            test.category,
        ])
    return buffer.getvalue()


def report_to_dict(report: ReportSnapshot) -> Dict[str, Any]:
    data = report.to_dict()
    if data["patient_info"] is None:
        data.pop("patient_info")
    return data


def report_to_json(report: ReportSnapshot) -> str:
    return json.dumps(report_to_dict(report), ensure_ascii=False, indent=2)
