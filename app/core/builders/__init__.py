"""Report builders and formatters."""
from app.core.builders.abbreviations import (
    format_test_name_with_abbreviation,
    get_test_abbreviation,
)
from app.core.builders.comparison_exporter import (
    parse_json_export,
    to_csv,
    to_json,
    to_json_dict,
    to_table,
)
from app.core.builders.date_utils import (
    calendar_key,
    extract_date_from_text,
    parse_report_date,
)
from app.core.builders.report_exporter import report_to_csv, report_to_json
from app.core.builders.sections import DEFAULT_SECTIONS, SectionSpec, partition_tests

__all__ = [
    # Date utilities
    "parse_report_date",
    "calendar_key",
    "extract_date_from_text",
    # Comparison exports
    "to_csv",
    "to_json",
    "to_json_dict",
    "parse_json_export",
    "to_table",
    # Single report exports
    "report_to_csv",
    "report_to_json",
    # Sections
    "SectionSpec",
    "DEFAULT_SECTIONS",
    "partition_tests",
    # Abbreviations
    "get_test_abbreviation",
    "format_test_name_with_abbreviation",
]
