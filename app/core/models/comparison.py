"""
Comparison Data Models

Cross-report reconciliation results: canonical tests, date columns and
the comparison matrix that ties them together.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

from app.core.exceptions import NormalizationError
from app.core.models.report import ReportSnapshot, TestObservation


class Trend(Enum):
    """Direction of a numeric value between two adjacent columns."""
    UP = "up"
    DOWN = "down"
    STABLE = "stable"
    NONE = "none"

    @property
    def arrow(self) -> str:
        return {Trend.UP: "↑", Trend.DOWN: "↓", Trend.STABLE: "→"}.get(self, "")


@dataclass
class CanonicalTest:
    """A cluster of observations judged to be the same parameter.

    Metadata comes from the first observation seen in date order; later
    conflicting values are not reconciled.
    """
    canonical_name: str
    category: str = ""
    unit: str = ""
    reference_range: str = ""
    original_names: List[str] = field(default_factory=list)

    def add_name(self, raw_name: str) -> None:
        if raw_name not in self.original_names:
            self.original_names.append(raw_name)

    @property
    def alternative_names(self) -> List[str]:
        """Raw names that differ from the canonical label."""
        return [n for n in self.original_names if n != self.canonical_name]


@dataclass
class DateColumn:
    """One comparison column: reports sharing a resolved date."""
    label: str
    raw_date: Optional[str]
    resolved_date: datetime
    member_report_indices: List[int] = field(default_factory=list)
    file_names: List[str] = field(default_factory=list)


@dataclass
class ComparisonMatrix:
    """Canonical test x date column matrix built from a comparison session."""
    reports: List[ReportSnapshot]
    canonical_tests: List[CanonicalTest]
    date_columns: List[DateColumn]
    mapping: Dict[str, str]
    normalization_error: Optional[NormalizationError] = None

    @property
    def normalized(self) -> bool:
        """False when the name mapping fell back to identity."""
        return self.normalization_error is None

    def canonical_name_for(self, raw_name: str) -> str:
        return self.mapping.get(raw_name, raw_name)

    def get_test(self, canonical_name: str) -> Optional[CanonicalTest]:
        for test in self.canonical_tests:
            if test.canonical_name == canonical_name:
                return test
        return None

    def lookup(self, canonical_name: str, column_index: int) -> Optional[TestObservation]:
        """Observation for a test in a column; first matching report wins.

        Returns:
            The observation, or None if the column has no matching test or
            the index is out of range
        """
        if column_index < 0 or column_index >= len(self.date_columns):
            return None

        for report_index in self.date_columns[column_index].member_report_indices:
            for test in self.reports[report_index].tests:
                if self.canonical_name_for(test.name) == canonical_name:
                    return test
        return None

    def trend(self, canonical_name: str, column_index: int) -> Trend:
        """Trend into a column from the column immediately before it."""
        from app.core.reconciliation.trends import compute_trend

        if column_index <= 0:
            return Trend.NONE
        return compute_trend(
            self.lookup(canonical_name, column_index),
            self.lookup(canonical_name, column_index - 1),
        )

    def categories(self) -> List[str]:
        """Sorted distinct categories across canonical tests."""
        return sorted({t.category for t in self.canonical_tests if t.category})

    def filter_by_categories(self, categories: Optional[Iterable[str]]) -> List[CanonicalTest]:
        """Canonical tests whose category is in the selection.

        An empty or missing selection keeps every test.
        """
        if not categories:
            return list(self.canonical_tests)
        selected = set(categories)
        return [t for t in self.canonical_tests if t.category in selected]

    def has_abnormal(self, canonical_name: str) -> bool:
        """True if any column holds an abnormal value for the test."""
        for idx in range(len(self.date_columns)):
            obs = self.lookup(canonical_name, idx)
            if obs is not None and obs.is_abnormal:
                return True
        return False

    @property
    def first_patient(self):
        """Patient info of the earliest report that has one."""
        for column in self.date_columns:
            for idx in column.member_report_indices:
                if self.reports[idx].patient_info:
                    return self.reports[idx].patient_info
        return None
