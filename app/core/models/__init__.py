"""Domain models and entities.

Blood report snapshots and cross-report comparison structures.
"""

from app.core.models.report import (
    PatientInfo,
    ReportSnapshot,
    TestObservation,
    TestStatus,
    parse_numeric,
)
from app.core.models.comparison import (
    CanonicalTest,
    ComparisonMatrix,
    DateColumn,
    Trend,
)

__all__ = [
    # report.py models
    "TestStatus",
    "TestObservation",
    "PatientInfo",
    "ReportSnapshot",
    "parse_numeric",
    # comparison.py models
    "Trend",
    "CanonicalTest",
    "DateColumn",
    "ComparisonMatrix",
]
