"""
Blood Report Models

Structured results extracted from a single uploaded report.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_COMMA_DECIMAL = re.compile(r"^\s*[+-]?\d+,\d+\s*$")


def parse_numeric(value: Any) -> Optional[float]:
    """Parse the leading numeric part of a measurement.

    "12.5", "12.5 g/dL" and "12,5" parse; "<5", "negative" and "" do not.

    Returns:
        Float value, or None if the value has no numeric prefix
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value)
    if _COMMA_DECIMAL.match(text):
        text = text.replace(",", ".")

    match = _NUMERIC_PREFIX.match(text)
    if not match:
        return None
    return float(match.group())


class TestStatus(Enum):
    """Status of a measurement against its reference range."""
    __test__ = False  # not a pytest test class

    NORMAL = "Normal"
    HIGH = "High"
    LOW = "Low"

    @classmethod
    def coerce(cls, value: Any) -> "TestStatus":
        """Map free-form model output to a status; unknown values are Normal."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for status in cls:
            if status.value.lower() == text:
                return status
        return cls.NORMAL

    @property
    def marker(self) -> str:
        """Arrow used in exports for abnormal values."""
        return {TestStatus.HIGH: "↑", TestStatus.LOW: "↓"}.get(self, "")


@dataclass
class TestObservation:
    """One measured parameter from one report."""

    __test__ = False  # not a pytest test class

    name: str
    value: Union[float, int, str, None] = None
    unit: str = ""
    reference_range: str = ""
    status: TestStatus = TestStatus.NORMAL
    category: str = ""

    @property
    def numeric_value(self) -> Optional[float]:
        return parse_numeric(self.value)

    @property
    def is_abnormal(self) -> bool:
        return self.status is not TestStatus.NORMAL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestObservation":
        """Build from an extraction payload (test_name/normal_range keys)."""
        return cls(
            name=str(data.get("test_name") or data.get("name") or "").strip(),
            value=data.get("value"),
            unit=str(data.get("unit") or ""),
            reference_range=str(data.get("normal_range") or data.get("reference_range") or ""),
            status=TestStatus.coerce(data.get("status")),
            category=str(data.get("category") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test_name": self.name,
            "value": self.value,
            "unit": self.unit,
            "normal_range": self.reference_range,
            "status": self.status.value,
            "category": self.category,
        }


@dataclass
class PatientInfo:
    """Patient metadata from the report header."""
    name: Optional[str] = None
    age: Optional[str] = None
    gender: Optional[str] = None
    date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["PatientInfo"]:
        if not data:
            return None

        def clean(key: str) -> Optional[str]:
            value = data.get(key)
            if value is None:
                return None
            text = str(value).strip()
            # Models sometimes echo the literal "null" placeholder
            if not text or text.lower() == "null":
                return None
            return text

        return cls(
            name=clean("name"),
            age=clean("age"),
            gender=clean("gender"),
            date=clean("date"),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "name": self.name,
            "age": self.age,
            "gender": self.gender,
            "date": self.date,
        }


@dataclass
class ReportSnapshot:
    """One uploaded and analyzed document."""
    tests: List[TestObservation] = field(default_factory=list)
    patient_info: Optional[PatientInfo] = None
    source_file_name: Optional[str] = None

    @property
    def date(self) -> Optional[str]:
        """Raw report date string, if the report carries one."""
        if self.patient_info and self.patient_info.date:
            return self.patient_info.date
        return None

    def summary(self) -> Dict[str, int]:
        """Counts of total, normal and abnormal results."""
        total = len(self.tests)
        normal = sum(1 for t in self.tests if not t.is_abnormal)
        return {"total": total, "normal": normal, "abnormal": total - normal}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportSnapshot":
        tests = [
            TestObservation.from_dict(t)
            for t in data.get("tests") or []
            if isinstance(t, dict)
        ]
        return cls(
            tests=[t for t in tests if t.name],
            patient_info=PatientInfo.from_dict(data.get("patient_info")),
            source_file_name=data.get("file_name") or data.get("fileName"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tests": [t.to_dict() for t in self.tests],
            "summary": self.summary(),
            "patient_info": self.patient_info.to_dict() if self.patient_info else None,
            "file_name": self.source_file_name,
        }
