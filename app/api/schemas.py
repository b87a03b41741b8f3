"""
API Pydantic models for the BloodParser service.

Request/response models used by the analysis, comparison and export
endpoints. Field names follow the JSON the browser client already sends
(snake_case for report payloads, camelCase for comparison exports).
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, validator

from app.core.models.report import ReportSnapshot


class TestResultModel(BaseModel):
    """One extracted test result"""

    __test__ = False

    test_name: str
    value: Union[float, int, str, None] = None
    unit: str = ""
    normal_range: str = ""
    status: str = "Normal"
    category: str = ""


class PatientInfoModel(BaseModel):
    name: Optional[str] = None
    age: Optional[str] = None
    gender: Optional[str] = None
    date: Optional[str] = None


class ReportSummary(BaseModel):
    total: int
    normal: int
    abnormal: int


class ReportPayload(BaseModel):
    """An analyzed report as sent back by the client"""

    tests: List[TestResultModel] = Field(default_factory=list)
    patient_info: Optional[PatientInfoModel] = None
    file_name: Optional[str] = Field(None, alias="fileName")

    class Config:
        populate_by_name = True
        extra = "ignore"

    def to_snapshot(self) -> ReportSnapshot:
        return ReportSnapshot.from_dict({
            "tests": [t.dict() for t in self.tests],
            "patient_info": self.patient_info.dict() if self.patient_info else None,
            "file_name": self.file_name,
        })


class AnalyzeResponse(BaseModel):
    """Response model for report analysis"""

    tests: List[TestResultModel]
    summary: ReportSummary
    patient_info: Optional[PatientInfoModel] = None
    file_name: Optional[str] = None


class VerifyOcrRequest(BaseModel):
    passphrase: Optional[str] = None


class VerifyOcrResponse(BaseModel):
    valid: bool
    retryAfter: Optional[int] = None


class ChatRequest(BaseModel):
    """Request model for the chat assistant"""

    message: str = Field(..., description="User question")
    context: Optional[str] = Field("", description="Test results as plain text")
    reports: Optional[List[ReportPayload]] = Field(
        None, description="Reports to build the context from when context is empty"
    )

    @validator("message")
    def validate_message(cls, v):
        if not v or not v.strip():
            raise ValueError("Message is required")
        return v


class ChatResponse(BaseModel):
    response: str


class NormalizeRequest(BaseModel):
    """Request model for test name normalization"""

    test_names: List[str] = Field(..., alias="testNames")

    class Config:
        populate_by_name = True

    @validator("test_names")
    def validate_test_names(cls, v):
        if not v:
            raise ValueError("test_names must be a non-empty list")
        return v


class NormalizeResponse(BaseModel):
    mappings: Dict[str, str]
    normalized: bool
    error: Optional[str] = None


class CompareRequest(BaseModel):
    """Request model for report comparison and comparison exports"""

    reports: List[ReportPayload]
    categories: Optional[List[str]] = None
    mappings: Optional[Dict[str, str]] = Field(
        None, description="Precomputed name mapping; skips the normalizer call"
    )

    @validator("reports")
    def validate_reports(cls, v):
        if not v:
            raise ValueError("At least one report is required")
        return v


class ReportExportRequest(BaseModel):
    report: ReportPayload
    filename: Optional[str] = None


class ExportPdfRequest(BaseModel):
    """Request model for raw HTML to PDF rendering"""

    html: str
    filename: Optional[str] = "report.pdf"

    @validator("html")
    def validate_html(cls, v):
        if not v or not v.strip():
            raise ValueError("html is required")
        return v


class HealthResponse(BaseModel):
    """Health check response"""

    status: str
    timestamp: datetime
    version: str
    uptime: float
    system_info: Dict[str, Any]
    pipeline_status: Dict[str, Any]


__all__ = [
    "TestResultModel",
    "PatientInfoModel",
    "ReportSummary",
    "ReportPayload",
    "AnalyzeResponse",
    "VerifyOcrRequest",
    "VerifyOcrResponse",
    "ChatRequest",
    "ChatResponse",
    "NormalizeRequest",
    "NormalizeResponse",
    "CompareRequest",
    "ReportExportRequest",
    "ExportPdfRequest",
    "HealthResponse",
]
