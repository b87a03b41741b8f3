"""Report extraction, name normalization and chat helpers."""
from app.core.extraction.response_parser import ResponseParser
from app.core.extraction.name_normalizer import NameNormalizer, NormalizationResult
from app.core.extraction.report_analyzer import ReportAnalyzer
from app.core.extraction.chat_assistant import ChatAssistant, build_context

__all__ = [
    "ResponseParser",
    "NameNormalizer",
    "NormalizationResult",
    "ReportAnalyzer",
    "ChatAssistant",
    "build_context",
]
