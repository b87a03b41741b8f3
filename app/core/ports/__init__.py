"""Abstract interfaces for external dependencies."""
from app.core.ports.llm import LLMPort, ModelConfig
from app.core.ports.ocr import OCRPort
from app.core.ports.pdf import PDFPort
from app.core.ports.export import ExportPort

__all__ = [
    "LLMPort",
    "ModelConfig",
    "OCRPort",
    "PDFPort",
    "ExportPort",
]
