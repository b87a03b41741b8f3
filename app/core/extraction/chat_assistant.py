"""ChatAssistant - answer questions about test results."""
import logging
from typing import Iterable, List

from app.core.models.report import ReportSnapshot
from app.core.ports.llm import LLMPort
from .prompts import build_chat_prompt

logger = logging.getLogger(__name__)


def build_context(reports: Iterable[ReportSnapshot]) -> str:
    """Format reports as plain-text context for the chat prompt."""
    blocks: List[str] = []
    for idx, report in enumerate(reports, start=1):
        header = f"Report {idx}"
        if report.date:
            header += f" ({report.date})"
        if report.source_file_name:
            header += f" - {report.source_file_name}"

        lines = [header + ":"]
        for test in report.tests:
            line = f"- {test.name}: {test.value} {test.unit}".rstrip()
            if test.reference_range:
                line += f" (normal: {test.reference_range})"
            line += f" [{test.status.value}]"
            lines.append(line)
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)


class ChatAssistant:
    """Single-turn Q&A grounded in the supplied test data."""

    def __init__(self, llm: LLMPort, model: str):
        self._llm = llm
        self.model = model

    async def answer(self, message: str, context: str = "") -> str:
        """
        Answer a question using only the supplied context.

        Raises:
            LLMError: If the model call fails
        """
        prompt = build_chat_prompt(message, context)
        logger.info(f"Chat question ({len(message)} chars, context {len(context or '')} chars)")
        response = await self._llm.generate(prompt, self.model, temperature=0.3)
        return (response or "").strip()
