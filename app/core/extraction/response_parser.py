"""
ResponseParser - Parse JSON objects from free-text LLM responses.

Models are asked for JSON but routinely wrap it in markdown fences or
surround it with prose, so extraction is best-effort.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


class ResponseParser:
    """Parse JSON responses from LLM with tolerant extraction."""

    def parse_object(self, response: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Parse an LLM response into a JSON object.

        Tries, in order: the whole response, each fenced code block, and the
        outermost {...} span in the text.

        Args:
            response: Raw LLM response text

        Returns:
            Parsed dict, or None if no JSON object could be recovered
        """
        if not response or not response.strip():
            return None

        for candidate in self._candidates(response):
            parsed = self._loads(candidate)
            if isinstance(parsed, dict):
                return parsed

        logger.warning(f"Could not parse JSON object from response: {response[:200]!r}")
        return None

    def _candidates(self, response: str) -> List[str]:
        candidates = [response.strip()]
        candidates.extend(m.group(1).strip() for m in _FENCED_BLOCK.finditer(response))

        # Unterminated fence: take everything after the opening marker
        if response.count("```") % 2 == 1:
            tail = response[response.rfind("```") + 3:]
            if tail.lower().startswith("json"):
                tail = tail[4:]
            candidates.append(tail.strip())

        span = self._outer_object(response)
        if span:
            candidates.append(span)
        return candidates

    def _outer_object(self, text: str) -> Optional[str]:
        """Text between the first '{' and the last '}'."""
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            return None
        return text[start:end + 1]

    def _loads(self, text: str) -> Any:
        if not text:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            # Trailing commas are the most common model slip
            fixed = re.sub(r",\s*([}\]])", r"\1", text)
            try:
                return json.loads(fixed)
            except json.JSONDecodeError:
                return None
