"""
NameNormalizer - cluster synonymous test names via an LLM.

One request per distinct set of raw names: the whole list is sent at once
and the model returns a JSON object mapping each name to a canonical label.
The normalizer never raises; failures come back as a NormalizationResult
carrying the error, and the caller decides on the fallback.
"""
import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.config.limits import NORMALIZATION_CACHE_SIZE
from app.core.exceptions import NormalizationError
from app.core.extraction.prompts import build_normalization_prompt
from app.core.extraction.response_parser import ResponseParser
from app.core.ports.llm import LLMPort

logger = logging.getLogger(__name__)


@dataclass
class NormalizationResult:
    """Outcome of one normalization call.

    On success `mapping` holds the service's reply (possibly covering only a
    subset of the names). On failure `mapping` is empty and `error` is set.
    """
    mapping: Dict[str, str] = field(default_factory=dict)
    error: Optional[NormalizationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class NameNormalizer:
    """Request canonical names for a set of raw test names."""

    def __init__(
        self,
        llm: LLMPort,
        model: str,
        timeout: Optional[float] = None,
        cache_size: int = NORMALIZATION_CACHE_SIZE,
    ):
        """
        Args:
            llm: LLM provider
            model: Model key used for normalization
            timeout: Seconds before the request is abandoned (None = no limit)
            cache_size: Number of successful results kept per name set
        """
        self.llm = llm
        self.model = model
        self.timeout = timeout
        self._parser = ResponseParser()
        self._cache_size = cache_size
        self._cache: "OrderedDict[Tuple[str, ...], NormalizationResult]" = OrderedDict()
        self._inflight: Dict[Tuple[str, ...], "asyncio.Task[NormalizationResult]"] = {}

    async def normalize(self, names: Iterable[str]) -> NormalizationResult:
        """
        Map raw test names to canonical names.

        Concurrent calls for the same set of names share a single request;
        successful results are cached, failures are not.

        Args:
            names: Raw test names (duplicates and blanks are ignored)

        Returns:
            NormalizationResult; never raises
        """
        unique = list(dict.fromkeys(n for n in names if n and n.strip()))
        if not unique:
            return NormalizationResult()

        key = tuple(sorted(unique))

        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            return cached

        task = self._inflight.get(key)
        if task is not None:
            logger.debug(f"Joining in-flight normalization for {len(key)} names")
            return await asyncio.shield(task)

        task = asyncio.ensure_future(self._request(unique))
        self._inflight[key] = task
        try:
            result = await asyncio.shield(task)
        finally:
            self._inflight.pop(key, None)

        if result.ok:
            self._remember(key, result)
        return result

    def clear_cache(self) -> None:
        """Forget cached results."""
        self._cache.clear()

    def _remember(self, key: Tuple[str, ...], result: NormalizationResult) -> None:
        self._cache[key] = result
        self._cache.move_to_end(key)
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)

    async def _request(self, names: List[str]) -> NormalizationResult:
        prompt = build_normalization_prompt(names)
        logger.info(f"Normalizing {len(names)} test names with {self.model}")

        try:
            call = self.llm.generate(prompt, self.model, temperature=0.1)
            if self.timeout:
                response = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                response = await call
        except asyncio.TimeoutError:
            return self._failure(f"Normalization timed out after {self.timeout}s")
        except Exception as e:
            return self._failure(f"Normalization request failed: {e}")

        parsed = self._parser.parse_object(response)
        if parsed is None:
            return self._failure("Could not parse JSON from normalization response")

        mapping = self._extract_mapping(parsed, set(names))
        if mapping is None:
            return self._failure("Normalization response has no mappings object")

        missing = len(names) - len(mapping)
        if missing:
            logger.info(f"Normalization left {missing} names unmapped")
        return NormalizationResult(mapping=mapping)

    def _extract_mapping(self, parsed: Dict[str, Any], names: set) -> Optional[Dict[str, str]]:
        """Pull the name -> label object out of the reply.

        Accepts {"mappings": {...}} or a bare {...}. Keys that were not asked
        for and non-string or empty labels are dropped.
        """
        raw = parsed.get("mappings", parsed)
        if not isinstance(raw, dict):
            return None

        mapping = {}
        for name, label in raw.items():
            if name not in names or not isinstance(label, str):
                continue
            label = label.strip()
            if label:
                mapping[name] = label
        return mapping

    def _failure(self, message: str) -> NormalizationResult:
        logger.warning(message)
        return NormalizationResult(error=NormalizationError(message))
