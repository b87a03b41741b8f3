"""Usage and cost tracking for LLM calls.

Keeps a bounded history of calls with token counts and cost estimates,
and mirrors token totals into Prometheus.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List

from prometheus_client import Counter

LLM_TOKENS = Counter(
    "bloodparser_llm_tokens_total",
    "Tokens consumed by LLM calls",
    ["model", "kind"],
)


@dataclass
class UsageStats:
    """Single LLM call statistics."""
    model: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    cost_estimate: float
    response_time: float
    timestamp: datetime = field(default_factory=datetime.now)


class CostTracker:
    """Track LLM costs and usage."""

    # USD per 1K tokens, matched by substring of the model ID
    PRICING = {
        "gemini-2.5-flash": {"input": 0.0003, "output": 0.0025},
        "gemini-2.5-pro": {"input": 0.00125, "output": 0.01},
        "haiku": {"input": 0.001, "output": 0.005},
        "sonnet": {"input": 0.003, "output": 0.015},
    }
    DEFAULT_PRICING = "gemini-2.5-flash"

    def __init__(self, max_history: int = 10000):
        """
        Args:
            max_history: Maximum number of stats entries to retain
        """
        self._stats: List[UsageStats] = []
        self._max_history = max_history

    def track(self, stats: UsageStats) -> None:
        self._stats.append(stats)
        LLM_TOKENS.labels(model=stats.model, kind="prompt").inc(stats.prompt_tokens)
        LLM_TOKENS.labels(model=stats.model, kind="completion").inc(stats.completion_tokens)

        if len(self._stats) > self._max_history:
            self._stats = self._stats[-self._max_history:]

    def record(
        self,
        model: str,
        prompt_tokens: int,
        completion_tokens: int,
        started_at: float,
    ) -> UsageStats:
        """Build, track and return stats for a finished call.

        Args:
            model: Provider model ID
            prompt_tokens: Input token count
            completion_tokens: Output token count
            started_at: time.time() when the call started
        """
        stats = UsageStats(
            model=model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
            cost_estimate=self.estimate_cost(model, prompt_tokens, completion_tokens),
            response_time=time.time() - started_at,
        )
        self.track(stats)
        return stats

    def estimate_cost(self, model: str, prompt_tokens: int, completion_tokens: int) -> float:
        """Estimate cost in USD for token counts."""
        pricing = self.PRICING[self.DEFAULT_PRICING]
        for key, prices in self.PRICING.items():
            if key in model.lower():
                pricing = prices
                break

        input_cost = (prompt_tokens / 1000) * pricing["input"]
        output_cost = (completion_tokens / 1000) * pricing["output"]
        return input_cost + output_cost

    def get_summary(self, hours: int = 24) -> Dict:
        """Cost summary for the last `hours` hours."""
        cutoff = datetime.now() - timedelta(hours=hours)
        recent = [s for s in self._stats if s.timestamp >= cutoff]

        if not recent:
            return {
                "total_cost": 0.0,
                "total_tokens": 0,
                "prompt_tokens": 0,
                "completion_tokens": 0,
                "request_count": 0,
                "avg_response_time": 0.0,
            }

        return {
            "total_cost": sum(s.cost_estimate for s in recent),
            "total_tokens": sum(s.total_tokens for s in recent),
            "prompt_tokens": sum(s.prompt_tokens for s in recent),
            "completion_tokens": sum(s.completion_tokens for s in recent),
            "request_count": len(recent),
            "avg_response_time": sum(s.response_time for s in recent) / len(recent),
        }

    def clear(self) -> None:
        self._stats = []
