"""Cross-report test reconciliation."""
from app.core.reconciliation.engine import (
    ReconciliationEngine,
    collect_names,
    resolve_mapping,
)
from app.core.reconciliation.trends import compute_trend

__all__ = [
    "ReconciliationEngine",
    "collect_names",
    "resolve_mapping",
    "compute_trend",
]
