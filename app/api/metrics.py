"""Prometheus metrics shared by the API routes."""
from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "bloodparser_api_requests_total", "Total API requests", [
        "method", "endpoint", "status"])
REQUEST_DURATION = Histogram(
    "bloodparser_api_request_duration_seconds",
    "Request duration")
ANALYSES = Counter(
    "bloodparser_analyses_total", "Report analyses", [
        "pipeline", "outcome"])
NORMALIZER_FALLBACKS = Counter(
    "bloodparser_normalizer_fallbacks_total",
    "Comparisons built with raw test names after a normalization failure")
EXPORTS = Counter(
    "bloodparser_exports_total", "Exported documents", [
        "kind", "format", "outcome"])
