"""
Prometheus метрики сервера.

Метрики живут в собственном реестре, который отдается ресурсом
metrics://prometheus.
"""
from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

app_registry = CollectorRegistry()

TOOL_CALLS_TOTAL = Counter(
    "tool_calls_total",
    "Total number of tool calls",
    ["tool_name", "status"],
    registry=app_registry
)

TOOL_CALL_DURATION = Histogram(
    "tool_call_duration_seconds",
    "Duration of tool calls",
    ["tool_name"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
    registry=app_registry
)

FIGMA_API_CALLS = Counter(
    "figma_api_calls_total",
    "Total number of Figma API calls by endpoint and HTTP status",
    ["endpoint", "status"],
    registry=app_registry
)


def get_metrics() -> bytes:
    """Returns metrics Prometheus."""
    return generate_latest(app_registry)
