"""
Prometheus metrics for the land registry service.

Tracks repository operations, compensating deletes and HTTP traffic.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "land_registry_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

# Repository metrics
record_operations_total = Counter(
    "land_registry_record_operations_total",
    "Total record operations",
    ["kind", "operation", "outcome"],
)

record_operation_duration_seconds = Histogram(
    "land_registry_record_operation_duration_seconds",
    "Record operation duration in seconds",
    ["kind", "operation"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Compensation metrics
compensations_total = Counter(
    "land_registry_compensations_total",
    "Compensating document deletes after failed inserts",
    ["kind", "outcome"],
)


def track_operation(kind: str, operation: str, outcome: str, duration: float) -> None:
    """Record the outcome and latency of one repository operation."""
    record_operations_total.labels(kind=kind, operation=operation, outcome=outcome).inc()
    record_operation_duration_seconds.labels(kind=kind, operation=operation).observe(
        duration
    )


def track_compensation(kind: str, outcome: str) -> None:
    compensations_total.labels(kind=kind, outcome=outcome).inc()


def track_request(method: str, endpoint: str, status: int) -> None:
    http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
