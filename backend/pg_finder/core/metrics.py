"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Ledger metrics
booking_transitions = Counter(
    'booking_transitions_total',
    'Booking status transition requests',
    ['from_status', 'to_status', 'result']  # applied, noop, invalid, occupied, unauthorized, store_error
)

booking_transition_latency = Histogram(
    'booking_transition_latency_seconds',
    'Latency of a booking transition including bed reconciliation',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

booking_requests = Counter(
    'booking_requests_total',
    'Tenant booking submissions',
    ['result']  # created, rejected
)

bed_selections = Counter(
    'bed_selections_total',
    'Bed availability selections',
    ['policy', 'filled']  # filled: full, partial
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

# Store metrics
store_errors = Counter(
    'store_errors_total',
    'Persistence calls that failed and were surfaced as StoreUnavailable'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_transition(from_status: str, to_status: str, result: str):
    """Record a transition outcome. Result: applied, noop, invalid, occupied, unauthorized"""
    booking_transitions.labels(from_status=from_status, to_status=to_status, result=result).inc()


def record_booking_request(created: bool):
    """Record a tenant booking submission."""
    booking_requests.labels(result="created" if created else "rejected").inc()


def record_bed_selection(policy: str, full: bool):
    bed_selections.labels(policy=policy, filled="full" if full else "partial").inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
