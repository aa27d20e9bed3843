"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, invalid_quantity, package_not_found, insufficient_capacity
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Booking creation latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

booking_cancellations = Counter(
    'booking_cancellations_total',
    'Bookings cancelled with seats released'
)

# Inventory metrics
seat_reservation_conflicts = Counter(
    'seat_reservation_conflicts_total',
    'Conditional seat decrements that matched no row'
)

# Checkout metrics
checkout_attempts = Counter(
    'checkout_attempts_total',
    'Cart checkouts by outcome',
    ['result']  # success, empty_cart, preflight_rejected, partial_failure, rolled_back
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

# External API metrics
external_api_calls = Counter(
    'external_api_calls_total',
    'Calls to third-party enrichment APIs',
    ['adapter', 'result']  # exchange_rates/weather/holidays/countries, ok/unavailable
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Convenience functions for instrumentation
def record_booking_attempt(status: str):
    """Record booking attempt by outcome label."""
    booking_attempts.labels(status=status).inc()


def record_checkout(result: str):
    checkout_attempts.labels(result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()


def record_external_call(adapter: str, ok: bool):
    external_api_calls.labels(adapter=adapter, result="ok" if ok else "unavailable").inc()
