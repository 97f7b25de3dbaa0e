"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Authentication metrics
login_attempts = Counter(
    'login_attempts_total',
    'Total login attempts',
    ['result']  # success, failure
)

# Stock metrics
stock_updates = Counter(
    'ticket_stock_updates_total',
    'Conditional stock updates on tickets',
    ['result']  # success, insufficient, not_found
)

stock_update_latency = Histogram(
    'ticket_stock_update_latency_seconds',
    'Latency of the conditional stock UPDATE',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Storefront metrics
cart_writes = Counter(
    'cart_writes_total',
    'Cart replace operations',
    ['result']  # success, rejected
)

checkouts_created = Counter(
    'checkouts_created_total',
    'Checkout snapshots created'
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
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
def record_login(success: bool):
    result = "success" if success else "failure"
    login_attempts.labels(result=result).inc()

def record_stock_update(result: str):
    """Record stock update. Result: success, insufficient, not_found"""
    stock_updates.labels(result=result).inc()

def record_cart_write(success: bool):
    result = "success" if success else "rejected"
    cart_writes.labels(result=result).inc()

def record_checkout():
    checkouts_created.inc()

def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
