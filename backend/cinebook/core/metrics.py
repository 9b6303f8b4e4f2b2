"""
Metrics instrumentation for observability.
Prometheus-compatible metrics are served from a side port so the public
API surface only carries the booking endpoints.
"""

from prometheus_client import Counter, Histogram, start_http_server

from cinebook.core.logging import get_logger

logger = get_logger(__name__)

signin_attempts = Counter(
    'signin_attempts_total',
    'Total sign-in attempts',
    ['result']  # success, registered, rejected, error
)

booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, conflict, error
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Booking transaction latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

cancellation_attempts = Counter(
    'cancellation_attempts_total',
    'Total cancellation attempts',
    ['status']  # success, not_found, error
)


def start_metrics_server(port: int) -> None:
    """Expose /metrics on its own port via prometheus_client's HTTP server."""
    start_http_server(port)
    logger.info("metrics_server_started", port=port)


def record_signin(result: str):
    """Record sign-in outcome. Result: success, registered, rejected, error"""
    signin_attempts.labels(result=result).inc()


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, conflict, error"""
    booking_attempts.labels(status=status).inc()


def record_cancellation(status: str):
    cancellation_attempts.labels(status=status).inc()
