"""
Prometheus metrics for the ordering app.

HTTP request metrics are collected by request hooks; menu and cart counters
are bumped by the services through ``record_*``. The /metrics endpoint is
unauthenticated: restrict it at the network level.
"""
from flask import Blueprint, Response, request, g
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CollectorRegistry, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess, REGISTRY
import time
import os

metrics_bp = Blueprint('metrics', __name__)

# Gunicorn workers share metrics through PROMETHEUS_MULTIPROC_DIR
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None
_metric_registry = None if MULTIPROCESS_MODE else REGISTRY

http_requests_total = Counter(
    'restaurant_http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'http_status'],
    registry=_metric_registry
)

http_request_duration_seconds = Histogram(
    'restaurant_http_request_duration_seconds',
    'HTTP request latency in seconds',
    ['method', 'endpoint'],
    registry=_metric_registry,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

http_requests_in_flight = Gauge(
    'restaurant_http_requests_in_flight',
    'Number of HTTP requests currently being processed',
    registry=_metric_registry
)

menu_mutations_total = Counter(
    'restaurant_menu_mutations_total',
    'Menu and category writes',
    ['operation'],
    registry=_metric_registry
)

cart_updates_total = Counter(
    'restaurant_cart_updates_total',
    'Cart quantity changes',
    ['direction'],
    registry=_metric_registry
)


def record_menu_mutation(operation: str) -> None:
    menu_mutations_total.labels(operation=operation).inc()


def record_cart_update(delta: int) -> None:
    cart_updates_total.labels(direction='increment' if delta > 0 else 'decrement').inc()


def setup_metrics_instrumentation(app):
    """Register before/after request hooks that feed the HTTP metrics."""

    @app.before_request
    def before_request_metrics():
        g._metrics_start_time = time.time()
        http_requests_in_flight.inc()

    @app.after_request
    def after_request_metrics(response):
        try:
            started = g.pop('_metrics_start_time', None)
            if started is not None:
                endpoint = request.endpoint or 'unknown'
                http_request_duration_seconds.labels(
                    method=request.method,
                    endpoint=endpoint
                ).observe(time.time() - started)
                http_requests_total.labels(
                    method=request.method,
                    endpoint=endpoint,
                    http_status=response.status_code
                ).inc()
                http_requests_in_flight.dec()
        except Exception as e:
            # Metrics never break the request
            app.logger.warning(f"Failed to record metrics: {e}")
        return response


@metrics_bp.route('/metrics')
def metrics():
    """Prometheus scrape endpoint."""
    if MULTIPROCESS_MODE:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        data = generate_latest(registry)
    else:
        data = generate_latest(REGISTRY)
    return Response(data, mimetype=CONTENT_TYPE_LATEST)
