"""
Observability: OpenTelemetry tracing + Prometheus metrics.

Usage:
    from sessiongate.observability import setup_observability, metrics, tracer

    setup_observability(app)

    metrics.auth_events_total.labels(operation="login", outcome="success").inc()
"""

from sessiongate.observability.setup import setup_observability
from sessiongate.observability.metrics import metrics
from sessiongate.observability.tracing import tracer

__all__ = ["setup_observability", "metrics", "tracer"]
