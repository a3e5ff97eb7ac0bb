"""
Prometheus metrics definitions.

All custom metrics live here; business modules use
`from sessiongate.observability import metrics`.
"""

from prometheus_client import Counter, Histogram, Info


class _Metrics:
    """Holds every Prometheus metric of the service"""

    def __init__(self):
        # ── HTTP requests ──
        self.http_requests_total = Counter(
            "sessiongate_http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
        )
        self.http_request_duration_seconds = Histogram(
            "sessiongate_http_request_duration_seconds",
            "HTTP request latency (seconds)",
            ["method", "endpoint"],
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
        )

        # ── Session lifecycle ──
        self.auth_events_total = Counter(
            "sessiongate_auth_events_total",
            "Session operations by outcome",
            ["operation", "outcome"],  # operation: register / login / refresh / logout
        )
        self.request_auth_total = Counter(
            "sessiongate_request_auth_total",
            "Per-request credential verification outcomes",
            ["outcome"],  # anonymous / authenticated / <failure>
        )

        # ── System ──
        self.app_info = Info(
            "sessiongate_app",
            "Application metadata",
        )


# singleton
metrics = _Metrics()
