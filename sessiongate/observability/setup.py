"""
One-call observability setup: middleware + /metrics endpoint + app metadata.
"""

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from sessiongate.observability.middleware import ObservabilityMiddleware
from sessiongate.observability.metrics import metrics
from sessiongate.log import get_logger

logger = get_logger(__name__)


def setup_observability(app: FastAPI) -> None:
    """
    Mount the observability components on a FastAPI app.

    Call after routers are registered and before startup.
    """
    app.add_middleware(ObservabilityMiddleware)

    @app.get("/metrics", include_in_schema=False)
    def prometheus_metrics():
        return PlainTextResponse(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    metrics.app_info.info({"version": "0.1.0", "service": "sessiongate"})

    logger.info("[observability] middleware + /metrics registered")
