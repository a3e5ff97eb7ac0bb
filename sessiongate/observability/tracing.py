"""
OpenTelemetry tracing setup.

Provides the global tracer for business code:
    from sessiongate.observability import tracer
    with tracer.start_as_current_span("auth.login"):
        ...

Console export is enabled only with SESSIONGATE_TRACE_CONSOLE=1.
"""

import os

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

_resource = Resource.create({"service.name": "sessiongate", "service.version": "0.1.0"})

_provider = TracerProvider(resource=_resource)

if os.getenv("SESSIONGATE_TRACE_CONSOLE", "0") == "1":
    _provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

trace.set_tracer_provider(_provider)

tracer = trace.get_tracer("sessiongate", "0.1.0")
