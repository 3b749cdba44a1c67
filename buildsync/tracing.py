"""
OpenTelemetry tracing configuration.

Exporter is selected via the ``OTEL_EXPORTER`` environment variable:

- ``none``     — tracing disabled (default; keeps CLI output clean)
- ``console``  — prints spans to stdout
- ``otlp``     — sends to any OTLP-compatible backend (Jaeger, Datadog, Grafana Cloud)

Additional env vars for OTLP:
- ``OTEL_EXPORTER_OTLP_ENDPOINT`` — e.g. ``http://jaeger:4317``
- ``OTEL_SERVICE_NAME``           — defaults to ``build-sync``

Usage::

    from buildsync.tracing import get_tracer
    tracer = get_tracer(__name__)

    with tracer.start_as_current_span("sync.upload") as span:
        span.set_attribute("artifact.name", "app.ipa")
        ...
"""
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.resources import Resource

from buildsync.config import settings


def _init_tracing() -> None:
    """Initialize the tracer provider with the configured exporter."""
    exporter_type = settings.otel_exporter.lower()

    resource = Resource.create({"service.name": settings.otel_service_name})
    provider = TracerProvider(resource=resource)

    if exporter_type == "none":
        pass  # No exporter — spans are created but dropped
    elif exporter_type == "otlp":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.sdk.trace.export import BatchSpanProcessor

        exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)
        provider.add_span_processor(BatchSpanProcessor(exporter))
    else:
        from opentelemetry.sdk.trace.export import (
            SimpleSpanProcessor,
            ConsoleSpanExporter,
        )

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)


def get_tracer(name: str) -> trace.Tracer:
    """Return a tracer for *name*."""
    return trace.get_tracer(name)


# Auto-initialize on import
_init_tracing()
