"""OpenTelemetry distributed tracing configuration.

Synthesis runs inside spans so slow stacks show up next to the deploy
pipeline's other traces. Until setup_tracing() is called the tracer is a no-op.
"""

import os
from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor


def setup_tracing(
    service_name: str = "tiered_vpc_cdk",
    otlp_endpoint: Optional[str] = None,
    service_version: str = "0.1.0",
) -> TracerProvider:
    """Configure OpenTelemetry tracing.

    Args:
        service_name: Name of the service for tracing
        otlp_endpoint: OTLP collector endpoint (defaults to env var OTEL_EXPORTER_OTLP_ENDPOINT)
        service_version: Version reported on every span

    Returns:
        The installed tracer provider

    Example:
        >>> from tiered_vpc_cdk.tracing import setup_tracing
        >>> setup_tracing(service_name="tiered-vpc-synth")
    """
    endpoint = otlp_endpoint or os.getenv(
        "OTEL_EXPORTER_OTLP_ENDPOINT",
        "http://localhost:4317",
    )

    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": service_version,
            "deployment.environment": os.getenv("ENVIRONMENT", "development"),
        }
    )

    tracer_provider = TracerProvider(resource=resource)

    otlp_exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)
    span_processor = BatchSpanProcessor(otlp_exporter)
    tracer_provider.add_span_processor(span_processor)

    trace.set_tracer_provider(tracer_provider)
    return tracer_provider


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer instance.

    Args:
        name: Tracer name (typically module name)

    Returns:
        Tracer: OpenTelemetry tracer instance

    Example:
        >>> from tiered_vpc_cdk.tracing import get_tracer
        >>> tracer = get_tracer(__name__)
        >>> with tracer.start_as_current_span("build_tiered_vpc"):
        ...     pass
    """
    return trace.get_tracer(name)


__all__ = [
    "setup_tracing",
    "get_tracer",
]
