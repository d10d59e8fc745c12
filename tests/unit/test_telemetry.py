"""Tracing helpers work without a configured provider."""

from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from catalog_search.shared.telemetry.telemetry import _build_exporter, pipeline_span


def test_pipeline_span_without_provider() -> None:
    with pipeline_span("score", candidates=3) as span:
        span.set_attribute("search.extra", 1)


def test_build_exporter() -> None:
    """Unknown types and OTLP without an endpoint fall back to the console exporter."""
    assert _build_exporter("none", None) is None
    assert isinstance(_build_exporter("console", None), ConsoleSpanExporter)
    assert isinstance(_build_exporter("otlp", None), ConsoleSpanExporter)
    assert isinstance(_build_exporter("zipkin", None), ConsoleSpanExporter)
    assert isinstance(_build_exporter("otlp", "http://localhost:4317"), OTLPSpanExporter)
