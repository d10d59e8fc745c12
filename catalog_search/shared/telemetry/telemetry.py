"""OpenTelemetry tracing for the search service.

One tracer provider per process, installed by the lifespan when telemetry is
enabled. Request spans come from the FastAPI instrumentation; the search
pipeline adds child spans per stage with pipeline_span().
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

from catalog_search.core.config import Settings

logger = logging.getLogger(__name__)

PIPELINE_TRACER = "catalog_search.pipeline"
# Health probes would drown the search traces.
EXCLUDED_URLS = "/api/v1/health"


def _build_exporter(exporter_type: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Exporter for the configured type; None means spans are sampled but not shipped."""
    if exporter_type == "none":
        return None
    if exporter_type == "otlp":
        if not otlp_endpoint:
            logger.warning("OTLP exporter selected without an endpoint, using console")
            return ConsoleSpanExporter()
        return OTLPSpanExporter(
            endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
        )
    if exporter_type != "console":
        logger.warning("Unknown exporter type '%s', using console", exporter_type)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider lifecycle: setup, FastAPI instrumentation, shutdown."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.exporter_type = exporter_type
        self.otlp_endpoint = otlp_endpoint
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    def setup(self) -> TracerProvider | None:
        """Install the global tracer provider. Returns None if setup failed."""
        resource = Resource(
            attributes={
                SERVICE_NAME: self.service_name,
                SERVICE_VERSION: self.service_version,
                "deployment.environment": self.environment,
            }
        )
        try:
            provider = TracerProvider(
                resource=resource, sampler=ParentBased(TraceIdRatioBased(self.sample_rate))
            )
            exporter = _build_exporter(self.exporter_type, self.otlp_endpoint)
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception as e:
            logger.exception("Failed to initialize telemetry: %s", e)
            return None
        self.tracer_provider = provider
        logger.info(
            "Tracing enabled: service=%s exporter=%s sample_rate=%s",
            self.service_name,
            self.exporter_type,
            self.sample_rate,
        )
        return provider

    def instrument_fastapi(self, app: FastAPI) -> None:
        if self.tracer_provider is None:
            return
        try:
            FastAPIInstrumentor.instrument_app(
                app, tracer_provider=self.tracer_provider, excluded_urls=EXCLUDED_URLS
            )
        except Exception as e:
            logger.exception("Failed to instrument FastAPI: %s", e)

    def shutdown(self) -> None:
        """Flush pending spans and release the provider."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception as e:
            logger.exception("Error during telemetry shutdown: %s", e)
        self.tracer_provider = None


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry


def get_tracer(name: str = PIPELINE_TRACER) -> trace.Tracer:
    """Tracer from the global provider; the no-op tracer until setup() has run."""
    return trace.get_tracer(name)


@contextmanager
def pipeline_span(stage: str, **attributes: str | int | float | bool) -> Iterator[trace.Span]:
    """Child span named search.<stage> for one pipeline stage.

    Attributes are prefixed with "search." so they group under the stage in
    trace viewers.
    """
    with get_tracer().start_as_current_span(f"search.{stage}") as span:
        for key, value in attributes.items():
            span.set_attribute(f"search.{key}", value)
        yield span
