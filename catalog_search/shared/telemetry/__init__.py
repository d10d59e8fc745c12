"""Shared telemetry: logging setup and OpenTelemetry config."""

from catalog_search.shared.telemetry.logging import setup_logging
from catalog_search.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    get_tracer,
    pipeline_span,
    set_telemetry,
)

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "get_tracer",
    "pipeline_span",
]
