"""Observability helpers for logging, tracing and metrics.

Knobs (environment first, then Settings / ``.env``):

- LOG_LEVEL (default: INFO): root logger level
- ENABLE_CONSOLE_TRACING (default: 0): emit OTel spans and metrics to console
- OTEL_TRACES_SAMPLER_RATIO (default: 1.0): trace sampling ratio (0.0-1.0)
- OTEL_EXCLUDED_URLS: comma-separated URL patterns to exclude from tracing
"""

from __future__ import annotations

import logging
import os

from opentelemetry import metrics, trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from pythonjsonlogger import jsonlogger

from .config import settings


def _parse_bool(value: str | bool | None, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def get_trace_context() -> tuple[str, str]:
    """Return ``(trace_id, span_id)`` of the active span as lowercase hex."""
    span_context = trace.get_current_span().get_span_context()
    return trace.format_trace_id(span_context.trace_id), trace.format_span_id(span_context.span_id)


class TraceContextFilter(logging.Filter):
    """Stamp the active trace/span ids on every record so JSON logs correlate with spans."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "trace_id", None):
            trace_id, span_id = get_trace_context()
            record.trace_id = trace_id
            record.span_id = span_id
        return True


def setup_logging() -> None:
    """Configure structured JSON logging."""
    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter("%(levelname)s %(name)s %(message)s"))
    handler.addFilter(TraceContextFilter())
    root = logging.getLogger()
    root.handlers = [handler]
    # Prefer process env, then Settings fallback (loaded from .env)
    level_name = (os.getenv("LOG_LEVEL") or settings.LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    root.setLevel(level)
    # Uvicorn's access log duplicates the FastAPI spans; warnings and above only
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))


def _resource() -> Resource:
    return Resource(attributes={"service.name": settings.SERVICE_NAME})


def setup_meter() -> None:
    """Install an OpenTelemetry MeterProvider; console export is optional."""
    enable_console = _parse_bool(os.getenv("ENABLE_CONSOLE_TRACING"), settings.ENABLE_CONSOLE_TRACING)
    readers = [PeriodicExportingMetricReader(ConsoleMetricExporter())] if enable_console else []
    metrics.set_meter_provider(MeterProvider(resource=_resource(), metric_readers=readers))


def setup_tracer(app) -> None:
    """Attach an OpenTelemetry tracer to the FastAPI app."""
    ratio_env = os.getenv("OTEL_TRACES_SAMPLER_RATIO")
    try:
        ratio = float(ratio_env) if ratio_env is not None else settings.OTEL_TRACES_SAMPLER_RATIO
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring invalid OTEL_TRACES_SAMPLER_RATIO=%r", ratio_env)
        ratio = settings.OTEL_TRACES_SAMPLER_RATIO
    ratio = 0.0 if ratio < 0 else (1.0 if ratio > 1 else ratio)

    provider = TracerProvider(
        resource=_resource(),
        sampler=ParentBased(TraceIdRatioBased(ratio)),
    )

    enable_console = _parse_bool(os.getenv("ENABLE_CONSOLE_TRACING"), settings.ENABLE_CONSOLE_TRACING)
    if enable_console:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)

    excluded = [s.strip() for s in os.getenv("OTEL_EXCLUDED_URLS", "").split(",") if s.strip()]
    excluded_urls = ",".join(dict.fromkeys(excluded)) if excluded else None
    FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)
