from __future__ import annotations

"""
Metrics sink used by the quote path.

Usage:
  from shipping.utils.metrics import OtelMetrics, ITEMS_COUNT
  OtelMetrics().add(ITEMS_COUNT, 3)

Callers depend on the ``MetricsSink`` protocol so tests can pass a recording
sink instead of the OpenTelemetry one.
"""

from typing import Dict, Optional, Protocol

from opentelemetry import metrics

METER_NAME = "otel_demo.shipping.quote"
ITEMS_COUNT = "app.shipping.items_count"

Attributes = Optional[Dict[str, object]]


class MetricsSink(Protocol):
    def add(self, name: str, value: int, attributes: Attributes = None) -> None:
        ...


class OtelMetrics:
    """Forward counter increments to an OpenTelemetry meter.

    Counters are created lazily on first use and reused afterwards; the meter
    comes from whatever provider ``setup_meter`` installed (no-op otherwise).
    """

    def __init__(self, meter_name: str = METER_NAME) -> None:
        self._meter = metrics.get_meter(meter_name)
        self._counters: Dict[str, metrics.Counter] = {}

    def _counter(self, name: str) -> metrics.Counter:
        counter = self._counters.get(name)
        if counter is None:
            counter = self._meter.create_counter(name)
            self._counters[name] = counter
        return counter

    def add(self, name: str, value: int, attributes: Attributes = None) -> None:
        if value < 0:
            raise ValueError(f"counter {name} cannot be decremented (got {value})")
        self._counter(name).add(int(value), attributes=attributes or {})


_default_sink: Optional[OtelMetrics] = None


def get_metrics() -> OtelMetrics:
    """Return the process-wide OpenTelemetry sink."""
    global _default_sink
    if _default_sink is None:
        _default_sink = OtelMetrics()
    return _default_sink
