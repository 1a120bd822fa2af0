from __future__ import annotations

import logging
from typing import Optional

from opentelemetry import trace

from ..utils.metrics import ITEMS_COUNT, MetricsSink, get_metrics
from .money import Quote, normalize
from .pricing_client import PricingClient, PricingError

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class QuoteUnavailableError(Exception):
    """Raised whenever a quote cannot be produced, whatever the pricing cause."""


class QuoteService:
    """Turn an item count into a shipping Quote.

    Pricing failures are collapsed into ``QuoteUnavailableError``: callers only
    distinguish success from failure, the detail stays in the logs and in
    ``__cause__``.
    """

    def __init__(self, pricing_client: PricingClient, metrics: Optional[MetricsSink] = None) -> None:
        self.pricing_client = pricing_client
        self.metrics = metrics if metrics is not None else get_metrics()

    async def quote_for_count(self, count: int) -> Quote:
        ctx = {"service": "shipping", "operation": "create_quote_from_count", "item_count": count}
        with tracer.start_as_current_span(
            "shipping.create_quote_from_count",
            attributes={"app.shipping.items.count": count},
        ) as span:
            logger.info("Starting quote calculation for items", extra=ctx)
            try:
                raw_price = await self.pricing_client.request_price(count)
            except PricingError as exc:
                logger.error(
                    "Failed to get quote from external service",
                    extra={**ctx, "error": str(exc), "error_type": type(exc).__name__},
                )
                raise QuoteUnavailableError("Quote service unavailable") from exc

            self.metrics.add(ITEMS_COUNT, count)

            quote = normalize(raw_price)
            total = str(quote)
            span.add_event(
                "Quote Calculated",
                attributes={
                    "app.shipping.cost.total": total,
                    "app.shipping.cost.units": quote.units,
                    "app.shipping.cost.subunits": quote.subunits,
                    "app.shipping.items.count": count,
                },
            )
            span.set_attribute("app.shipping.cost.total", total)
            logger.info(
                "Quote calculation completed successfully",
                extra={
                    **ctx,
                    "raw_quote_value": raw_price,
                    "quote_units": quote.units,
                    "quote_subunits": quote.subunits,
                    "quote_total": total,
                },
            )
            return quote
