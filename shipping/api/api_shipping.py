from fastapi import APIRouter, Depends
from typing import Optional
import logging

from opentelemetry import trace

from ..core.observability import get_trace_context
from ..schemas.shipping import (
    GetQuoteRequest,
    GetQuoteResponse,
    MoneyRead,
    ShipOrderRequest,
    ShipOrderResponse,
)
from ..services.shipping_quote import QuoteService, QuoteUnavailableError
from ..services.tracking import new_tracking_id
from ..utils.errors import internal_error_response
from .dependencies import get_quote_service

router = APIRouter(tags=["shipping"])
logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@router.post("/get-quote", response_model=GetQuoteResponse)
async def get_quote(
    payload: GetQuoteRequest,
    quote_service: QuoteService = Depends(get_quote_service),
):
    """Return the shipping cost for the cart's total item count."""
    with tracer.start_as_current_span("shipping.get_quote"):
        item_count = payload.item_count
        trace_id, span_id = get_trace_context()
        ctx = {
            "service": "shipping",
            "operation": "get_quote",
            "item_count": item_count,
            "trace_id": trace_id,
            "span_id": span_id,
        }
        logger.info(
            "Processing shipping quote request",
            extra={
                **ctx,
                "has_address": payload.address is not None,
                "zip_code": payload.address.zip_code if payload.address else "none",
            },
        )

        try:
            quote = await quote_service.quote_for_count(item_count)
        except QuoteUnavailableError:
            return internal_error_response("Failed to calculate shipping quote", trace_id)

        logger.info(
            "Successfully calculated shipping quote",
            extra={**ctx, "quote_dollars": quote.units, "quote_cents": quote.subunits},
        )

        money = quote.to_money()
        logger.info(
            "Sending shipping quote response",
            extra={
                **ctx,
                "response_units": money.units,
                "response_nanos": money.nanos,
                "currency": money.currency_code,
            },
        )
        return GetQuoteResponse(
            cost_usd=MoneyRead(
                currency_code=money.currency_code,
                units=money.units,
                nanos=money.nanos,
            )
        )


@router.post("/ship-order", response_model=ShipOrderResponse)
async def ship_order(payload: Optional[ShipOrderRequest] = None):
    """Register a shipment and hand back its tracking id."""
    with tracer.start_as_current_span("shipping.ship_order"):
        trace_id, span_id = get_trace_context()
        ctx = {"service": "shipping", "operation": "ship_order", "trace_id": trace_id, "span_id": span_id}
        logger.info("Processing ship order request", extra=ctx)

        tracking_id = new_tracking_id()

        logger.info("Order shipped successfully with tracking ID", extra={**ctx, "tracking_id": tracking_id})
        return ShipOrderResponse(tracking_id=tracking_id)
