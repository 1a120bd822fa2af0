from fastapi import Depends

from ..core.config import settings
from ..services.pricing_client import PricingClient
from ..services.shipping_quote import QuoteService
from ..utils.metrics import get_metrics


def get_pricing_client() -> PricingClient:
    return PricingClient(settings)


def get_quote_service(pricing_client: PricingClient = Depends(get_pricing_client)) -> QuoteService:
    return QuoteService(pricing_client, metrics=get_metrics())
