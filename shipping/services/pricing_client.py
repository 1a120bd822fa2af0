"""HTTP client for the external pricing oracle.

``PricingClient.request_price(count)`` makes exactly one ``POST
<QUOTE_ADDR>/getquote`` call carrying ``{"numberOfItems": count}`` and parses
the plain-text body into a float. Every failure is reported as a subclass of
``PricingError``; nothing is retried or cached.
"""

from __future__ import annotations

import logging
import math
import re
import time
from typing import Any, Dict, Optional

import httpx
from opentelemetry import trace
from opentelemetry.propagate import inject

from ..core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

_PRICE_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class PricingError(Exception):
    """Base class for pricing oracle failures."""


class PricingTransportError(PricingError):
    """The oracle could not be reached (connect error, timeout, DNS...)."""


class OracleRejectedError(PricingError):
    """The oracle answered with a non-success status code."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Quote service returned status: {status_code}")
        self.status_code = status_code


class BadResponseError(PricingError):
    """The response body could not be read or is not UTF-8 text."""


class InvalidPriceFormatError(PricingError):
    """The response text is not a finite number."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid quote format '{text}'")
        self.text = text


class PricingClient:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or default_settings
        self._transport = transport

    @property
    def url(self) -> str:
        return self.settings.quote_url

    async def request_price(self, count: int) -> float:
        """Return the oracle's raw price for ``count`` items."""
        start = time.perf_counter()
        url = self.url
        base: Dict[str, Any] = {
            "service": "shipping",
            "operation": "request_quote",
            "item_count": count,
            "quote_service_addr": url,
        }

        def _ctx(**fields: Any) -> Dict[str, Any]:
            return {**base, "duration_ms": round((time.perf_counter() - start) * 1000.0, 1), **fields}

        with tracer.start_as_current_span(
            "shipping.request_quote",
            attributes={"app.shipping.items.count": count},
        ):
            logger.info("Requesting quote from external service", extra=base)
            if count == 0:
                logger.warning("Requesting quote for zero items", extra=base)

            headers: Dict[str, str] = {}
            inject(headers)

            try:
                async with httpx.AsyncClient(
                    timeout=self.settings.QUOTE_TIMEOUT_SECONDS,
                    transport=self._transport,
                ) as client:
                    async with client.stream(
                        "POST", url, json={"numberOfItems": count}, headers=headers
                    ) as response:
                        if not response.is_success:
                            logger.error(
                                "Quote service returned error status",
                                extra=_ctx(status_code=response.status_code),
                            )
                            raise OracleRejectedError(response.status_code)
                        try:
                            body = await response.aread()
                        except httpx.HTTPError as exc:
                            logger.error(
                                "Failed to read response body from quote service",
                                extra=_ctx(error=str(exc)),
                            )
                            raise BadResponseError(f"Failed to read response body: {exc}") from exc
            except (httpx.RequestError, httpx.InvalidURL) as exc:
                logger.error(
                    "Failed to send request to quote service",
                    extra=_ctx(error=str(exc)),
                )
                raise PricingTransportError(f"HTTP request failed: {exc}") from exc

            try:
                text = body.decode("utf-8").strip()
            except UnicodeDecodeError as exc:
                logger.error("Quote service response is not valid UTF-8", extra=_ctx(error=str(exc)))
                raise BadResponseError("Quote service response is not valid UTF-8") from exc

            price = _parse_price(text)
            if price is None:
                logger.error(
                    "Failed to parse quote value as number",
                    extra=_ctx(response_text=text),
                )
                raise InvalidPriceFormatError(text)

            if price < 0:
                logger.warning("Received negative quote value", extra=_ctx(quote_value=price))

            logger.info(
                "Successfully received quote from external service",
                extra=_ctx(quote_value=price),
            )
            return price


def _parse_price(text: str) -> Optional[float]:
    # ASCII decimal only: float() would also take "1_000" and non-ASCII digits.
    if not _PRICE_RE.fullmatch(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None
