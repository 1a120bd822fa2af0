from __future__ import annotations

import json
from typing import Callable, List

import httpx

from shipping.core.config import Settings
from shipping.services.pricing_client import PricingClient

ORACLE_ADDR = "http://quote.test:8090"


class RecordingMetrics:
    """Metrics sink that keeps every increment for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, int, dict | None]] = []

    def add(self, name: str, value: int, attributes: dict | None = None) -> None:
        self.calls.append((name, value, attributes))


class BrokenStream(httpx.AsyncByteStream):
    """Response body that fails half-way through reading."""

    async def __aiter__(self):
        yield b"12"
        raise httpx.ReadError("connection reset while reading body")


def oracle_settings(**overrides) -> Settings:
    return Settings(_env_file=None, QUOTE_ADDR=overrides.pop("QUOTE_ADDR", ORACLE_ADDR), **overrides)


def text_oracle(
    body: str | bytes,
    status_code: int = 200,
    seen: List[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """Oracle stub answering every request with ``body``."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        content = body.encode("utf-8") if isinstance(body, str) else body
        return httpx.Response(status_code, content=content, headers={"Content-Type": "text/plain"})

    return httpx.MockTransport(handler)


def failing_oracle(exc_factory: Callable[[httpx.Request], Exception]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    return httpx.MockTransport(handler)


def broken_body_oracle() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=BrokenStream())

    return httpx.MockTransport(handler)


def make_client(transport: httpx.MockTransport, **overrides) -> PricingClient:
    return PricingClient(oracle_settings(**overrides), transport=transport)


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content.decode("utf-8"))
