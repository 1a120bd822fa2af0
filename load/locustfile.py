"""
Locust load script for the shipping service.

Simulates checkout traffic:
- Quote a random cart via POST /get-quote (most frequent)
- Ship an order via POST /ship-order once a quote succeeded

Configure with env vars or Locust UI:
- HOST: pass via `--host http://localhost:50051` (recommended)
- SHIPPING_MAX_ITEMS: upper bound for quantities per cart line (default 5)
- SHIPPING_ZIP_CODES: CSV of zip codes used for cart addresses

Run:
  locust -f load/locustfile.py --host http://localhost:50051
"""

from __future__ import annotations

import logging
import os
import random
from typing import Dict, List, Optional

from locust import HttpUser, between, events, task


# --- Config -------------------------------------------------------------------

DEFAULT_ZIP_CODES = ["94043", "10001", "60601", "73301"]


def _load_zip_codes() -> List[str]:
    raw = os.getenv("SHIPPING_ZIP_CODES", "").strip()
    codes = [piece.strip() for piece in raw.split(",") if piece.strip()]
    return codes or DEFAULT_ZIP_CODES


ZIP_CODES = _load_zip_codes()
MAX_ITEMS = int(os.getenv("SHIPPING_MAX_ITEMS", "5") or 5)


# --- Helpers ------------------------------------------------------------------

def _safe_json(resp) -> Dict:
    try:
        return resp.json()
    except Exception:
        return {}


def _random_cart() -> Dict:
    lines = random.randint(0, 4)
    return {
        "items": [
            {"productId": f"SKU-{random.randint(1, 50):03d}", "quantity": random.randint(1, MAX_ITEMS)}
            for _ in range(lines)
        ],
        "address": {"zipCode": random.choice(ZIP_CODES)},
    }


# --- The User Model -----------------------------------------------------------

class CheckoutUser(HttpUser):
    wait_time = between(1, 3)

    last_quote: Optional[Dict] = None

    @task(5)
    def get_quote(self):
        with self.client.post("/get-quote", json=_random_cart(), name="/get-quote", catch_response=True) as r:
            if r.status_code != 200:
                self.last_quote = None
                r.failure(f"quote failed: {r.status_code} {_safe_json(r).get('error')}")
                return
            cost = _safe_json(r).get("costUsd")
            if not cost or cost.get("currencyCode") != "USD":
                r.failure("quote response missing costUsd")
                return
            self.last_quote = cost

    @task(2)
    def ship_order(self):
        if self.last_quote is None:
            return
        with self.client.post("/ship-order", json={}, name="/ship-order", catch_response=True) as r:
            if not _safe_json(r).get("trackingId"):
                r.failure("ship-order returned no trackingId")
                return
            self.last_quote = None


# --- Optional event hooks -----------------------------------------------------

@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    logging.getLogger("locust").info("Starting shipping load test (zip codes: %s)", ", ".join(ZIP_CODES))


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    logging.getLogger("locust").info("Test finished")
