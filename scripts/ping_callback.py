#!/usr/bin/env python3
"""
Send a sample shipping-change callback to a running checkout server and
print what comes back.

Start the API first (in another terminal):
  uvicorn checkout_server.api.main:app --host 127.0.0.1 --port 8888

Then run this script:
  python scripts/ping_callback.py
  python scripts/ping_callback.py --url http://127.0.0.1:8888/api/shipping-callback --country CA
  python scripts/ping_callback.py --option 1 --item-total 25.50
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, Optional

from dotenv import load_dotenv
import requests

from checkout_server.utils.config_loader import load_platform_config


def sample_payload(country: str, option_id: Optional[str], item_total: str) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": "5O190127TN364715T",
        "shipping_address": {
            "country_code": country,
            "admin_area_1": "CA",
            "admin_area_2": "San Jose",
            "postal_code": "95131",
        },
        "purchase_units": [
            {
                "reference_id": "default",
                "amount": {
                    "currency_code": "USD",
                    "value": item_total,
                    "breakdown": {"item_total": {"currency_code": "USD", "value": item_total}},
                },
            }
        ],
    }
    if option_id:
        payload["shipping_option"] = {"id": option_id}
    return payload


def main() -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Ping the shipping callback with a sample payload")
    parser.add_argument("--url", default=None, help="Callback URL (defaults to the configured one)")
    parser.add_argument("--country", default="US", help="Shipping address country code")
    parser.add_argument("--option", default=None, help="Selected shipping option id (omit for first callback)")
    parser.add_argument("--item-total", default="100.00", help="Item total in USD")
    args = parser.parse_args()

    url = args.url or load_platform_config().shipping_callback_url
    payload = sample_payload(args.country, args.option, args.item_total)

    print(f"POST {url}")
    try:
        r = requests.post(url, json=payload, timeout=15)
    except requests.RequestException as e:
        print(f"FAIL: {e}")
        if "Connection refused" in str(e) or "Failed to establish" in str(e):
            print("→ Start the API first: uvicorn checkout_server.api.main:app --port 8888")
        return 1

    print(f"Status: {r.status_code}")
    if r.headers.get("content-type", "").startswith("application/json"):
        print(json.dumps(r.json(), indent=2))
    else:
        print(r.text)
    return 0 if r.status_code < 500 else 1


if __name__ == "__main__":
    sys.exit(main())
