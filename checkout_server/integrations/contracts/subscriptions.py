"""
Subscription contracts.

Catalog product and billing plan payloads for the monthly subscription
sample. A plan needs a product id, so the product is always created first.
"""

from typing import Any, Dict

PLAN_PRICE = "3.99"


def build_subscription_product() -> Dict[str, Any]:
    return {
        "name": "Monthly Subscription Service",
        "description": f"Monthly subscription service for ${PLAN_PRICE}",
        "type": "SERVICE",
        "category": "SOFTWARE",
    }


def build_monthly_plan(product_id: str, price: str = PLAN_PRICE) -> Dict[str, Any]:
    return {
        "product_id": product_id,
        "name": "Monthly Subscription Plan",
        "description": f"Monthly subscription for ${price}",
        "status": "ACTIVE",
        "billing_cycles": [
            {
                "frequency": {"interval_unit": "MONTH", "interval_count": 1},
                "tenure_type": "REGULAR",
                "sequence": 1,
                "total_cycles": 0,  # 0 = bill until cancelled
                "pricing_scheme": {"fixed_price": {"value": price, "currency_code": "USD"}},
            }
        ],
        "payment_preferences": {
            "auto_bill_outstanding": True,
            "setup_fee": {"value": "0", "currency_code": "USD"},
            "setup_fee_failure_action": "CONTINUE",
            "payment_failure_threshold": 3,
        },
        "taxes": {"percentage": "0", "inclusive": False},
    }
