"""
Factory for payment gateway clients.
"""
from __future__ import annotations

from typing import Optional

from application.ports.payment_gateway import PaymentGateway


def get_payment_gateway(provider: Optional[str] = None) -> PaymentGateway:
    name = (provider or "paynow").lower()
    if name == "paynow":
        from .paynow_client import PaynowClient
        return PaynowClient()
    raise ValueError(f"Unsupported payment provider: {name}")
