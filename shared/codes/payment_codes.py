"""
Payment specific codes and provider status mapping.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):

    # Provider/Network errors (6xxxx)
    PROVIDER_ERROR = 60000
    PROVIDER_RECOVERABLE = 60001
    SIGNATURE_ERROR = 60002
    TIMEOUT = 60003
    REMOTE_ERROR = 60004
    DECODE_ERROR = 60005


# Provider→internal status mapping (extend per needs)
PROVIDER_STATUS_TO_INTERNAL = {
    "paynow": {
        # Per transaction status reported by the poll URL / result URL
        "Created": "created",
        "Sent": "pending",
        "Pending": "pending",
        "Paid": "succeeded",
        "Awaiting Delivery": "awaiting_delivery",
        "Delivered": "delivered",
        "Cancelled": "canceled",
        "Failed": "failed",
        "Refunded": "refunded",
        "Disputed": "disputed",
    },
}
