"""
Payment DTOs (Pydantic v2) used at application boundaries.
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class PaymentMethod(str, Enum):
    """Mobile money wallets accepted by the express checkout."""

    ECOCASH = "ecocash"
    ONEMONEY = "onemoney"
    INNBUCKS = "innbucks"


class TransactionStatus(str, Enum):
    CREATED = "Created"
    SENT = "Sent"
    PENDING = "Pending"
    PAID = "Paid"
    CANCELLED = "Cancelled"
    FAILED = "Failed"
    REFUNDED = "Refunded"
    AWAITING_DELIVERY = "Awaiting Delivery"
    DELIVERED = "Delivered"
    DISPUTED = "Disputed"

    def is_paid(self) -> bool:
        return self is TransactionStatus.PAID

    def is_pending(self) -> bool:
        return self in _PENDING

    def is_failed(self) -> bool:
        return self in _FAILED

    def is_final(self) -> bool:
        return not self.is_pending()


_PENDING = {TransactionStatus.CREATED, TransactionStatus.SENT, TransactionStatus.PENDING}
_FAILED = {TransactionStatus.CANCELLED, TransactionStatus.FAILED}


class Payment(BaseModel):
    reference: str = ""
    amount: Decimal = Decimal("0")
    auth_email: str = ""
    phone: str = ""
    method: Optional[PaymentMethod] = None


class InitResponse(BaseModel):
    status: str
    browser_url: str = ""
    poll_url: str = ""
    hash: str = ""
    error: str = ""
    instructions: str = ""
    paynow_reference: str = ""

    @property
    def success(self) -> bool:
        return self.status.lower() == "ok"


class StatusResponse(BaseModel):
    reference: str = ""
    amount: Decimal = Decimal("0")
    paynow_reference: str = ""
    poll_url: str = ""
    status: str = ""
    hash: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def transaction_status(self) -> Optional[TransactionStatus]:
        """Known status as an enum member, ``None`` for values the gateway added later."""
        try:
            return TransactionStatus(self.status)
        except ValueError:
            return None

    @property
    def paid(self) -> bool:
        ts = self.transaction_status
        return ts is not None and ts.is_paid()

    @property
    def pending(self) -> bool:
        ts = self.transaction_status
        return ts is not None and ts.is_pending()

    @property
    def failed(self) -> bool:
        ts = self.transaction_status
        return ts is not None and ts.is_failed()

    @property
    def settled(self) -> bool:
        """No further change is expected without merchant action."""
        ts = self.transaction_status
        return ts is not None and ts.is_final()
