"""
Exceptions for payment providers mapped to unified BusinessException variants.
"""
from __future__ import annotations

from typing import Any, Optional
from domain.common.exceptions import BusinessException
from shared.codes.payment_codes import PaymentCode


class PaymentProviderError(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        provider: str,
        provider_code: str | None = None,
        details: Optional[dict] = None,
        code: int = PaymentCode.PROVIDER_ERROR,
    ):
        full_details = {"provider": provider, "provider_code": provider_code}
        if details:
            full_details.update(details)
        super().__init__(
            code=code,
            message=message,
            error_type=type(self).__name__,
            details=full_details,
        )


class PaynowRemoteError(PaymentProviderError):
    """The gateway accepted the request but answered ``status=Error``."""

    def __init__(self, message: str, *, provider: str, response: Any = None):
        super().__init__(
            f"paynow error: {message}",
            provider=provider,
            details={"error": message},
            code=PaymentCode.REMOTE_ERROR,
        )
        self.response = response


class PaymentSignatureError(BusinessException):
    def __init__(self, message: str, *, provider: str, details: Optional[dict] = None, code: int = PaymentCode.SIGNATURE_ERROR):
        full_details = {"provider": provider}
        if details:
            full_details.update(details)
        super().__init__(
            code=code,
            message=message,
            error_type=type(self).__name__,
            details=full_details,
        )


class SignatureMismatch(PaymentSignatureError):
    def __init__(self, received: str, expected: str, *, provider: str = "paynow"):
        super().__init__(
            f"invalid hash: received {received or '<missing>'}, expected {expected}",
            provider=provider,
            details={"received": received, "expected": expected},
        )
        self.received = received
        self.expected = expected


class DecodeError(PaymentSignatureError):
    def __init__(self, field: str, value: str, *, provider: str = "paynow"):
        super().__init__(
            f"failed to decode value for key {field}",
            provider=provider,
            details={"value": value},
            code=PaymentCode.DECODE_ERROR,
        )
        self.field = field
