"""
Paynow adapter for the remote transaction interface.

Flow:
- ``send_mobile`` signs a form with the integration key and posts it to the
  initiate URL; the reply carries a poll URL.
- ``poll_transaction`` fetches the poll URL for the latest status.
- ``parse_webhook`` handles the same status payload pushed to the result URL.

Every reply except ``status=Error`` carries a ``hash`` that is verified
against the raw body before anything is returned.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from application.dtos.payments import (
    InitResponse,
    Payment,
    PaymentMethod,
    StatusResponse,
)
from core.logging_config import get_logger
from core.settings import PaynowSettings, get_paynow_settings
from domain.common.exceptions import DomainValidationException
from infrastructure.external.payments.base import BasePaymentClient
from infrastructure.external.payments.exceptions import (
    PaymentProviderError,
    PaymentSignatureError,
    PaynowRemoteError,
)
from infrastructure.external.payments.hashing import (
    HASH_FIELD,
    encode_form,
    format_amount,
    generate_hash,
    iter_wire_pairs,
    unescape,
    validate_hash,
)


logger = get_logger(__name__)

ERROR_STATUS = "error"
# Literal marker the interface expects on every initiate request
MESSAGE_STATUS = "Message"


def parse_fields(body: str) -> dict[str, str]:
    """Decode a form body into a mapping; names are lower-cased and the first value wins."""
    fields: dict[str, str] = {}
    for raw_name, raw_value in iter_wire_pairs(body):
        name = unescape(raw_name, raw_name).decode("utf-8", errors="replace").lower()
        value = unescape(name, raw_value).decode("utf-8", errors="replace")
        fields.setdefault(name, value)
    return fields


class PaynowClient(BasePaymentClient):
    provider = "paynow"

    def __init__(
        self,
        settings: Optional[PaynowSettings] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_paynow_settings()
        super().__init__(
            timeouts=self.settings.timeouts.model_dump(),
            http_client=http_client,
        )

    @property
    def _integration_key(self) -> str:
        return self.settings.integration_key.get_secret_value()

    async def send_mobile(self, payment: Payment) -> InitResponse:  # type: ignore[override]
        self._validate_payment(payment)
        if payment.method is None:
            payment = payment.model_copy(update={"method": PaymentMethod.ECOCASH})

        data = self.build_request_data(payment)
        data[HASH_FIELD] = generate_hash(data, self._integration_key)
        self._log(
            "paynow_initiate_request",
            reference=payment.reference,
            method=data["method"],
            amount=data["amount"],
            hash_prefix=data[HASH_FIELD][:8],
        )

        body = await self._post_form(self.settings.initiate_url, encode_form(data))
        return self.parse_init_response(body)

    async def poll_transaction(self, poll_url: str) -> StatusResponse:  # type: ignore[override]
        body = await self._get(poll_url)
        return self.parse_status_response(body)

    def parse_webhook(self, headers: dict[str, Any], body: bytes) -> StatusResponse:  # type: ignore[override]
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PaymentProviderError("result callback is not valid UTF-8", provider=self.provider) from exc
        return self.parse_status_response(text)

    @staticmethod
    def _validate_payment(payment: Payment) -> None:
        if not payment.reference:
            raise DomainValidationException("payment reference is required", field="reference")
        if payment.amount <= 0:
            raise DomainValidationException("payment amount must be greater than zero", field="amount")
        if not payment.auth_email:
            raise DomainValidationException("auth email is required", field="auth_email")
        if not payment.phone:
            raise DomainValidationException("phone number is required for mobile payments", field="phone")

    def build_request_data(self, payment: Payment) -> dict[str, str]:
        method = payment.method or PaymentMethod.ECOCASH
        return {
            "id": self.settings.integration_id,
            "reference": payment.reference,
            "amount": format_amount(payment.amount),
            "authemail": payment.auth_email,
            "phone": payment.phone,
            "method": method.value,
            "returnurl": self.settings.return_url,
            "resulturl": self.settings.result_url,
            "status": MESSAGE_STATUS,
        }

    def parse_init_response(self, body: str) -> InitResponse:
        values = parse_fields(body)
        status = values.get("status", "")
        is_error = status.lower() == ERROR_STATUS

        if not is_error:
            self._verify(body)

        resp = InitResponse(
            status=status,
            browser_url=values.get("browserurl", ""),
            poll_url=values.get("pollurl", ""),
            hash=values.get(HASH_FIELD, ""),
            error=values.get("error", ""),
            instructions=values.get("instructions", ""),
            paynow_reference=values.get("paynowreference", ""),
        )

        if is_error:
            self._log("paynow_initiate_rejected", error=resp.error)
            raise PaynowRemoteError(resp.error, provider=self.provider, response=resp)

        self._log("paynow_initiate_response", status=resp.status, poll_url=resp.poll_url)
        return resp

    def parse_status_response(self, body: str) -> StatusResponse:
        values = parse_fields(body)
        self._verify(body)

        raw_amount = values.get("amount", "")
        try:
            amount = Decimal(raw_amount)
        except InvalidOperation as exc:
            raise PaymentProviderError(
                f"failed to parse amount: {raw_amount!r}", provider=self.provider
            ) from exc
        if not amount.is_finite():
            raise PaymentProviderError(f"failed to parse amount: {raw_amount!r}", provider=self.provider)

        resp = StatusResponse(
            reference=values.get("reference", ""),
            amount=amount,
            paynow_reference=values.get("paynowreference", ""),
            poll_url=values.get("pollurl", ""),
            status=values.get("status", ""),
            hash=values.get(HASH_FIELD, ""),
        )
        self._log(
            "paynow_status",
            reference=resp.reference,
            status=resp.status,
            internal_status=self._map_status(resp.status),
        )
        return resp

    def _verify(self, body: str) -> None:
        try:
            validate_hash(body, self._integration_key)
        except PaymentSignatureError as exc:
            logger.warning("paynow_hash_invalid", provider=self.provider, error_type=exc.error_type)
            raise
