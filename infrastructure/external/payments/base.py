"""
Base payment client implementing shared concerns: http, logging, mapping.

Concrete providers should subclass and implement provider-specific logic.
Responses are returned as the exact text received so signatures can be
verified against the wire order.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx

from core.logging_config import get_logger
from application.dtos.payments import InitResponse, Payment, StatusResponse
from application.ports.payment_gateway import PaymentGateway
from infrastructure.external.payments.exceptions import PaymentProviderError
from shared.codes.payment_codes import PROVIDER_STATUS_TO_INTERNAL, PaymentCode


logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class BasePaymentClient(PaymentGateway):
    provider: str = "base"

    def __init__(
        self,
        *,
        timeouts: Optional[dict[str, float]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._timeouts_cfg = timeouts or {"connect": 1.0, "read": 10.0, "write": 10.0, "total": 15.0}
        self._client: Optional[httpx.AsyncClient] = http_client
        self._owns_client = http_client is None

    @property
    def timeouts(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self._timeouts_cfg["connect"],
            read=self._timeouts_cfg["read"],
            write=self._timeouts_cfg["write"],
            timeout=self._timeouts_cfg["total"],
        )

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeouts)
        return self._client

    async def aclose(self) -> None:
        """Close underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            try:
                await self._client.aclose()
            finally:
                self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def _post_form(self, url: str, body: str) -> str:
        """POST an already-encoded form body and return the raw response text."""
        return await self._send("POST", url, content=body.encode("utf-8"), headers={"Content-Type": FORM_CONTENT_TYPE})

    async def _get(self, url: str) -> str:
        return await self._send("GET", url)

    async def _send(self, method: str, url: str, **kwargs: Any) -> str:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise PaymentProviderError(
                f"request timed out: {exc}", provider=self.provider, code=PaymentCode.TIMEOUT
            ) from exc
        except httpx.HTTPError as exc:
            raise PaymentProviderError(
                f"failed to send request: {exc}", provider=self.provider, code=PaymentCode.PROVIDER_RECOVERABLE
            ) from exc

        self._log("payment_http_response", method=method, url=url, status_code=response.status_code)
        if response.is_error:
            raise PaymentProviderError(
                f"unexpected HTTP status {response.status_code}",
                provider=self.provider,
                provider_code=str(response.status_code),
            )
        return response.text

    # Default implementations raise to force override where needed
    async def send_mobile(self, payment: Payment) -> InitResponse:  # type: ignore[override]
        raise NotImplementedError

    async def poll_transaction(self, poll_url: str) -> StatusResponse:  # type: ignore[override]
        raise NotImplementedError

    def parse_webhook(self, headers: dict[str, Any], body: bytes) -> StatusResponse:  # type: ignore[override]
        raise NotImplementedError

    # Helpers
    def _map_status(self, provider_status: str) -> str:
        mapping = PROVIDER_STATUS_TO_INTERNAL.get(self.provider, {})
        return mapping.get(provider_status, provider_status)

    def _log(self, event: str, **kwargs) -> None:
        logger.info(
            event,
            provider=self.provider,
            **kwargs,
        )
