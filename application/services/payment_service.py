"""
Application service orchestrating payment use-cases.

This class depends only on the application PaymentGateway port and DTOs.
Gateway implementations are provided by infrastructure and must be injected
from the composition root (CLI/tasks), keeping dependencies one-way.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from application.dtos.payments import InitResponse, Payment, StatusResponse
from application.ports.payment_gateway import PaymentGateway
from core.logging_config import get_logger
from infrastructure.external.payments.exceptions import PaymentProviderError
from shared.codes.payment_codes import PaymentCode


logger = get_logger(__name__)


class PaymentService:
    def __init__(
        self,
        gateway: PaymentGateway,
        *,
        poll_interval: float = 5.0,
        max_attempts: int = 60,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.gateway = gateway
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._sleep = sleep

    async def send_mobile(self, payment: Payment) -> InitResponse:
        logger.info(
            "payment_send_mobile_request",
            reference=payment.reference,
            provider=self.gateway.provider,
        )
        resp = await self.gateway.send_mobile(payment)
        logger.info(
            "payment_send_mobile_response",
            reference=payment.reference,
            provider=self.gateway.provider,
            status=resp.status,
        )
        return resp

    async def poll_transaction(self, poll_url: str) -> StatusResponse:
        logger.info("payment_poll_request", provider=self.gateway.provider)
        return await self.gateway.poll_transaction(poll_url)

    async def wait_for_settlement(self, poll_url: str) -> StatusResponse:
        """Poll until the transaction leaves the pending states.

        Raises PaymentProviderError with code TIMEOUT once ``max_attempts``
        polls have returned a non-final status.
        """
        status = None
        for attempt in range(1, self.max_attempts + 1):
            status = await self.gateway.poll_transaction(poll_url)
            logger.info(
                "payment_poll_status",
                provider=self.gateway.provider,
                reference=status.reference,
                status=status.status,
                attempt=attempt,
            )
            if status.settled:
                return status
            if attempt < self.max_attempts:
                await self._sleep(self.poll_interval)

        raise PaymentProviderError(
            f"transaction not settled after {self.max_attempts} polls",
            provider=self.gateway.provider,
            details={"last_status": status.status if status else None},
            code=PaymentCode.TIMEOUT,
        )

    def handle_webhook(self, headers: dict, body: bytes) -> StatusResponse:
        status = self.gateway.parse_webhook(headers, body)
        logger.info(
            "payment_webhook_parsed",
            provider=self.gateway.provider,
            reference=status.reference,
            status=status.status,
        )
        return status

    async def aclose(self) -> None:
        close = getattr(self.gateway, "aclose", None)
        if callable(close):
            await close()
