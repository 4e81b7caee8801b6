"""
Payment gateway port (application/ports) exposing a replaceable protocol.

Application depends on this Protocol; infrastructure implements adapters.
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from application.dtos.payments import (
    InitResponse,
    Payment,
    StatusResponse,
)


@runtime_checkable
class PaymentGateway(Protocol):
    """Gateway protocol for mobile money providers.

    Implementations are async and must verify every signed response before
    returning a typed result.
    """

    provider: str

    async def send_mobile(self, payment: Payment) -> InitResponse: ...

    async def poll_transaction(self, poll_url: str) -> StatusResponse: ...

    def parse_webhook(self, headers: dict[str, Any], body: bytes) -> StatusResponse: ...
