from __future__ import annotations

import argparse
import asyncio
import sys
from decimal import Decimal

from application.dtos.payments import Payment, PaymentMethod
from application.services.payment_service import PaymentService
from core.logging_config import configure_logging
from core.settings import get_paynow_settings
from domain.common.exceptions import BusinessException
from infrastructure.external.payments.paynow_client import PaynowClient


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Send a mobile money payment and wait for it to settle")
    p.add_argument("--reference", required=True)
    p.add_argument("--amount", required=True, type=Decimal)
    p.add_argument("--email", required=True, help="auth email of the payer")
    p.add_argument("--phone", required=True)
    p.add_argument("--method", default=PaymentMethod.ECOCASH.value, choices=[m.value for m in PaymentMethod])
    p.add_argument("--no-wait", action="store_true", help="return after initiating the payment")
    return p.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    settings = get_paynow_settings()
    service = PaymentService(
        PaynowClient(settings),
        poll_interval=settings.poll.interval_seconds,
        max_attempts=settings.poll.max_attempts,
    )
    try:
        init = await service.send_mobile(
            Payment(
                reference=args.reference,
                amount=args.amount,
                auth_email=args.email,
                phone=args.phone,
                method=PaymentMethod(args.method),
            )
        )
        print(f"Payment initiated: status={init.status} poll_url={init.poll_url}")
        if init.instructions:
            print(init.instructions)
        if args.no_wait:
            return 0

        status = await service.wait_for_settlement(init.poll_url)
        print(f"Transaction status: {status.status}")
        return 0 if status.paid else 1
    except BusinessException as exc:
        print(f"[paynow] {exc.error_type}: {exc.message}", file=sys.stderr)
        return 2
    finally:
        await service.aclose()


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(parse_args())))


if __name__ == "__main__":
    main()
