"""PaymentsService — payment history reads and the bounded status poller.

The poller is separate from the ledger core: a fixed number of attempts at a
fixed interval, resolving on the first terminal status (completed, failed,
cancelled). Transient transport/upstream errors are retried; on exhaustion
the last error is re-raised, or PaymentTimeoutError if the last attempt
succeeded but the payment was still pending.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from src.sw_client.infrastructure.http_client import ApiClient
from src.sw_common.errors import NetworkError, PaymentTimeoutError, UpstreamError
from src.sw_payments.domain.models import Payment

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 20
DEFAULT_INTERVAL_SECONDS = 3.0


class PaymentsService:
    def __init__(
        self,
        api: ApiClient,
        default_currency: str = "RWF",
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        interval: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        self._api = api
        self._default_currency = default_currency
        self._max_attempts = max_attempts
        self._interval = interval

    async def get_payment_history(self, limit: int = 20, offset: int = 0) -> tuple[list[Payment], int]:
        payload: Any = await self._api.get(
            "/payments/history", params={"limit": limit, "offset": offset}
        )
        rows = payload.get("payments", []) if isinstance(payload, dict) else []
        payments = [
            Payment.from_payload(row, self._default_currency)
            for row in rows
            if isinstance(row, dict)
        ]
        total = payload.get("total", len(payments)) if isinstance(payload, dict) else 0
        return payments, int(total)

    async def check_status(self, payment_id: str) -> Payment:
        payload = await self._api.get(f"/payments/{payment_id}/status")
        return Payment.from_payload(payload, self._default_currency)

    async def poll_status(
        self,
        payment_id: str,
        on_update: Callable[[Payment], None] | None = None,
        max_attempts: int | None = None,
        interval: float | None = None,
    ) -> Payment:
        max_attempts = self._max_attempts if max_attempts is None else max_attempts
        interval = self._interval if interval is None else interval
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        last_error: Exception | None = None
        for attempt in range(1, max_attempts + 1):
            try:
                payment = await self.check_status(payment_id)
            except (NetworkError, UpstreamError) as exc:
                logger.info(
                    "Payment %s status check failed (attempt %d/%d): %s",
                    payment_id, attempt, max_attempts, exc.message,
                )
                last_error = exc
            else:
                last_error = None
                if on_update is not None:
                    on_update(payment)
                if payment.is_terminal:
                    return payment
            if attempt < max_attempts:
                await asyncio.sleep(interval)

        if last_error is not None:
            raise last_error
        raise PaymentTimeoutError(payment_id, max_attempts)
