"""Domain models for sw_payments — pure dataclasses."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.sw_common.datetime_utils import parse_timestamp
from src.sw_common.enums import TERMINAL_PAYMENT_STATUSES, PaymentStatus
from src.sw_common.money import ZERO, to_magnitude


@dataclass
class Payment:
    id: str
    amount: Decimal
    currency: str
    method: str
    status: PaymentStatus
    type: str
    description: str | None = None
    failure_reason: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_PAYMENT_STATUSES

    @classmethod
    def from_payload(cls, payload: dict[str, Any], default_currency: str = "RWF") -> "Payment":
        if not isinstance(payload, dict):
            payload = {}
        data = payload.get("data") if isinstance(payload.get("data"), dict) else payload
        raw_status = str(data.get("status") or "pending").lower()
        try:
            status = PaymentStatus(raw_status)
        except ValueError:
            status = PaymentStatus.PENDING
        return cls(
            id=str(data.get("id", "")),
            amount=to_magnitude(data.get("amount")) or ZERO,
            currency=str(data.get("currency") or default_currency),
            method=str(data.get("method") or ""),
            status=status,
            type=str(data.get("type") or ""),
            description=data.get("description"),
            failure_reason=data.get("failureReason") or data.get("failure_reason"),
            created_at=parse_timestamp(data.get("createdAt") or data.get("created_at")),
            completed_at=parse_timestamp(data.get("completedAt") or data.get("completed_at")),
        )
