"""Domain models for sw_wallet — pure dataclasses, no HTTP or pydantic dependency."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.sw_common.enums import Direction, TransactionStatus, TransactionType

# Metadata keys, checked in order
COMMISSION_LINK_KEYS = ("commissionId", "commission_id", "commissionIds", "commission_ids")
COUNTERPARTY_ID_KEYS = (
    "counterpartyId",
    "counterparty_id",
    "employeeUserId",
    "employee_user_id",
    "salonOwnerId",
    "salon_owner_id",
    "paidById",
    "paid_by_id",
)
COUNTERPARTY_NAME_KEYS = (
    "counterpartyName",
    "employeeName",
    "salonOwnerName",
    "ownerName",
    "owner_name",
)
COUNTERPARTY_NAME_KEY = "counterpartyName"  # written by enrichment


@dataclass(frozen=True)
class WalletSnapshot:
    id: str
    current_balance: Decimal
    currency: str


@dataclass
class NormalizedTransaction:
    id: str
    wallet_id: str
    transaction_type: TransactionType
    amount: Decimal                  # always >= 0
    direction: Direction
    balance_before: Decimal
    balance_after: Decimal
    status: TransactionStatus
    description: str | None = None
    reference_type: str | None = None
    reference_id: str | None = None
    transaction_reference: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_debit(self) -> bool:
        return self.direction is Direction.DEBIT

    @property
    def signed_amount(self) -> Decimal:
        return -self.amount if self.is_debit else self.amount

    @property
    def is_commission_linked(self) -> bool:
        if any(self.metadata.get(k) for k in COMMISSION_LINK_KEYS):
            return True
        return "commission" in (self.reference_type or "").lower()

    @property
    def counterparty_id(self) -> str | None:
        for key in COUNTERPARTY_ID_KEYS:
            value = self.metadata.get(key)
            if value:
                return str(value)
        return None

    @property
    def counterparty_name(self) -> str | None:
        for key in COUNTERPARTY_NAME_KEYS:
            value = self.metadata.get(key)
            if isinstance(value, str) and value:
                return value
        return None


@dataclass(frozen=True)
class GroupHeader:
    """Synthetic list entry placed before each contiguous same-day run."""
    label: str


@dataclass(frozen=True)
class LedgerTotals:
    credits: Decimal
    debits: Decimal

    @property
    def net(self) -> Decimal:
        return self.credits - self.debits


@dataclass(frozen=True)
class WalletSummary:
    """Completed-only received/sent totals over the full feed."""
    total_received: Decimal
    total_sent: Decimal
    pending_count: int


@dataclass
class LedgerView:
    rows: list[GroupHeader | NormalizedTransaction]
    transactions: list[NormalizedTransaction]
    totals: LedgerTotals
