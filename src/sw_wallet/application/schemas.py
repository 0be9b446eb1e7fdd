"""Pydantic schemas for the sw_wallet API.

Decimals serialize as strings in JSON mode; every amount also carries a
pre-formatted *_display string ("100,000 RWF").
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from src.sw_common.enums import DirectionFilter, TransactionCategory
from src.sw_common.money import format_amount
from src.sw_wallet.domain.models import (
    GroupHeader,
    LedgerTotals,
    LedgerView,
    NormalizedTransaction,
    WalletSnapshot,
    WalletSummary,
)
from src.sw_wallet.domain.view import categorize, display_title, resolved_counterparty


def _signed_display(tx: NormalizedTransaction, currency: str) -> str:
    display = format_amount(tx.signed_amount, currency)
    return display if tx.is_debit else f"+{display}"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class LedgerQuery(BaseModel):
    direction: DirectionFilter = DirectionFilter.ALL
    category: TransactionCategory | None = None
    q: str = Field("", max_length=200, description="Case-insensitive search")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class GroupHeaderItem(BaseModel):
    kind: Literal["header"] = "header"
    label: str


class TransactionItem(BaseModel):
    kind: Literal["transaction"] = "transaction"
    id: str
    wallet_id: str
    transaction_type: str
    category: str | None
    direction: str
    title: str
    amount: Decimal
    amount_display: str  # signed: "+10,000 RWF" / "-2,000 RWF"
    balance_before: Decimal
    balance_before_display: str
    balance_after: Decimal
    balance_after_display: str
    status: str
    description: str | None
    reference_type: str | None
    reference_id: str | None
    transaction_reference: str | None
    counterparty_name: str | None
    metadata: dict[str, Any]
    created_at: str | None  # ISO8601 string
    updated_at: str | None

    @classmethod
    def from_domain(
        cls,
        tx: NormalizedTransaction,
        currency: str,
        names: Mapping[str, str] | None = None,
    ) -> "TransactionItem":
        category = categorize(tx)
        return cls(
            id=tx.id,
            wallet_id=tx.wallet_id,
            transaction_type=tx.transaction_type.value,
            category=category.value if category else None,
            direction=tx.direction.value,
            title=display_title(tx),
            amount=tx.amount,
            amount_display=_signed_display(tx, currency),
            balance_before=tx.balance_before,
            balance_before_display=format_amount(tx.balance_before, currency),
            balance_after=tx.balance_after,
            balance_after_display=format_amount(tx.balance_after, currency),
            status=tx.status.value,
            description=tx.description,
            reference_type=tx.reference_type,
            reference_id=tx.reference_id,
            transaction_reference=tx.transaction_reference,
            counterparty_name=resolved_counterparty(tx, names),
            metadata=tx.metadata,
            created_at=tx.created_at.isoformat() if tx.created_at else None,
            updated_at=tx.updated_at.isoformat() if tx.updated_at else None,
        )


LedgerRow = Annotated[GroupHeaderItem | TransactionItem, Field(discriminator="kind")]


class TotalsResponse(BaseModel):
    credits: Decimal
    credits_display: str
    debits: Decimal
    debits_display: str
    net: Decimal
    net_display: str

    @classmethod
    def from_totals(cls, totals: LedgerTotals, currency: str) -> "TotalsResponse":
        return cls(
            credits=totals.credits,
            credits_display=format_amount(totals.credits, currency),
            debits=totals.debits,
            debits_display=format_amount(totals.debits, currency),
            net=totals.net,
            net_display=format_amount(totals.net, currency),
        )


class LedgerViewResponse(BaseModel):
    wallet_id: str
    currency: str
    balance: Decimal
    balance_display: str
    count: int
    rows: list[LedgerRow]
    totals: TotalsResponse

    @classmethod
    def from_view(
        cls,
        wallet: WalletSnapshot,
        view: LedgerView,
        names: Mapping[str, str] | None = None,
    ) -> "LedgerViewResponse":
        rows: list[GroupHeaderItem | TransactionItem] = [
            GroupHeaderItem(label=row.label)
            if isinstance(row, GroupHeader)
            else TransactionItem.from_domain(row, wallet.currency, names)
            for row in view.rows
        ]
        return cls(
            wallet_id=wallet.id,
            currency=wallet.currency,
            balance=wallet.current_balance,
            balance_display=format_amount(wallet.current_balance, wallet.currency),
            count=len(view.transactions),
            rows=rows,
            totals=TotalsResponse.from_totals(view.totals, wallet.currency),
        )


class WalletSummaryResponse(BaseModel):
    wallet_id: str
    currency: str
    balance: Decimal
    balance_display: str
    total_received: Decimal
    total_received_display: str
    total_sent: Decimal
    total_sent_display: str
    pending_count: int

    @classmethod
    def from_summary(cls, wallet: WalletSnapshot, summary: WalletSummary) -> "WalletSummaryResponse":
        currency = wallet.currency
        return cls(
            wallet_id=wallet.id,
            currency=currency,
            balance=wallet.current_balance,
            balance_display=format_amount(wallet.current_balance, currency),
            total_received=summary.total_received,
            total_received_display=format_amount(summary.total_received, currency),
            total_sent=summary.total_sent,
            total_sent_display=format_amount(summary.total_sent, currency),
            pending_count=summary.pending_count,
        )
