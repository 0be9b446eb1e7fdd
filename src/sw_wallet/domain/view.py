"""View projection over reconciled transactions: filter, search, group, totals.

Never mutates or re-sorts its input. Totals are always computed over the
filtered set, so every filter or search change yields fresh totals.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, date, datetime, timedelta, tzinfo

from src.sw_common.enums import (
    DirectionFilter,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from src.sw_common.money import ZERO
from src.sw_wallet.domain.models import (
    GroupHeader,
    LedgerTotals,
    LedgerView,
    NormalizedTransaction,
    WalletSummary,
)

_TYPE_CATEGORIES: dict[TransactionType, TransactionCategory] = {
    TransactionType.DEPOSIT: TransactionCategory.TOPUP,
    TransactionType.WITHDRAWAL: TransactionCategory.WITHDRAWAL,
    TransactionType.TRANSFER: TransactionCategory.TRANSFER,
    TransactionType.COMMISSION: TransactionCategory.COMMISSION_EARNED,
    TransactionType.REFUND: TransactionCategory.REFUND,
    TransactionType.FEE: TransactionCategory.FEE,
    TransactionType.LOAN_REPAYMENT: TransactionCategory.LOAN,
    TransactionType.LOAN_DISBURSEMENT: TransactionCategory.LOAN,
}

_TYPE_LABELS: dict[TransactionType, str] = {
    TransactionType.DEPOSIT: "Wallet Top-up",
    TransactionType.WITHDRAWAL: "Withdrawal",
    TransactionType.TRANSFER: "Transfer",
    TransactionType.COMMISSION: "Commission Earned",
    TransactionType.REFUND: "Refund",
    TransactionType.FEE: "Fee",
    TransactionType.LOAN_REPAYMENT: "Loan Repayment",
    TransactionType.LOAN_DISBURSEMENT: "Loan Disbursement",
}

_UUID = re.compile(r"\b[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\b", re.I)
_TX_ID = re.compile(r"\bTransaction\s*ID[:\s]*\w+", re.I)
_ID = re.compile(r"\bID:\s*\w+\b", re.I)

TODAY = "Today"
YESTERDAY = "Yesterday"
UNKNOWN_DATE = "Unknown date"


# ---------------------------------------------------------------------------
# Classification / labels
# ---------------------------------------------------------------------------


def categorize(tx: NormalizedTransaction) -> TransactionCategory | None:
    """Semantic bucket; None for UNKNOWN types (they only show under "all")."""
    if tx.transaction_type is TransactionType.TRANSFER and tx.is_commission_linked:
        return TransactionCategory.COMMISSION_PAYMENT
    return _TYPE_CATEGORIES.get(tx.transaction_type)


def type_label(tx: NormalizedTransaction) -> str:
    if categorize(tx) is TransactionCategory.COMMISSION_PAYMENT:
        return "Commission Payment"
    return _TYPE_LABELS.get(tx.transaction_type, "Transaction")


def clean_description(description: str | None) -> str:
    """Strip UUIDs and "ID: xxx" fragments so a description reads as a title."""
    text = description or ""
    text = _UUID.sub("", text)
    text = _ID.sub("", text)
    text = _TX_ID.sub("", text)
    return " ".join(text.split())


def display_title(tx: NormalizedTransaction) -> str:
    return clean_description(tx.description) or type_label(tx)


def resolved_counterparty(
    tx: NormalizedTransaction, names: Mapping[str, str] | None = None
) -> str | None:
    if tx.counterparty_name:
        return tx.counterparty_name
    if names and tx.counterparty_id:
        return names.get(tx.counterparty_id)
    return None


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def matches_direction(tx: NormalizedTransaction, direction: DirectionFilter) -> bool:
    if direction is DirectionFilter.IN:
        return not tx.is_debit
    if direction is DirectionFilter.OUT:
        return tx.is_debit
    return True


def matches_category(tx: NormalizedTransaction, category: TransactionCategory | None) -> bool:
    return category is None or categorize(tx) is category


def matches_search(
    tx: NormalizedTransaction,
    query: str,
    names: Mapping[str, str] | None = None,
) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    haystack = (
        tx.description,
        tx.reference_type,
        tx.reference_id,
        tx.transaction_reference,
        tx.transaction_type.value,
        resolved_counterparty(tx, names),
    )
    return any(needle in value.lower() for value in haystack if value)


def filter_transactions(
    transactions: Iterable[NormalizedTransaction],
    direction: DirectionFilter = DirectionFilter.ALL,
    category: TransactionCategory | None = None,
    query: str = "",
    names: Mapping[str, str] | None = None,
) -> list[NormalizedTransaction]:
    return [
        tx
        for tx in transactions
        if matches_direction(tx, direction)
        and matches_category(tx, category)
        and matches_search(tx, query, names)
    ]


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------


def date_label(moment: datetime | None, today: date, tz: tzinfo = UTC) -> str:
    if moment is None:
        return UNKNOWN_DATE
    day = moment.astimezone(tz).date()
    if day == today:
        return TODAY
    if day == today - timedelta(days=1):
        return YESTERDAY
    return f"{day:%b} {day.day}, {day.year}"


def group_by_date(
    transactions: Sequence[NormalizedTransaction],
    today: date,
    tz: tzinfo = UTC,
) -> list[GroupHeader | NormalizedTransaction]:
    """Interleave a header before each contiguous run of same-bucket rows."""
    rows: list[GroupHeader | NormalizedTransaction] = []
    current: str | None = None
    for tx in transactions:
        label = date_label(tx.created_at, today, tz)
        if label != current:
            rows.append(GroupHeader(label=label))
            current = label
        rows.append(tx)
    return rows


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


def compute_totals(transactions: Iterable[NormalizedTransaction]) -> LedgerTotals:
    credits = ZERO
    debits = ZERO
    for tx in transactions:
        if tx.is_debit:
            debits += tx.amount
        else:
            credits += tx.amount
    return LedgerTotals(credits=credits, debits=debits)


def summarize(transactions: Iterable[NormalizedTransaction]) -> WalletSummary:
    """Received / sent over completed rows only, plus the pending count."""
    received = ZERO
    sent = ZERO
    pending = 0
    for tx in transactions:
        if tx.status is TransactionStatus.PENDING:
            pending += 1
        if tx.status is not TransactionStatus.COMPLETED:
            continue
        if tx.is_debit:
            sent += tx.amount
        else:
            received += tx.amount
    return WalletSummary(total_received=received, total_sent=sent, pending_count=pending)


def build_view(
    transactions: Sequence[NormalizedTransaction],
    today: date,
    direction: DirectionFilter = DirectionFilter.ALL,
    category: TransactionCategory | None = None,
    query: str = "",
    names: Mapping[str, str] | None = None,
    tz: tzinfo = UTC,
) -> LedgerView:
    filtered = filter_transactions(transactions, direction, category, query, names)
    return LedgerView(
        rows=group_by_date(filtered, today, tz),
        transactions=filtered,
        totals=compute_totals(filtered),
    )
