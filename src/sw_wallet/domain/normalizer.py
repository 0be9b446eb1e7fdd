"""Normalization boundary for raw wallet payloads.

The remote service is loosely typed: camelCase or snake_case keys, amounts
as numbers or numeric strings, metadata as an object or a JSON-encoded
string, lists bare or wrapped in {data: [...]} / {transactions: [...]}.
Every shape is resolved here, once, so nothing downstream has to guess.

Malformed values degrade to safe defaults (zero amount, empty metadata,
UNKNOWN type/status) and are logged; they never raise.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.sw_common.datetime_utils import parse_timestamp, to_epoch_ms
from src.sw_common.enums import DEBIT_TYPES, Direction, TransactionStatus, TransactionType
from src.sw_common.id_generator import SyntheticIdGenerator
from src.sw_common.money import ZERO, parse_decimal, to_magnitude
from src.sw_wallet.domain.models import WalletSnapshot

logger = logging.getLogger(__name__)


@dataclass
class ParsedTransaction:
    """One raw row with every field except the balance trail resolved."""
    id: str
    wallet_id: str
    transaction_type: TransactionType
    direction: Direction
    amount: Decimal
    status: TransactionStatus
    explicit_balance_before: Decimal | None
    explicit_balance_after: Decimal | None
    description: str | None = None
    reference_type: str | None = None
    reference_id: str | None = None
    transaction_reference: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


def pick(raw: dict[str, Any], camel: str, snake: str) -> Any:
    """Value under the camelCase key, else the snake_case key, else None."""
    value = raw.get(camel)
    if value is None:
        value = raw.get(snake)
    return value


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


def classify_direction(transaction_type: TransactionType) -> Direction:
    return Direction.DEBIT if transaction_type in DEBIT_TYPES else Direction.CREDIT


def parse_transaction_type(value: Any, tx_id: str = "?") -> TransactionType:
    if isinstance(value, str):
        try:
            return TransactionType(value.strip().lower())
        except ValueError:
            pass
    logger.warning("Unknown transaction type %r on %s, flagged for review", value, tx_id)
    return TransactionType.UNKNOWN


def parse_status(value: Any) -> TransactionStatus:
    if isinstance(value, str):
        try:
            return TransactionStatus(value.strip().lower())
        except ValueError:
            pass
    return TransactionStatus.UNKNOWN


def parse_metadata(value: Any, tx_id: str = "?") -> dict[str, Any]:
    """Metadata as a dict. JSON strings are decoded; anything else becomes {}."""
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, str):
        if not value.strip():
            return {}
        try:
            decoded = json.loads(value)
        except ValueError:
            logger.warning("Unparsable metadata on %s, using empty map", tx_id)
            return {}
        if isinstance(decoded, dict):
            return decoded
    logger.warning("Metadata on %s is not an object (%s), using empty map", tx_id, type(value).__name__)
    return {}


def _parse_balance(raw: dict[str, Any], camel: str, snake: str, tx_id: str) -> Decimal | None:
    value = pick(raw, camel, snake)
    if value is None:
        return None
    parsed = parse_decimal(value)
    if parsed is None:
        logger.warning("Unparsable %s %r on %s, treating as absent", camel, value, tx_id)
    return parsed


def parse_transaction(
    raw: dict[str, Any],
    wallet_id: str,
    ids: SyntheticIdGenerator,
) -> ParsedTransaction:
    created_at = parse_timestamp(pick(raw, "createdAt", "created_at"))
    raw_id = raw.get("id")
    tx_id = str(raw_id) if raw_id not in (None, "") else ids.next_id(to_epoch_ms(created_at))

    transaction_type = parse_transaction_type(
        pick(raw, "transactionType", "transaction_type") or raw.get("type"), tx_id
    )

    amount = to_magnitude(raw.get("amount"))
    if amount is None:
        logger.warning("Unparsable amount %r on %s, using 0", raw.get("amount"), tx_id)
        amount = ZERO

    return ParsedTransaction(
        id=tx_id,
        wallet_id=_optional_str(pick(raw, "walletId", "wallet_id")) or wallet_id,
        transaction_type=transaction_type,
        direction=classify_direction(transaction_type),
        amount=amount,
        status=parse_status(raw.get("status")),
        explicit_balance_before=_parse_balance(raw, "balanceBefore", "balance_before", tx_id),
        explicit_balance_after=_parse_balance(raw, "balanceAfter", "balance_after", tx_id),
        description=_optional_str(raw.get("description")),
        reference_type=_optional_str(pick(raw, "referenceType", "reference_type")),
        reference_id=_optional_str(pick(raw, "referenceId", "reference_id")),
        transaction_reference=_optional_str(
            pick(raw, "transactionReference", "transaction_reference")
        ),
        metadata=parse_metadata(raw.get("metadata"), tx_id),
        created_at=created_at,
        updated_at=parse_timestamp(pick(raw, "updatedAt", "updated_at")),
    )


# ---------------------------------------------------------------------------
# Envelope unwrapping
# ---------------------------------------------------------------------------


def parse_wallet(payload: Any, default_currency: str = "RWF") -> WalletSnapshot | None:
    """Wallet from a bare object, {data: {...}}, or a list whose first item is the wallet."""
    wallet: Any = None
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        wallet = payload["data"]
    elif isinstance(payload, dict) and payload.get("id"):
        wallet = payload
    elif isinstance(payload, list) and payload and isinstance(payload[0], dict):
        wallet = payload[0]
    if not wallet or not wallet.get("id"):
        return None

    balance = parse_decimal(pick(wallet, "balance", "current_balance"))
    if balance is None:
        logger.warning("Wallet %s has unparsable balance %r, using 0", wallet["id"], wallet.get("balance"))
        balance = ZERO
    return WalletSnapshot(
        id=str(wallet["id"]),
        current_balance=balance,
        currency=_optional_str(wallet.get("currency")) or default_currency,
    )


def unwrap_transactions(payload: Any) -> list[dict[str, Any]]:
    """Transaction rows from a bare list, {data: [...]} or {transactions: [...]}."""
    rows: Any = []
    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        if "data" in payload:
            rows = payload["data"]
        elif "transactions" in payload:
            rows = payload["transactions"]
    if not isinstance(rows, list):
        return []
    skipped = sum(1 for r in rows if not isinstance(r, dict))
    if skipped:
        logger.warning("Skipped %d non-object rows in transaction feed", skipped)
    return [r for r in rows if isinstance(r, dict)]


def parse_user_names(payload: Any) -> dict[str, str]:
    """[{id, fullName}] (optionally wrapped in {data: [...]}) -> {id: fullName}."""
    rows = payload.get("data") if isinstance(payload, dict) else payload
    if not isinstance(rows, list):
        return {}
    names: dict[str, str] = {}
    for row in rows:
        if not isinstance(row, dict) or not row.get("id"):
            continue
        name = pick(row, "fullName", "full_name")
        if name:
            names[str(row["id"])] = str(name)
    return names
