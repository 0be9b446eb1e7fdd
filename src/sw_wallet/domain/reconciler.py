"""Ledger trail reconstruction.

The feed is newest-first and may omit balance snapshots (legacy rows,
rows written before the snapshot columns existed). The live wallet balance
is the one value guaranteed fresh, so the trail is rebuilt by walking the
feed backward from it:

    running = wallet.current_balance
    for tx in feed (newest -> oldest):
        tx.balance_after  = running        (explicit value is only cross-checked)
        tx.balance_before = explicit, else reverse tx from balance_after
        running = tx.balance_before

Identity per direction:
    credit: after = before + amount
    debit:  after = before - amount

Result: newer.balance_before == older.balance_after for every adjacent pair.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from src.sw_common.enums import Direction
from src.sw_common.id_generator import SyntheticIdGenerator
from src.sw_wallet.domain.models import NormalizedTransaction, WalletSnapshot
from src.sw_wallet.domain.normalizer import ParsedTransaction, parse_transaction

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = Decimal("0.01")


def after_from_before(before: Decimal, amount: Decimal, direction: Direction) -> Decimal:
    return before - amount if direction is Direction.DEBIT else before + amount


def before_from_after(after: Decimal, amount: Decimal, direction: Direction) -> Decimal:
    return after + amount if direction is Direction.DEBIT else after - amount


def resolve_balances(
    tx: ParsedTransaction,
    running: Decimal,
    epsilon: Decimal = DEFAULT_EPSILON,
) -> tuple[Decimal, Decimal]:
    """Return (balance_before, balance_after) for one row given the running balance."""
    explicit_before = tx.explicit_balance_before
    candidate_after = tx.explicit_balance_after
    if candidate_after is None and explicit_before is not None:
        candidate_after = after_from_before(explicit_before, tx.amount, tx.direction)

    if candidate_after is None:
        after = running
        before = before_from_after(after, tx.amount, tx.direction)
        return before, after

    if abs(candidate_after - running) > epsilon:
        logger.warning(
            "Balance mismatch on %s: server after=%s, computed=%s; using computed",
            tx.id,
            candidate_after,
            running,
        )
        after = running
        return before_from_after(after, tx.amount, tx.direction), after

    # Within epsilon: snap to running so the trail stays exactly contiguous
    after = running
    before = (
        explicit_before
        if explicit_before is not None
        else before_from_after(after, tx.amount, tx.direction)
    )
    return before, after


def reconcile(
    wallet: WalletSnapshot,
    raw_feed: Iterable[dict[str, Any]],
    epsilon: Decimal = DEFAULT_EPSILON,
) -> list[NormalizedTransaction]:
    """Normalize a newest-first feed and derive a gap-free balance trail.

    Pure and synchronous; the same wallet snapshot and feed always produce
    equal output. Feed order is preserved.
    """
    ids = SyntheticIdGenerator()
    running = wallet.current_balance
    result: list[NormalizedTransaction] = []

    for raw in raw_feed:
        tx = parse_transaction(raw, wallet.id, ids)
        before, after = resolve_balances(tx, running, epsilon)
        running = before
        result.append(
            NormalizedTransaction(
                id=tx.id,
                wallet_id=tx.wallet_id,
                transaction_type=tx.transaction_type,
                amount=tx.amount,
                direction=tx.direction,
                balance_before=before,
                balance_after=after,
                status=tx.status,
                description=tx.description,
                reference_type=tx.reference_type,
                reference_id=tx.reference_id,
                transaction_reference=tx.transaction_reference,
                metadata=tx.metadata,
                created_at=tx.created_at,
                updated_at=tx.updated_at,
            )
        )

    logger.debug(
        "Reconciled %d transactions for wallet %s (opening balance %s)",
        len(result),
        wallet.id,
        running,
    )
    return result
