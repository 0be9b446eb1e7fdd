"""Counterparty name enrichment for commission-linked transactions.

All counterparty ids missing a display name on the loaded page are resolved
in one batched lookup. Resolved names go into a per-session cache keyed by
user id and are backfilled into each transaction's metadata. Ids already
cached are never requested again.

Best-effort: a failed lookup is logged and swallowed; the list still renders,
just without counterparty names.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from src.sw_common.enums import TransactionCategory
from src.sw_common.errors import AppError
from src.sw_wallet.domain.models import COUNTERPARTY_NAME_KEY, NormalizedTransaction
from src.sw_wallet.domain.repository import WalletGatewayProtocol
from src.sw_wallet.domain.view import categorize

logger = logging.getLogger(__name__)

_COMMISSION_CATEGORIES = frozenset({
    TransactionCategory.COMMISSION_PAYMENT,
    TransactionCategory.COMMISSION_EARNED,
})


def _needs_name(tx: NormalizedTransaction) -> bool:
    return (
        categorize(tx) in _COMMISSION_CATEGORIES
        and tx.counterparty_id is not None
        and tx.counterparty_name is None
    )


class CounterpartyNameResolver:
    def __init__(self, gateway: WalletGatewayProtocol) -> None:
        self._gateway = gateway
        self._names: dict[str, str] = {}
        self._requested: set[str] = set()  # ids in an outstanding lookup

    @property
    def names(self) -> Mapping[str, str]:
        return MappingProxyType(self._names)

    def missing_ids(self, transactions: Iterable[NormalizedTransaction]) -> list[str]:
        """Distinct uncached counterparty ids, in feed order."""
        seen: dict[str, None] = {}
        for tx in transactions:
            if not _needs_name(tx):
                continue
            user_id = tx.counterparty_id
            if user_id and user_id not in self._names and user_id not in self._requested:
                seen[user_id] = None
        return list(seen)

    def backfill(self, transactions: Iterable[NormalizedTransaction]) -> int:
        """Write cached names into metadata. Returns the number of rows updated."""
        updated = 0
        for tx in transactions:
            if not _needs_name(tx):
                continue
            name = self._names.get(tx.counterparty_id or "")
            if name:
                tx.metadata[COUNTERPARTY_NAME_KEY] = name
                updated += 1
        return updated

    async def enrich(self, transactions: Sequence[NormalizedTransaction]) -> None:
        self.backfill(transactions)
        user_ids = self.missing_ids(transactions)
        if not user_ids:
            return

        self._requested.update(user_ids)
        try:
            resolved = await self._gateway.lookup_user_names(user_ids)
        except AppError as exc:
            logger.warning(
                "Counterparty lookup failed for %d ids: %s", len(user_ids), exc.message
            )
            return
        finally:
            self._requested.difference_update(user_ids)

        self._names.update(resolved)
        updated = self.backfill(transactions)
        logger.debug("Resolved %d/%d counterparty names, %d rows backfilled",
                     len(resolved), len(user_ids), updated)

    def clear(self) -> None:
        self._names.clear()
