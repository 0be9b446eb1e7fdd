"""WalletLedgerService — fetch → reconcile → enrich → view pipeline.

refresh() re-runs the whole pipeline from scratch (pull-to-refresh): the
cached wallet/transaction reads are invalidated, the feed is reconciled
again and counterparty enrichment is scheduled in the background.
Only wallet/transaction fetch errors propagate; everything downstream
degrades gracefully.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, tzinfo
from decimal import Decimal

from src.sw_common.datetime_utils import utc_now
from src.sw_wallet.application.enrichment import CounterpartyNameResolver
from src.sw_wallet.application.schemas import (
    LedgerQuery,
    LedgerViewResponse,
    WalletSummaryResponse,
)
from src.sw_wallet.domain.models import NormalizedTransaction, WalletSnapshot
from src.sw_wallet.domain.reconciler import DEFAULT_EPSILON, reconcile
from src.sw_wallet.domain.repository import WalletGatewayProtocol
from src.sw_wallet.domain.view import build_view, summarize

logger = logging.getLogger(__name__)


@dataclass
class LedgerState:
    wallet: WalletSnapshot
    transactions: list[NormalizedTransaction]
    refreshed_at: datetime


class WalletLedgerService:
    def __init__(
        self,
        gateway: WalletGatewayProtocol,
        resolver: CounterpartyNameResolver | None = None,
        epsilon: Decimal = DEFAULT_EPSILON,
        tz: tzinfo = UTC,
    ) -> None:
        self._gateway = gateway
        self._resolver = resolver or CounterpartyNameResolver(gateway)
        self._epsilon = epsilon
        self._tz = tz
        self._state: LedgerState | None = None
        self._enrichment: asyncio.Task[None] | None = None

    @property
    def state(self) -> LedgerState | None:
        return self._state

    @property
    def resolver(self) -> CounterpartyNameResolver:
        return self._resolver

    async def refresh(self) -> LedgerState:
        previous = self._state
        self._gateway.invalidate(previous.wallet.id if previous else None)

        wallet = await self._gateway.get_wallet()
        raw_feed = await self._gateway.list_transactions(wallet.id)
        transactions = reconcile(wallet, raw_feed, self._epsilon)

        self._state = LedgerState(
            wallet=wallet,
            transactions=transactions,
            refreshed_at=utc_now(),
        )
        self._schedule_enrichment(transactions)
        logger.info(
            "Wallet %s refreshed: %d transactions, balance %s %s",
            wallet.id,
            len(transactions),
            wallet.current_balance,
            wallet.currency,
        )
        return self._state

    async def wait_for_enrichment(self) -> None:
        if self._enrichment is not None:
            await asyncio.shield(self._enrichment)

    async def get_view(self, query: LedgerQuery, today: date | None = None) -> LedgerViewResponse:
        state = self._state or await self.refresh()
        names = self._resolver.names
        view = build_view(
            state.transactions,
            today=today or utc_now().astimezone(self._tz).date(),
            direction=query.direction,
            category=query.category,
            query=query.q,
            names=names,
            tz=self._tz,
        )
        return LedgerViewResponse.from_view(state.wallet, view, names)

    async def get_summary(self) -> WalletSummaryResponse:
        state = self._state or await self.refresh()
        return WalletSummaryResponse.from_summary(state.wallet, summarize(state.transactions))

    def reset(self) -> None:
        """Forget session state (logout)."""
        if self._enrichment is not None and not self._enrichment.done():
            self._enrichment.cancel()
        self._enrichment = None
        self._state = None
        self._resolver.clear()

    def _schedule_enrichment(self, transactions: list[NormalizedTransaction]) -> None:
        task = asyncio.create_task(self._enrich_after(self._enrichment, transactions))
        task.add_done_callback(_log_enrichment_crash)
        self._enrichment = task

    async def _enrich_after(
        self,
        previous: asyncio.Task[None] | None,
        transactions: list[NormalizedTransaction],
    ) -> None:
        # missing_ids skips ids of an outstanding lookup; wait for it first.
        if previous is not None and not previous.done():
            try:
                await asyncio.wait([previous])
            except asyncio.CancelledError:
                previous.cancel()
                raise
        await self._resolver.enrich(transactions)


def _log_enrichment_crash(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Counterparty enrichment crashed", exc_info=exc)
