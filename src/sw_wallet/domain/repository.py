"""WalletGatewayProtocol: the remote reads the ledger service depends on.

HttpWalletGateway implements it over the JSON API; unit tests pass an
AsyncMock with the same shape.
"""

from typing import Any, Protocol

from src.sw_wallet.domain.models import WalletSnapshot


class WalletGatewayProtocol(Protocol):
    async def get_wallet(self) -> WalletSnapshot: ...

    async def list_transactions(self, wallet_id: str) -> list[dict[str, Any]]: ...

    async def lookup_user_names(self, user_ids: list[str]) -> dict[str, str]: ...

    def invalidate(self, wallet_id: str | None = None) -> None: ...
