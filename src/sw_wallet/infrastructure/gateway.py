"""HttpWalletGateway — WalletGatewayProtocol over the remote JSON API.

Endpoints:
  GET  /wallets/me                  -> wallet (bare, {data: ...} or [wallet])
  GET  /wallets/{id}/transactions   -> newest-first rows (bare or wrapped)
  POST /users/names {userIds}       -> [{id, fullName}]

Both GETs are cached and coalesced by the session RequestCache.
"""

from typing import Any

from src.sw_client.infrastructure.http_client import ApiClient, RequestOptions
from src.sw_common.errors import WalletNotFoundError
from src.sw_wallet.domain.models import WalletSnapshot
from src.sw_wallet.domain.normalizer import parse_user_names, parse_wallet, unwrap_transactions

WALLET_ENDPOINT = "/wallets/me"
USER_NAMES_ENDPOINT = "/users/names"


def transactions_endpoint(wallet_id: str) -> str:
    return f"/wallets/{wallet_id}/transactions"


class HttpWalletGateway:
    def __init__(
        self,
        api: ApiClient,
        default_currency: str = "RWF",
        cache_duration: float | None = None,
    ) -> None:
        self._api = api
        self._default_currency = default_currency
        self._read = RequestOptions(cache=True, cache_duration=cache_duration)

    async def get_wallet(self) -> WalletSnapshot:
        payload = await self._api.get(WALLET_ENDPOINT, self._read)
        wallet = parse_wallet(payload, self._default_currency)
        if wallet is None:
            raise WalletNotFoundError()
        return wallet

    async def list_transactions(self, wallet_id: str) -> list[dict[str, Any]]:
        payload = await self._api.get(transactions_endpoint(wallet_id), self._read)
        return unwrap_transactions(payload)

    async def lookup_user_names(self, user_ids: list[str]) -> dict[str, str]:
        payload = await self._api.post(USER_NAMES_ENDPOINT, {"userIds": user_ids})
        return parse_user_names(payload)

    def invalidate(self, wallet_id: str | None = None) -> None:
        self._api.invalidate(WALLET_ENDPOINT)
        if wallet_id is not None:
            self._api.invalidate(transactions_endpoint(wallet_id))
