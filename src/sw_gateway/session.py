"""WalletSession — explicitly constructed, per-process session container.

Owns everything with session lifetime: credential store, request cache,
HTTP client, counterparty name cache (inside the ledger service). Tests
build isolated instances with a mock transport; the app builds one in its
lifespan and keeps it on app.state.
"""

import logging
from typing import Any

import httpx
from starlette.requests import Request

from config.settings import Settings, settings
from src.sw_client.domain.cache import RequestCache
from src.sw_client.domain.credentials import CredentialStoreProtocol
from src.sw_client.infrastructure.credential_store import InMemoryCredentialStore
from src.sw_client.infrastructure.http_client import ApiClient, RequestOptions
from src.sw_common.errors import UpstreamError
from src.sw_payments.application.service import PaymentsService
from src.sw_wallet.application.enrichment import CounterpartyNameResolver
from src.sw_wallet.application.service import WalletLedgerService
from src.sw_wallet.infrastructure.gateway import HttpWalletGateway

logger = logging.getLogger(__name__)

LOGIN_ENDPOINT = "/auth/login"


class WalletSession:
    def __init__(
        self,
        config: Settings = settings,
        transport: httpx.AsyncBaseTransport | None = None,
        credentials: CredentialStoreProtocol | None = None,
    ) -> None:
        self.credentials = credentials or InMemoryCredentialStore()
        self.cache = RequestCache(default_duration=config.CACHE_DURATION_SECONDS)
        self.api = ApiClient(
            config.API_BASE_URL,
            self.credentials,
            self.cache,
            transport=transport,
            timeout=config.HTTP_TIMEOUT_SECONDS,
        )
        gateway = HttpWalletGateway(self.api, default_currency=config.DEFAULT_CURRENCY)
        self.ledger = WalletLedgerService(
            gateway,
            CounterpartyNameResolver(gateway),
            epsilon=config.BALANCE_EPSILON,
        )
        self.payments = PaymentsService(
            self.api,
            default_currency=config.DEFAULT_CURRENCY,
            max_attempts=config.PAYMENT_POLL_MAX_ATTEMPTS,
            interval=config.PAYMENT_POLL_INTERVAL_SECONDS,
        )

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Authenticate against the remote API and store the access token.

        A 401 surfaces as InvalidCredentialsError and leaves stored
        credentials untouched.
        """
        payload = await self.api.post(
            LOGIN_ENDPOINT,
            {"email": email, "password": password},
            RequestOptions(require_auth=False, is_login_request=True),
        )
        data = payload.get("data", payload) if isinstance(payload, dict) else {}
        token = data.get("access_token") or data.get("accessToken")
        if not token:
            raise UpstreamError(200, "Login response did not include an access token")
        await self.credentials.set_token(str(token))
        self.reset()
        logger.info("Logged in as %s", email)
        return {"user": data.get("user")}

    async def logout(self) -> None:
        await self.credentials.clear_token()
        self.reset()

    def reset(self) -> None:
        """Drop cached reads and per-user ledger state."""
        self.api.invalidate()
        self.ledger.reset()

    async def aclose(self) -> None:
        self.ledger.reset()
        await self.api.aclose()


def get_session(request: Request) -> WalletSession:
    """FastAPI dependency: the app-wide WalletSession."""
    session: WalletSession = request.app.state.session
    return session
