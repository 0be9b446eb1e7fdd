"""ApiClient — httpx wrapper for the remote salon API.

Every GET goes through the session's RequestCache (optional TTL caching plus
in-flight coalescing). Writes are never cached; callers invalidate the
affected read keys afterwards.

401 handling:
  - login request (is_login_request=True)  -> InvalidCredentialsError,
    credential store untouched
  - any other request                      -> credential store cleared,
    then SessionExpiredError
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.sw_client.domain.cache import RequestCache
from src.sw_client.domain.credentials import CredentialStoreProtocol
from src.sw_common.errors import (
    InvalidCredentialsError,
    NetworkError,
    SessionExpiredError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


@dataclass
class RequestOptions:
    headers: dict[str, str] = field(default_factory=dict)
    require_auth: bool = True
    is_login_request: bool = False
    cache: bool = False
    cache_duration: float | None = None  # seconds; None = cache default


def cache_key(method: str, endpoint: str, params: dict[str, Any] | None = None) -> str:
    """Logical request identity: method + path + query. Never includes headers."""
    url = httpx.URL(endpoint, params=params) if params else httpx.URL(endpoint)
    return f"{method.upper()}:{url}"


class ApiClient:
    def __init__(
        self,
        base_url: str,
        credentials: CredentialStoreProtocol,
        cache: RequestCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._credentials = credentials
        self._cache = cache or RequestCache()
        self._http = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
        )

    @property
    def cache(self) -> RequestCache:
        return self._cache

    async def aclose(self) -> None:
        await self._http.aclose()

    def invalidate(self, endpoint: str | None = None, params: dict[str, Any] | None = None) -> None:
        """Drop the cached GET for endpoint, or the whole cache."""
        if endpoint is None:
            self._cache.invalidate()
        else:
            self._cache.invalidate(cache_key("GET", endpoint, params))

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    async def get(
        self,
        endpoint: str,
        options: RequestOptions | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        opts = options or RequestOptions()
        key = cache_key("GET", endpoint, params)

        async def load() -> Any:
            return await self._request("GET", endpoint, opts, params=params)

        return await self._cache.fetch(
            key, load, cache=opts.cache, cache_duration=opts.cache_duration
        )

    async def post(self, endpoint: str, data: Any, options: RequestOptions | None = None) -> Any:
        return await self._request("POST", endpoint, options or RequestOptions(), body=data)

    async def put(self, endpoint: str, data: Any, options: RequestOptions | None = None) -> Any:
        return await self._request("PUT", endpoint, options or RequestOptions(), body=data)

    async def patch(self, endpoint: str, data: Any, options: RequestOptions | None = None) -> Any:
        return await self._request("PATCH", endpoint, options or RequestOptions(), body=data)

    async def delete(self, endpoint: str, options: RequestOptions | None = None) -> Any:
        return await self._request("DELETE", endpoint, options or RequestOptions())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _headers(self, options: RequestOptions) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if options.require_auth:
            token = await self._credentials.get_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        headers.update(options.headers)
        return headers

    async def _request(
        self,
        method: str,
        endpoint: str,
        options: RequestOptions,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = await self._headers(options)
        try:
            response = await self._http.request(
                method,
                endpoint,
                json=body,
                params=params,
                headers=headers,
            )
        except httpx.TransportError as exc:
            logger.warning("Network failure on %s %s: %s", method, endpoint, exc)
            raise NetworkError() from exc
        return await self._handle_response(response, options.is_login_request)

    async def _handle_response(self, response: httpx.Response, is_login_request: bool) -> Any:
        if response.is_success:
            if "application/json" not in response.headers.get("content-type", ""):
                return {}
            try:
                return response.json()
            except ValueError as exc:
                raise UpstreamError(response.status_code, "Malformed JSON response") from exc

        if response.status_code == 401:
            if is_login_request:
                raise InvalidCredentialsError(
                    _error_message(response) or "Invalid email or password"
                )
            await self._credentials.clear_token()
            logger.info("Session expired on %s, credentials cleared", response.request.url.path)
            raise SessionExpiredError()

        message = _error_message(response) or f"API Error: {response.reason_phrase}"
        raise UpstreamError(response.status_code, message)


def _error_message(response: httpx.Response) -> str | None:
    """Pull `message` (or `error`) out of a JSON error body, if there is one."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    message = payload.get("message") or payload.get("error")
    if isinstance(message, list):
        message = "; ".join(str(m) for m in message)
    return str(message) if message else None
