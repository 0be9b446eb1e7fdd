"""Credential store Protocol — the HTTP client depends on this, not on storage.

Unit tests inject an AsyncMock or the in-memory implementation.
"""

from typing import Protocol


class CredentialStoreProtocol(Protocol):
    async def get_token(self) -> str | None: ...

    async def set_token(self, token: str) -> None: ...

    async def clear_token(self) -> None: ...
