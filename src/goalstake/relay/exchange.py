"""
Token exchange against the goalstake backend.

The backend correlates a wallet address with an off-chain identity and
issues a short-lived access token for verification data requests.
Tokens are never cached; each request fetches a fresh one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from ..config import DEFAULT_TOKEN_SERVICE_URL
from ..errors import ExchangeFailed

logger = logging.getLogger(__name__)

TOKEN_ENDPOINT = "/api/get-token"


@dataclass(frozen=True)
class AccessToken:
    token: str
    wallet_address: str
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __str__(self) -> str:
        return self.token


class TokenExchangeClient:
    def __init__(
        self,
        base_url: str = DEFAULT_TOKEN_SERVICE_URL,
        endpoint: str = TOKEN_ENDPOINT,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = base_url.rstrip("/") + endpoint
        self.timeout = timeout
        self._transport = transport

    async def exchange(self, wallet_address: str) -> AccessToken:
        """
        Swap a wallet address for an access token.

        Raises:
            ExchangeFailed: On transport error, non-2xx status, or a body
                            without a string ``accessToken``
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.url, json={"walletAddress": wallet_address})
        except httpx.HTTPError as exc:
            raise ExchangeFailed(f"Token service unreachable: {exc}") from exc

        if not resp.is_success:
            raise ExchangeFailed(
                f"Token service error: {resp.status_code} - {resp.text}",
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise ExchangeFailed("Token service returned a non-JSON body", status_code=resp.status_code) from exc

        token = body.get("accessToken") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise ExchangeFailed("Token service response has no accessToken", status_code=resp.status_code)

        logger.info("Fetched access token for %s", wallet_address)
        return AccessToken(token=token, wallet_address=wallet_address, raw=body)
