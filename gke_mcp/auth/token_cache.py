"""
Access token cache with single-flight refresh.

One token is kept per (client_email, scope). Concurrent callers that find
the token missing or about to expire wait on the same per-key lock, so only
one of them signs and exchanges a new assertion.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from .assertion import CLOUD_PLATFORM_SCOPE, TOKEN_URL, sign_assertion
from .credentials import ServiceAccountCredentials
from .token_exchange import AccessToken, exchange_assertion

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]


class TokenCache:
    """Cache of exchanged access tokens.

    Caching Strategy:
    - Token is reused until `refresh_margin` seconds before expiry
    - Refresh is serialized per (client_email, scope); waiters re-check
      the cache after acquiring the lock

    Example:
        >>> cache = TokenCache()
        >>> token = await cache.get_token(credentials)
        >>> # Second call within the hour returns the cached token
        >>> token = await cache.get_token(credentials)
    """

    def __init__(
        self,
        token_url: str = TOKEN_URL,
        refresh_margin: float = 300.0,
        timeout: float = 30.0,
        clock: Callable[[], float] = time.time,
    ):
        self.token_url = token_url
        self.refresh_margin = refresh_margin
        self.timeout = timeout
        self._clock = clock
        self._tokens: dict[CacheKey, AccessToken] = {}
        self._locks: dict[CacheKey, asyncio.Lock] = {}

    def _cached(self, key: CacheKey) -> AccessToken | None:
        cached = self._tokens.get(key)
        if cached and cached.is_valid(self._clock(), self.refresh_margin):
            return cached
        return None

    async def get_token(
        self,
        credentials: ServiceAccountCredentials,
        scope: str = CLOUD_PLATFORM_SCOPE,
    ) -> str:
        """Return a valid bearer token, refreshing it when needed.

        Raises:
            SigningError: If the assertion cannot be signed
            TokenExchangeError: If the token endpoint rejects it
        """
        key = (credentials.client_email, scope)

        cached = self._cached(key)
        if cached:
            return cached.token

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another caller may have refreshed while we waited
            cached = self._cached(key)
            if cached:
                return cached.token

            logger.info(f"Refreshing access token for {credentials.client_email}")
            assertion = sign_assertion(
                credentials, scope=scope, audience=self.token_url, clock=self._clock
            )
            access_token = await exchange_assertion(
                assertion, token_url=self.token_url, timeout=self.timeout, clock=self._clock
            )
            self._tokens[key] = access_token
            return access_token.token

    def invalidate(
        self,
        credentials: ServiceAccountCredentials,
        scope: str = CLOUD_PLATFORM_SCOPE,
    ) -> None:
        """Drop the cached token for one credential and scope."""
        self._tokens.pop((credentials.client_email, scope), None)

    def clear(self) -> None:
        """Drop all cached tokens."""
        self._tokens.clear()
