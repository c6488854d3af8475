"""
OAuth2 token exchange for signed JWT assertions.

Posts the assertion to the token endpoint and returns the short-lived
bearer token. No retry happens here; callers decide whether a failure is
worth another attempt.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

from ..exceptions import TokenExchangeError
from .assertion import TOKEN_URL

logger = logging.getLogger(__name__)

JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
DEFAULT_EXPIRES_IN = 3600


@dataclass(frozen=True)
class AccessToken:
    """Exchanged bearer token.

    Attributes:
        token: Bearer token string, excluded from repr
        expires_at: Expiry as epoch seconds
    """

    token: str = field(repr=False)
    expires_at: float

    def is_valid(self, now: float, margin: float = 0.0) -> bool:
        """True while the token has more than `margin` seconds left."""
        return now < self.expires_at - margin


async def exchange_assertion(
    assertion: str,
    token_url: str = TOKEN_URL,
    timeout: float = 30.0,
    clock: Callable[[], float] = time.time,
) -> AccessToken:
    """Exchange a signed assertion for an access token.

    Args:
        assertion: Compact JWT from sign_assertion()
        token_url: OAuth2 token endpoint
        timeout: Request timeout in seconds
        clock: Returns current epoch seconds (injectable for tests)

    Returns:
        AccessToken with its expiry instant

    Raises:
        TokenExchangeError: On non-2xx response (body attached), network
            failure, or a response without access_token
    """
    requested_at = clock()

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                token_url,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
                headers={"Accept": "application/json"},
            )
    except httpx.HTTPError as e:
        raise TokenExchangeError(f"Token endpoint unreachable: {e}") from e

    if not 200 <= response.status_code < 300:
        body = response.text
        raise TokenExchangeError(
            f"Token exchange rejected: {body}",
            body=body,
            status_code=response.status_code,
        )

    try:
        data = response.json()
        token = data["access_token"]
    except (ValueError, KeyError, TypeError) as e:
        raise TokenExchangeError(
            "Token endpoint response has no access_token",
            body=response.text,
            status_code=response.status_code,
        ) from e

    expires_in = data.get("expires_in") or DEFAULT_EXPIRES_IN
    logger.debug(f"Exchanged assertion for access token (expires in {expires_in}s)")

    return AccessToken(token=token, expires_at=requested_at + float(expires_in))
