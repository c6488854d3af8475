"""
JWT bearer assertion signing.

Builds the self-signed RS256 assertion that Google's OAuth2 token endpoint
exchanges for an access token (jwt-bearer grant, RFC 7523).
"""

import json
import time
from collections.abc import Callable

from jwt.algorithms import RSAAlgorithm

from ..exceptions import SigningError
from .credentials import ServiceAccountCredentials
from .encoding import base64url_encode

TOKEN_URL = "https://oauth2.googleapis.com/token"
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

ASSERTION_LIFETIME_SECONDS = 3600

_HEADER = {"alg": "RS256", "typ": "JWT"}
_RS256 = RSAAlgorithm(RSAAlgorithm.SHA256)


def _encode_segment(payload: dict) -> str:
    return base64url_encode(json.dumps(payload, separators=(",", ":")))


def sign_assertion(
    credentials: ServiceAccountCredentials,
    scope: str = CLOUD_PLATFORM_SCOPE,
    audience: str = TOKEN_URL,
    clock: Callable[[], float] = time.time,
) -> str:
    """Create a signed JWT assertion for the jwt-bearer grant.

    Args:
        credentials: Parsed service-account key
        scope: Space-separated OAuth2 scopes to request
        audience: Token endpoint URL (aud claim)
        clock: Returns current epoch seconds (injectable for tests)

    Returns:
        Compact JWT: base64url(header).base64url(claims).base64url(signature)

    Raises:
        SigningError: If the private key cannot be imported or signing fails

    Example:
        >>> creds = load_credentials(os.environ["GCP_SERVICE_ACCOUNT_KEY"])
        >>> assertion = sign_assertion(creds)
        >>> token = await exchange_assertion(assertion)
    """
    issued_at = int(clock())
    claims = {
        "iss": credentials.client_email,
        "scope": scope,
        "aud": audience,
        "iat": issued_at,
        "exp": issued_at + ASSERTION_LIFETIME_SECONDS,
    }
    signing_input = f"{_encode_segment(_HEADER)}.{_encode_segment(claims)}"

    try:
        key = _RS256.prepare_key(credentials.private_key)
        signature = _RS256.sign(signing_input.encode("ascii"), key)
    except Exception as e:
        # Never include the key material in the message
        raise SigningError(
            f"Failed to sign assertion for {credentials.client_email}: {type(e).__name__}"
        ) from e

    return f"{signing_input}.{base64url_encode(signature)}"
