"""
Service-account authentication for Google Cloud REST APIs.

Credential Loader -> Assertion Signer -> Token Exchanger, with a
single-flight TokenCache on top.
"""

from .assertion import CLOUD_PLATFORM_SCOPE, TOKEN_URL, sign_assertion
from .credentials import ServiceAccountCredentials, load_credentials
from .encoding import base64url_decode, base64url_encode
from .token_cache import TokenCache
from .token_exchange import JWT_BEARER_GRANT, AccessToken, exchange_assertion

__all__ = [
    "CLOUD_PLATFORM_SCOPE",
    "TOKEN_URL",
    "JWT_BEARER_GRANT",
    "ServiceAccountCredentials",
    "AccessToken",
    "TokenCache",
    "load_credentials",
    "sign_assertion",
    "exchange_assertion",
    "base64url_encode",
    "base64url_decode",
]
