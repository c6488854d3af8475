"""Base64url helpers for JWT segments (RFC 7515, no padding)."""

import base64


def base64url_encode(data: bytes | str) -> str:
    """Encode bytes (or UTF-8 text) as unpadded base64url."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_decode(text: str) -> bytes:
    """Decode unpadded base64url text back to bytes."""
    padding = -len(text) % 4
    return base64.urlsafe_b64decode(text + "=" * padding)
