"""
Service-account key parsing.

Turns the raw JSON key document (as downloaded from IAM, or pasted into an
environment variable) into ServiceAccountCredentials.
"""

import json
from dataclasses import dataclass, field

from ..exceptions import ParseError

REQUIRED_FIELDS = ("client_email", "private_key")


@dataclass(frozen=True)
class ServiceAccountCredentials:
    """Parsed service-account key.

    Attributes:
        client_email: Service account identity (JWT issuer)
        private_key: PKCS8 PEM private key, excluded from repr
        project_id: Project that owns the service account (may be empty)
    """

    client_email: str
    private_key: str = field(repr=False)
    project_id: str = ""


def load_credentials(raw: str) -> ServiceAccountCredentials:
    """Parse a service-account JSON document.

    Args:
        raw: JSON key document as a string

    Returns:
        ServiceAccountCredentials

    Raises:
        ParseError: If the string is not a JSON object or lacks
            client_email / private_key
    """
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise ParseError(f"Service account key is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("Service account key must be a JSON object")

    missing = [name for name in REQUIRED_FIELDS if not data.get(name)]
    if missing:
        raise ParseError(
            f"Service account key is missing required fields: {', '.join(missing)}",
            details={"missing": missing},
        )

    # Keys pasted into env vars often keep the JSON-escaped newlines
    private_key = data["private_key"].replace("\\n", "\n")

    return ServiceAccountCredentials(
        client_email=data["client_email"],
        private_key=private_key,
        project_id=data.get("project_id") or "",
    )
