"""
Pytest configuration and shared fixtures.

Provides a throwaway RSA service-account key, tool configuration, a fake
clock, and a patched httpx.AsyncClient for tests that exercise HTTP calls.
"""

import json
from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from gke_mcp.auth import ServiceAccountCredentials
from gke_mcp.config import GatewayConfig, ToolConfig

CLIENT_EMAIL = "a@b.iam.gserviceaccount.com"
PROJECT_ID = "proj-1"


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """RSA key generated once per session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key) -> str:
    """PKCS8 PEM as found in service-account key files."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def public_key_pem(rsa_private_key) -> str:
    return (
        rsa_private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode("ascii")
    )


@pytest.fixture
def service_account_json(private_key_pem) -> str:
    """Raw service-account key document."""
    return json.dumps(
        {
            "type": "service_account",
            "project_id": PROJECT_ID,
            "private_key_id": "abc123",
            "private_key": private_key_pem,
            "client_email": CLIENT_EMAIL,
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    )


@pytest.fixture
def credentials(private_key_pem) -> ServiceAccountCredentials:
    return ServiceAccountCredentials(
        client_email=CLIENT_EMAIL, private_key=private_key_pem, project_id=PROJECT_ID
    )


@pytest.fixture
def tool_config(service_account_json) -> ToolConfig:
    return ToolConfig(
        project_id=PROJECT_ID,
        cluster_name="tech-island",
        region="europe-west1",
        service_account_key=service_account_json,
    )


@pytest.fixture
def gateway_config(tool_config) -> GatewayConfig:
    return GatewayConfig(tool=tool_config)


class FakeClock:
    """Callable clock whose time only moves when a test advances it."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_http() -> Generator[tuple[MagicMock, AsyncMock], None, None]:
    """Patch httpx.AsyncClient.

    Yields (client class mock, client instance). Set return values or
    side effects on instance.get / instance.post; class mock call_count
    tells how many clients (i.e. HTTP calls) were opened.
    """
    with patch("httpx.AsyncClient") as mock_client:
        instance = AsyncMock()
        mock_client.return_value.__aenter__.return_value = instance
        yield mock_client, instance

