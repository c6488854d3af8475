"""
Configuration management for the GKE MCP gateway.

Loads the target cluster and service-account key from environment
variables once at startup. The resulting objects are frozen and passed
into every tool operation; nothing mutates them afterwards.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .auth.credentials import load_credentials
from .exceptions import ParseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolConfig:
    """Target of a tool operation.

    Attributes:
        project_id: GCP project ID
        cluster_name: GKE cluster name
        region: Cluster location (region or zone)
        service_account_key: Raw service-account JSON, excluded from repr
    """

    project_id: str
    cluster_name: str
    region: str
    service_account_key: str = field(repr=False)


@dataclass(frozen=True)
class GatewayConfig:
    """MCP gateway configuration."""

    tool: ToolConfig
    workload_strategy: str = "kubernetes"
    http_timeout: float = 30.0
    default_namespace: str = "apps"
    retry_attempts: int = 3
    log_lookback_seconds: int = 3600
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"


def _read_service_account_key(env: Mapping[str, str]) -> str:
    """Raw key JSON from GCP_SERVICE_ACCOUNT_KEY or the GOOGLE_APPLICATION_CREDENTIALS file."""
    raw = env.get("GCP_SERVICE_ACCOUNT_KEY", "")
    if raw:
        return raw

    key_path = env.get("GOOGLE_APPLICATION_CREDENTIALS", "")
    if key_path:
        try:
            return Path(key_path).read_text()
        except OSError as e:
            logger.error(f"Cannot read GOOGLE_APPLICATION_CREDENTIALS ({key_path}): {e}")
    return ""


def _project_from_key(raw_key: str) -> str:
    try:
        return load_credentials(raw_key).project_id
    except ParseError as e:
        logger.warning(f"Cannot derive project ID from service account key: {e}")
        return ""


def load_config(environ: Mapping[str, str] | None = None) -> GatewayConfig:
    """
    Build configuration from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (for tests)

    Returns:
        GatewayConfig. Missing values are logged rather than raised; the
        tool operations fail with typed errors when they need them.
    """
    env = os.environ if environ is None else environ

    service_account_key = _read_service_account_key(env)
    project_id = env.get("GCP_PROJECT_ID", "")
    if not project_id and service_account_key:
        project_id = _project_from_key(service_account_key)

    tool = ToolConfig(
        project_id=project_id,
        cluster_name=env.get("GKE_CLUSTER_NAME", ""),
        region=env.get("GKE_REGION", ""),
        service_account_key=service_account_key,
    )

    missing = [
        name
        for name, value in (
            ("GCP_PROJECT_ID", tool.project_id),
            ("GKE_CLUSTER_NAME", tool.cluster_name),
            ("GKE_REGION", tool.region),
            ("GCP_SERVICE_ACCOUNT_KEY", tool.service_account_key),
        )
        if not value
    ]
    if missing:
        logger.warning(f"Missing configuration: {', '.join(missing)}")

    return GatewayConfig(
        tool=tool,
        workload_strategy=env.get("GKE_WORKLOAD_STRATEGY", "kubernetes"),
        http_timeout=float(env.get("GCP_HTTP_TIMEOUT", "30")),
        default_namespace=env.get("GKE_DEFAULT_NAMESPACE", "apps"),
        retry_attempts=max(1, int(env.get("GKE_TOOL_RETRY_ATTEMPTS", "3"))),
        log_lookback_seconds=int(env.get("GKE_LOG_LOOKBACK_SECONDS", "3600")),
        host=env.get("MCP_HOST", "0.0.0.0"),
        port=int(env.get("MCP_PORT", "8080")),
        log_level=env.get("LOG_LEVEL", "INFO"),
    )


_config: GatewayConfig | None = None


def get_config() -> GatewayConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config

    if _config is None:
        _config = load_config()
    return _config


def clear_config() -> None:
    """Clear cached configuration (for testing)."""
    global _config
    _config = None
