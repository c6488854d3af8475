"""
Connectivity tools.

Small tools an agent can call to confirm the gateway is reachable before
using the cluster tools.
"""

from datetime import UTC, datetime
from typing import Any

from .. import __version__
from ..config import get_config

SERVER_NAME = "gke-mcp"
SERVER_DESCRIPTION = "MCP gateway for GKE and Cloud Logging"


def hello(name: str) -> str:
    """
    Greet the caller; confirms the gateway is reachable.

    Args:
        name: The name to greet
    """
    return f"Hello, {name}! This MCP server is working correctly."


def echo(message: str) -> str:
    """Return the message unchanged, prefixed with "Echo: "."""
    return f"Echo: {message}"


def server_info() -> dict[str, Any]:
    """Name, version, active workload strategy and current time."""
    config = get_config()
    return {
        "name": SERVER_NAME,
        "version": __version__,
        "description": SERVER_DESCRIPTION,
        "workload_strategy": config.workload_strategy,
        "timestamp": datetime.now(UTC).isoformat(),
    }
