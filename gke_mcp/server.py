"""
GKE MCP Server.

This module provides the FastMCP server with read-only tools for GKE
workloads and Cloud Logging, plus connectivity tools and a health route.
Errors rendered by the tool layer are raised as ToolError so MCP clients
see them with isError set on the call result.

Usage:
    Standalone:
        python -m gke_mcp.server

    With FastAPI (mount):
        from gke_mcp.server import create_mcp_app
        app.mount("/gke", create_mcp_app())
"""

import logging
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from starlette.requests import Request
from starlette.responses import JSONResponse

from .config import get_config
from .logging_config import setup_logging
from .tools import info

logger = logging.getLogger(__name__)


def _raise_on_error(result: Any) -> Any:
    """Turn the tool layer's error dict into an MCP error result (isError=True)."""
    if isinstance(result, dict) and result.get("isError"):
        raise ToolError(result["error"])
    return result


def create_mcp_server() -> FastMCP:
    """
    Create and configure the FastMCP server.

    Returns:
        FastMCP server instance with all gateway tools registered.
    """
    mcp = FastMCP(info.SERVER_NAME, instructions=info.SERVER_DESCRIPTION)

    # ========================================================================
    # CONNECTIVITY TOOLS
    # ========================================================================

    @mcp.tool
    def hello(name: str) -> str:
        """
        Says hello to someone.

        Args:
            name: The name to greet
        """
        return info.hello(name)

    @mcp.tool
    def echo(message: str) -> str:
        """
        Echoes back the input message.

        Args:
            message: The message to echo
        """
        return info.echo(message)

    @mcp.tool
    def server_info() -> dict:
        """
        Returns information about this MCP server.

        Returns:
            Server name, version, workload strategy and current timestamp
        """
        return info.server_info()

    # ========================================================================
    # KUBERNETES TOOLS
    # ========================================================================

    @mcp.tool
    async def list_pods(namespace: str = "", label_selector: str = "") -> dict:
        """
        List pods in a GKE namespace.

        Args:
            namespace: Kubernetes namespace (uses default if empty)
            label_selector: Label selector such as "app=web" (optional)

        Returns:
            Pods with name, status, restarts, age and containers
        """
        from .tools.kubernetes import list_pods as list_pods_tool

        return _raise_on_error(await list_pods_tool(namespace or None, label_selector or None))

    @mcp.tool
    async def get_pod_logs(
        pod_name: str,
        namespace: str = "",
        container: str = "",
        tail_lines: int = 100,
    ) -> str:
        """
        Get recent logs from a pod.

        Args:
            pod_name: Name of the pod
            namespace: Kubernetes namespace (uses default if empty)
            container: Container name (optional, required for multi-container pods)
            tail_lines: Number of lines from the end of the log (default: 100)

        Returns:
            Raw log text
        """
        from .tools.kubernetes import get_pod_logs as get_pod_logs_tool

        return _raise_on_error(
            await get_pod_logs_tool(pod_name, namespace or None, container or None, tail_lines)
        )

    @mcp.tool
    async def describe_resource(kind: str, name: str, namespace: str = "") -> dict:
        """
        Describe a Kubernetes resource.

        Args:
            kind: pod, deployment, service or ingress
            name: Resource name
            namespace: Kubernetes namespace (uses default if empty)

        Returns:
            Full resource object as returned by the API server
        """
        from .tools.kubernetes import describe_resource as describe_resource_tool

        return _raise_on_error(await describe_resource_tool(kind, name, namespace or None))

    # ========================================================================
    # CLOUD LOGGING TOOLS
    # ========================================================================

    @mcp.tool
    async def query_cloud_logs(filter: str, limit: int = 50) -> list:
        """
        Query Cloud Logging entries, newest first.

        Args:
            filter: Cloud Logging filter expression
            limit: Maximum number of entries (default: 50)

        Returns:
            Entries with timestamp, severity, resource, message and labels
        """
        from .tools.cloud_logging import query_cloud_logs as query_cloud_logs_tool

        return _raise_on_error(await query_cloud_logs_tool(filter, limit))

    # ========================================================================
    # HTTP ROUTES
    # ========================================================================

    @mcp.custom_route("/health", methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    @mcp.custom_route("/", methods=["GET"])
    async def root(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "name": info.SERVER_NAME,
                "endpoints": {"mcp": "/mcp", "health": "/health"},
                "usage": "Connect an MCP client to /mcp (streamable HTTP)",
            }
        )

    return mcp


def create_mcp_app(transport: str = "http") -> Any:
    """
    Create ASGI app for mounting in FastAPI or serving with uvicorn.

    Args:
        transport: "http" (streamable HTTP at /mcp) or "sse" (at /sse)

    Returns:
        Starlette ASGI application
    """
    return create_mcp_server().http_app(transport=transport)


# Module-level server instance for standalone use
mcp = create_mcp_server()


def main() -> None:
    """Run the MCP server standalone."""
    config = get_config()
    setup_logging(config.log_level)

    logger.info(
        f"Starting GKE MCP gateway on {config.host}:{config.port} "
        f"(strategy={config.workload_strategy}, cluster={config.tool.cluster_name})"
    )
    mcp.run(transport="streamable-http", host=config.host, port=config.port)


if __name__ == "__main__":
    main()
