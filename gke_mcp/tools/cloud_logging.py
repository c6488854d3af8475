"""Cloud Logging tools for the MCP gateway."""

from typing import Any

from .base import run_tool


async def query_cloud_logs(filter: str, limit: int = 50) -> list[dict[str, Any]] | dict[str, Any]:
    """
    Query Cloud Logging entries for the configured project, newest first.

    Args:
        filter: Cloud Logging filter, e.g. 'severity>=ERROR AND resource.type="k8s_container"'
        limit: Maximum number of entries

    Returns:
        List of {timestamp, severity, resource, message, labels}, or
        {"error": ..., "isError": True}
    """
    return await run_tool("query_cloud_logs", "query_cloud_logs", filter, limit)
