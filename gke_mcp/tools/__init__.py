"""
GKE MCP Gateway Tools.

This package provides tool implementations for:
- Kubernetes: pod listing, pod logs, resource description
- Cloud Logging: log entry queries
- Info: connectivity checks (hello, echo, server_info)
"""

from .base import clear_tool_client, error_result, get_tool_client, run_tool
from .cloud_logging import query_cloud_logs
from .info import echo, hello, server_info
from .kubernetes import describe_resource, get_pod_logs, list_pods

__all__ = [
    # Kubernetes
    "list_pods",
    "get_pod_logs",
    "describe_resource",
    # Cloud Logging
    "query_cloud_logs",
    # Info
    "hello",
    "echo",
    "server_info",
    # Plumbing
    "run_tool",
    "error_result",
    "get_tool_client",
    "clear_tool_client",
]
