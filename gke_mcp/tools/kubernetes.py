"""
Kubernetes tools for the MCP gateway.

Provides read-only cluster operations:
- List pods in a namespace
- Fetch pod logs
- Describe a pod, deployment, service or ingress
"""

from typing import Any

from ..config import get_config
from .base import run_tool


def _namespace(namespace: str | None) -> str:
    return namespace or get_config().default_namespace


async def list_pods(
    namespace: str | None = None, label_selector: str | None = None
) -> dict[str, Any]:
    """
    List pods in a namespace.

    Args:
        namespace: Kubernetes namespace (default from GKE_DEFAULT_NAMESPACE)
        label_selector: Optional label selector, e.g. "app=web"

    Returns:
        {"items": [...], "total": n}, or {"error": ..., "isError": True}
    """
    return await run_tool(
        "list_pods", "list_pods", _namespace(namespace), label_selector or None
    )


async def get_pod_logs(
    pod_name: str,
    namespace: str | None = None,
    container: str | None = None,
    tail_lines: int = 100,
) -> str | dict[str, Any]:
    """
    Fetch recent logs of a pod.

    Args:
        pod_name: Pod name
        namespace: Kubernetes namespace (default from GKE_DEFAULT_NAMESPACE)
        container: Container name, required for multi-container pods
        tail_lines: Number of lines from the end of the log

    Returns:
        Raw log text, or {"error": ..., "isError": True}
    """
    return await run_tool(
        "get_pod_logs",
        "get_pod_logs",
        pod_name,
        _namespace(namespace),
        container or None,
        tail_lines,
    )


async def describe_resource(
    kind: str, name: str, namespace: str | None = None
) -> dict[str, Any]:
    """
    Return the full Kubernetes object for a resource.

    Args:
        kind: pod, deployment, service or ingress (plural and any case accepted)
        name: Resource name
        namespace: Kubernetes namespace (default from GKE_DEFAULT_NAMESPACE)

    Returns:
        The resource as returned by the API server, or {"error": ..., "isError": True}
    """
    return await run_tool(
        "describe_resource", "describe_resource", kind, name, _namespace(namespace)
    )
