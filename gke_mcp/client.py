"""
GCP Tool Client.

Authenticated REST access to GKE and Cloud Logging for the four agent
tools: list pods, get pod logs, describe a resource, query log entries.

Each operation is a straight-line async pipeline:
authenticate -> (resolve cluster) -> request -> transform -> return.
Only the access token survives between calls, via the shared TokenCache.

Example:
    >>> from gke_mcp.client import GCPToolClient
    >>> from gke_mcp.config import get_config
    >>>
    >>> client = GCPToolClient()
    >>> config = get_config().tool
    >>> pods = await client.list_pods(config, namespace="apps")
    >>> print(pods["total"])
    >>> logs = await client.get_pod_logs(config, "web-7d9f", tail_lines=50)
"""

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from . import cluster as cluster_api
from .auth import CLOUD_PLATFORM_SCOPE, TokenCache, load_credentials
from .cluster import ClusterEndpoint
from .config import ToolConfig
from .exceptions import ApiError
from .resources import resource_path
from .transforms import log_entry_list
from .workloads import WorkloadStrategy, get_strategy

logger = logging.getLogger(__name__)

LOGGING_API = "https://logging.googleapis.com/v2"


class GCPToolClient:
    """Client for the GKE / Cloud Logging tool operations.

    Attributes:
        token_cache: Shared access token cache (single-flight refresh)
        strategy: Workload strategy used by list_pods and get_pod_logs
        timeout: Per-request timeout in seconds
        log_lookback_seconds: Window the Cloud Logging strategy scans for pods
    """

    def __init__(
        self,
        token_cache: TokenCache | None = None,
        strategy: str | WorkloadStrategy = "kubernetes",
        timeout: float = 30.0,
        log_lookback_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self.token_cache = token_cache or TokenCache(timeout=timeout, clock=clock)
        self.strategy = get_strategy(strategy) if isinstance(strategy, str) else strategy
        self.timeout = timeout
        self.log_lookback_seconds = log_lookback_seconds
        self.clock = clock

    # ========================================================================
    # AUTHENTICATED REQUEST HELPERS
    # ========================================================================

    async def authenticate(self, config: ToolConfig) -> str:
        """Parse the config's key and return a cloud-platform bearer token.

        Raises:
            ParseError: If the service-account key is malformed
            SigningError: If the private key cannot sign
            TokenExchangeError: If the token endpoint rejects the assertion
        """
        credentials = load_credentials(config.service_account_key)
        return await self.token_cache.get_token(credentials, CLOUD_PLATFORM_SCOPE)

    async def resolve_cluster(self, config: ToolConfig, token: str) -> ClusterEndpoint:
        """Resolve the config's cluster (no caching; every call hits the API)."""
        return await cluster_api.resolve_cluster(
            token,
            config.project_id,
            config.region,
            config.cluster_name,
            timeout=self.timeout,
        )

    async def kubernetes_get(
        self,
        cluster: ClusterEndpoint,
        token: str,
        path: str,
        params: dict[str, Any] | None = None,
        action: str = "call Kubernetes API",
    ) -> httpx.Response:
        """GET a Kubernetes API path with bearer auth.

        Raises:
            ApiError: On non-2xx (body attached) or network failure
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, verify=cluster.ssl_context()
            ) as client:
                response = await client.get(
                    f"{cluster.base_url}{path}",
                    params=params,
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as e:
            raise ApiError(f"Failed to {action}: {e}", service="kubernetes") from e

        if not 200 <= response.status_code < 300:
            body = response.text
            raise ApiError(
                f"Failed to {action}: {response.status_code} {body}",
                body=body,
                status_code=response.status_code,
                service="kubernetes",
            )
        return response

    @staticmethod
    def json_object(response: httpx.Response, action: str, service: str) -> dict[str, Any]:
        """Decode a 2xx body that must be a JSON object.

        Raises:
            ApiError: If the body is not JSON or not an object (body attached)
        """
        try:
            data = response.json()
        except ValueError as e:
            raise ApiError(
                f"Failed to {action}: response is not valid JSON",
                body=response.text,
                status_code=response.status_code,
                service=service,
            ) from e

        if not isinstance(data, dict):
            raise ApiError(
                f"Failed to {action}: expected a JSON object, got {type(data).__name__}",
                body=response.text,
                status_code=response.status_code,
                service=service,
            )
        return data

    async def kubernetes_get_json(
        self,
        cluster: ClusterEndpoint,
        token: str,
        path: str,
        params: dict[str, Any] | None = None,
        action: str = "call Kubernetes API",
    ) -> dict[str, Any]:
        """kubernetes_get() for endpoints that return a JSON object."""
        response = await self.kubernetes_get(cluster, token, path, params=params, action=action)
        return self.json_object(response, action, "kubernetes")

    async def list_log_entries(
        self,
        config: ToolConfig,
        token: str,
        filter: str,
        limit: int,
        order_by: str = "timestamp desc",
        max_pages: int = 1,
    ) -> list[dict[str, Any]]:
        """POST entries:list for the config's project and return raw entries.

        Follows nextPageToken for up to `max_pages` pages of `limit`
        entries each. A response without "entries" means no matches.

        Raises:
            ApiError: On non-2xx (body attached), a non-JSON body, or
                network failure
        """
        payload: dict[str, Any] = {
            "resourceNames": [f"projects/{config.project_id}"],
            "filter": filter,
            "pageSize": limit,
            "orderBy": order_by,
        }
        entries: list[dict[str, Any]] = []

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for page in range(1, max_pages + 1):
                try:
                    response = await client.post(
                        f"{LOGGING_API}/entries:list",
                        json=payload,
                        headers={"Authorization": f"Bearer {token}"},
                    )
                except httpx.HTTPError as e:
                    raise ApiError(f"Failed to query logs: {e}", service="logging") from e

                if not 200 <= response.status_code < 300:
                    body = response.text
                    raise ApiError(
                        f"Failed to query logs: {response.status_code} {body}",
                        body=body,
                        status_code=response.status_code,
                        service="logging",
                    )

                data = self.json_object(response, "query logs", "logging")
                entries.extend(data.get("entries") or [])

                next_page = data.get("nextPageToken")
                if not next_page:
                    break
                if page == max_pages:
                    logger.warning(
                        f"Stopped after {max_pages} pages of log entries; results are partial",
                        extra={"project_id": config.project_id},
                    )
                    break
                payload = {**payload, "pageToken": next_page}

        return entries

    # ========================================================================
    # TOOL OPERATIONS
    # ========================================================================

    async def list_pods(
        self,
        config: ToolConfig,
        namespace: str = "apps",
        label_selector: str | None = None,
    ) -> dict[str, Any]:
        """List pods in a namespace.

        Args:
            config: Target cluster and credentials
            namespace: Kubernetes namespace
            label_selector: Optional selector, e.g. "app=web"

        Returns:
            {"items": [{name, namespace, status, restarts, age, containers}], "total": n}
        """
        token = await self.authenticate(config)
        logger.info(
            f"Listing pods in {namespace} via {self.strategy.name}",
            extra={"tool": "list_pods", "cluster": config.cluster_name},
        )
        return await self.strategy.list_pods(self, config, token, namespace, label_selector)

    async def get_pod_logs(
        self,
        config: ToolConfig,
        pod_name: str,
        namespace: str = "apps",
        container: str | None = None,
        tail_lines: int = 100,
    ) -> str:
        """Fetch the last `tail_lines` lines of a pod's log as raw text."""
        token = await self.authenticate(config)
        logger.info(
            f"Fetching logs for {namespace}/{pod_name} via {self.strategy.name}",
            extra={"tool": "get_pod_logs", "cluster": config.cluster_name},
        )
        return await self.strategy.get_pod_logs(
            self, config, token, pod_name, namespace, container, tail_lines
        )

    async def describe_resource(
        self,
        config: ToolConfig,
        kind: str,
        name: str,
        namespace: str = "apps",
    ) -> dict[str, Any]:
        """Return the full object for a pod, deployment, service or ingress.

        Raises:
            UnsupportedKindError: Before any network call, for unknown kinds
            ApiError: If the API server returns non-2xx
        """
        path = resource_path(kind, name, namespace)

        token = await self.authenticate(config)
        cluster = await self.resolve_cluster(config, token)
        logger.info(
            f"Describing {kind}/{name} in {namespace}",
            extra={"tool": "describe_resource", "cluster": config.cluster_name},
        )
        return await self.kubernetes_get_json(
            cluster, token, path, action=f"describe {kind}/{name}"
        )

    async def query_cloud_logs(
        self,
        config: ToolConfig,
        filter: str,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """Query Cloud Logging, newest first.

        Returns:
            [{timestamp, severity, resource, message, labels}], empty when
            nothing matches
        """
        token = await self.authenticate(config)
        logger.info(
            f"Querying Cloud Logging (limit={limit})",
            extra={"tool": "query_cloud_logs", "project_id": config.project_id},
        )
        entries = await self.list_log_entries(config, token, filter, limit)
        return log_entry_list({"entries": entries})
