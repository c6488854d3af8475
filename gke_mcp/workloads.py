"""
Workload strategies for pod listing and log retrieval.

Two ways to answer "which pods are running" and "what did this pod log":

- KubernetesApiStrategy talks to the cluster's API server directly. It
  needs network access to the control-plane endpoint.
- CloudLoggingStrategy reconstructs the same answers from k8s_container
  entries in Cloud Logging, for callers that can reach googleapis.com but
  not the cluster itself.

The strategy is chosen by name from configuration (GKE_WORKLOAD_STRATEGY).
"""

import re
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from .config import ToolConfig
from .exceptions import ConfigurationError, UnsupportedSelectorError
from .resources import pod_log_path, pods_path
from .transforms import log_lines_from_entries, pod_list, pods_from_log_entries

if TYPE_CHECKING:
    from .client import GCPToolClient

# entries:list rejects pageSize above 1000
MAX_PAGE_SIZE = 1000
# Upper bound on entries scanned when reconstructing pods
MAX_POD_SCAN_PAGES = 10

_SELECTOR_TOKEN = re.compile(r"^[A-Za-z0-9._/-]*$")


class WorkloadStrategy(ABC):
    """Interface for pod listing and pod log retrieval."""

    name: str = ""

    @abstractmethod
    async def list_pods(
        self,
        client: "GCPToolClient",
        config: ToolConfig,
        token: str,
        namespace: str,
        label_selector: str | None,
    ) -> dict[str, Any]:
        """Return {"items": [...], "total": n}."""

    @abstractmethod
    async def get_pod_logs(
        self,
        client: "GCPToolClient",
        config: ToolConfig,
        token: str,
        pod_name: str,
        namespace: str,
        container: str | None,
        tail_lines: int,
    ) -> str:
        """Return the pod's log text."""


class KubernetesApiStrategy(WorkloadStrategy):
    """Direct calls to the cluster API server."""

    name = "kubernetes"

    async def list_pods(self, client, config, token, namespace, label_selector):
        cluster = await client.resolve_cluster(config, token)
        params = {"labelSelector": label_selector} if label_selector else None
        data = await client.kubernetes_get_json(
            cluster, token, pods_path(namespace), params=params, action="list pods"
        )
        return pod_list(data)

    async def get_pod_logs(self, client, config, token, pod_name, namespace, container, tail_lines):
        cluster = await client.resolve_cluster(config, token)
        params: dict[str, Any] = {"tailLines": str(tail_lines)}
        if container:
            params["container"] = container
        response = await client.kubernetes_get(
            cluster,
            token,
            pod_log_path(namespace, pod_name),
            params=params,
            action=f"get logs for pod {pod_name}",
        )
        # Raw text, not JSON
        return response.text


def quote_filter_value(value: str) -> str:
    """Quote a string for the Cloud Logging filter language."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def selector_to_filter(selector: str) -> list[str]:
    """Translate an equality-based label selector into Cloud Logging terms.

    GKE copies pod labels onto container log entries as
    labels."k8s-pod/<key>", so `app=web,tier!=db` becomes
    `labels."k8s-pod/app"="web"` and `labels."k8s-pod/tier"!="db"`.

    Raises:
        UnsupportedSelectorError: For set-based or existence selectors
    """
    terms = []
    for raw_term in selector.split(","):
        term = raw_term.strip()
        if not term:
            continue

        for op, filter_op in (("!=", "!="), ("==", "="), ("=", "=")):
            if op in term:
                key, value = (part.strip() for part in term.split(op, 1))
                break
        else:
            raise UnsupportedSelectorError(selector)

        if not key or not _SELECTOR_TOKEN.match(key) or not _SELECTOR_TOKEN.match(value):
            raise UnsupportedSelectorError(selector)

        label = quote_filter_value(f"k8s-pod/{key}")
        terms.append(f"labels.{label}{filter_op}{quote_filter_value(value)}")
    return terms


class CloudLoggingStrategy(WorkloadStrategy):
    """Pods and logs reconstructed from Cloud Logging container entries."""

    name = "cloud_logging"

    def _container_filter(self, config: ToolConfig, namespace: str) -> list[str]:
        return [
            'resource.type="k8s_container"',
            f"resource.labels.project_id={quote_filter_value(config.project_id)}",
            f"resource.labels.location={quote_filter_value(config.region)}",
            f"resource.labels.cluster_name={quote_filter_value(config.cluster_name)}",
            f"resource.labels.namespace_name={quote_filter_value(namespace)}",
        ]

    async def list_pods(self, client, config, token, namespace, label_selector):
        terms = self._container_filter(config, namespace)
        if label_selector:
            terms.extend(selector_to_filter(label_selector))

        since = datetime.fromtimestamp(client.clock() - client.log_lookback_seconds, UTC)
        terms.append(f'timestamp>="{since.strftime("%Y-%m-%dT%H:%M:%SZ")}"')

        entries = await client.list_log_entries(
            config,
            token,
            " AND ".join(terms),
            limit=MAX_PAGE_SIZE,
            max_pages=MAX_POD_SCAN_PAGES,
        )
        return pods_from_log_entries(entries, namespace)

    async def get_pod_logs(self, client, config, token, pod_name, namespace, container, tail_lines):
        terms = self._container_filter(config, namespace)
        terms.append(f"resource.labels.pod_name={quote_filter_value(pod_name)}")
        if container:
            terms.append(f"resource.labels.container_name={quote_filter_value(container)}")

        entries = await client.list_log_entries(
            config, token, " AND ".join(terms), limit=min(tail_lines, MAX_PAGE_SIZE)
        )
        return log_lines_from_entries(entries)


STRATEGIES: dict[str, type[WorkloadStrategy]] = {
    KubernetesApiStrategy.name: KubernetesApiStrategy,
    CloudLoggingStrategy.name: CloudLoggingStrategy,
}


def get_strategy(name: str) -> WorkloadStrategy:
    """Instantiate a workload strategy by name.

    Raises:
        ConfigurationError: If the name is not registered
    """
    strategy_class = STRATEGIES.get(name.strip().lower())
    if strategy_class is None:
        raise ConfigurationError(
            f"Unknown workload strategy: {name}. Available: {', '.join(STRATEGIES)}"
        )
    return strategy_class()
