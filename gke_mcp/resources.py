"""Kubernetes REST paths for the resource kinds describe_resource accepts."""

from urllib.parse import quote

from .exceptions import UnsupportedKindError

_PATH_TEMPLATES = {
    "pod": "/api/v1/namespaces/{namespace}/pods/{name}",
    "deployment": "/apis/apps/v1/namespaces/{namespace}/deployments/{name}",
    "service": "/api/v1/namespaces/{namespace}/services/{name}",
    "ingress": "/apis/networking.k8s.io/v1/namespaces/{namespace}/ingresses/{name}",
}

_ALIASES = {
    "pod": "pod",
    "pods": "pod",
    "deployment": "deployment",
    "deployments": "deployment",
    "service": "service",
    "services": "service",
    "ingress": "ingress",
    "ingresses": "ingress",
}

SUPPORTED_KINDS = tuple(_PATH_TEMPLATES)


def canonical_kind(kind: str) -> str:
    """Map a kind or its plural (any case) to its singular form.

    Raises:
        UnsupportedKindError: If the kind is not one of SUPPORTED_KINDS
    """
    canonical = _ALIASES.get(kind.strip().lower())
    if canonical is None:
        raise UnsupportedKindError(kind, SUPPORTED_KINDS)
    return canonical


def resource_path(kind: str, name: str, namespace: str) -> str:
    """REST path of a namespaced resource, e.g. /api/v1/namespaces/apps/services/web."""
    template = _PATH_TEMPLATES[canonical_kind(kind)]
    return template.format(namespace=quote(namespace, safe=""), name=quote(name, safe=""))


def pods_path(namespace: str) -> str:
    return f"/api/v1/namespaces/{quote(namespace, safe='')}/pods"


def pod_log_path(namespace: str, pod_name: str) -> str:
    return f"{pods_path(namespace)}/{quote(pod_name, safe='')}/log"
