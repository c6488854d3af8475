"""
GKE cluster endpoint resolution.

Looks up a cluster's control-plane address and CA certificate through the
Container API. Every Kubernetes-bound operation re-resolves; nothing is
cached here.
"""

import base64
import binascii
import logging
import ssl
from dataclasses import dataclass

import httpx

from .exceptions import ClusterLookupError

logger = logging.getLogger(__name__)

CONTAINER_API = "https://container.googleapis.com/v1"


@dataclass(frozen=True)
class ClusterEndpoint:
    """Resolved control-plane address.

    Attributes:
        endpoint: Hostname or IP of the Kubernetes API server
        ca_certificate: Base64-encoded PEM CA bundle, if the API returned one
    """

    endpoint: str
    ca_certificate: str | None = None

    @property
    def base_url(self) -> str:
        return f"https://{self.endpoint}"

    def ssl_context(self) -> ssl.SSLContext | bool:
        """TLS verification settings for requests to this cluster.

        Returns an SSLContext trusting the cluster CA, or True (system
        trust store) when no CA was returned.
        """
        if not self.ca_certificate:
            return True
        try:
            pem = base64.b64decode(self.ca_certificate).decode("ascii")
            return ssl.create_default_context(cadata=pem)
        except (binascii.Error, UnicodeDecodeError, ssl.SSLError) as e:
            raise ClusterLookupError(
                f"Cluster CA certificate is not valid base64 PEM: {e}"
            ) from e


def cluster_path(project_id: str, region: str, cluster_name: str) -> str:
    """Resource name used by the Container API."""
    return f"projects/{project_id}/locations/{region}/clusters/{cluster_name}"


async def resolve_cluster(
    access_token: str,
    project_id: str,
    region: str,
    cluster_name: str,
    timeout: float = 30.0,
) -> ClusterEndpoint:
    """Resolve a cluster to its API endpoint and CA certificate.

    Args:
        access_token: Bearer token with container.clusters.get
        project_id: GCP project ID
        region: Cluster location (region or zone)
        cluster_name: Cluster name
        timeout: Request timeout in seconds

    Returns:
        ClusterEndpoint

    Raises:
        ClusterLookupError: If the cluster is missing, access is denied,
            the network call fails, or the response has no endpoint
    """
    path = cluster_path(project_id, region, cluster_name)

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(
                f"{CONTAINER_API}/{path}",
                headers={"Authorization": f"Bearer {access_token}"},
            )
    except httpx.HTTPError as e:
        raise ClusterLookupError(
            f"Failed to reach Container API for {path}: {e}", cluster_path=path
        ) from e

    if not 200 <= response.status_code < 300:
        body = response.text
        raise ClusterLookupError(
            f"Failed to get cluster {path}: {body}",
            cluster_path=path,
            body=body,
            status_code=response.status_code,
        )

    try:
        data = response.json()
    except ValueError as e:
        raise ClusterLookupError(
            f"Container API returned invalid JSON for {path}", cluster_path=path
        ) from e

    endpoint = data.get("endpoint")
    if not endpoint:
        raise ClusterLookupError(f"Cluster endpoint not found for {path}", cluster_path=path)

    ca_certificate = (data.get("masterAuth") or {}).get("clusterCaCertificate")
    logger.debug(f"Resolved {path} to {endpoint}")

    return ClusterEndpoint(endpoint=endpoint, ca_certificate=ca_certificate)
