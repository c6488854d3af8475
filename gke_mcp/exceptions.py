"""
Exception hierarchy for the GKE MCP tool gateway.

Every failure raised by the authentication layer, the cluster resolver and
the tool client derives from GCPToolError, so the tool-facing layer can
render any of them with a single except clause.

Usage:
    from gke_mcp.exceptions import ApiError, GCPToolError, TokenExchangeError

    try:
        pods = await client.list_pods(config)
    except TokenExchangeError as e:
        # Assertion was rejected - credentials are likely revoked
        logger.error(f"Auth failed: {e}")
    except GCPToolError as e:
        return {"error": str(e), "isError": True}
"""

from typing import Any


class GCPToolError(Exception):
    """Base exception for all gateway errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dict with additional error context.
        status_code: Upstream HTTP status code if applicable.
        service: Name of the upstream service involved.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        service: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        self.service = service

    def __str__(self) -> str:
        parts = [self.message]
        if self.service:
            parts.insert(0, f"[{self.service}]")
        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")
        return " ".join(parts)


class ParseError(GCPToolError):
    """Service-account key is not valid JSON or lacks required fields."""

    pass


class SigningError(GCPToolError):
    """Private key could not be imported or the assertion could not be signed."""

    pass


class TokenExchangeError(GCPToolError):
    """OAuth2 token endpoint rejected the assertion or was unreachable.

    Attributes:
        body: Raw response body from the token endpoint (may be empty).
    """

    def __init__(self, message: str, *, body: str = "", **kwargs: Any) -> None:
        kwargs.setdefault("service", "oauth2")
        super().__init__(message, **kwargs)
        self.body = body


class ClusterLookupError(GCPToolError):
    """GKE cluster could not be resolved.

    Raised when:
    - Cluster does not exist (HTTP 404)
    - Caller lacks container.clusters.get permission (HTTP 403)
    - Control-plane API is unreachable

    Attributes:
        cluster_path: projects/{p}/locations/{r}/clusters/{c}
        body: Raw upstream response body (may be empty).
    """

    def __init__(
        self,
        message: str,
        *,
        cluster_path: str | None = None,
        body: str = "",
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("service", "container")
        super().__init__(message, **kwargs)
        self.cluster_path = cluster_path
        self.body = body


class UnsupportedKindError(GCPToolError):
    """Requested resource kind has no known REST path.

    Attributes:
        kind: The kind the caller asked for.
        supported: Canonical kinds that are accepted.
    """

    def __init__(
        self,
        kind: str,
        supported: list[str] | tuple[str, ...],
        **kwargs: Any,
    ) -> None:
        message = f"Unsupported resource kind: {kind}. Supported: {', '.join(supported)}"
        super().__init__(message, **kwargs)
        self.kind = kind
        self.supported = list(supported)


class UnsupportedSelectorError(GCPToolError):
    """Label selector uses a form the active workload strategy cannot express."""

    def __init__(self, selector: str, **kwargs: Any) -> None:
        super().__init__(f"Unsupported label selector: {selector}", **kwargs)
        self.selector = selector


class ApiError(GCPToolError):
    """Downstream REST call (Kubernetes or Cloud Logging) failed.

    Attributes:
        body: Raw upstream response body (may be empty).
    """

    def __init__(self, message: str, *, body: str = "", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.body = body


class ConfigurationError(GCPToolError):
    """Configuration value is invalid (e.g. unknown workload strategy)."""

    pass


__all__ = [
    "GCPToolError",
    "ParseError",
    "SigningError",
    "TokenExchangeError",
    "ClusterLookupError",
    "UnsupportedKindError",
    "UnsupportedSelectorError",
    "ApiError",
    "ConfigurationError",
]
