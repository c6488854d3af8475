"""
Shared plumbing for the tool-facing layer.

The tool layer is the caller of GCPToolClient: it owns the process-wide
client, retries transient failures, and turns every exception into an
{"error": ..., "isError": True} result instead of raising to the agent.
"""

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..client import GCPToolClient
from ..config import get_config
from ..exceptions import GCPToolError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
RETRY_WAIT = wait_exponential(multiplier=1, min=1, max=10)

_client: GCPToolClient | None = None


def get_tool_client() -> GCPToolClient:
    """Return the process-wide client, built from configuration on first use.

    Raises:
        ConfigurationError: If GKE_WORKLOAD_STRATEGY names no strategy
    """
    global _client

    if _client is None:
        config = get_config()
        _client = GCPToolClient(
            strategy=config.workload_strategy,
            timeout=config.http_timeout,
            log_lookback_seconds=config.log_lookback_seconds,
        )
    return _client


def clear_tool_client() -> None:
    """Drop the cached client and its tokens (for testing)."""
    global _client
    _client = None


def is_transient(error: BaseException) -> bool:
    """True for failures worth another attempt: network errors, 429 and 5xx.

    Errors raised before any request (ParseError, SigningError,
    UnsupportedKindError, ...) carry no status and are not transient
    unless they wrap a network failure.
    """
    if not isinstance(error, GCPToolError):
        return False
    if error.status_code is None:
        return isinstance(error.__cause__, httpx.TransportError)
    return error.status_code in RETRYABLE_STATUS_CODES


def error_result(error: Exception) -> dict[str, Any]:
    """Render an exception as an MCP error result."""
    return {"error": str(error), "isError": True}


async def run_tool(tool_name: str, operation: str, *args: Any, **kwargs: Any) -> Any:
    """Invoke a GCPToolClient operation against the configured target.

    Args:
        tool_name: Tool name for log context
        operation: GCPToolClient method name (e.g. "list_pods")
        *args, **kwargs: Operation arguments after the ToolConfig

    Returns:
        The operation's result, or an error result dict
    """
    try:
        config = get_config()
        method = getattr(get_tool_client(), operation)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(config.retry_attempts),
            wait=RETRY_WAIT,
            retry=retry_if_exception(is_transient),
            reraise=True,
        ):
            with attempt:
                return await method(config.tool, *args, **kwargs)
    except GCPToolError as e:
        logger.warning(f"Tool {tool_name} failed: {e}", extra={"tool": tool_name})
        return error_result(e)
    except Exception as e:
        logger.exception(f"Tool {tool_name} raised unexpectedly", extra={"tool": tool_name})
        return error_result(e)
