"""
Response shaping.

One explicit mapping per operation from the upstream JSON to the compact
result the tools return. Upstream documents are never returned partially
reshaped by the callers; everything goes through these functions.
"""

import json
from datetime import UTC, datetime
from typing import Any


def pod_summary(pod: dict[str, Any]) -> dict[str, Any]:
    """Map a Kubernetes Pod object to {name, namespace, status, restarts, age, containers}."""
    metadata = pod.get("metadata") or {}
    status = pod.get("status") or {}
    spec = pod.get("spec") or {}

    container_statuses = status.get("containerStatuses") or []
    restarts = container_statuses[0].get("restartCount", 0) if container_statuses else 0

    return {
        "name": metadata.get("name"),
        "namespace": metadata.get("namespace"),
        "status": status.get("phase"),
        "restarts": restarts or 0,
        "age": metadata.get("creationTimestamp"),
        "containers": [c.get("name") for c in spec.get("containers") or []],
    }


def pod_list(data: dict[str, Any]) -> dict[str, Any]:
    """Map a Kubernetes PodList to {items, total}."""
    items = [pod_summary(pod) for pod in data.get("items") or []]
    return {"items": items, "total": len(items)}


def log_entry_message(entry: dict[str, Any]) -> str:
    """Message text of a Cloud Logging entry.

    textPayload when it is a string, otherwise the JSON of jsonPayload or
    protoPayload; empty when the entry carries no payload.
    """
    text = entry.get("textPayload")
    if isinstance(text, str):
        return text
    payload = entry.get("jsonPayload")
    if payload is None:
        payload = entry.get("protoPayload")
    if payload is None:
        return ""
    return json.dumps(payload)


def log_entry_summary(entry: dict[str, Any]) -> dict[str, Any]:
    """Map a Cloud Logging LogEntry to {timestamp, severity, resource, message, labels}."""
    return {
        "timestamp": entry.get("timestamp"),
        "severity": entry.get("severity", "DEFAULT"),
        "resource": (entry.get("resource") or {}).get("type"),
        "message": log_entry_message(entry),
        "labels": entry.get("labels") or {},
    }


def log_entry_list(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Map an entries:list response; a response without entries is an empty list."""
    return [log_entry_summary(entry) for entry in data.get("entries") or []]


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp; None when missing or malformed."""
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def pods_from_log_entries(entries: list[dict[str, Any]], namespace: str) -> dict[str, Any]:
    """Reconstruct a pod list from k8s_container log entries.

    Phase and restart counts are not observable from logs, so status is
    "Unknown" and restarts 0. Age is the oldest entry timestamp seen for
    the pod inside the query window.
    """
    pods: dict[str, dict[str, Any]] = {}
    oldest: dict[str, datetime] = {}

    for entry in entries:
        labels = (entry.get("resource") or {}).get("labels") or {}
        pod_name = labels.get("pod_name")
        if not pod_name:
            continue

        pod = pods.setdefault(
            pod_name,
            {
                "name": pod_name,
                "namespace": labels.get("namespace_name", namespace),
                "status": "Unknown",
                "restarts": 0,
                "age": None,
                "containers": [],
            },
        )

        container = labels.get("container_name")
        if container and container not in pod["containers"]:
            pod["containers"].append(container)

        # Fractional seconds are omitted when zero, so compare parsed instants
        seen_at = _parse_timestamp(entry.get("timestamp"))
        if seen_at and (pod_name not in oldest or seen_at < oldest[pod_name]):
            oldest[pod_name] = seen_at
            pod["age"] = entry["timestamp"]

    items = sorted(pods.values(), key=lambda p: p["name"])
    for pod in items:
        pod["containers"].sort()
    return {"items": items, "total": len(items)}


def log_lines_from_entries(entries: list[dict[str, Any]]) -> str:
    """Join newest-first log entries into oldest-first text, one line per entry."""
    lines = [log_entry_message(entry).rstrip("\n") for entry in reversed(entries)]
    return "".join(f"{line}\n" for line in lines)
