"""Tests for response shaping functions."""

import json

from gke_mcp.transforms import (
    log_entry_list,
    log_entry_message,
    log_entry_summary,
    log_lines_from_entries,
    pod_list,
    pod_summary,
    pods_from_log_entries,
)

POD = {
    "metadata": {
        "name": "web-7d9f",
        "namespace": "apps",
        "creationTimestamp": "2026-01-12T10:00:00Z",
    },
    "spec": {"containers": [{"name": "web"}, {"name": "cloud-sql-proxy"}]},
    "status": {
        "phase": "Running",
        "containerStatuses": [{"name": "web", "restartCount": 4}],
    },
}


class TestPodSummary:
    """Tests for pod_summary / pod_list."""

    def test_maps_pod(self):
        assert pod_summary(POD) == {
            "name": "web-7d9f",
            "namespace": "apps",
            "status": "Running",
            "restarts": 4,
            "age": "2026-01-12T10:00:00Z",
            "containers": ["web", "cloud-sql-proxy"],
        }

    def test_restarts_default_to_zero(self):
        """Test a pending pod without container statuses."""
        pending = {**POD, "status": {"phase": "Pending"}}

        assert pod_summary(pending)["restarts"] == 0
        assert pod_summary(pending)["status"] == "Pending"

    def test_empty_pod_list(self):
        assert pod_list({"kind": "PodList", "items": []}) == {"items": [], "total": 0}

    def test_pod_list_without_items_key(self):
        assert pod_list({"kind": "PodList"}) == {"items": [], "total": 0}

    def test_pod_list_total(self):
        result = pod_list({"items": [POD, POD]})

        assert result["total"] == 2
        assert [p["name"] for p in result["items"]] == ["web-7d9f", "web-7d9f"]


class TestLogEntries:
    """Tests for Cloud Logging entry mapping."""

    def test_text_payload(self):
        entry = {
            "timestamp": "2026-01-12T10:00:00.123Z",
            "severity": "ERROR",
            "resource": {"type": "k8s_container", "labels": {"pod_name": "web"}},
            "textPayload": "boom",
            "labels": {"k8s-pod/app": "web"},
        }

        assert log_entry_summary(entry) == {
            "timestamp": "2026-01-12T10:00:00.123Z",
            "severity": "ERROR",
            "resource": "k8s_container",
            "message": "boom",
            "labels": {"k8s-pod/app": "web"},
        }

    def test_json_payload_is_stringified(self):
        payload = {"message": "request done", "status": 200}

        message = log_entry_message({"jsonPayload": payload})

        assert json.loads(message) == payload

    def test_proto_payload_is_stringified(self):
        payload = {"@type": "type.googleapis.com/google.cloud.audit.AuditLog"}

        assert json.loads(log_entry_message({"protoPayload": payload})) == payload

    def test_no_payload(self):
        assert log_entry_message({"severity": "INFO"}) == ""

    def test_missing_fields_have_defaults(self):
        summary = log_entry_summary({})

        assert summary["severity"] == "DEFAULT"
        assert summary["resource"] is None
        assert summary["labels"] == {}

    def test_response_without_entries(self):
        """Test that {} maps to an empty list rather than an error."""
        assert log_entry_list({}) == []


def _container_entry(pod, container, timestamp, text="line"):
    return {
        "timestamp": timestamp,
        "resource": {
            "type": "k8s_container",
            "labels": {
                "namespace_name": "apps",
                "pod_name": pod,
                "container_name": container,
            },
        },
        "textPayload": text,
    }


class TestPodsFromLogEntries:
    """Tests for pod reconstruction from container logs."""

    def test_groups_by_pod(self):
        entries = [
            _container_entry("web-2", "web", "2026-01-12T10:05:00Z"),
            _container_entry("web-1", "proxy", "2026-01-12T10:04:00Z"),
            _container_entry("web-1", "web", "2026-01-12T10:01:00Z"),
            _container_entry("web-1", "web", "2026-01-12T10:03:00Z"),
        ]

        result = pods_from_log_entries(entries, "apps")

        assert result["total"] == 2
        first = result["items"][0]
        assert first == {
            "name": "web-1",
            "namespace": "apps",
            "status": "Unknown",
            "restarts": 0,
            "age": "2026-01-12T10:01:00Z",
            "containers": ["proxy", "web"],
        }
        assert result["items"][1]["name"] == "web-2"

    def test_age_compares_instants_not_strings(self):
        """Test that a whole-second timestamp is older than a fractional one in the same second."""
        entries = [
            _container_entry("web-1", "web", "2026-01-12T10:00:00.5Z"),
            _container_entry("web-1", "web", "2026-01-12T10:00:00Z"),
        ]

        result = pods_from_log_entries(entries, "apps")

        assert result["items"][0]["age"] == "2026-01-12T10:00:00Z"

    def test_age_with_nanosecond_precision(self):
        entries = [
            _container_entry("web-1", "web", "2026-01-12T10:00:01.000000001Z"),
            _container_entry("web-1", "web", "2026-01-12T10:00:00.999999999Z"),
        ]

        result = pods_from_log_entries(entries, "apps")

        assert result["items"][0]["age"] == "2026-01-12T10:00:00.999999999Z"

    def test_unparseable_timestamp_is_skipped(self):
        entries = [
            _container_entry("web-1", "web", "not-a-time"),
            _container_entry("web-1", "web", "2026-01-12T10:00:00Z"),
        ]

        result = pods_from_log_entries(entries, "apps")

        assert result["items"][0]["age"] == "2026-01-12T10:00:00Z"

    def test_ignores_entries_without_pod(self):
        entries = [{"resource": {"type": "k8s_container", "labels": {}}, "textPayload": "x"}]

        assert pods_from_log_entries(entries, "apps") == {"items": [], "total": 0}


class TestLogLinesFromEntries:
    def test_reverses_to_chronological_order(self):
        newest_first = [
            _container_entry("p", "c", "t3", "third\n"),
            _container_entry("p", "c", "t2", "second"),
            _container_entry("p", "c", "t1", "first\n"),
        ]

        assert log_lines_from_entries(newest_first) == "first\nsecond\nthird\n"

    def test_no_entries(self):
        assert log_lines_from_entries([]) == ""
