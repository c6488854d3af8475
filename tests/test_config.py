"""Tests for gateway configuration loading."""

import json
import os
from unittest.mock import patch

import pytest

from gke_mcp.config import GatewayConfig, ToolConfig, clear_config, get_config, load_config


@pytest.fixture(autouse=True)
def reset_config():
    clear_config()
    yield
    clear_config()


def _environ(service_account_json, **overrides) -> dict[str, str]:
    env = {
        "GCP_PROJECT_ID": "proj-1",
        "GKE_CLUSTER_NAME": "tech-island",
        "GKE_REGION": "europe-west1",
        "GCP_SERVICE_ACCOUNT_KEY": service_account_json,
    }
    env.update(overrides)
    return env


class TestLoadConfig:
    """Tests for load_config."""

    def test_reads_target(self, service_account_json):
        config = load_config(_environ(service_account_json))

        assert config.tool == ToolConfig(
            project_id="proj-1",
            cluster_name="tech-island",
            region="europe-west1",
            service_account_key=service_account_json,
        )

    def test_defaults(self, service_account_json):
        config = load_config(_environ(service_account_json))

        assert config.workload_strategy == "kubernetes"
        assert config.http_timeout == 30.0
        assert config.default_namespace == "apps"
        assert config.retry_attempts == 3
        assert config.log_lookback_seconds == 3600
        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.log_level == "INFO"

    def test_overrides(self, service_account_json):
        config = load_config(
            _environ(
                service_account_json,
                GKE_WORKLOAD_STRATEGY="cloud_logging",
                GCP_HTTP_TIMEOUT="5.5",
                GKE_DEFAULT_NAMESPACE="default",
                GKE_TOOL_RETRY_ATTEMPTS="0",
                GKE_LOG_LOOKBACK_SECONDS="600",
                MCP_HOST="127.0.0.1",
                MCP_PORT="9000",
                LOG_LEVEL="DEBUG",
            )
        )

        assert config.workload_strategy == "cloud_logging"
        assert config.http_timeout == 5.5
        assert config.default_namespace == "default"
        # At least one attempt always runs
        assert config.retry_attempts == 1
        assert config.log_lookback_seconds == 600
        assert config.host == "127.0.0.1"
        assert config.port == 9000
        assert config.log_level == "DEBUG"

    def test_project_falls_back_to_key(self, service_account_json):
        env = _environ(service_account_json)
        del env["GCP_PROJECT_ID"]

        assert load_config(env).tool.project_id == "proj-1"

    def test_key_from_credentials_file(self, service_account_json, tmp_path):
        key_file = tmp_path / "key.json"
        key_file.write_text(service_account_json)
        env = _environ(service_account_json, GOOGLE_APPLICATION_CREDENTIALS=str(key_file))
        del env["GCP_SERVICE_ACCOUNT_KEY"]

        assert load_config(env).tool.service_account_key == service_account_json

    def test_env_key_wins_over_file(self, service_account_json, tmp_path):
        key_file = tmp_path / "key.json"
        key_file.write_text(json.dumps({"client_email": "other"}))
        env = _environ(service_account_json, GOOGLE_APPLICATION_CREDENTIALS=str(key_file))

        assert load_config(env).tool.service_account_key == service_account_json

    def test_unreadable_credentials_file(self, tmp_path, caplog):
        env = {"GOOGLE_APPLICATION_CREDENTIALS": str(tmp_path / "missing.json")}

        config = load_config(env)

        assert config.tool.service_account_key == ""
        assert "GOOGLE_APPLICATION_CREDENTIALS" in caplog.text

    def test_missing_values_are_logged(self, caplog):
        config = load_config({})

        assert config.tool.project_id == ""
        assert "GKE_CLUSTER_NAME" in caplog.text
        assert "GCP_SERVICE_ACCOUNT_KEY" in caplog.text

    def test_key_not_in_repr(self, service_account_json):
        config = load_config(_environ(service_account_json))

        assert "PRIVATE KEY" not in repr(config)


class TestGetConfig:
    def test_cached(self, service_account_json):
        with patch.dict(os.environ, _environ(service_account_json), clear=True):
            first = get_config()
            second = get_config()

        assert first is second
        assert isinstance(first, GatewayConfig)

    def test_clear_config_reloads(self, service_account_json):
        with patch.dict(os.environ, _environ(service_account_json), clear=True):
            first = get_config()
            clear_config()
            os.environ["GKE_CLUSTER_NAME"] = "other"
            second = get_config()

        assert first is not second
        assert second.tool.cluster_name == "other"
