"""
Tests for configuration loading.
"""

import pytest
import yaml
from pydantic import ValidationError

from webhook_redeployer.config import CallbackConfig, PortBinding, RedeployerConfig


class TestDefaults:
    """Defaults match the single deployment this service was built for."""

    def test_container_defaults(self):
        config = RedeployerConfig()

        assert config.container.name == "app"
        assert config.container.image == "jfbrandhorst/grpcweb-example:latest"
        assert config.container.command == ["--host", "demo.jbrandhorst.com"]
        assert config.container.port_map() == {"443/tcp": 443}
        assert config.container.stop_timeout == 5
        assert config.container.remove_volumes is True

    def test_callback_and_server_defaults(self):
        config = RedeployerConfig()

        assert config.callback.trusted_prefix == (
            "https://registry.hub.docker.com/u/jfbrandhorst/grpcweb-example"
        )
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8080
        assert config.server.webhook_path == "/docker-webhook"
        assert config.redeploy.concurrency == "queue"
        assert config.redeploy.fallback_restart is True


class TestFromFile:
    """Loading YAML configuration."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = RedeployerConfig.from_file(tmp_path / "absent.yml")
        assert config == RedeployerConfig()

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("")
        assert RedeployerConfig.from_file(path) == RedeployerConfig()

    def test_partial_override(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(
            yaml.dump(
                {
                    "container": {
                        "name": "web",
                        "repository": "acme/web",
                        "ports": [{"container_port": 8443, "host_port": 443}],
                    },
                    "callback": {"trusted_prefix": "https://registry.hub.docker.com/u/acme/web"},
                    "redeploy": {"concurrency": "reject"},
                }
            )
        )

        config = RedeployerConfig.from_file(path)

        assert config.container.name == "web"
        assert config.container.image == "acme/web:latest"
        assert config.container.port_map() == {"8443/tcp": 443}
        assert config.callback.context == "docker-webhook-receiver"
        assert config.redeploy.concurrency == "reject"
        assert config.server.port == 8080

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError):
            RedeployerConfig.from_file(path)

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "config.yml"
        config = RedeployerConfig()
        config.container.name = "blue"

        config.save(path)

        assert RedeployerConfig.from_file(path).container.name == "blue"


class TestValidation:
    """Invalid values are refused at load time."""

    def test_empty_trusted_prefix(self):
        with pytest.raises(ValidationError):
            CallbackConfig(trusted_prefix="  ")

    def test_bad_port(self):
        with pytest.raises(ValidationError):
            PortBinding(container_port=0)

    def test_unknown_concurrency_mode(self):
        with pytest.raises(ValidationError):
            RedeployerConfig(redeploy={"concurrency": "parallel"})

    def test_udp_port_key(self):
        assert PortBinding(container_port=53, host_port=5353, protocol="udp").key == "53/udp"
