"""
Tests for the CLI entry point and service wiring.
"""

import pytest
from unittest.mock import Mock, patch

from docker.errors import DockerException
from fastapi.testclient import TestClient

from webhook_redeployer.__main__ import main
from webhook_redeployer.config import RedeployerConfig
from webhook_redeployer.manager import RedeployManager


class TestMain:
    """Command-line handling."""

    def test_generate_config(self, tmp_path, capsys):
        path = tmp_path / "config.yml"

        with patch("sys.argv", ["webhook-redeployer", "--generate-config", "-c", str(path)]):
            assert main() == 0

        assert path.exists()
        assert RedeployerConfig.from_file(path) == RedeployerConfig()
        assert "Generated default configuration" in capsys.readouterr().out

    def test_validate_config(self, tmp_path, capsys):
        path = tmp_path / "config.yml"
        RedeployerConfig().save(path)

        with patch("sys.argv", ["webhook-redeployer", "--validate-config", "-c", str(path)]):
            assert main() == 0

        assert "Configuration valid" in capsys.readouterr().out

    def test_invalid_config(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("server:\n  port: not-a-port\n")

        with patch("sys.argv", ["webhook-redeployer", "--validate-config", "-c", str(path)]):
            assert main() == 1

    def test_docker_client_failure_exits(self, tmp_path):
        """Startup fails when the Docker client cannot be built."""
        path = tmp_path / "config.yml"
        config = RedeployerConfig()
        config.logging.directory = str(tmp_path / "logs")
        config.save(path)

        with patch("sys.argv", ["webhook-redeployer", "-c", str(path)]), patch(
            "webhook_redeployer.docker_engine.docker.from_env",
            side_effect=DockerException("Error while fetching server API version"),
        ), patch("webhook_redeployer.__main__.asyncio.run") as mock_run:
            assert main() == 1

        mock_run.assert_not_called()

    def test_server_failure_exits(self, tmp_path, mock_docker_client):
        """A listener that fails to start ends the process with an error."""
        path = tmp_path / "config.yml"
        config = RedeployerConfig()
        config.logging.directory = str(tmp_path / "logs")
        config.save(path)

        def fail(coro):
            coro.close()
            raise RuntimeError("API server failed to start on 0.0.0.0:8080")

        with patch("sys.argv", ["webhook-redeployer", "-c", str(path)]), patch(
            "webhook_redeployer.__main__.asyncio.run", side_effect=fail
        ):
            assert main() == 1


class TestRedeployManager:
    """Service wiring."""

    def test_app_routes(self, tmp_path):
        manager = RedeployManager(RedeployerConfig(), engine=Mock())
        client = TestClient(manager.create_app())

        assert client.get("/health").json() == {"status": "ok"}
        assert client.post("/docker-webhook", content=b"").status_code == 400

    def test_engine_from_env(self, mock_docker_client):
        manager = RedeployManager(RedeployerConfig())
        assert manager.engine.client is mock_docker_client

    @pytest.mark.asyncio
    async def test_run_raises_when_not_started(self):
        manager = RedeployManager(RedeployerConfig(), engine=Mock())

        with patch("webhook_redeployer.manager.uvicorn.Server") as mock_server_class:
            server = mock_server_class.return_value
            server.started = False

            async def serve():
                return None

            server.serve = serve

            with pytest.raises(RuntimeError):
                await manager.run()
