"""
Webhook redeployer service.

Wires the Docker client, the redeploy pipeline and the HTTP API together and
serves them with uvicorn.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from webhook_redeployer import __version__
from webhook_redeployer.api import create_routes
from webhook_redeployer.config import RedeployerConfig
from webhook_redeployer.docker_engine import ContainerEngine
from webhook_redeployer.redeployer import Redeployer

logger = logging.getLogger(__name__)


class RedeployManager:
    """Main service hosting the webhook endpoint."""

    def __init__(
        self,
        config: Optional[RedeployerConfig] = None,
        engine: Optional[ContainerEngine] = None,
    ):
        """
        Initialize the service.

        Args:
            config: Configuration object, uses defaults if not provided
            engine: Docker engine wrapper, built from the environment if not provided

        Raises:
            docker.errors.DockerException: If the Docker client cannot be created
        """
        self.config = config or RedeployerConfig()
        self.engine = engine or ContainerEngine.from_env()
        self.redeployer = Redeployer(
            self.config,
            self.engine,
            log=logging.getLogger("webhook_redeployer.redeployer"),
        )
        logger.info(
            f"Redeploying container '{self.config.container.name}' "
            f"from {self.config.container.image}"
        )

    def create_app(self) -> FastAPI:
        """Build the FastAPI application."""
        app = FastAPI(title="Webhook Redeployer", version=__version__)
        app.include_router(create_routes(self.redeployer))
        return app

    async def run(self) -> None:
        """
        Serve the API until uvicorn receives a shutdown signal.

        Raises:
            RuntimeError: If the listener could not be started
        """
        host = self.config.server.host
        port = self.config.server.port

        server = uvicorn.Server(
            uvicorn.Config(self.create_app(), host=host, port=port, log_level="info")
        )

        logger.info(f"Serving on http://{host}:{port}")
        await server.serve()

        if not server.started:
            raise RuntimeError(f"API server failed to start on {host}:{port}")

        logger.info("Webhook redeployer stopped")
