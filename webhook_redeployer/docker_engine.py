"""
Docker engine operations used by the redeploy pipeline.

Wraps the docker SDK client with the handful of calls a redeploy needs. All
methods are blocking; callers on the event loop run them in an executor.
"""

import logging
from typing import Dict, List, Optional

import docker
from docker import DockerClient
from docker.errors import APIError, NotFound
from docker.models.containers import Container

logger = logging.getLogger(__name__)


class ContainerEngine:
    """Container lifecycle operations against one Docker daemon."""

    def __init__(self, client: DockerClient):
        """
        Initialize container engine.

        Args:
            client: Connected docker SDK client
        """
        self.client = client

    @classmethod
    def from_env(cls) -> "ContainerEngine":
        """
        Build an engine from the standard Docker environment.

        Honors DOCKER_HOST, DOCKER_TLS_VERIFY and DOCKER_CERT_PATH.

        Raises:
            docker.errors.DockerException: If the client cannot be created
        """
        return cls(docker.from_env())

    def get_container(self, name: str) -> Container:
        """Look up a container by name or ID."""
        return self.client.containers.get(name)

    def image_id_of(self, container: Container) -> Optional[str]:
        """Image ID the container was created from, without an extra API call."""
        return container.attrs.get("Image") or None

    def stop_container(self, container: Container, timeout: int) -> None:
        """
        Stop a running container, killing it after ``timeout`` seconds.

        Raises:
            docker.errors.APIError: If the container is not running
        """
        state = container.attrs.get("State") or {}
        if not state.get("Running"):
            raise APIError(f"Container {container.name} is not running")

        logger.debug(f"Stopping container {container.name} (timeout={timeout}s)")
        container.stop(timeout=timeout)

    def remove_container(self, container: Container, remove_volumes: bool = True) -> None:
        """Remove a stopped container and optionally its anonymous volumes."""
        logger.debug(f"Removing container {container.name} (volumes={remove_volumes})")
        container.remove(v=remove_volumes)

    def pull_image(self, repository: str, tag: str) -> None:
        """Pull ``repository:tag`` without registry credentials."""
        logger.debug(f"Pulling image {repository}:{tag}")
        self.client.images.pull(repository, tag=tag)

    def create_container(
        self,
        name: str,
        image: str,
        command: List[str],
        ports: Dict[str, int],
    ) -> Container:
        """
        Create (but do not start) a container.

        Stdout and stderr are attached, which is what the engine does for a
        non-detached create.

        Args:
            name: Container name
            image: Image reference or image ID
            command: Arguments passed to the image entrypoint
            ports: Mapping of ``"<port>/<proto>"`` to host port

        Returns:
            The created container
        """
        logger.debug(f"Creating container {name} from {image}")
        return self.client.containers.create(
            image=image,
            command=list(command),
            name=name,
            detach=False,
            ports=dict(ports),
        )

    def start_container(self, container: Container) -> None:
        """Start a created container."""
        logger.debug(f"Starting container {container.id}")
        container.start()

    def remove_if_exists(self, name: str) -> bool:
        """
        Force-remove a container by name if there is one.

        Returns:
            True if a container was removed
        """
        try:
            container = self.client.containers.get(name)
        except NotFound:
            return False

        container.remove(v=True, force=True)
        return True
