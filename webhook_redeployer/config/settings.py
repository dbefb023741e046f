"""
Configuration settings for the webhook redeployer.

Everything that used to be a build-time constant (target container, image
repository, trusted callback prefix, listen address) lives here and is loaded
from a YAML file at startup.
"""

from pathlib import Path
from typing import Any, Dict, List, Literal, Union

import yaml
from pydantic import BaseModel, Field, field_validator


class PortBinding(BaseModel):
    """A single container port published on the host."""

    container_port: int = Field(default=443, ge=1, le=65535)
    host_port: int = Field(default=443, ge=1, le=65535)
    protocol: Literal["tcp", "udp"] = "tcp"

    @property
    def key(self) -> str:
        """Port key in the form the Docker API expects, e.g. ``443/tcp``."""
        return f"{self.container_port}/{self.protocol}"


class ContainerConfig(BaseModel):
    """The single container that gets redeployed."""

    name: str = Field(default="app", description="Name of the container to restart")
    repository: str = Field(
        default="jfbrandhorst/grpcweb-example", description="Image repository to pull"
    )
    tag: str = Field(default="latest", description="Image tag to pull and run")
    command: List[str] = Field(
        default_factory=lambda: ["--host", "demo.jbrandhorst.com"],
        description="Command-line arguments passed to the new container",
    )
    ports: List[PortBinding] = Field(default_factory=lambda: [PortBinding()])
    stop_timeout: int = Field(
        default=5, ge=0, description="Grace period in seconds before the old container is killed"
    )
    remove_volumes: bool = True

    @property
    def image(self) -> str:
        """Full image reference including tag."""
        return f"{self.repository}:{self.tag}"

    def port_map(self) -> Dict[str, int]:
        """Port bindings in docker SDK ``ports=`` form."""
        return {binding.key: binding.host_port for binding in self.ports}


class CallbackConfig(BaseModel):
    """Acknowledgement sent back to the registry callback URL."""

    trusted_prefix: str = Field(
        default="https://registry.hub.docker.com/u/jfbrandhorst/grpcweb-example",
        description="Callback URLs must start with this prefix",
    )
    description: str = "Redeploy was successful"
    context: str = "docker-webhook-receiver"
    target_url: str = "https://demo.jbrandhorst.com"
    timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("trusted_prefix")
    @classmethod
    def validate_trusted_prefix(cls, v: str) -> str:
        """An empty prefix would trust every callback URL."""
        if not v.strip():
            raise ValueError("trusted_prefix must not be empty")
        return v


class RedeployConfig(BaseModel):
    """Behavior of the redeploy pipeline."""

    concurrency: Literal["queue", "reject"] = Field(
        default="queue",
        description="What to do with a request while a redeploy of the same container runs",
    )
    fallback_restart: bool = Field(
        default=True,
        description="Restart the previous image if the new container cannot be brought up",
    )


class ServerConfig(BaseModel):
    """HTTP listener settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    webhook_path: str = "/docker-webhook"


class LoggingConfig(BaseModel):
    """Logging settings."""

    directory: str = "/var/log/webhook-redeployer"
    console_level: str = "INFO"
    file_level: str = "DEBUG"
    use_json: bool = False


class RedeployerConfig(BaseModel):
    """Complete configuration for the webhook redeployer."""

    container: ContainerConfig = Field(default_factory=ContainerConfig)
    callback: CallbackConfig = Field(default_factory=CallbackConfig)
    redeploy: RedeployConfig = Field(default_factory=RedeployConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RedeployerConfig":
        """
        Load configuration from a YAML file.

        A missing file yields the default configuration.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Loaded configuration

        Raises:
            ValueError: If the file does not contain a YAML mapping
        """
        config_path = Path(path)
        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data: Any = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping")

        return cls(**data)

    def save(self, path: Union[str, Path]) -> None:
        """Write configuration to a YAML file, creating parent directories."""
        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)
