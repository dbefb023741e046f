"""Configuration for the webhook redeployer."""

from .settings import (
    CallbackConfig,
    ContainerConfig,
    LoggingConfig,
    PortBinding,
    RedeployConfig,
    RedeployerConfig,
    ServerConfig,
)

__all__ = [
    "CallbackConfig",
    "ContainerConfig",
    "LoggingConfig",
    "PortBinding",
    "RedeployConfig",
    "RedeployerConfig",
    "ServerConfig",
]
