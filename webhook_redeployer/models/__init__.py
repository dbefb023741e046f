"""Data models for the webhook redeployer."""

from .redeploy import RedeployResult, RedeployStep
from .webhook import CallbackState, DockerCallback, DockerHubWebhook, PushData, RepositoryInfo

__all__ = [
    "CallbackState",
    "DockerCallback",
    "DockerHubWebhook",
    "PushData",
    "RedeployResult",
    "RedeployStep",
    "RepositoryInfo",
]
