"""
Exceptions raised by the redeploy pipeline.
"""

from typing import Optional

from webhook_redeployer.models import RedeployResult, RedeployStep


class WebhookRedeployerError(Exception):
    """Base class for redeployer errors."""


class InvalidWebhookError(WebhookRedeployerError):
    """The request body is not a parseable webhook notification."""


class UntrustedWebhookError(WebhookRedeployerError):
    """The callback URL does not belong to the trusted repository."""


class CallbackError(WebhookRedeployerError):
    """The acknowledgement could not be built or delivered to the callback URL."""


class RedeployInProgressError(WebhookRedeployerError):
    """A redeploy of the same container is already running."""

    def __init__(self, container_name: str):
        self.container_name = container_name
        super().__init__(f"Redeploy of container '{container_name}' already in progress")


class EngineOperationError(WebhookRedeployerError):
    """
    A Docker engine operation failed partway through a redeploy.

    ``step`` is the step the failed operation would have reached. ``result``
    is filled in by the orchestrator once the failure has been recorded.
    """

    def __init__(self, step: RedeployStep, message: str, cause: Optional[Exception] = None):
        self.step = step
        self.cause = cause
        self.result: Optional[RedeployResult] = None
        super().__init__(f"{step.value}: {message}")
