"""
Redeploy orchestration.

Turns one Docker Hub webhook into a full redeploy of the configured container:
parse, validate origin, acknowledge via callback, then stop, remove, pull,
create and start. The first failing step aborts everything after it.
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Dict, Optional

import requests
from docker.errors import DockerException
from pydantic import ValidationError

from webhook_redeployer.callback import CallbackClient
from webhook_redeployer.config import RedeployerConfig
from webhook_redeployer.docker_engine import ContainerEngine
from webhook_redeployer.exceptions import (
    EngineOperationError,
    InvalidWebhookError,
    RedeployInProgressError,
    UntrustedWebhookError,
)
from webhook_redeployer.logging_config import log_redeploy_step
from webhook_redeployer.models import DockerHubWebhook, RedeployResult, RedeployStep
from webhook_redeployer.utils.log_sanitizer import sanitize_url

logger = logging.getLogger(__name__)

# Failing at one of these steps means the old container is already gone
_FALLBACK_STEPS = (RedeployStep.PULLED, RedeployStep.CREATED, RedeployStep.STARTED)


class Redeployer:
    """Runs the webhook-to-redeploy pipeline for a single container."""

    def __init__(
        self,
        config: RedeployerConfig,
        engine: ContainerEngine,
        callback_client: Optional[CallbackClient] = None,
        log: Optional[logging.Logger] = None,
    ):
        """
        Initialize redeployer.

        Args:
            config: Redeployer configuration
            engine: Docker engine wrapper
            callback_client: Client for acknowledging webhooks, built from config if omitted
            log: Logger to use, defaults to the module logger
        """
        self.config = config
        self.engine = engine
        self.log = log or logger
        self.callback_client = callback_client or CallbackClient(config.callback, log=self.log)
        self._locks: Dict[str, asyncio.Lock] = {}

    def parse_webhook(self, body: bytes) -> DockerHubWebhook:
        """
        Decode a request body into a webhook notification.

        Raises:
            InvalidWebhookError: If the body is not a valid notification
        """
        try:
            return DockerHubWebhook.model_validate_json(body)
        except ValidationError as e:
            raise InvalidWebhookError(f"Invalid webhook payload: {e.error_count()} error(s)") from e

    def validate_origin(self, hook: DockerHubWebhook) -> None:
        """
        Check the callback URL points at the trusted repository.

        Raises:
            UntrustedWebhookError: If the prefix does not match
        """
        if not hook.is_trusted(self.config.callback.trusted_prefix):
            raise UntrustedWebhookError(
                f"Got request not from docker hub: {sanitize_url(hook.callback_url)}"
            )

    def is_busy(self, container_name: Optional[str] = None) -> bool:
        """Whether a redeploy of the container is currently running."""
        name = container_name or self.config.container.name
        lock = self._locks.get(name)
        return lock is not None and lock.locked()

    def _lock_for(self, name: str) -> asyncio.Lock:
        if name not in self._locks:
            self._locks[name] = asyncio.Lock()
        return self._locks[name]

    async def handle_webhook(self, body: bytes) -> RedeployResult:
        """
        Handle one webhook request body end to end.

        Args:
            body: Raw request body

        Returns:
            Result of a successful redeploy

        Raises:
            InvalidWebhookError: Body could not be parsed
            UntrustedWebhookError: Callback URL is not trusted
            RedeployInProgressError: Another redeploy is running and concurrency is "reject"
            CallbackError: Acknowledgement could not be delivered
            EngineOperationError: A Docker operation failed
        """
        hook = self.parse_webhook(body)
        self.validate_origin(hook)

        name = self.config.container.name
        lock = self._lock_for(name)
        if self.config.redeploy.concurrency == "reject" and lock.locked():
            raise RedeployInProgressError(name)

        async with lock:
            await self.callback_client.acknowledge(hook.callback_url)
            log_redeploy_step(RedeployStep.ACKNOWLEDGED.value, name)

            # The callback URL worked, so the request came from the registry
            return await self.redeploy()

    async def redeploy(self) -> RedeployResult:
        """
        Replace the running container with one from the freshly pulled image.

        Callers must hold the container's lock.

        Raises:
            EngineOperationError: With ``result`` set, when any step fails
        """
        container = self.config.container
        result = RedeployResult(container_name=container.name, image=container.image)

        try:
            old = await self._run(RedeployStep.STOPPED, self.engine.get_container, container.name)
            result.previous_image_id = self.engine.image_id_of(old)

            await self._run(
                RedeployStep.STOPPED, self.engine.stop_container, old, container.stop_timeout
            )
            self._advance(result, RedeployStep.STOPPED)

            await self._run(
                RedeployStep.REMOVED,
                self.engine.remove_container,
                old,
                container.remove_volumes,
            )
            self._advance(result, RedeployStep.REMOVED)

            await self._run(
                RedeployStep.PULLED, self.engine.pull_image, container.repository, container.tag
            )
            self._advance(result, RedeployStep.PULLED)

            new = await self._run(
                RedeployStep.CREATED,
                self.engine.create_container,
                container.name,
                container.image,
                container.command,
                container.port_map(),
            )
            result.container_id = new.id
            self._advance(result, RedeployStep.CREATED)

            await self._run(RedeployStep.STARTED, self.engine.start_container, new)
            self._advance(result, RedeployStep.STARTED)

        except EngineOperationError as e:
            result.error = str(e)
            result.failed_step = e.step.value
            log_redeploy_step(e.step.value, container.name, success=False, error=str(e))

            if (
                e.step in _FALLBACK_STEPS
                and self.config.redeploy.fallback_restart
                and result.previous_image_id
            ):
                await self._restart_previous(result)

            e.result = result
            raise

        result.step = RedeployStep.DONE
        result.success = True
        self.log.info(f"Container {container.name} restarted successfully")
        return result

    async def _restart_previous(self, result: RedeployResult) -> None:
        """Bring the previous image back up under the same name."""
        container = self.config.container
        result.fallback_attempted = True
        self.log.warning(
            f"Restarting {container.name} from previous image {result.previous_image_id}"
        )

        try:
            await self._run(RedeployStep.REMOVED, self.engine.remove_if_exists, container.name)
            previous = await self._run(
                RedeployStep.CREATED,
                self.engine.create_container,
                container.name,
                result.previous_image_id,
                container.command,
                container.port_map(),
            )
            await self._run(RedeployStep.STARTED, self.engine.start_container, previous)
        except EngineOperationError as e:
            self.log.error(
                f"Fallback restart of {container.name} failed, manual intervention required: {e}"
            )
            log_redeploy_step(
                "fallback_restart", container.name, success=False, error=str(e)
            )
            return

        result.fallback_succeeded = True
        result.container_id = previous.id
        log_redeploy_step(
            "fallback_restart",
            container.name,
            details={"image_id": result.previous_image_id},
        )

    def _advance(self, result: RedeployResult, step: RedeployStep) -> None:
        result.step = step
        log_redeploy_step(step.value, result.container_name)

    async def _run(self, step: RedeployStep, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking engine call off the event loop, mapping failures to ``step``."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, functools.partial(func, *args))
        except (DockerException, requests.exceptions.RequestException) as e:
            raise EngineOperationError(step, str(e), e) from e
