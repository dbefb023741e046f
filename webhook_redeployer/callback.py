"""
Acknowledgement of Docker Hub webhooks.

Docker Hub hands every webhook a one-time callback URL. Posting to it both
acknowledges the notification and, because only the genuine registry serves
that URL, stands in for authenticating the request.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from webhook_redeployer.config import CallbackConfig
from webhook_redeployer.exceptions import CallbackError
from webhook_redeployer.models import CallbackState, DockerCallback
from webhook_redeployer.utils.log_sanitizer import sanitize_url

logger = logging.getLogger(__name__)


class CallbackClient:
    """Posts acknowledgements to webhook callback URLs."""

    def __init__(self, config: CallbackConfig, log: Optional[logging.Logger] = None):
        """
        Initialize callback client.

        Args:
            config: Callback settings (reply text, target URL, timeout)
            log: Logger to use, defaults to the module logger
        """
        self.config = config
        self.log = log or logger

    def build_reply(self) -> bytes:
        """
        Build the serialized acknowledgement.

        The reply always reports success: it is only sent once the webhook has
        been parsed and validated.

        Raises:
            CallbackError: If the reply cannot be built
        """
        try:
            reply = DockerCallback(
                state=CallbackState.SUCCESS,
                description=self.config.description,
                context=self.config.context,
                target_url=self.config.target_url,
            )
        except ValidationError as e:
            raise CallbackError(f"Failed to build callback reply: {e}") from e
        return reply.model_dump_json().encode()

    async def acknowledge(self, callback_url: str) -> None:
        """
        POST the acknowledgement to the callback URL.

        The response status is not inspected, only transport failures count.

        Args:
            callback_url: URL supplied by the webhook

        Raises:
            CallbackError: If the request could not be delivered
        """
        body = self.build_reply()

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                response = await client.post(
                    callback_url,
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise CallbackError(
                f"Failed to post callback to {sanitize_url(callback_url)}: {e}"
            ) from e

        self.log.debug(
            f"Callback to {sanitize_url(callback_url)} answered with {response.status_code}"
        )
