"""
Webhook API routes.

The status code is the only signal returned to the caller; no response body
is produced.
"""

import logging
from typing import Dict

from fastapi import APIRouter, Request, Response
from starlette.requests import ClientDisconnect

from webhook_redeployer.exceptions import (
    CallbackError,
    EngineOperationError,
    InvalidWebhookError,
    RedeployInProgressError,
    UntrustedWebhookError,
)
from webhook_redeployer.redeployer import Redeployer

logger = logging.getLogger(__name__)


def create_routes(redeployer: Redeployer) -> APIRouter:
    """
    Create webhook API routes.

    Args:
        redeployer: Redeployer handling accepted webhooks

    Returns:
        Configured FastAPI router
    """
    router = APIRouter(tags=["webhook"])
    webhook_path = redeployer.config.server.webhook_path

    @router.post(webhook_path)
    async def docker_webhook(request: Request) -> Response:
        """Receive a Docker Hub push notification and redeploy the container."""
        try:
            body = await request.body()
        except ClientDisconnect as e:
            logger.error(f"Failed to read request body: {e}")
            return Response(status_code=400)

        try:
            await redeployer.handle_webhook(body)
        except (InvalidWebhookError, UntrustedWebhookError) as e:
            logger.error(str(e))
            return Response(status_code=400)
        except RedeployInProgressError as e:
            logger.warning(str(e))
            return Response(status_code=409)
        except CallbackError as e:
            logger.error(str(e))
            return Response(status_code=500)
        except EngineOperationError as e:
            if e.result is not None and e.result.fallback_attempted:
                logger.error(
                    f"Redeploy failed at {e.step.value}: {e} "
                    f"(fallback restart {'succeeded' if e.result.fallback_succeeded else 'failed'})"
                )
            else:
                logger.error(f"Redeploy failed at {e.step.value}: {e}")
            return Response(status_code=500)

        return Response(status_code=200)

    @router.get("/health")
    async def health() -> Dict[str, str]:
        """Liveness check. Does not contact the Docker daemon."""
        return {"status": "ok"}

    return router
