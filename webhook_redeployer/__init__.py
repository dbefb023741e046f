"""Webhook Redeployer - redeploys a container when Docker Hub announces a new push."""

__version__ = "1.0.0"

from .redeployer import Redeployer

__all__ = ["Redeployer"]
