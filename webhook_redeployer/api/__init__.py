"""HTTP API for the webhook redeployer."""

from .routes import create_routes

__all__ = ["create_routes"]
