"""
Redeploy progress and outcome models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RedeployStep(str, Enum):
    """Stages a webhook request moves through, in order."""

    RECEIVED = "received"
    BODY_READ = "body_read"
    PARSED = "parsed"
    VALIDATED = "validated"
    ACKNOWLEDGED = "acknowledged"
    STOPPED = "stopped"
    REMOVED = "removed"
    PULLED = "pulled"
    CREATED = "created"
    STARTED = "started"
    DONE = "done"
    FAILED = "failed"


class RedeployResult(BaseModel):
    """Outcome of one redeploy run. Logged, never returned to the caller."""

    container_name: str
    image: str
    step: RedeployStep = Field(
        default=RedeployStep.ACKNOWLEDGED, description="Last step completed successfully"
    )
    success: bool = False
    error: Optional[str] = None
    failed_step: Optional[str] = Field(None, description="Engine operation that failed")
    container_id: Optional[str] = None
    previous_image_id: Optional[str] = None
    fallback_attempted: bool = False
    fallback_succeeded: bool = False
