"""
Docker Hub webhook payloads.

These models describe the notification Docker Hub sends when an image is
pushed, and the acknowledgement posted back to its callback URL.
"""

from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, model_validator


class WebhookPayloadModel(BaseModel):
    """
    Base for inbound payload models.

    A ``null`` value leaves the field at its default. Numbers and booleans
    must already have the right JSON type.
    """

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        """Treat explicit nulls like absent fields."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class PushData(WebhookPayloadModel):
    """Details of the push that triggered the webhook."""

    pushed_at: StrictInt = 0
    images: List[str] = Field(default_factory=list)
    tag: str = ""
    pusher: str = ""

    @model_validator(mode="before")
    @classmethod
    def blank_null_images(cls, data: Any) -> Any:
        """Null entries in the image list become empty strings."""
        if isinstance(data, dict) and isinstance(data.get("images"), list):
            data = dict(data)
            data["images"] = ["" if image is None else image for image in data["images"]]
        return data


class RepositoryInfo(WebhookPayloadModel):
    """Repository metadata included in the webhook."""

    status: str = ""
    description: str = ""
    is_trusted: StrictBool = False
    full_description: str = ""
    repo_url: str = ""
    owner: str = ""
    is_official: StrictBool = False
    is_private: StrictBool = False
    name: str = ""
    namespace: str = ""
    star_count: StrictInt = 0
    comment_count: StrictInt = 0
    date_created: StrictInt = 0
    repo_name: str = ""


class DockerHubWebhook(WebhookPayloadModel):
    """
    Notification sent by a Docker Hub repository webhook.

    Only ``callback_url`` drives behavior; the remaining fields are parsed so
    that malformed payloads are rejected, then ignored.
    """

    push_data: PushData = Field(default_factory=PushData)
    callback_url: str = ""
    repository: RepositoryInfo = Field(default_factory=RepositoryInfo)

    def is_trusted(self, trusted_prefix: str) -> bool:
        """Whether the callback URL points at the trusted registry repository."""
        return self.callback_url.startswith(trusted_prefix)


class CallbackState(str, Enum):
    """Allowed states of a callback reply."""

    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"


class DockerCallback(BaseModel):
    """Reply posted to the webhook's callback URL."""

    state: CallbackState
    description: str
    context: str
    target_url: str
