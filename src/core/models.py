from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventType(Enum):
    """Supported GitHub event types."""

    STATUS = "status"
    PUSH = "push"
    ISSUES = "issues"
    ISSUE_COMMENT = "issue_comment"
    RELEASE = "release"
    WATCH = "watch"
    FORK = "fork"
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    PULL_REQUEST_REVIEW = "pull_request_review"
    DISCUSSION = "discussion"
    DISCUSSION_COMMENT = "discussion_comment"

    @classmethod
    def from_header(cls, value: str | None) -> "EventType | None":
        """Map an X-GitHub-Event header value to an EventType, or None if unsupported."""
        if not value:
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None


class Visibility(str, Enum):
    """Note visibility on the Misskey instance."""

    HOME = "home"
    PUBLIC = "public"


class NotificationMessage(BaseModel):
    """A note ready to be published."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Note body in Misskey markup")
    visibility: Visibility = Field(default=Visibility.HOME, description="home for followers, public for everyone")


class WebhookEvent:
    """
    A representation of an incoming webhook event after authentication,
    carrying the parsed payload exactly as GitHub sent it.
    """

    def __init__(self, event_type: EventType, payload: dict[str, Any], delivery_id: str | None = None):
        self.event_type = event_type
        self.payload = payload
        self.delivery_id = delivery_id

    @property
    def action(self) -> str | None:
        return self.payload.get("action")
