from typing import Literal

from pydantic import BaseModel, Field


class HandlerResult(BaseModel):
    """Outcome of running one event handler. Logged, never returned to GitHub."""

    status: Literal["published", "skipped", "failed"] = Field(
        ..., description="published: note created, skipped: nothing to announce, failed: publish error"
    )
    event_type: str = Field(..., description="GitHub event type the handler ran for")
    detail: str | None = Field(None, description="Additional context")
