from abc import ABC, abstractmethod

from src.core.models import NotificationMessage, WebhookEvent
from src.integrations.misskey.client import MisskeyClient
from src.webhooks.models import HandlerResult


class EventHandler(ABC):
    """
    Abstract base class for all webhook event handlers.

    A handler formats one event into at most one note and hands it to the
    publisher. Handlers run detached from the HTTP request.
    """

    def __init__(self, publisher: MisskeyClient) -> None:
        self.publisher = publisher

    @abstractmethod
    async def handle(self, event: WebhookEvent) -> HandlerResult:
        """
        Process the incoming webhook event.

        Args:
            event: The authenticated and parsed WebhookEvent object.

        Returns:
            A HandlerResult describing what happened.
        """
        pass

    async def publish(self, event: WebhookEvent, message: NotificationMessage | None) -> HandlerResult:
        """Send the formatted message, or record a skip when there is none."""
        event_type = event.event_type.value
        if message is None:
            return HandlerResult(status="skipped", event_type=event_type, detail=f"action={event.action}")

        published = await self.publisher.create_note(message)
        if not published:
            return HandlerResult(status="failed", event_type=event_type, detail="note could not be created")
        return HandlerResult(status="published", event_type=event_type)
