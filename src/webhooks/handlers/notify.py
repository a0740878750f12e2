import structlog

from src.core.models import EventType, WebhookEvent
from src.integrations.misskey.client import MisskeyClient
from src.presentation.misskey_formatter import Formatter
from src.webhooks.handlers.base import EventHandler
from src.webhooks.models import HandlerResult

logger = structlog.get_logger()


class NotificationEventHandler(EventHandler):
    """Handler for events whose note depends on the payload alone."""

    def __init__(self, event_type: EventType, formatter: Formatter, publisher: MisskeyClient) -> None:
        super().__init__(publisher)
        self.event_type = event_type
        self.formatter = formatter

    async def handle(self, event: WebhookEvent) -> HandlerResult:
        message = self.formatter(event.payload)
        if message is None:
            logger.debug("event_not_announced", event_type=self.event_type.value, action=event.action)
        return await self.publish(event, message)
