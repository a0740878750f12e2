from functools import partial

import structlog

from src.core.config.hook_config import HookConfig
from src.core.models import EventType, WebhookEvent
from src.core.utils.logging import log_operation
from src.integrations.github.statuses import GitHubStatusClient
from src.integrations.misskey.client import MisskeyClient
from src.presentation.misskey_formatter import FORMATTERS, format_push
from src.tasks.background import BackgroundTaskRunner
from src.webhooks.handlers.base import EventHandler
from src.webhooks.handlers.notify import NotificationEventHandler
from src.webhooks.handlers.status import StatusEventHandler
from src.webhooks.models import HandlerResult

logger = structlog.get_logger()


class WebhookDispatcher:
    """
    Dispatches webhook events to registered EventHandler instances.

    Handlers run on the background runner, so dispatch returns as soon as the
    work is scheduled and the HTTP response never waits for outbound calls.
    """

    def __init__(self, runner: BackgroundTaskRunner):
        # At most one handler per event type
        self._handlers: dict[EventType, EventHandler] = {}
        self.runner = runner

    @property
    def registered_event_types(self) -> list[EventType]:
        return list(self._handlers)

    def is_registered(self, event_type: EventType) -> bool:
        return event_type in self._handlers

    def register_handler(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Registers a handler instance for a specific event type.

        Args:
            event_type: The EventType to handle (e.g., EventType.PULL_REQUEST).
            handler: An instance of a class that implements the EventHandler interface.
        """
        if event_type in self._handlers:
            logger.warning("handler_overridden", event_type=event_type.value)
        self._handlers[event_type] = handler
        logger.info("handler_registered", event_type=event_type.value, handler=handler.__class__.__name__)

    def dispatch(self, event: WebhookEvent) -> bool:
        """
        Schedule the registered handler for the event.

        Args:
            event: The WebhookEvent to be dispatched.

        Returns:
            True if a handler was scheduled, False if the event type has none.
        """
        handler = self._handlers.get(event.event_type)
        if handler is None:
            logger.info("no_handler_registered", event_type=event.event_type.value)
            return False

        self.runner.spawn(self._run(handler, event), name=f"handle-{event.event_type.value}")
        return True

    async def _run(self, handler: EventHandler, event: WebhookEvent) -> HandlerResult:
        try:
            async with log_operation(
                "handle_event",
                event_type=event.event_type.value,
                handler=handler.__class__.__name__,
                delivery_id=event.delivery_id,
            ):
                result = await handler.handle(event)
        except Exception as e:
            # Already logged with its traceback by log_operation
            return HandlerResult(status="failed", event_type=event.event_type.value, detail=str(e))
        logger.info("event_handled", event_type=result.event_type, status=result.status, detail=result.detail)
        return result


def build_dispatcher(
    hooks: HookConfig,
    publisher: MisskeyClient,
    status_client: GitHubStatusClient,
    runner: BackgroundTaskRunner,
    push_branch: str = "develop",
) -> WebhookDispatcher:
    """
    Create a dispatcher with a handler for every enabled event type.

    Disabled event types get no handler at all, so their deliveries are
    acknowledged and dropped before any formatting happens.
    """
    dispatcher = WebhookDispatcher(runner)

    for event_type in EventType:
        if not hooks.is_enabled(event_type):
            logger.info("hook_disabled", event_type=event_type.value)
            continue

        handler: EventHandler
        if event_type is EventType.STATUS:
            handler = StatusEventHandler(publisher, status_client)
        elif event_type is EventType.PUSH:
            handler = NotificationEventHandler(event_type, partial(format_push, branch=push_branch), publisher)
        else:
            handler = NotificationEventHandler(event_type, FORMATTERS[event_type], publisher)
        dispatcher.register_handler(event_type, handler)

    return dispatcher
