import structlog

from src.core.models import WebhookEvent
from src.integrations.github.statuses import GitHubStatusClient
from src.integrations.misskey.client import MisskeyClient
from src.presentation.misskey_formatter import format_status, is_failed_status, parent_commit_url
from src.webhooks.handlers.base import EventHandler
from src.webhooks.models import HandlerResult

logger = structlog.get_logger()


class StatusEventHandler(EventHandler):
    """
    Handler for commit status events.

    Failed builds look up the parent commit's latest status first so a
    build that was already broken is announced as "still failed". If the
    lookup cannot tell, the plain "build failed" note is sent.
    """

    def __init__(self, publisher: MisskeyClient, status_client: GitHubStatusClient) -> None:
        super().__init__(publisher)
        self.status_client = status_client

    async def handle(self, event: WebhookEvent) -> HandlerResult:
        payload = event.payload
        if not is_failed_status(payload):
            return await self.publish(event, None)

        parent_state = None
        parent_url = parent_commit_url(payload)
        if parent_url:
            parent_state = await self.status_client.get_latest_state(parent_url)
        else:
            logger.info("status_commit_without_parent", sha=payload.get("sha"))

        logger.info("build_failure_detected", sha=payload.get("sha"), state=payload.get("state"), parent_state=parent_state)
        return await self.publish(event, format_status(payload, parent_state))
