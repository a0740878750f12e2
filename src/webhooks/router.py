import json

import structlog
from fastapi import APIRouter, Depends, Request, Response, status

from src.core.errors import InvalidPayloadError
from src.core.models import EventType, WebhookEvent
from src.webhooks.auth import verify_github_signature
from src.webhooks.dispatcher import WebhookDispatcher

logger = structlog.get_logger()

router = APIRouter()


def get_dispatcher(request: Request) -> WebhookDispatcher:
    """Returns the dispatcher built for this application at startup."""
    return request.app.state.dispatcher


def _parse_payload(body: bytes) -> dict:
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidPayloadError("Invalid JSON payload") from e
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Invalid JSON payload")
    return payload


@router.post("/github", status_code=status.HTTP_204_NO_CONTENT, summary="Endpoint for all GitHub webhooks")
async def github_webhook_endpoint(
    request: Request,
    is_verified: bool = Depends(verify_github_signature),
    dispatcher_instance: WebhookDispatcher = Depends(get_dispatcher),
) -> Response:
    """
    This endpoint receives all events from a GitHub repository webhook.

    - The source address and signature are verified by the dependencies.
    - The verified body is parsed and wrapped in a WebhookEvent.
    - The event is handed to the dispatcher, which schedules its handler in
      the background. GitHub gets 204 whether or not a note is posted.
    """
    payload = _parse_payload(await request.body())
    event_name = request.headers.get("X-GitHub-Event")
    delivery_id = request.headers.get("X-GitHub-Delivery")
    log = logger.bind(github_event=event_name, delivery_id=delivery_id)

    event_type = EventType.from_header(event_name)
    if event_type is None:
        log.info("event_not_supported")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    log.info("webhook_validated", action=payload.get("action"))
    dispatcher_instance.dispatch(WebhookEvent(event_type=event_type, payload=payload, delivery_id=delivery_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
