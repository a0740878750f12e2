import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field

from src.core.config.http_config import HttpConfig
from src.core.config.misskey_config import MisskeyConfig
from src.core.models import NotificationMessage, Visibility

logger = structlog.get_logger()


class NoteCreateRequest(BaseModel):
    """Request body for ``POST /api/notes/create``."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    i: str = Field(..., description="API token")
    text: str
    visibility: Visibility = Visibility.HOME
    # Quoted issue and comment bodies must not turn into mentions or hashtags
    no_extract_mentions: bool = Field(default=True, alias="noExtractMentions")
    no_extract_hashtags: bool = Field(default=True, alias="noExtractHashtags")


class MisskeyClient:
    """Publishes notes to a Misskey instance."""

    def __init__(self, misskey_config: MisskeyConfig, http_config: HttpConfig) -> None:
        self._misskey_config = misskey_config
        self._http_config = http_config

    async def create_note(self, message: NotificationMessage) -> bool:
        """
        Post a note. Failures are logged and reported as False, never raised.

        There is no retry: a note that fails to post is dropped.
        """
        url = self._misskey_config.notes_create_url
        body = NoteCreateRequest(
            i=self._misskey_config.token,
            text=message.text,
            visibility=message.visibility,
        ).model_dump(by_alias=True)

        try:
            async with httpx.AsyncClient(timeout=self._http_config.timeout, proxy=self._http_config.proxy) as client:
                response = await client.post(url, json=body)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "note_publish_failed",
                url=url,
                status_code=e.response.status_code,
                response_body=e.response.text,
            )
            return False
        except httpx.TimeoutException as e:
            logger.error("note_publish_timeout", url=url, error=str(e))
            return False
        except httpx.RequestError as e:
            logger.error("note_publish_request_error", url=url, error=str(e))
            return False

        logger.info("note_published", visibility=body["visibility"], length=len(message.text))
        return True
