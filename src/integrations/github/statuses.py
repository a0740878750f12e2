from typing import Any

import httpx
import structlog

from src.core.config.http_config import HttpConfig

logger = structlog.get_logger()

FAILED_STATES = frozenset({"failure", "error"})


class GitHubStatusClient:
    """
    Reads commit statuses from the GitHub REST API.

    Used once per failed status event to find out whether the parent commit
    was already failing. Every failure mode resolves to None so the caller can
    fall back to its default message.
    """

    USER_AGENT = "misskey"

    def __init__(self, http_config: HttpConfig) -> None:
        self._http_config = http_config

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._http_config.timeout,
            proxy=self._http_config.proxy,
            headers={"User-Agent": self.USER_AGENT},
        )

    async def get_statuses(self, commit_url: str) -> list[dict[str, Any]] | None:
        """
        Fetch the status list of a commit.

        Args:
            commit_url: The commit's API URL (``commit.parents[0].url`` in a status payload).

        Returns:
            The statuses, newest first, or None if the request or its body was unusable.
        """
        url = f"{commit_url.rstrip('/')}/statuses"

        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "github_statuses_fetch_failed",
                url=url,
                status_code=e.response.status_code,
                response_body=e.response.text,
            )
            return None
        except httpx.TimeoutException as e:
            logger.error("github_statuses_timeout", url=url, error=str(e))
            return None
        except httpx.RequestError as e:
            logger.error("github_statuses_request_error", url=url, error=str(e))
            return None
        except ValueError as e:
            logger.error("github_statuses_invalid_json", url=url, error=str(e))
            return None

        if not isinstance(data, list):
            logger.error("github_statuses_unexpected_shape", url=url, type=type(data).__name__)
            return None
        return data

    async def get_latest_state(self, commit_url: str) -> str | None:
        """Return the ``state`` of the most recent status on a commit, or None if unknown."""
        statuses = await self.get_statuses(commit_url)
        if not statuses:
            return None
        latest = statuses[0]
        if not isinstance(latest, dict):
            return None
        state = latest.get("state")
        return state if isinstance(state, str) else None
