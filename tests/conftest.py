"""
Shared fixtures: a test configuration, the app built from it, and a
signing helper for webhook bodies.
"""

import json
import sys
from collections.abc import Callable
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

ROOT = Path(__file__).resolve().parent.parent

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.core.config import Config, GitHubConfig, HookConfig, HttpConfig, MisskeyConfig  # noqa: E402
from src.main import create_app  # noqa: E402
from src.webhooks.auth import compute_signature  # noqa: E402

WEBHOOK_SECRET = "It's a Secret to Everybody"
MISSKEY_INSTANCE = "https://misskey.test"
NOTES_CREATE_URL = f"{MISSKEY_INSTANCE}/api/notes/create"
GITHUB_IP = "140.82.115.42"
OUTSIDE_IP = "203.0.113.9"


def make_config(hooks: HookConfig | None = None, **github_overrides) -> Config:
    return Config(
        github=GitHubConfig(webhook_secret=WEBHOOK_SECRET, **github_overrides),
        misskey=MisskeyConfig(instance=MISSKEY_INSTANCE, token="misskey-token"),
        http=HttpConfig(timeout=2.0),
        hooks=hooks or HookConfig(),
    )


def make_client(app: FastAPI, client_ip: str = GITHUB_IP) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app, client=(client_ip, 4567)), base_url="http://test")


@pytest.fixture
def app_config() -> Config:
    return make_config()


@pytest.fixture
def app(app_config: Config) -> FastAPI:
    return create_app(app_config)


@pytest.fixture
def signed_request() -> Callable[..., tuple[bytes, dict[str, str]]]:
    """Serialize a payload and build the headers GitHub would send with it."""

    def _build(event: str, payload: dict, secret: str = WEBHOOK_SECRET) -> tuple[bytes, dict[str, str]]:
        body = json.dumps(payload).encode()
        headers = {
            "X-GitHub-Event": event,
            "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
            "X-Hub-Signature": compute_signature(secret, body),
            "Content-Type": "application/json",
        }
        return body, headers

    return _build
