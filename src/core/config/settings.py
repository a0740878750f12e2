"""
Main configuration class that composes all configs.
"""

import json
import os
from dataclasses import dataclass, field

import structlog
from dotenv import load_dotenv

from src.core.config.github_config import DEFAULT_ALLOWED_IP_BLOCKS, GitHubConfig
from src.core.config.hook_config import HookConfig
from src.core.config.http_config import HttpConfig
from src.core.config.logging_config import LoggingConfig
from src.core.config.misskey_config import MisskeyConfig
from src.core.config.server_config import ServerConfig
from src.core.models import EventType

logger = structlog.get_logger()

# Load environment variables from a .env file
load_dotenv()


def _env_flag(name: str, default: bool = True) -> bool:
    return os.getenv(name, "true" if default else "false").strip().lower() in {"1", "true", "yes", "on"}


def _parse_ip_blocks(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_ALLOWED_IP_BLOCKS
    try:
        blocks = json.loads(raw)
    except json.JSONDecodeError:
        # Fallback to GitHub's published ranges if JSON parsing fails
        logger.warning("allowed_ip_blocks_invalid_json", value=raw)
        return DEFAULT_ALLOWED_IP_BLOCKS
    if not isinstance(blocks, list) or not all(isinstance(block, str) for block in blocks):
        logger.warning("allowed_ip_blocks_not_a_list", value=raw)
        return DEFAULT_ALLOWED_IP_BLOCKS
    return tuple(blocks)


@dataclass(frozen=True)
class Config:
    """Main configuration class, composed of one frozen section per concern."""

    github: GitHubConfig
    misskey: MisskeyConfig
    server: ServerConfig = field(default_factory=ServerConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    hooks: HookConfig = field(default_factory=HookConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Build the configuration from environment variables and the .env file."""
        return cls(
            server=ServerConfig(
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "3000")),
            ),
            github=GitHubConfig(
                webhook_secret=os.getenv("WEBHOOK_SECRET_GITHUB", ""),
                allowed_ip_blocks=_parse_ip_blocks(os.getenv("ALLOWED_IP_BLOCKS")),
                ip_check_enabled=_env_flag("ALLOWED_IP_CHECK_ENABLED"),
                push_branch=os.getenv("PUSH_BRANCH", "develop"),
            ),
            misskey=MisskeyConfig(
                instance=os.getenv("MISSKEY_INSTANCE", ""),
                token=os.getenv("MISSKEY_TOKEN", ""),
            ),
            http=HttpConfig(
                proxy=os.getenv("HTTP_PROXY_URL") or None,
                timeout=float(os.getenv("HTTP_TIMEOUT", "5.0")),
            ),
            # One switch per event type, e.g. HOOK_PULL_REQUEST=false
            hooks=HookConfig.from_flags(
                {event_type: _env_flag(f"HOOK_{event_type.value.upper()}") for event_type in EventType}
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "console"),
            ),
        )

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if not self.github.webhook_secret:
            errors.append("WEBHOOK_SECRET_GITHUB is required")

        if not self.misskey.instance:
            errors.append("MISSKEY_INSTANCE is required")

        if not self.misskey.token:
            errors.append("MISSKEY_TOKEN is required")

        if self.http.timeout <= 0:
            errors.append("HTTP_TIMEOUT must be positive")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config.from_env()
