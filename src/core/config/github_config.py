"""
GitHub configuration.
"""

from dataclasses import dataclass, field

# GitHub's webhook source ranges: https://api.github.com/meta (section "hooks")
DEFAULT_ALLOWED_IP_BLOCKS: tuple[str, ...] = (
    "192.30.252.0/22",
    "185.199.108.0/22",
    "140.82.112.0/20",
    "143.55.64.0/20",
)


@dataclass(frozen=True)
class GitHubConfig:
    """GitHub configuration."""

    webhook_secret: str
    allowed_ip_blocks: tuple[str, ...] = field(default=DEFAULT_ALLOWED_IP_BLOCKS)
    ip_check_enabled: bool = True
    push_branch: str = "develop"
