"""
Configuration package - unified access point.

This package provides all configuration classes and the global config instance.
"""

from src.core.config.github_config import GitHubConfig
from src.core.config.hook_config import HookConfig
from src.core.config.http_config import HttpConfig
from src.core.config.logging_config import LoggingConfig
from src.core.config.misskey_config import MisskeyConfig
from src.core.config.server_config import ServerConfig
from src.core.config.settings import Config, config

__all__ = [
    "Config",
    "GitHubConfig",
    "HookConfig",
    "HttpConfig",
    "LoggingConfig",
    "MisskeyConfig",
    "ServerConfig",
    "config",
]
