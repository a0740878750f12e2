"""
Server configuration.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ServerConfig:
    """Listening address for the webhook receiver."""

    host: str = "0.0.0.0"
    port: int = 3000
