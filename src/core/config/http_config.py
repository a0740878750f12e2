"""
Outbound HTTP configuration.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpConfig:
    """Settings shared by the status lookup and the note publisher."""

    proxy: str | None = None
    timeout: float = 5.0
