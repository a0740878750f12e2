"""
Misskey instance configuration.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MisskeyConfig:
    """Target instance and the API token used to create notes."""

    instance: str
    token: str

    @property
    def notes_create_url(self) -> str:
        return f"{self.instance.rstrip('/')}/api/notes/create"
