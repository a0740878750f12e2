"""
Misskey API adapter.
"""

from src.integrations.misskey.client import MisskeyClient, NoteCreateRequest

__all__ = [
    "MisskeyClient",
    "NoteCreateRequest",
]
