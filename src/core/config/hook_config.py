"""
Per-event hook switches.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from src.core.models import EventType


def _all_enabled() -> Mapping[EventType, bool]:
    return MappingProxyType({event_type: True for event_type in EventType})


@dataclass(frozen=True)
class HookConfig:
    """
    Which event types get a handler.

    Read once at startup. A disabled event type is never registered with the
    dispatcher, so its deliveries are acknowledged and dropped.
    """

    enabled: Mapping[EventType, bool] = field(default_factory=_all_enabled)

    def is_enabled(self, event_type: EventType) -> bool:
        return self.enabled.get(event_type, False)

    @classmethod
    def from_flags(cls, flags: Mapping[EventType, bool]) -> "HookConfig":
        return cls(enabled=MappingProxyType({event_type: bool(flags.get(event_type, False)) for event_type in EventType}))
