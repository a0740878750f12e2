import pytest
from pydantic import ValidationError

from src.core.models import EventType, NotificationMessage, Visibility, WebhookEvent


class TestEventType:
    @pytest.mark.parametrize("event_type", list(EventType))
    def test_from_header_round_trips_supported_names(self, event_type):
        assert EventType.from_header(event_type.value) is event_type

    @pytest.mark.parametrize("value", [None, "", "gollum", "PUSH", "check_run"])
    def test_from_header_unknown(self, value):
        assert EventType.from_header(value) is None


class TestNotificationMessage:
    def test_default_visibility_is_home(self):
        assert NotificationMessage(text="hi").visibility == Visibility.HOME

    def test_is_frozen(self):
        message = NotificationMessage(text="hi")
        with pytest.raises(ValidationError):
            message.text = "changed"


class TestWebhookEvent:
    def test_accessors(self):
        event = WebhookEvent(EventType.ISSUES, {"action": "opened"}, delivery_id="d-1")

        assert event.action == "opened"
        assert event.delivery_id == "d-1"

    def test_missing_action(self):
        event = WebhookEvent(EventType.PUSH, {"ref": "refs/heads/develop"})

        assert event.action is None
        assert event.delivery_id is None
