"""
Core error classes for the webhook receiver.
"""


class WebhookRequestError(Exception):
    """A webhook delivery rejected before dispatch. Rendered as a plain-text response."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SourceNotAllowedError(WebhookRequestError):
    """Raised when the client address is outside the allowed network blocks."""

    status_code = 403

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class SignatureError(WebhookRequestError):
    """Raised when the X-Hub-Signature header is missing or does not match the body."""

    status_code = 400


class InvalidPayloadError(WebhookRequestError):
    """Raised when a verified body is not a JSON object."""

    status_code = 400
