"""Push notifications to group leaders through Firebase Cloud Messaging."""

from __future__ import annotations

from typing import Any

from firebase_admin import exceptions, messaging
from flask import current_app

INVALID_TOKEN = "invalid_token"
OTHER = "other"

_INVALID_TOKEN_ERRORS = (
    messaging.UnregisteredError,
    messaging.SenderIdMismatchError,
    exceptions.InvalidArgumentError,
)


class NotificationError(Exception):
    """Raised when a push notification could not be delivered."""

    def __init__(self, message: str, reason: str = OTHER) -> None:
        """Initialize the error."""
        super().__init__(message)
        self.message = message
        self.reason = reason

    @property
    def invalid_token(self) -> bool:
        """Whether the recipient token is invalid or no longer registered."""
        return self.reason == INVALID_TOKEN


def classify_error(error: Exception) -> str:
    """Sort a messaging failure into ``invalid_token`` or ``other``."""
    if isinstance(error, _INVALID_TOKEN_ERRORS):
        return INVALID_TOKEN
    return OTHER


class FcmNotifier:
    """Sends titled push messages with a data payload to one device token.

    Bound to a Flask app with :meth:`init_app`; the Firebase app it sends
    through is whatever ``create_app`` initialized from the service-account
    settings (the SDK signs the OAuth exchange for the messaging scope).
    """

    def __init__(self, app: Any = None) -> None:
        """Initialize the notifier."""
        self.firebase_app = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Any, firebase_app: Any = None) -> None:
        """Register the notifier on a Flask app."""
        self.firebase_app = firebase_app
        app.extensions["fcm_notifier"] = self

    @staticmethod
    def build_message(
        token: str, title: str, body: str, data: dict[str, Any] | None = None
    ) -> messaging.Message:
        """Build the FCM message; data values must be strings."""
        payload = {
            str(key): str(value)
            for key, value in (data or {}).items()
            if value is not None
        }
        return messaging.Message(
            token=token,
            notification=messaging.Notification(title=title, body=body),
            data=payload,
        )

    def send(
        self, token: str, title: str, body: str, data: dict[str, Any] | None = None
    ) -> str:
        """Send a notification and return the FCM message id.

        Raises:
            NotificationError: If FCM rejects the message. Not retried.
        """
        message = self.build_message(token, title, body, data)
        try:
            response = messaging.send(message, app=self.firebase_app)
        except Exception as e:
            reason = classify_error(e)
            if reason == INVALID_TOKEN:
                current_app.logger.error(
                    "Invalid recipient token. The registration token is no "
                    f"longer valid and should be updated: {e}"
                )
            else:
                current_app.logger.error(f"Error during FCM notification: {e}")
            raise NotificationError(str(e), reason) from e

        current_app.logger.info(f"FCM Notification sent successfully: {response}")
        return response
