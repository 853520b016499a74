"""Flask extensions for the application."""
from .notifications import FcmNotifier

notifier = FcmNotifier()
