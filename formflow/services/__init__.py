"""Service modules - Business logic layer

The workflow-running services import the engine, which itself depends on
NotificationService; import them from their modules directly.
"""
from .notification_service import NotificationService

__all__ = [
    "NotificationService",
]
