from draftdesk.domains.notifications.entities import Notification
from draftdesk.domains.notifications.services import NotificationSink

__all__ = ["Notification", "NotificationSink"]
