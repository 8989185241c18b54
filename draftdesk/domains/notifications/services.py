import logging
import threading
from typing import List, Optional

from draftdesk.domains.notifications.entities import Notification

logger = logging.getLogger(__name__)


class NotificationSink:
    """Приемник уведомлений в памяти процесса (новые первыми)"""

    def __init__(self):
        self._notifications: List[Notification] = []
        self._lock = threading.Lock()

    def deliver(self, notification: Notification) -> None:
        with self._lock:
            self._notifications.insert(0, notification)
        logger.info(f"Notification {notification.id} delivered to {notification.recipient_id}")

    def list_for(self, recipient_id: Optional[str] = None) -> List[Notification]:
        with self._lock:
            if recipient_id is None:
                return list(self._notifications)
            return [n for n in self._notifications if n.recipient_id == recipient_id]

    def clear(self) -> None:
        with self._lock:
            self._notifications.clear()
