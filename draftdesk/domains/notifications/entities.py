import uuid
from datetime import datetime, timezone
from typing import Optional


class Notification:
    """Уведомление для ленты автора"""

    def __init__(
        self,
        recipient_id: str,
        actor_id: str,
        subject_id: str,
        summary: str,
        type: str = "comment",
        id: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.id = id or f"notif-{uuid.uuid4()}"
        self.type = type
        self.recipient_id = recipient_id
        self.actor_id = actor_id
        self.subject_id = subject_id
        self.summary = summary
        self.created_at = created_at or datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return f"Notification(id={self.id}, recipient_id={self.recipient_id}, type={self.type})"
