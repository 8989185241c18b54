from enum import Enum
from typing import Optional

from draftdesk.core.errors import DraftAuthorizationError
from draftdesk.domains.drafts.entities import Draft, DraftVisibility


class AccessTier(str, Enum):
    """Уровень доступа зрителя к черновику"""
    OWNER = "owner"
    COLLABORATOR = "collaborator"
    PUBLIC_READER = "public_reader"
    NONE = "none"


class DraftAccess:
    """Проверка прав доступа к черновику.

    Порядок разрешения: владелец, затем соавтор (только при видимости
    ``shared``), затем публичный читатель. Список ``shared_with``
    учитывается только для видимости ``shared``.
    Соавторы получают право записи наравне с владельцем.
    """

    @staticmethod
    def resolve_tier(draft: Draft, viewer_id: Optional[str]) -> AccessTier:
        if viewer_id and viewer_id == draft.owner_id:
            return AccessTier.OWNER
        if (
            viewer_id
            and draft.visibility is DraftVisibility.SHARED
            and viewer_id in draft.shared_with
        ):
            return AccessTier.COLLABORATOR
        if draft.visibility is DraftVisibility.PUBLIC:
            return AccessTier.PUBLIC_READER
        return AccessTier.NONE

    @classmethod
    def can_read(cls, draft: Draft, viewer_id: Optional[str]) -> bool:
        return cls.resolve_tier(draft, viewer_id) is not AccessTier.NONE

    @classmethod
    def can_write(cls, draft: Draft, viewer_id: Optional[str]) -> bool:
        return cls.resolve_tier(draft, viewer_id) in (AccessTier.OWNER, AccessTier.COLLABORATOR)

    @classmethod
    def require_read(cls, draft: Draft, viewer_id: Optional[str], action: str = "view this draft") -> None:
        """Проверка права чтения; иначе DraftAuthorizationError"""
        if not cls.can_read(draft, viewer_id):
            raise DraftAuthorizationError(f"Not authorised to {action}")

    @classmethod
    def require_write(cls, draft: Draft, viewer_id: Optional[str], action: str = "modify this draft") -> None:
        """Проверка права записи; иначе DraftAuthorizationError"""
        if not cls.can_write(draft, viewer_id):
            raise DraftAuthorizationError(f"Not authorised to {action}")
