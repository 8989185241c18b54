import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DraftVisibility(str, Enum):
    """Уровни видимости черновика"""
    PRIVATE = "private"
    SHARED = "shared"
    PUBLIC = "public"


class RevisionKind(str, Enum):
    """Явное сохранение или автосохранение"""
    SAVE = "save"
    AUTOSAVE = "autosave"


class CommentPlacement(str, Enum):
    INLINE = "inline"
    SIDEBAR = "sidebar"


HTML_TAG_RE = re.compile(r"<[^>]+>")
HTML_BLOCK_END_RE = re.compile(r"</(p|div)>", re.IGNORECASE)
HTML_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


def strip_html_to_preview(content: str, limit: int = 160) -> str:
    """Превью черновика: HTML в плоский текст с нормализованными пробелами"""
    text = HTML_BLOCK_END_RE.sub(" ", content)
    text = HTML_BREAK_RE.sub(" ", text)
    text = HTML_TAG_RE.sub(" ", text)
    text = " ".join(text.split())
    return text[:limit]


@dataclass(frozen=True)
class Revision:
    """Неизменяемый снимок содержимого черновика"""
    id: str
    draft_id: str
    author_id: str
    title_snapshot: str
    content: str
    word_count: int
    kind: RevisionKind
    created_at: datetime
    note: Optional[str] = None

    @property
    def autosave(self) -> bool:
        return self.kind is RevisionKind.AUTOSAVE


class DraftAttachment:
    """Метаданные вложения; сами байты живут во внешнем хранилище"""

    def __init__(
        self,
        filename: str,
        content_type: str,
        size: int,
        asset_ref: str,
        id: Optional[str] = None,
        uploaded_at: Optional[datetime] = None
    ):
        self.id = id or f"draft-attachment-{uuid.uuid4()}"
        self.filename = filename
        self.content_type = content_type
        self.size = size
        self.asset_ref = asset_ref
        self.uploaded_at = uploaded_at or utcnow()

    def __repr__(self) -> str:
        return f"DraftAttachment(id={self.id}, filename={self.filename}, size={self.size})"


class DraftComment:
    """Комментарий к черновику (на полях или привязанный к цитате)"""

    def __init__(
        self,
        draft_id: str,
        author_id: str,
        body: str,
        placement: CommentPlacement = CommentPlacement.SIDEBAR,
        quote: Optional[str] = None,
        id: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.id = id or f"draft-comment-{uuid.uuid4()}"
        self.draft_id = draft_id
        self.author_id = author_id
        self.body = body
        self.placement = placement
        self.quote = quote
        self.created_at = created_at or utcnow()

    def __eq__(self, other) -> bool:
        if not isinstance(other, DraftComment):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"DraftComment(id={self.id}, draft_id={self.draft_id}, placement={self.placement.value})"


class Draft:
    """Агрегат черновика: текущее содержимое, история ревизий и комментарии"""

    def __init__(
        self,
        owner_id: str,
        title: str,
        content: str = "",
        visibility: DraftVisibility = DraftVisibility.PRIVATE,
        shared_with: Optional[List[str]] = None,
        attachments: Optional[List[DraftAttachment]] = None,
        id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        preview_length: int = 160
    ):
        now = utcnow()
        self.id = id or f"draft-{uuid.uuid4()}"
        self.owner_id = owner_id
        self.title = title
        self.content = content
        self.visibility = visibility
        self.shared_with: List[str] = list(shared_with or [])
        self.attachments: List[DraftAttachment] = list(attachments or [])
        self.revisions: List[Revision] = []
        self.comments: List[DraftComment] = []
        self.created_at = created_at or now
        self.updated_at = self.created_at
        self._preview_length = preview_length
        self.preview = strip_html_to_preview(content, preview_length)

    @property
    def latest_revision_id(self) -> Optional[str]:
        if not self.revisions:
            return None
        return self.revisions[-1].id

    def set_content(self, content: str) -> bool:
        """Замена содержимого; возвращает True, если текст действительно изменился"""
        if content == self.content:
            return False
        self.content = content
        self.preview = strip_html_to_preview(content, self._preview_length)
        return True

    def touch(self) -> None:
        self.updated_at = utcnow()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Draft):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Draft(id={self.id}, title={self.title}, revisions={len(self.revisions)})"
