from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime

from draftdesk.domains.drafts.entities import CommentPlacement, DraftVisibility, RevisionKind
from draftdesk.domains.drafts.ledger import DiffSegmentType


class AttachmentInput(BaseModel):
    """Схема входящего вложения (байты в base64)"""
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(default="application/octet-stream", max_length=255)
    base64_data: str = ""
    size: int = Field(default=0, ge=0)


class DraftCreate(BaseModel):
    """Схема для создания черновика"""
    owner_id: str = ""
    title: str = Field(default="", max_length=255)
    content: str = ""
    visibility: DraftVisibility = DraftVisibility.PRIVATE
    shared_with: List[str] = Field(default_factory=list)
    attachments: List[AttachmentInput] = Field(default_factory=list)
    note: Optional[str] = None


class DraftUpdate(BaseModel):
    """Схема для обновления черновика"""
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    visibility: Optional[DraftVisibility] = None
    shared_with: Optional[List[str]] = None
    attachments_to_add: List[AttachmentInput] = Field(default_factory=list)
    remove_attachment_ids: List[str] = Field(default_factory=list)
    autosave: bool = False
    note: Optional[str] = None


class CommentCreate(BaseModel):
    """Схема для создания комментария"""
    body: str = ""
    placement: Optional[str] = None
    quote: Optional[str] = None


class AttachmentResponse(BaseModel):
    id: str
    filename: str
    content_type: str
    size: int
    asset_ref: str
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RevisionResponse(BaseModel):
    """Схема ревизии черновика"""
    id: str
    draft_id: str
    author_id: str
    title_snapshot: str
    content: str
    word_count: int
    kind: RevisionKind
    autosave: bool
    note: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    """Схема комментария"""
    id: str
    draft_id: str
    author_id: str
    author_name: str
    body: str
    placement: CommentPlacement
    quote: Optional[str] = None
    created_at: datetime


class DraftSummary(BaseModel):
    """Краткое представление черновика для списков"""
    id: str
    title: str
    owner_id: str
    visibility: DraftVisibility
    shared_with: List[str]
    preview: str
    attachments: List[AttachmentResponse]
    latest_revision_id: Optional[str] = None
    revision_count: int
    created_at: datetime
    updated_at: datetime


class DraftWorkspace(DraftSummary):
    """Полное представление черновика с ревизиями и комментариями"""
    content: str
    word_count: int
    revisions: List[RevisionResponse]
    comments: List[CommentResponse]


class DraftBuckets(BaseModel):
    """Черновики зрителя, разложенные по непересекающимся группам"""
    owned: List[DraftSummary] = Field(default_factory=list)
    collaborating: List[DraftSummary] = Field(default_factory=list)
    public: List[DraftSummary] = Field(default_factory=list)


class DiffSegmentResponse(BaseModel):
    type: DiffSegmentType
    text: str
    tokens: List[str]

    model_config = ConfigDict(from_attributes=True)


class DraftComparison(BaseModel):
    """Результат сравнения двух ревизий"""
    draft_id: str
    granularity: str
    base: RevisionResponse
    target: RevisionResponse
    segments: List[DiffSegmentResponse]


class DraftCommentedEvent(BaseModel):
    """Полезная нагрузка события draft:commented"""
    draft_id: str
    comment: CommentResponse


class CommentThreads(BaseModel):
    inline: List[CommentResponse] = Field(default_factory=list)
    sidebar: List[CommentResponse] = Field(default_factory=list)
