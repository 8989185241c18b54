import logging
import threading
from typing import Dict, Iterable, List, Optional

from draftdesk.core.config import Settings, settings as default_settings
from draftdesk.core.errors import DraftNotFoundError, DraftValidationError
from draftdesk.domains.assets.services import AssetStore
from draftdesk.domains.drafts.access import DraftAccess
from draftdesk.domains.drafts.entities import (
    Draft, DraftAttachment, DraftComment, DraftVisibility, CommentPlacement
)
from draftdesk.domains.drafts.events import DraftEventEmitter, DraftEventKind
from draftdesk.domains.drafts.ledger import RevisionLedger, coerce_granularity, count_words
from draftdesk.domains.drafts.schemas import (
    AttachmentInput, AttachmentResponse, CommentCreate, CommentResponse, CommentThreads,
    DiffSegmentResponse, DraftBuckets, DraftCommentedEvent, DraftComparison, DraftCreate,
    DraftSummary, DraftUpdate, DraftWorkspace, RevisionResponse
)
from draftdesk.domains.identity.entities import WriterProfile
from draftdesk.domains.identity.services import WriterDirectory
from draftdesk.domains.notifications.entities import Notification
from draftdesk.domains.notifications.services import NotificationSink

logger = logging.getLogger(__name__)


def _sanitise_shared_with(shared_with: Optional[Iterable[str]], owner_id: str) -> List[str]:
    """Уникальные идентификаторы соавторов без владельца, порядок сохраняется"""
    clean: List[str] = []
    for writer_id in shared_with or []:
        writer_id = (writer_id or "").strip()
        if writer_id and writer_id != owner_id and writer_id not in clean:
            clean.append(writer_id)
    return clean


class DraftStore:
    """Хранилище черновиков в памяти процесса.

    Владеет всеми черновиками, их ревизиями и комментариями. Каждая операция
    выполняется под общей блокировкой хранилища, события публикуются внутри
    нее, поэтому порядок событий совпадает с порядком изменений.
    """

    def __init__(
        self,
        event_emitter: Optional[DraftEventEmitter] = None,
        writer_directory: Optional[WriterDirectory] = None,
        notification_sink: Optional[NotificationSink] = None,
        asset_store: Optional[AssetStore] = None,
        settings: Optional[Settings] = None
    ):
        self.event_emitter = event_emitter or DraftEventEmitter()
        self.writer_directory = writer_directory or WriterDirectory()
        self.notification_sink = notification_sink or NotificationSink()
        self.asset_store = asset_store or AssetStore()
        self.settings = settings or default_settings
        self.ledger = RevisionLedger(max_diff_tokens=self.settings.max_diff_tokens)
        self.comments = DraftCommentService(self)

        self._drafts: Dict[str, Draft] = {}
        self.lock = threading.RLock()

    # Представления

    def to_comment_response(self, comment: DraftComment) -> CommentResponse:
        return CommentResponse(
            id=comment.id,
            draft_id=comment.draft_id,
            author_id=comment.author_id,
            author_name=self.writer_directory.display_name(comment.author_id, fallback=comment.author_id),
            body=comment.body,
            placement=comment.placement,
            quote=comment.quote,
            created_at=comment.created_at
        )

    def _to_summary(self, draft: Draft) -> DraftSummary:
        return DraftSummary(
            id=draft.id,
            title=draft.title,
            owner_id=draft.owner_id,
            visibility=draft.visibility,
            shared_with=list(draft.shared_with),
            preview=draft.preview,
            attachments=[AttachmentResponse.model_validate(a) for a in draft.attachments],
            latest_revision_id=draft.latest_revision_id,
            revision_count=len(draft.revisions),
            created_at=draft.created_at,
            updated_at=draft.updated_at
        )

    def _to_workspace(self, draft: Draft) -> DraftWorkspace:
        summary = self._to_summary(draft)
        return DraftWorkspace(
            **summary.model_dump(),
            content=draft.content,
            word_count=count_words(draft.content),
            revisions=[RevisionResponse.model_validate(r) for r in self.ledger.list(draft)],
            comments=[self.to_comment_response(c) for c in draft.comments]
        )

    # Внутренние операции

    def require_draft(self, draft_id: str) -> Draft:
        draft = self._drafts.get(draft_id)
        if draft is None:
            raise DraftNotFoundError(f"Draft {draft_id} not found")
        return draft

    def _check_content(self, content: str) -> None:
        if len(content) > self.settings.max_content_length:
            raise DraftValidationError(
                f"Draft content exceeds {self.settings.max_content_length} characters"
            )

    def _store_attachments(self, inputs: List[AttachmentInput]) -> List[DraftAttachment]:
        asset_refs = self.asset_store.put_all(
            [(item.filename, item.content_type, item.base64_data) for item in inputs]
        )
        return [
            DraftAttachment(
                filename=item.filename,
                content_type=item.content_type or "application/octet-stream",
                size=item.size,
                asset_ref=asset_ref
            )
            for item, asset_ref in zip(inputs, asset_refs)
        ]

    def _publish_update(self, draft: Draft) -> DraftWorkspace:
        workspace = self._to_workspace(draft)
        self.event_emitter.emit(DraftEventKind.DRAFT_UPDATED, workspace)
        return workspace

    # Операции черновиков

    def create_draft(self, draft_data: DraftCreate) -> DraftWorkspace:
        """Создание черновика с первой ревизией"""
        owner_id = (draft_data.owner_id or "").strip()
        if not owner_id:
            raise DraftValidationError("Drafts require an owner")
        self._check_content(draft_data.content)

        visibility = draft_data.visibility or DraftVisibility.PRIVATE
        shared_with = []
        if visibility is DraftVisibility.SHARED:
            shared_with = _sanitise_shared_with(draft_data.shared_with, owner_id)

        with self.lock:
            attachments = self._store_attachments(draft_data.attachments)
            draft = Draft(
                owner_id=owner_id,
                title=draft_data.title.strip() or self.settings.default_untitled_title,
                content=draft_data.content or "",
                visibility=visibility,
                shared_with=shared_with,
                attachments=attachments,
                preview_length=self.settings.preview_length
            )
            self.ledger.append(
                draft,
                draft.content,
                owner_id,
                is_autosave=False,
                note=draft_data.note or "Initial draft"
            )
            self._drafts[draft.id] = draft
            logger.info(f"Draft {draft.id} created by {owner_id} ({visibility.value})")
            return self._publish_update(draft)

    def update_draft(self, draft_id: str, actor_id: str, update_data: DraftUpdate) -> DraftWorkspace:
        """Обновление черновика; новая ревизия только при изменении текста"""
        with self.lock:
            draft = self.require_draft(draft_id)
            DraftAccess.require_write(draft, actor_id)
            if update_data.content is not None:
                self._check_content(update_data.content)
            new_attachments = self._store_attachments(update_data.attachments_to_add)

            if update_data.title is not None and update_data.title.strip():
                draft.title = update_data.title.strip()

            if update_data.visibility is not None:
                draft.visibility = update_data.visibility

            if update_data.shared_with is not None:
                draft.shared_with = _sanitise_shared_with(update_data.shared_with, draft.owner_id)

            if new_attachments:
                draft.attachments.extend(new_attachments)

            if update_data.remove_attachment_ids:
                to_remove = set(update_data.remove_attachment_ids)
                draft.attachments = [a for a in draft.attachments if a.id not in to_remove]

            if update_data.content is not None:
                if draft.set_content(update_data.content):
                    revision = self.ledger.append(
                        draft,
                        draft.content,
                        actor_id,
                        is_autosave=update_data.autosave,
                        note=update_data.note
                    )
                    logger.info(f"Draft {draft.id} revised by {actor_id} -> {revision.id} ({revision.kind.value})")

            draft.touch()
            return self._publish_update(draft)

    def get_draft_workspace(self, draft_id: str, viewer_id: Optional[str]) -> DraftWorkspace:
        """Полное представление черновика с ревизиями и комментариями"""
        with self.lock:
            draft = self.require_draft(draft_id)
            DraftAccess.require_read(draft, viewer_id)
            return self._to_workspace(draft)

    def list_accessible_drafts(self, viewer_id: Optional[str]) -> List[DraftSummary]:
        """Все черновики, доступные зрителю на чтение, новые первыми"""
        with self.lock:
            summaries = [
                self._to_summary(draft)
                for draft in self._drafts.values()
                if DraftAccess.can_read(draft, viewer_id)
            ]
        summaries.sort(key=lambda s: s.updated_at, reverse=True)
        return summaries

    def list_draft_buckets_for_user(self, viewer_id: Optional[str]) -> DraftBuckets:
        """Раскладка черновиков: owned, затем collaborating, затем public"""
        buckets = DraftBuckets()
        with self.lock:
            for draft in self._drafts.values():
                if draft.owner_id == viewer_id:
                    buckets.owned.append(self._to_summary(draft))
                elif DraftAccess.can_write(draft, viewer_id):
                    buckets.collaborating.append(self._to_summary(draft))
                elif draft.visibility is DraftVisibility.PUBLIC:
                    buckets.public.append(self._to_summary(draft))

        for bucket in (buckets.owned, buckets.collaborating, buckets.public):
            bucket.sort(key=lambda s: s.updated_at, reverse=True)
        return buckets

    def list_potential_collaborators(self, owner_id: Optional[str]) -> List[WriterProfile]:
        return [writer for writer in self.writer_directory.list_writers() if writer.id != owner_id]

    def list_draft_revisions(self, draft_id: str, viewer_id: Optional[str]) -> List[RevisionResponse]:
        with self.lock:
            draft = self.require_draft(draft_id)
            DraftAccess.require_read(draft, viewer_id, "inspect revisions")
            return [RevisionResponse.model_validate(r) for r in self.ledger.list(draft)]

    def compare_draft_revisions(
        self,
        draft_id: str,
        base_revision_id: str,
        target_revision_id: str,
        viewer_id: Optional[str],
        granularity: Optional[str] = None
    ) -> DraftComparison:
        """Сравнение двух ревизий одного черновика"""
        mode = coerce_granularity(granularity or self.settings.diff_granularity)

        with self.lock:
            draft = self.require_draft(draft_id)
            DraftAccess.require_read(draft, viewer_id, "compare revisions")
            base = self.ledger.get(draft, base_revision_id)
            target = self.ledger.get(draft, target_revision_id)

        segments = self.ledger.diff_revisions(base, target, mode)

        return DraftComparison(
            draft_id=draft_id,
            granularity=mode.value,
            base=RevisionResponse.model_validate(base),
            target=RevisionResponse.model_validate(target),
            segments=[DiffSegmentResponse.model_validate(s) for s in segments]
        )

    def create_draft_comment(self, draft_id: str, actor_id: str, comment_data: CommentCreate) -> CommentResponse:
        return self.comments.create_comment(draft_id, actor_id, comment_data)

    def list_draft_comments(
        self,
        draft_id: str,
        viewer_id: Optional[str],
        placement: Optional[str] = None
    ) -> List[CommentResponse]:
        return self.comments.list_comments(draft_id, viewer_id, placement)

    def get_event_emitter(self) -> DraftEventEmitter:
        return self.event_emitter

    def reset(self) -> None:
        """Полная очистка состояния (для изоляции тестов)"""
        with self.lock:
            self._drafts.clear()
        self.notification_sink.clear()
        self.asset_store.clear()
        logger.info("Draft state reset")


class DraftCommentService:
    """Комментарии к черновикам: для комментирования достаточно права чтения"""

    def __init__(self, store: DraftStore):
        self.store = store

    def _notify(self, draft: Draft, comment: DraftComment) -> None:
        """Уведомление владельца и соавторов, кроме автора комментария"""
        recipients = [draft.owner_id]
        if draft.visibility is DraftVisibility.SHARED:
            recipients.extend(draft.shared_with)

        actor_name = self.store.writer_directory.display_name(comment.author_id)
        summary = f"{actor_name} commented on draft {draft.title}"
        for recipient_id in dict.fromkeys(recipients):
            if recipient_id == comment.author_id:
                continue
            notification = Notification(
                recipient_id=recipient_id,
                actor_id=comment.author_id,
                subject_id=draft.id,
                summary=summary,
                created_at=comment.created_at
            )
            try:
                self.store.notification_sink.deliver(notification)
            except Exception:
                # Доставка уведомлений не должна ломать создание комментария
                logger.warning(f"Failed to notify {recipient_id} about comment {comment.id}", exc_info=True)

    def create_comment(self, draft_id: str, actor_id: str, comment_data: CommentCreate) -> CommentResponse:
        """Создание комментария к черновику"""
        with self.store.lock:
            draft = self.store.require_draft(draft_id)
            DraftAccess.require_read(draft, actor_id, "discuss this draft")

            body = (comment_data.body or "").strip()
            if not body:
                raise DraftValidationError("Comments require content")

            placement = (
                CommentPlacement.INLINE
                if comment_data.placement == CommentPlacement.INLINE.value
                else CommentPlacement.SIDEBAR
            )
            quote = (comment_data.quote or "").strip() or None

            comment = DraftComment(
                draft_id=draft.id,
                author_id=actor_id,
                body=body,
                placement=placement,
                quote=quote
            )
            draft.comments.append(comment)
            logger.info(f"Comment {comment.id} added to draft {draft.id} by {actor_id}")

            self._notify(draft, comment)

            response = self.store.to_comment_response(comment)
            self.store.event_emitter.emit(
                DraftEventKind.DRAFT_COMMENTED,
                DraftCommentedEvent(draft_id=draft.id, comment=response)
            )
            return response

    def list_comments(
        self,
        draft_id: str,
        viewer_id: Optional[str],
        placement: Optional[str] = None
    ) -> List[CommentResponse]:
        """Комментарии в порядке создания, при необходимости только одного типа"""
        with self.store.lock:
            draft = self.store.require_draft(draft_id)
            DraftAccess.require_read(draft, viewer_id, "view comments")
            comments = list(draft.comments)

        if placement is not None:
            try:
                wanted = CommentPlacement(placement)
            except ValueError:
                raise DraftValidationError(f"Unknown comment placement: {placement}")
            comments = [c for c in comments if c.placement is wanted]

        return [self.store.to_comment_response(c) for c in comments]

    @staticmethod
    def partition_by_placement(comments: List[CommentResponse]) -> CommentThreads:
        threads = CommentThreads()
        for comment in comments:
            if comment.placement is CommentPlacement.INLINE:
                threads.inline.append(comment)
            else:
                threads.sidebar.append(comment)
        return threads
