from draftdesk.domains.drafts.entities import (
    Draft, DraftAttachment, DraftComment, Revision,
    DraftVisibility, RevisionKind, CommentPlacement
)
from draftdesk.domains.drafts.access import AccessTier, DraftAccess
from draftdesk.domains.drafts.ledger import (
    DiffGranularity, DiffSegment, DiffSegmentType, RevisionLedger, count_words, diff_contents
)
from draftdesk.domains.drafts.events import DraftEventEmitter, DraftEventKind
from draftdesk.domains.drafts.schemas import (
    AttachmentInput, DraftCreate, DraftUpdate, CommentCreate,
    AttachmentResponse, RevisionResponse, CommentResponse, DraftSummary, DraftWorkspace,
    DraftBuckets, DiffSegmentResponse, DraftComparison, DraftCommentedEvent, CommentThreads
)
from draftdesk.domains.drafts.services import DraftStore, DraftCommentService

__all__ = [
    "Draft", "DraftAttachment", "DraftComment", "Revision",
    "DraftVisibility", "RevisionKind", "CommentPlacement",
    "AccessTier", "DraftAccess",
    "DiffGranularity", "DiffSegment", "DiffSegmentType", "RevisionLedger", "count_words", "diff_contents",
    "DraftEventEmitter", "DraftEventKind",
    "AttachmentInput", "DraftCreate", "DraftUpdate", "CommentCreate",
    "AttachmentResponse", "RevisionResponse", "CommentResponse", "DraftSummary", "DraftWorkspace",
    "DraftBuckets", "DiffSegmentResponse", "DraftComparison", "DraftCommentedEvent", "CommentThreads",
    "DraftStore", "DraftCommentService"
]
