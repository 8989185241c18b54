"""Tests for the comment thread manager."""

import pytest

from draftdesk.core.errors import DraftAuthorizationError, DraftNotFoundError, DraftValidationError
from draftdesk.domains.drafts.entities import CommentPlacement
from draftdesk.domains.drafts.events import DraftEventKind
from draftdesk.domains.drafts.schemas import CommentCreate


def test_whitespace_comment_is_rejected(make_draft, store) -> None:
    draft = make_draft()
    with pytest.raises(DraftValidationError, match="Comments require content"):
        store.create_draft_comment(draft.id, "writer-aria", CommentCreate(body="   \n\t"))


def test_comment_requires_read_access_only(make_draft, store) -> None:
    private = make_draft(visibility="private")
    with pytest.raises(DraftAuthorizationError):
        store.create_draft_comment(private.id, "writer-ronin", CommentCreate(body="Let me in"))

    public = make_draft(visibility="public")
    comment = store.create_draft_comment(public.id, "writer-ronin", CommentCreate(body="Lovely opening"))
    assert comment.author_id == "writer-ronin"
    assert comment.author_name == "Ronin Vale"


def test_comment_on_missing_draft_is_not_found(store) -> None:
    with pytest.raises(DraftNotFoundError):
        store.create_draft_comment("draft-missing", "writer-aria", CommentCreate(body="Hello"))


def test_comment_defaults(make_draft, store) -> None:
    draft = make_draft()
    sidebar = store.create_draft_comment(draft.id, "writer-aria", CommentCreate(body="  Note  ", placement="margin"))
    inline = store.create_draft_comment(draft.id, "writer-aria", CommentCreate(
        body="Tighten this", placement="inline", quote="  Hello world ",
    ))

    assert sidebar.body == "Note"
    assert sidebar.placement is CommentPlacement.SIDEBAR
    assert sidebar.quote is None
    assert inline.placement is CommentPlacement.INLINE
    assert inline.quote == "Hello world"


def test_comments_are_listed_in_creation_order(make_draft, store) -> None:
    draft = make_draft(visibility="public")
    bodies = ["first", "second", "third"]
    for body in bodies:
        store.create_draft_comment(draft.id, "writer-jules", CommentCreate(body=body))

    listed = store.list_draft_comments(draft.id, "writer-ronin")
    assert [c.body for c in listed] == bodies

    workspace = store.get_draft_workspace(draft.id, "writer-aria")
    assert [c.body for c in workspace.comments] == bodies


def test_list_comments_by_placement(make_draft, store) -> None:
    draft = make_draft()
    store.create_draft_comment(draft.id, "writer-aria", CommentCreate(body="side"))
    store.create_draft_comment(draft.id, "writer-aria", CommentCreate(body="in", placement="inline"))

    inline = store.list_draft_comments(draft.id, "writer-aria", placement="inline")
    assert [c.body for c in inline] == ["in"]

    threads = store.comments.partition_by_placement(store.list_draft_comments(draft.id, "writer-aria"))
    assert [c.body for c in threads.inline] == ["in"]
    assert [c.body for c in threads.sidebar] == ["side"]

    with pytest.raises(DraftValidationError):
        store.list_draft_comments(draft.id, "writer-aria", placement="footer")


def test_list_comments_requires_read_access(make_draft, store) -> None:
    draft = make_draft(visibility="shared", shared_with=["writer-jules"])
    assert store.list_draft_comments(draft.id, "writer-jules") == []
    with pytest.raises(DraftAuthorizationError):
        store.list_draft_comments(draft.id, "writer-ronin")


def test_comment_notifies_owner_and_collaborators(make_draft, store) -> None:
    draft = make_draft(title="Night Train", visibility="shared", shared_with=["writer-jules", "writer-mira"])
    store.create_draft_comment(draft.id, "writer-jules", CommentCreate(body="Great pacing"))

    recipients = {n.recipient_id for n in store.notification_sink.list_for()}
    assert recipients == {"writer-aria", "writer-mira"}
    owner_note = store.notification_sink.list_for("writer-aria")[0]
    assert owner_note.summary == "Jules Marlow commented on draft Night Train"
    assert owner_note.subject_id == draft.id


def test_owner_comment_on_private_draft_notifies_nobody(make_draft, store) -> None:
    draft = make_draft()
    store.create_draft_comment(draft.id, "writer-aria", CommentCreate(body="Note to self"))
    assert store.notification_sink.list_for() == []


def test_notification_failure_does_not_block_comment(make_draft, store, monkeypatch) -> None:
    draft = make_draft(visibility="public")

    def broken(notification):
        raise RuntimeError("sink down")

    monkeypatch.setattr(store.notification_sink, "deliver", broken)
    comment = store.create_draft_comment(draft.id, "writer-ronin", CommentCreate(body="Still works"))
    assert comment.body == "Still works"


def test_comment_publishes_event(make_draft, store) -> None:
    draft = make_draft(visibility="public")
    received = []
    store.get_event_emitter().on(DraftEventKind.DRAFT_COMMENTED, received.append)

    comment = store.create_draft_comment(draft.id, "writer-ronin", CommentCreate(body="Hi"))
    assert len(received) == 1
    assert received[0].draft_id == draft.id
    assert received[0].comment.id == comment.id
