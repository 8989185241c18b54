"""Tests for the access control gate."""

import pytest

from draftdesk.core.errors import DraftAuthorizationError
from draftdesk.domains.drafts.access import AccessTier, DraftAccess
from draftdesk.domains.drafts.entities import Draft, DraftVisibility


def _draft(visibility, shared_with=None):
    return Draft(owner_id="writer-aria", title="Test draft", visibility=visibility, shared_with=shared_with)


def test_private_draft_is_owner_only() -> None:
    draft = _draft(DraftVisibility.PRIVATE, shared_with=["writer-jules"])
    assert DraftAccess.resolve_tier(draft, "writer-aria") is AccessTier.OWNER
    # shared_with is ignored unless the draft is shared
    assert not DraftAccess.can_read(draft, "writer-jules")
    assert not DraftAccess.can_read(draft, "writer-ronin")
    assert not DraftAccess.can_read(draft, None)


def test_shared_draft_grants_collaborators_read_and_write() -> None:
    draft = _draft(DraftVisibility.SHARED, shared_with=["writer-jules"])
    assert DraftAccess.resolve_tier(draft, "writer-jules") is AccessTier.COLLABORATOR
    assert DraftAccess.can_read(draft, "writer-jules")
    assert DraftAccess.can_write(draft, "writer-jules")
    assert DraftAccess.resolve_tier(draft, "writer-ronin") is AccessTier.NONE
    assert not DraftAccess.can_read(draft, "writer-ronin")


def test_public_draft_is_readable_but_not_writable() -> None:
    draft = _draft(DraftVisibility.PUBLIC, shared_with=["writer-jules"])
    assert DraftAccess.resolve_tier(draft, "writer-ronin") is AccessTier.PUBLIC_READER
    assert DraftAccess.can_read(draft, "writer-ronin")
    assert DraftAccess.can_read(draft, None)
    assert not DraftAccess.can_write(draft, "writer-ronin")
    # Collaborator list only applies to shared drafts
    assert not DraftAccess.can_write(draft, "writer-jules")
    assert DraftAccess.can_write(draft, "writer-aria")


def test_require_helpers_raise_authorization_errors() -> None:
    draft = _draft(DraftVisibility.PRIVATE)
    with pytest.raises(DraftAuthorizationError, match="authoris"):
        DraftAccess.require_read(draft, "writer-ronin")
    with pytest.raises(PermissionError):
        DraftAccess.require_write(draft, "writer-ronin")
    DraftAccess.require_write(draft, "writer-aria")
