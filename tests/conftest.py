import pytest
from fastapi.testclient import TestClient

from draftdesk.core.config import Settings
from draftdesk.domains.drafts.schemas import DraftCreate
from draftdesk.domains.drafts.services import DraftStore
from draftdesk.main import create_app


@pytest.fixture
def test_settings():
    """Settings without reading the local .env file."""
    return Settings(_env_file=None, stream_keepalive_seconds=0.05)


@pytest.fixture
def store(test_settings):
    """A fresh, isolated draft store for every test."""
    draft_store = DraftStore(settings=test_settings)
    yield draft_store
    draft_store.reset()


@pytest.fixture
def client(store, test_settings):
    """Return a TestClient bound to the isolated store."""
    return TestClient(create_app(store=store, app_settings=test_settings))


@pytest.fixture
def make_draft(store):
    """Factory creating drafts straight through the store."""
    def _make(owner_id="writer-aria", **fields):
        return store.create_draft(DraftCreate(owner_id=owner_id, **fields))
    return _make
