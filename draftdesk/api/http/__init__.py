from draftdesk.api.http.health import router as health_router
from draftdesk.api.http.events import router as events_router
from draftdesk.api.http.drafts import router as drafts_router

__all__ = [
    "health_router",
    "events_router",
    "drafts_router"
]
