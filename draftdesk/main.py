from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
import logging

from draftdesk.core.config import Settings, settings
from draftdesk.core.state import build_draft_store
from draftdesk.domains.drafts.services import DraftStore
from draftdesk.api.http.health import router as health_router
from draftdesk.api.http.events import router as events_router
from draftdesk.api.http.drafts import router as drafts_router


def configure_logging(app_settings: Settings) -> None:
    logging.basicConfig(
        level=app_settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def create_app(store: Optional[DraftStore] = None, app_settings: Settings = settings) -> FastAPI:
    """Сборка приложения; хранилище можно передать извне (например, в тестах)"""
    configure_logging(app_settings)

    app = FastAPI(
        title=app_settings.app_title,
        description="Черновики с историей ревизий, сравнением версий и комментариями",
        version="1.0.0"
    )

    # Настройка CORS для работы с frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # В продакшене указать конкретные домены
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = app_settings
    app.state.draft_store = store or build_draft_store(app_settings)

    # Поток событий подключается раньше, чем /drafts/{draft_id}
    app.include_router(health_router)
    app.include_router(events_router)
    app.include_router(drafts_router)

    @app.get("/")
    async def root():
        return {
            "message": f"{app_settings.app_title} API",
            "docs": "/docs",
            "health": "/health"
        }

    return app


app = create_app()
