from fastapi import Request

from draftdesk.core.config import Settings, settings
from draftdesk.domains.drafts.services import DraftStore


def build_draft_store(app_settings: Settings = settings) -> DraftStore:
    """Одно хранилище на процесс; эмиттер передается через конструктор"""
    return DraftStore(settings=app_settings)


# Функция для dependency injection в FastAPI
def get_draft_store(request: Request) -> DraftStore:
    return request.app.state.draft_store


def get_viewer_id(request: Request) -> str:
    """Идентификатор зрителя из заголовка запроса"""
    header = request.app.state.settings.viewer_header
    return request.headers.get(header) or request.app.state.settings.default_viewer_id
