from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional
import asyncio
import json
import logging

from draftdesk.core.errors import DraftError
from draftdesk.core.state import get_draft_store, get_viewer_id
from draftdesk.api.http.errors import http_error
from draftdesk.domains.drafts.access import DraftAccess
from draftdesk.domains.drafts.events import DraftEventEmitter, DraftEventKind
from draftdesk.domains.drafts.schemas import DraftCommentedEvent, DraftWorkspace
from draftdesk.domains.drafts.services import DraftStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drafts", tags=["events"])


def format_event(event: str, data: Any) -> str:
    """Кадр text/event-stream: event + data + пустая строка"""
    if isinstance(data, BaseModel):
        payload = data.model_dump_json()
    else:
        payload = json.dumps(data)
    return f"event: {event}\n" + f"data: {payload}\n\n"


class DraftEventStream:
    """Подписка одного клиента на события конкретного черновика.

    Обработчики эмиттера могут вызываться из других потоков, поэтому кадры
    передаются в очередь через ``call_soon_threadsafe``.
    """

    def __init__(self, emitter: DraftEventEmitter, draft_id: str, viewer_id: Optional[str] = None):
        self.emitter = emitter
        self.draft_id = draft_id
        self.viewer_id = viewer_id
        self.queue: asyncio.Queue = asyncio.Queue()
        self._loop = asyncio.get_running_loop()
        self._unsubscribers: List[Callable[[], None]] = []
        self._closed = False
        self._revoked = False

    def open(self) -> None:
        self._unsubscribers = [
            self.emitter.subscribe(DraftEventKind.DRAFT_UPDATED, self._on_updated),
            self.emitter.subscribe(DraftEventKind.DRAFT_COMMENTED, self._on_commented),
        ]

    def _push(self, frame: Optional[str]) -> None:
        if self._closed or self._revoked:
            return
        self._loop.call_soon_threadsafe(self.queue.put_nowait, frame)

    def _on_updated(self, draft: DraftWorkspace) -> None:
        if draft.id != self.draft_id:
            return
        if not DraftAccess.can_read(draft, self.viewer_id):
            # None в очереди завершает поток
            self._push(None)
            self._revoked = True
            logger.info(f"Viewer {self.viewer_id} lost access to draft {self.draft_id}, ending stream")
            return
        self._push(format_event("draft", draft))

    def _on_commented(self, event: DraftCommentedEvent) -> None:
        if event.draft_id == self.draft_id:
            self._push(format_event("comment", event.comment))

    def close(self) -> None:
        """Отписка от эмиттера; повторный вызов ничего не делает"""
        if self._closed:
            return
        self._closed = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        logger.info(f"Event stream for draft {self.draft_id} closed")


async def draft_event_stream(
    store: DraftStore,
    draft_id: str,
    viewer_id: str,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive_seconds: float = 15.0
) -> AsyncIterator[str]:
    """Поток событий: ready, начальное состояние, затем обновления и комментарии"""
    stream = DraftEventStream(store.get_event_emitter(), draft_id, viewer_id)
    try:
        try:
            with store.lock:
                initial_draft = store.get_draft_workspace(draft_id, viewer_id)
                stream.open()
        except DraftError as e:
            logger.warning(f"Event stream for draft {draft_id} refused: {e.message}")
            return

        yield format_event("ready", {"ok": True})
        yield format_event("draft", initial_draft)

        while True:
            if await is_disconnected():
                break
            try:
                frame = await asyncio.wait_for(stream.queue.get(), timeout=keepalive_seconds)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            if frame is None:
                break
            yield frame
    finally:
        stream.close()


@router.get("/events")
async def stream_draft_events(
    request: Request,
    draft_id: Optional[str] = Query(None, alias="draftId"),
    viewer_id: str = Depends(get_viewer_id),
    store: DraftStore = Depends(get_draft_store)
):
    """Поток событий черновика в формате text/event-stream"""
    if not draft_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="draftId is required"
        )

    # Проверка доступа до открытия потока, чтобы вернуть корректный статус
    try:
        store.get_draft_workspace(draft_id, viewer_id)
    except DraftError as e:
        raise http_error(e)

    return StreamingResponse(
        draft_event_stream(
            store,
            draft_id,
            viewer_id,
            request.is_disconnected,
            request.app.state.settings.stream_keepalive_seconds
        ),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"}
    )
