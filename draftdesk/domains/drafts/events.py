import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class DraftEventKind(str, Enum):
    """Типы событий черновиков"""
    DRAFT_UPDATED = "draft:updated"
    DRAFT_COMMENTED = "draft:commented"


class DraftEventEmitter:
    """Синхронный канал публикации/подписки для событий черновиков.

    Доставка только текущим подписчикам в порядке регистрации, без буфера
    и повторной отправки. Подписчик обязан отписаться при разрыве
    соединения.
    """

    def __init__(self):
        self._listeners: Dict[DraftEventKind, List[Listener]] = {kind: [] for kind in DraftEventKind}
        self._lock = threading.Lock()

    def on(self, kind: DraftEventKind, listener: Listener) -> None:
        """Регистрация подписчика"""
        kind = DraftEventKind(kind)
        with self._lock:
            self._listeners[kind].append(listener)

    def off(self, kind: DraftEventKind, listener: Listener) -> None:
        """Отписка; повторный вызов ничего не делает"""
        kind = DraftEventKind(kind)
        with self._lock:
            listeners = self._listeners[kind]
            if listener in listeners:
                listeners.remove(listener)

    def subscribe(self, kind: DraftEventKind, listener: Listener) -> Callable[[], None]:
        """Подписка с возвратом функции отписки"""
        self.on(kind, listener)

        def unsubscribe() -> None:
            self.off(kind, listener)

        return unsubscribe

    def emit(self, kind: DraftEventKind, payload: Any) -> int:
        """Рассылка события; возвращает число подписчиков, получивших его"""
        kind = DraftEventKind(kind)
        with self._lock:
            listeners = list(self._listeners[kind])

        delivered = 0
        for listener in listeners:
            try:
                listener(payload)
                delivered += 1
            except Exception:
                logger.exception(f"Listener {listener!r} failed on {kind.value}")
        return delivered

    def listener_count(self, kind: DraftEventKind) -> int:
        kind = DraftEventKind(kind)
        with self._lock:
            return len(self._listeners[kind])
