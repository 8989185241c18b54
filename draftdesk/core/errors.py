from enum import Enum


class DraftErrorKind(str, Enum):
    """Виды ошибок ядра черновиков"""
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation"


class DraftError(Exception):
    """Базовая ошибка ядра черновиков.

    HTTP-слой сопоставляет статус по ``kind``, а не по тексту сообщения.
    Сообщение остается человекочитаемым для логов и ответа клиенту.
    """

    kind: DraftErrorKind = DraftErrorKind.VALIDATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value}, message={self.message!r})"


class DraftNotFoundError(DraftError, LookupError):
    """Черновик, ревизия или комментарий не существует"""
    kind = DraftErrorKind.NOT_FOUND


class DraftAuthorizationError(DraftError, PermissionError):
    """У зрителя нет прав на чтение или запись"""
    kind = DraftErrorKind.UNAUTHORIZED


class DraftValidationError(DraftError, ValueError):
    """Некорректные входные данные"""
    kind = DraftErrorKind.VALIDATION
