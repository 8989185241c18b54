from fastapi import HTTPException, status

from draftdesk.core.errors import DraftError, DraftErrorKind

_STATUS_BY_KIND = {
    DraftErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    DraftErrorKind.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    DraftErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
}


def http_error(error: DraftError) -> HTTPException:
    """Перевод ошибки ядра в HTTP-ответ по ее виду"""
    return HTTPException(
        status_code=_STATUS_BY_KIND.get(error.kind, status.HTTP_400_BAD_REQUEST),
        detail=error.message
    )
