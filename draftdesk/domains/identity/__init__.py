from draftdesk.domains.identity.entities import WriterProfile
from draftdesk.domains.identity.services import WriterDirectory, DEFAULT_WRITERS

__all__ = ["WriterProfile", "WriterDirectory", "DEFAULT_WRITERS"]
