from typing import Iterable, List, Optional, Dict

from draftdesk.domains.identity.entities import WriterProfile


DEFAULT_WRITERS = [
    WriterProfile(id="writer-aria", slug="aria-lumen", name="Aria Lumen",
                  tagline="Speculative fiction & lyrical essays", interests=["fiction", "essays"]),
    WriterProfile(id="writer-jules", slug="jules-marlow", name="Jules Marlow",
                  tagline="Noir short stories", interests=["noir", "short stories"]),
    WriterProfile(id="writer-ronin", slug="ronin-vale", name="Ronin Vale",
                  tagline="Travel writing from the edges of the map", interests=["travel"]),
    WriterProfile(id="writer-mira", slug="mira-solis", name="Mira Solis",
                  tagline="Poetry and translation", interests=["poetry", "translation"]),
]


class WriterDirectory:
    """Каталог авторов: id -> профиль.

    Используется для выбора соавторов и отображения имен в комментариях.
    """

    def __init__(self, writers: Optional[Iterable[WriterProfile]] = None):
        source = DEFAULT_WRITERS if writers is None else writers
        self._writers: Dict[str, WriterProfile] = {writer.id: writer for writer in source}

    def get(self, writer_id: str) -> Optional[WriterProfile]:
        return self._writers.get(writer_id)

    def display_name(self, writer_id: str, fallback: str = "Collaborator") -> str:
        writer = self.get(writer_id)
        return writer.name if writer else fallback

    def list_writers(self) -> List[WriterProfile]:
        return list(self._writers.values())
