from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class WriterProfile:
    """Профиль автора из внешнего каталога"""
    id: str
    slug: str
    name: str
    tagline: str = ""
    interests: List[str] = field(default_factory=list)
    avatar: Optional[str] = None
