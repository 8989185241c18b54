import base64
import binascii
import threading
import uuid
from typing import Dict, List, Optional, Tuple

from draftdesk.core.errors import DraftValidationError


class AssetStore:
    """Хранилище бинарных вложений в памяти процесса.

    Ядро черновиков хранит только ссылку, которую возвращает ``put_all``.
    """

    def __init__(self):
        self._blobs: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    @staticmethod
    def decode(filename: str, base64_data: str) -> bytes:
        try:
            return base64.b64decode(base64_data, validate=True) if base64_data else b""
        except (binascii.Error, ValueError):
            raise DraftValidationError(f"Attachment {filename} is not valid base64")

    def put_all(self, files: List[Tuple[str, str, str]]) -> List[str]:
        """Сохранение пакета (filename, content_type, base64_data).

        Сначала декодируется весь пакет: при ошибке в любом файле ничего
        не сохраняется.
        """
        payloads = [self.decode(filename, base64_data) for filename, _, base64_data in files]
        asset_refs = [f"asset-{uuid.uuid4()}" for _ in payloads]
        with self._lock:
            self._blobs.update(zip(asset_refs, payloads))
        return asset_refs

    def get(self, asset_ref: str) -> Optional[bytes]:
        with self._lock:
            return self._blobs.get(asset_ref)

    def clear(self) -> None:
        with self._lock:
            self._blobs.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._blobs)
