from abc import ABC, abstractmethod
import hashlib
import hmac

from pyping.core.name import Name
from .packets import Data


class Signer(ABC):
    """Подписывает ответы сервера."""

    @abstractmethod
    def sign(self, name: Name, payload: bytes, freshness: int | None) -> bytes:
        """
        Построить подписанный ответ.

        Args:
            name: имя ответа
            payload: содержимое
            freshness: FreshnessSeconds или None, если не указывать

        Returns:
            Закодированный пакет Data
        """
        ...

    @abstractmethod
    def verify(self, data: Data) -> bool:
        ...


class DigestSigner(Signer):
    """
    Подпись SHA-256 дайджестом от имени, свежести и содержимого.
    Если задан ключ, вместо простого дайджеста используется HMAC-SHA256.
    """
    def __init__(self, key: bytes | None = None):
        self._key = key

    def _digest(self, name: str, payload: bytes, freshness: int | None) -> str:
        blob = b'\x00'.join([
            name.encode('utf-8'),
            b'' if freshness is None else str(freshness).encode('ascii'),
            payload,
        ])
        if self._key is not None:
            return hmac.new(self._key, blob, hashlib.sha256).hexdigest()
        return hashlib.sha256(blob).hexdigest()

    def sign(self, name: Name, payload: bytes, freshness: int | None) -> bytes:
        uri = name.to_uri()
        data = Data(
            name=uri,
            content=payload,
            freshness=freshness,
            signature=self._digest(uri, payload, freshness),
        )
        return data.to_wire()

    def verify(self, data: Data) -> bool:
        expected = self._digest(data.name, data.content, data.freshness)
        return hmac.compare_digest(expected, data.signature)
