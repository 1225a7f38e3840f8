from dataclasses import dataclass
from typing import Callable, Iterator
import time


class PendingTableError(KeyError):
    """
    Нарушение инварианта таблицы ожидающих запросов: повторное добавление
    ключа или обращение к отсутствующему ключу. Это ошибка логики
    программы, а не сети, поэтому ее не нужно перехватывать и обрабатывать.
    """
    ...


@dataclass(frozen=True, slots=True)
class PendingEntry:
    number: int        # номер из имени запроса
    send_time: float   # момент отправки, в секундах по часам таблицы


class PendingTable:
    """
    Таблица запросов, отправленных клиентом и ожидающих ответа или таймаута.

    Ключ - непрозрачная байтовая строка (`Name.key()` имени запроса).
    На один ключ в каждый момент приходится не более одной записи. Запись
    создается при отправке запроса и удаляется ровно один раз: при
    получении ответа или при таймауте.
    """

    def __init__(self, clock: Callable[[], float] | None = None):
        self._clock = clock or time.monotonic
        self._entries: dict[bytes, PendingEntry] = {}

    def add(self, key: bytes, number: int) -> PendingEntry:
        """Запомнить текущее время для `key`.

        Raises:
            PendingTableError: если запись с таким ключом уже есть
        """
        if key in self._entries:
            raise PendingTableError(f"duplicate pending key: {key!r}")
        entry = PendingEntry(number=number, send_time=self._clock())
        self._entries[key] = entry
        return entry

    def lookup(self, key: bytes) -> PendingEntry:
        try:
            return self._entries[key]
        except KeyError:
            raise PendingTableError(f"no pending entry for key: {key!r}") from None

    def remove(self, key: bytes) -> PendingEntry:
        try:
            return self._entries.pop(key)
        except KeyError:
            raise PendingTableError(f"no pending entry for key: {key!r}") from None

    def size(self) -> int:
        return len(self._entries)

    def __contains__(self, key: bytes) -> bool:
        return key in self._entries

    def __len__(self):
        return len(self._entries)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._entries)
