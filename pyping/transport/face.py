from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from pyping.core.logger import PingLogger
from pyping.core.name import Name
from pyping.core.scheduler import EventId, Handler, Scheduler
from .packets import Data, Interest


# Время жизни запроса по-умолчанию, секунды
DEFAULT_INTEREST_LIFETIME = 4.0


class TransportError(RuntimeError):
    """Ошибка транспорта: нет соединения, не удалось отправить пакет и т.п."""
    ...


class UpcallKind(Enum):
    FINAL = 0               # обработчик больше не будет вызываться
    INTEREST = 1            # пришел запрос, подходящий под фильтр
    CONSUMED_INTEREST = 2   # пришел запрос, но его уже обработал другой фильтр
    CONTENT = 3             # пришел ответ на отправленный запрос
    INTEREST_TIMED_OUT = 4  # время жизни запроса истекло
    CONTENT_UNVERIFIED = 5  # ответ пришел, но подпись не проверена
    CONTENT_BAD = 6         # ответ с неверной подписью


class UpcallResult(Enum):
    OK = 0
    ERR = -1
    INTEREST_CONSUMED = 1


@dataclass
class UpcallInfo:
    face: "Face"
    interest: Interest
    data: Data | None = None

    @property
    def name(self) -> Name:
        return self.interest.ndn_name


# Обработчик уведомлений транспорта
Closure = Callable[[UpcallKind, UpcallInfo | None], UpcallResult]


@dataclass
class _PendingInterest:
    interest: Interest
    closure: Closure
    timer: EventId


class Face(ABC):
    """
    Точка подключения к сети (к форвардеру).

    Общая часть всех транспортов: учет отправленных запросов и их таймеров,
    фильтры входящих запросов, вызов обработчиков. Конкретный транспорт
    реализует подключение, отправку байтов и прием (`_poll()`).

    Все обработчики вызываются из `run()`, то есть из того потока, который
    крутит цикл обработки событий.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        logger: PingLogger | None = None,
        interest_lifetime: float = DEFAULT_INTEREST_LIFETIME,
    ):
        self.scheduler = scheduler or Scheduler()
        self.logger = logger or PingLogger('pyping.face')
        self.interest_lifetime = interest_lifetime
        self._connected = False
        self._pending: dict[bytes, list[_PendingInterest]] = {}
        self._filters: list[tuple[Name, Closure]] = []

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        """
        Подключиться к форвардеру.

        Raises:
            TransportError: если подключиться не удалось
        """
        self._connect()
        self._connected = True

    def express_interest(
        self,
        name: Name,
        closure: Closure,
        lifetime: float | None = None,
    ) -> Interest:
        """
        Отправить запрос. На каждый запрос обработчик получит ровно одно
        уведомление: CONTENT или INTEREST_TIMED_OUT.

        Raises:
            TransportError: если нет подключения или отправка не удалась
        """
        self._check_connected()
        interest = Interest(
            name=name.to_uri(),
            lifetime=lifetime or self.interest_lifetime,
        )
        self._send(interest)
        key = name.key()
        timer = self.scheduler.schedule(
            interest.lifetime, self._handle_expiry, (key, interest),
            msg=f"lifetime of {interest.name}",
        )
        self._pending.setdefault(key, []).append(
            _PendingInterest(interest, closure, timer))
        self.logger.debug("expressed interest %s", interest.name)
        return interest

    def set_interest_filter(self, prefix: Name, closure: Closure) -> None:
        """
        Получать запросы с префиксом `prefix`.

        Raises:
            TransportError: если регистрация не удалась
        """
        self._check_connected()
        self._register(prefix)
        self._filters.append((prefix, closure))
        self.logger.debug("registered filter %s", prefix)

    def put(self, wire: bytes) -> None:
        """
        Отправить подписанный ответ (Data в закодированном виде).

        Raises:
            TransportError: если отправка не удалась
        """
        self._check_connected()
        self._send_wire(wire)

    def schedule_after(self, delay_us: int, handler: Handler) -> EventId:
        return self.scheduler.schedule_after_micros(delay_us, handler)

    def run(self, timeout_ms: int) -> None:
        """
        Один шаг: выполнить наступившие таймеры и обработать входящие
        пакеты, ожидая их не дольше `timeout_ms` миллисекунд.

        Raises:
            TransportError: если транспорт больше не может работать
        """
        self._check_connected()
        self.scheduler.run()
        timeout = max(0, timeout_ms) / 1000
        delay = self.scheduler.time_to_next()
        if delay is not None:
            timeout = min(timeout, delay)
        self._poll(timeout)
        self.scheduler.run()

    def destroy(self) -> None:
        """Отключиться. Каждый обработчик получает FINAL ровно один раз."""
        closures: list[Closure] = []
        for entries in self._pending.values():
            for pending in entries:
                self.scheduler.cancel(pending.timer)
                if pending.closure not in closures:
                    closures.append(pending.closure)
        for _, closure in self._filters:
            if closure not in closures:
                closures.append(closure)
        self._pending.clear()
        self._filters.clear()
        for closure in closures:
            closure(UpcallKind.FINAL, None)
        if self._connected:
            self._disconnect()
            self._connected = False

    # ------------------------------------------------------------------
    # Входящие пакеты (вызываются транспортом из _poll())
    # ------------------------------------------------------------------
    def _on_data(self, data: Data) -> None:
        entries = self._pending.pop(data.ndn_name.key(), None)
        if not entries:
            self.logger.debug("unsolicited data %s", data.name)
            return
        for pending in entries:
            self.scheduler.cancel(pending.timer)
            self._upcall(
                pending.closure, UpcallKind.CONTENT,
                UpcallInfo(self, pending.interest, data))

    def _on_interest(self, interest: Interest) -> bool:
        """Передать запрос фильтрам. Вернуть True, если его обработали."""
        name = interest.ndn_name
        consumed = False
        for prefix, closure in list(self._filters):
            if not prefix.is_prefix_of(name):
                continue
            kind = UpcallKind.CONSUMED_INTEREST if consumed else UpcallKind.INTEREST
            result = self._upcall(closure, kind, UpcallInfo(self, interest))
            if result == UpcallResult.INTEREST_CONSUMED:
                consumed = True
        return consumed

    def _handle_expiry(self, scheduler: Scheduler, key: bytes, interest: Interest) -> None:
        entries = self._pending.get(key, [])
        for pending in entries:
            if pending.interest is interest:
                entries.remove(pending)
                if not entries:
                    del self._pending[key]
                self._upcall(
                    pending.closure, UpcallKind.INTEREST_TIMED_OUT,
                    UpcallInfo(self, interest))
                return

    def _upcall(self, closure: Closure, kind: UpcallKind, info: UpcallInfo) -> UpcallResult:
        result = closure(kind, info)
        if result == UpcallResult.ERR:
            self.logger.error("closure returned error on %s for %s",
                              kind.name, info.interest.name)
        return result

    def _check_connected(self) -> None:
        if not self._connected:
            raise TransportError("face is not connected")

    def _send(self, interest: Interest) -> None:
        self._send_wire(interest.to_wire())

    # ------------------------------------------------------------------
    # Реализуется конкретным транспортом
    # ------------------------------------------------------------------
    @abstractmethod
    def _connect(self) -> None:
        ...

    @abstractmethod
    def _disconnect(self) -> None:
        ...

    @abstractmethod
    def _register(self, prefix: Name) -> None:
        ...

    @abstractmethod
    def _send_wire(self, wire: bytes) -> None:
        ...

    @abstractmethod
    def _poll(self, timeout: float) -> None:
        ...
