import random
from typing import Callable

import click

from pyping.apps.constants import PING_COMPONENT, RANDOM_NUMBER_LIMIT
from pyping.core import Name, PendingTable, PingLogger, Scheduler, Statistics
from pyping.transport import Face, TransportError, UpcallInfo, UpcallKind, \
    UpcallResult
from .objects import ClientState, Config


class PingClient:
    """
    Клиент ping: раз в `interval` секунд отправляет запрос
    `<prefix>/ping/<number>` и ждет ответ или таймаут.

    Клиент владеет таблицей ожидающих запросов и статистикой. Все изменения
    происходят в обработчиках, которые вызываются из цикла обработки
    событий: `handle_tick()` (через собственный планировщик клиента) и
    `handle_upcall()` (через face).
    """
    def __init__(
        self,
        config: Config,
        face: Face,
        logger: PingLogger | None = None,
        rng: random.Random | None = None,
        echo: Callable[[str], None] | None = None,
    ):
        self.config = config
        self.face = face
        self.logger = logger or PingLogger('ndnping')
        self.echo = echo or click.echo
        self._rng = rng or random.Random()

        # Raises MalformedNameError
        self.prefix: Name = Name.from_uri(config.prefix).append(PING_COMPONENT)

        clock = face.scheduler.clock
        self.scheduler = Scheduler(clock=clock)
        self.table = PendingTable(clock=clock)
        self.stats = Statistics(prefix=config.prefix, clock=clock)

        # State:
        self._state = ClientState.IDLE
        self._next_number: int | None = config.number

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def sent(self) -> int:
        return self.stats.sent

    @property
    def received(self) -> int:
        return self.stats.received

    @property
    def finished(self) -> bool:
        return self._state == ClientState.DRAINED

    def start(self) -> None:
        """Перейти в ACTIVE и запланировать первый запрос на сейчас."""
        if self._state != ClientState.IDLE:
            return
        self._state = ClientState.ACTIVE
        self.scheduler.call(self.handle_tick, msg="first ping")

    def allocate_number(self) -> int:
        """Следующий номер: по порядку, если задан стартовый, иначе случайный."""
        if self._next_number is not None:
            number = self._next_number
            self._next_number += 1
            return number
        while True:
            number = self._rng.randrange(RANDOM_NUMBER_LIMIT)
            # Ключ не должен совпадать с ключом запроса, который еще ждет ответа
            if self.prefix.append(number).key() not in self.table:
                return number

    def _limit_reached(self) -> bool:
        return self.config.count is not None and self.sent >= self.config.count

    def handle_tick(self, scheduler: Scheduler) -> None:
        """
        Отправить очередной запрос и запланировать следующий.

        Если ошибка при отправке, дальнейшие запросы не планируются, но
        клиент продолжает ждать ответы на уже отправленные.
        """
        if self._state != ClientState.ACTIVE:
            return
        if self._limit_reached():
            self._state = ClientState.EXHAUSTED
            self._check_drained()
            return

        number = self.allocate_number()
        name = self.prefix.append(number)
        try:
            self.face.express_interest(
                name, self.handle_upcall,
                lifetime=self.config.interest_lifetime)
        except TransportError as e:
            # Ответа на этот запрос не будет, в таблицу его не заносим,
            # но отправленным считаем
            self.stats.record_sent()
            self.logger.error("failed to express interest %s: %s", name, e)
            self._state = ClientState.STOPPED
            self._check_drained()
            return

        self.table.add(name.key(), number)
        self.stats.record_sent()
        self.logger.debug("sent interest #%d (%d in flight)",
                          number, self.table.size())

        if self._limit_reached():
            self.logger.info("reached max pings (%d)", self.config.count)
            self._state = ClientState.EXHAUSTED
        else:
            scheduler.schedule(self.config.interval, self.handle_tick)

    def handle_upcall(self, kind: UpcallKind, info: UpcallInfo | None) -> UpcallResult:
        """
        Обработка уведомлений транспорта об отправленных запросах.

        Для ответа считается RTT и обновляется статистика, для таймаута
        печатается строка о потере. В обоих случаях запись удаляется из
        таблицы. Уведомления других видов транспорт присылать не должен,
        на них возвращается ERR.
        """
        if kind == UpcallKind.FINAL:
            return UpcallResult.OK

        if kind == UpcallKind.CONTENT:
            key = info.name.key()
            entry = self.table.lookup(key)
            rtt = (self.scheduler.now - entry.send_time) * 1000
            self.stats.record_received(rtt)
            self.echo(f"content from {self.config.prefix}: "
                      f"number = {entry.number} {'':2s}\trtt = {rtt:.3f} ms")
            self.table.remove(key)
        elif kind == UpcallKind.INTEREST_TIMED_OUT:
            key = info.name.key()
            entry = self.table.lookup(key)
            self.echo(f"timeout from {self.config.prefix}: "
                      f"number = {entry.number}")
            self.table.remove(key)
        else:
            self.logger.error("Unexpected response of kind %s", kind.name)
            return UpcallResult.ERR

        self._check_drained()
        return UpcallResult.OK

    def _check_drained(self) -> None:
        if (self._state in (ClientState.EXHAUSTED, ClientState.STOPPED)
                and self.table.size() == 0):
            self._state = ClientState.DRAINED
            self.logger.debug("client drained, sent %d, received %d",
                              self.sent, self.received)
