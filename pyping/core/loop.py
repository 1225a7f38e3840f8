from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
import signal
from typing import Iterator


class ExitReason(Enum):
    DRAINED = 0          # все запросы отправлены, все ответы/таймауты получены
    STOPPED = 1          # остановка по запросу (stop())
    INTERRUPTED = 2      # прерывание пользователем (SIGINT)
    TRANSPORT_ERROR = 3  # транспорт больше не может работать


@dataclass
class ExecutionStats:
    '''
    Результат работы цикла обработки событий.
    Some args:
        num_steps - сколько раз был вызван шаг транспорта
        time_elapsed - длительность работы в секундах
        stop_message - причина остановки, если была
    '''
    num_steps: int
    time_elapsed: float
    exit_reason: ExitReason
    stop_message: str = ""


class StopSignal:
    """
    Флаг остановки цикла обработки событий.

    Обработчик сигнала только выставляет флаг. Цикл проверяет его на каждой
    итерации и сам завершает работу (в том числе печатает статистику),
    поэтому в контексте обработчика сигнала ничего не форматируется и не
    выводится.
    """
    def __init__(self):
        self._set = False
        self._reason = ExitReason.STOPPED
        self.message = ''

    def stop(self, msg: str = '', reason: ExitReason = ExitReason.STOPPED) -> None:
        if not self._set:
            self._set = True
            self._reason = reason
            self.message = msg

    @property
    def is_set(self) -> bool:
        return self._set

    @property
    def reason(self) -> ExitReason:
        return self._reason

    def _handle_signal(self, signum, frame) -> None:
        self.stop(signal.Signals(signum).name, ExitReason.INTERRUPTED)

    @contextmanager
    def installed(self, signals=(signal.SIGINT, signal.SIGTERM)) -> Iterator["StopSignal"]:
        """Перехватывать `signals` на время блока, потом вернуть старые обработчики."""
        old_handlers = {}
        for signum in signals:
            old_handlers[signum] = signal.signal(signum, self._handle_signal)
        try:
            yield self
        finally:
            for signum, handler in old_handlers.items():
                signal.signal(signum, handler)
