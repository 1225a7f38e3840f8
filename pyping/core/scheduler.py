import heapq
import itertools
import time
from typing import Any, Callable, Iterable, NewType


EventId = NewType('EventId', int)

# Обработчик события вызывается как handler(scheduler, *args)
Handler = Callable[..., None]
Clock = Callable[[], float]
Sleep = Callable[[float], None]


class SchedulingInPastError(ValueError):
    """Исключение, возникающее при попытке запланировать событие в прошлом."""
    ...


class EventQueue:
    '''
    Очередь событий на основе приоритетной кучи (heapq).

    Отмененные события из кучи сразу не удаляются: у записи затирается
    задача, а при извлечении такие записи пропускаются.
    '''
    def __init__(self):
        '''
        Поля:
            _event_list - куча записей вида [time, event_id, task]
            _event_dict - словарь event_id -> запись в куче
            _next_id - генератор уникальных номеров событий
        '''
        self._event_list = []
        self._event_dict = {}
        self._next_id = itertools.count()

    def push(self, time: float, task: Any) -> EventId:
        '''
        Добавить событие в очередь.

        Args:
            time - момент наступления события (приоритет)
            task - произвольный объект, связанный с событием

        Returns:
            event_id - уникальный порядковый номер события
        '''
        event_id = EventId(next(self._next_id))
        event = [time, event_id, task]
        self._event_dict[event_id] = event
        heapq.heappush(self._event_list, event)
        return event_id

    def pop(self) -> tuple[float, EventId, Any]:
        '''
        Извлечь ближайшее событие.

        :raises:
            - KeyError: если очередь пуста
        '''
        if self.empty:
            raise KeyError("pop from an empty event queue")
        self._drop_cancelled()
        (time, event_id, task) = heapq.heappop(self._event_list)
        self._event_dict.pop(event_id)
        return time, event_id, task

    def cancel(self, event_id: EventId) -> Any:
        '''
        Отменить запланированное событие. Неизвестные и уже отмененные
        идентификаторы игнорируются.
        '''
        if event_id is not None and event_id in self._event_dict:
            event = self._event_dict.pop(event_id)
            event[-1] = None
            return event
        return None

    def clear(self) -> None:
        self._event_list.clear()
        self._event_dict.clear()

    @property
    def next_time(self) -> float | None:
        '''Момент наступления ближайшего события или None.'''
        if self.empty:
            return None
        self._drop_cancelled()
        return self._event_list[0][0]

    @property
    def empty(self) -> bool:
        return len(self._event_dict) == 0

    def _drop_cancelled(self) -> None:
        while self._event_list and self._event_list[0][-1] is None:
            heapq.heappop(self._event_list)

    def __len__(self):
        return len(self._event_dict)


class Scheduler:
    """
    Планировщик событий в реальном времени.

    Ядро устроено так же, как очередь модельного времени, но время берется
    из часов `clock` (по-умолчанию `time.monotonic`). Метод `run()`
    выполняет все события, время которых уже наступило, и возвращает
    интервал до следующего события. Сам планировщик нигде не блокируется:
    ждать между шагами должен цикл обработки событий (`wait()` или
    блокирующий вызов транспорта).

    Часы и функцию сна можно подменить, например, в тестах.
    """

    def __init__(self, clock: Clock | None = None, sleep: Sleep | None = None):
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep
        self._queue = EventQueue()

    @property
    def now(self) -> float:
        """Текущее время по часам планировщика, в секундах."""
        return self._clock()

    @property
    def clock(self) -> Clock:
        return self._clock

    def schedule(
            self,
            delay: float,
            handler: Handler,
            args: Iterable[Any] = (),
            msg: str = ""
    ) -> EventId:
        """Запланировать событие через `delay` секунд.

        Args:
            delay (float): интервал времени до наступления события
            handler (Handler): обработчик события
            args (tuple[Any, ...], optional): аргументы для обработчика
            msg (str, optional): комментарий, можно использовать для отладки

        Raises:
            SchedulingInPastError: если `delay < 0`
            TypeError: если обработчик не является вызываемым объектом

        Returns:
            EventId: идентификатор события
        """
        if delay < 0:
            raise SchedulingInPastError(f"negative delay: {delay}")
        if not callable(handler):
            raise TypeError(f"handler is not callable: {handler!r}")
        return self._queue.push(self._clock() + delay, (handler, tuple(args), msg))

    def schedule_after_micros(
            self,
            delay_us: int,
            handler: Handler,
            args: Iterable[Any] = ()
    ) -> EventId:
        """Вариант `schedule()` с задержкой в микросекундах."""
        return self.schedule(delay_us / 1_000_000, handler, args)

    def call(self, handler: Handler, args: Iterable[Any] = (), msg: str = "") -> EventId:
        """Запланировать событие на текущий момент времени."""
        return self.schedule(0, handler, args, msg)

    def cancel(self, event_id: EventId) -> int:
        """Отменить событие, вернуть число отмененных событий (0 или 1)."""
        return 0 if self._queue.cancel(event_id) is None else 1

    def run(self) -> float | None:
        """
        Выполнить все события, время которых наступило.

        События, запланированные обработчиками с нулевой задержкой,
        выполняются в этом же вызове.

        Returns:
            Интервал в секундах до следующего события или None, если
            очередь пуста.
        """
        while not self._queue.empty:
            next_time = self._queue.next_time
            if next_time > self._clock():
                break
            _, _, (handler, args, _) = self._queue.pop()
            handler(self, *args)
        return self.time_to_next()

    def time_to_next(self) -> float | None:
        next_time = self._queue.next_time
        if next_time is None:
            return None
        return max(0.0, next_time - self._clock())

    def wait(self, timeout: float) -> None:
        """Подождать до ближайшего события, но не дольше `timeout` секунд."""
        delay = self.time_to_next()
        if delay is None or delay > timeout:
            delay = timeout
        if delay > 0:
            self._sleep(delay)

    def clear(self) -> None:
        self._queue.clear()

    @property
    def empty(self) -> bool:
        return self._queue.empty

    def __len__(self):
        return len(self._queue)


class ManualClock:
    """
    Часы, которые идут только при вызове `sleep()` или `advance()`.

    Подходят в качестве `clock` и `sleep` для `Scheduler`, когда нужен
    детерминированный прогон (тесты, локальный транспорт).
    """
    def __init__(self, start: float = 0.0):
        self._now = start

    def __call__(self) -> float:
        return self._now

    def sleep(self, delay: float) -> None:
        self.advance(delay)

    def advance(self, delay: float) -> None:
        if delay < 0:
            raise SchedulingInPastError(f"negative delay: {delay}")
        self._now += delay
