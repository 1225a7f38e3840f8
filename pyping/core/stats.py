from dataclasses import dataclass
import math
import sys
import time
from typing import Callable

from pydantic import BaseModel, Field


class Summary(BaseModel):
    prefix: str = Field(..., description="Prefix as given by the user")
    sent: int = Field(..., description="Interests transmitted")
    received: int = Field(..., description="Data received")
    loss: float = Field(..., description="Packet loss, percent")
    elapsed_ms: int = Field(..., description="Time since start, ms")
    rtt_min: float | None = Field(None, description="Minimal RTT, ms")
    rtt_avg: float | None = Field(None, description="Average RTT, ms")
    rtt_max: float | None = Field(None, description="Maximal RTT, ms")
    rtt_mdev: float | None = Field(None, description="RTT standard deviation, ms")


@dataclass
class Statistics:
    '''
    Накопленная статистика клиента.

    Some args:
        prefix - префикс в том виде, в каком его задал пользователь
        start - момент запуска по часам `clock`
        rtt_min - инициализируется максимальным значением, чтобы первое
            же измерение его заменило
        rtt_sum, rtt_sum2 - сумма RTT и сумма квадратов RTT
    '''
    prefix: str
    clock: Callable[[], float] = time.monotonic
    start: float | None = None
    sent: int = 0
    received: int = 0
    rtt_min: float = sys.float_info.max
    rtt_max: float = 0.0
    rtt_sum: float = 0.0
    rtt_sum2: float = 0.0

    def __post_init__(self):
        if self.start is None:
            self.start = self.clock()

    def record_sent(self) -> None:
        self.sent += 1

    def record_received(self, rtt: float) -> None:
        """Учесть полученный ответ с временем `rtt` (мс)."""
        self.received += 1
        self.rtt_min = min(self.rtt_min, rtt)
        self.rtt_max = max(self.rtt_max, rtt)
        self.rtt_sum += rtt
        self.rtt_sum2 += rtt * rtt

    @property
    def loss(self) -> float:
        if self.sent == 0:
            return 0.0
        return (self.sent - self.received) * 100 / self.sent

    def summary(self) -> Summary:
        """Снимок статистики. Состояние при этом не меняется."""
        result = Summary(
            prefix=self.prefix,
            sent=self.sent,
            received=self.received,
            loss=self.loss,
            elapsed_ms=int((self.clock() - self.start) * 1000),
        )
        if self.received > 0:
            avg = self.rtt_sum / self.received
            # Из-за округления дисперсия может оказаться чуть меньше нуля
            mdev = math.sqrt(max(0.0, self.rtt_sum2 / self.received - avg * avg))
            avg = min(max(avg, self.rtt_min), self.rtt_max)
            result.rtt_min = self.rtt_min
            result.rtt_avg = avg
            result.rtt_max = self.rtt_max
            result.rtt_mdev = mdev
        return result

    def report(self) -> str:
        return format_report(self.summary())


def format_report(summary: Summary) -> str:
    lines = ['', f'--- {summary.prefix} ndnping statistics ---']
    if summary.sent > 0:
        lines.append(
            f'{summary.sent} Interests transmitted, '
            f'{summary.received} Data received, '
            f'{summary.loss:.1f}% packet loss, time {summary.elapsed_ms} ms'
        )
    if summary.received > 0:
        lines.append(
            'rtt min/avg/max/mdev = '
            f'{summary.rtt_min:.3f}/{summary.rtt_avg:.3f}/'
            f'{summary.rtt_max:.3f}/{summary.rtt_mdev:.3f} ms'
        )
    return '\n'.join(lines)
