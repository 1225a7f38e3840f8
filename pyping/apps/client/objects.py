from enum import Enum

from pydantic import BaseModel, Field

from pyping.apps.constants import DEFAULT_INTERVAL, PING_MIN_INTERVAL
from pyping.transport import DEFAULT_INTEREST_LIFETIME


class Config(BaseModel):
    prefix: str = Field(..., description="Name prefix to ping")
    interval: float = Field(DEFAULT_INTERVAL, ge=PING_MIN_INTERVAL)
    count: int | None = Field(None, ge=1, description="None - no limit")
    number: int | None = Field(None, ge=0, description="None - random")
    interest_lifetime: float = Field(DEFAULT_INTEREST_LIFETIME, gt=0)


class ClientState(Enum):
    IDLE = 0        # создан, запросы еще не отправлялись
    ACTIVE = 1      # отправляет запросы раз в interval секунд
    EXHAUSTED = 2   # отправлено count запросов, ждем ответы
    STOPPED = 3     # отправка прекращена из-за ошибки транспорта
    DRAINED = 4     # отправка завершена и ждать больше нечего
