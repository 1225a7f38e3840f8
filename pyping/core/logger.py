from dataclasses import dataclass
import logging
from typing import Callable, Literal
import uuid

import colorama


class ColoredFormatter(logging.Formatter):
    """
    Форматтер, выводит записи лога в консоль цветом, зависящим от уровня.
    """

    # Цвета по-умолчанию
    DEFAULT_COLORS = {
        logging.DEBUG: colorama.Fore.LIGHTBLACK_EX,
        logging.INFO: colorama.Fore.GREEN,
        logging.WARN: colorama.Fore.YELLOW,
        logging.ERROR: colorama.Fore.RED + colorama.Style.BRIGHT,
        logging.CRITICAL:
            colorama.Back.RED + colorama.Fore.WHITE + colorama.Style.BRIGHT,
    }

    def __init__(
        self,
        fmt: str,
        style: Literal['{', '%', '$'] = '%',
        colors: dict[int, str] | None = None,
        **kwargs
    ):
        super().__init__(fmt=fmt, style=style, **kwargs)  # type: ignore
        colors = colors or {}
        self.FORMATS = {
            level: logging.Formatter(
                colors.get(level, ColoredFormatter.DEFAULT_COLORS[level]) +
                fmt + colorama.Style.RESET_ALL,
                style=style  # type: ignore
            )
            for level in ColoredFormatter.DEFAULT_COLORS.keys()
        }

    def format(self, record):
        log_fmt: logging.Formatter = self.FORMATS[record.levelno]
        return log_fmt.format(record)


# Формат вывода по-умолчанию. Кроме стандартных полей используются два
# дополнительных, которые добавляет PingLogger:
#
# - elapsed: секунды с момента запуска клиента или сервера
# - runId: идентификатор запуска
#
# Пример строки в журнале:
# 000012.345678 [DEBUG   ] ndnping (R:972274) (model.py:handle_tick) - ...

PING_LOGGER_FORMAT = (
    "{elapsed:013.06f} [{levelname:8s}] {name} (R:{runId}) "
    "({filename}:{funcName}) - {message}"
)


@dataclass
class PingLoggerConfig:
    """Настройки логгера клиента и сервера."""
    fmt: str = PING_LOGGER_FORMAT        # формат-строка логгера
    style: Literal['%', '{', '$'] = '{'  # стиль формат-строки логгера

    level: int = logging.INFO      # уровень логгирования по-умолчанию

    use_console: bool = False      # логгировать ли в консоль (stderr)
    colored_console: bool = True   # использовать ли цветной вывод в консоль

    # Кастомные цвета (ключ - уровень логгирования, значение - цвет).
    # Если не заданы, используются значения по-умолчанию из ColoredFormatter.
    console_colors: dict[int, str] | None = None

    # Уровень логгирования в консоль, если не задан - использовать level
    console_level: int = 0

    # Имя лог-файла. Если не задано, логгирования в файл не будет.
    file_name: str | None = None

    # Уровень логгирования в файл, если не задан - использовать level
    file_level: int = 0


class PingLogger:
    """
    Логгер клиента и сервера ping.

    Проксирует вызовы записи в лог (debug, info, warning, error, critical,
    exception) в стандартный логгер и добавляет поля `elapsed` и `runId`.
    В качестве имени логгера используется название приложения.

    Сообщения лучше передавать через формат-строку:

        `debug("sent interest #%d", number)`

    тогда строка строится только при реальной записи в журнал.

    Ping-строки и итоговая статистика логгером не выводятся: это вывод
    программы, он идет в stdout. Журнал - для диагностики.
    """
    def __init__(
        self,
        app_name: str = '',
        time_getter: Callable[[], float] | None = None,
        run_id: int | None = None
    ):
        self._logger = logging.getLogger(app_name)
        self.time_getter = time_getter or (lambda: 0)
        self._run_id: int = run_id or uuid.uuid4().int % 1_000_000
        self._setup_was_called: bool = False

    @property
    def run_id(self) -> int:
        return self._run_id

    def set_time_getter(self, fn: Callable[[], float]) -> None:
        """Настроить функцию получения времени с момента запуска."""
        self.time_getter = fn

    def setup(
        self,
        config: PingLoggerConfig | None = None,
        force_run: bool = False
    ) -> None:
        """
        Настроить логгер.

        Повторные вызовы игнорируются, если не передать `force_run = True`.

        Args:
            config (PingLoggerConfig): конфигурация логгера
            force_run (bool): выполнить, даже если ранее логгер был настроен
        """
        if self._setup_was_called and not force_run:
            return

        config = config or PingLoggerConfig()
        self._logger.handlers = []
        if config.use_console:
            if config.colored_console:
                c_formatter = ColoredFormatter(
                    config.fmt,
                    style=config.style,
                    colors=config.console_colors
                )
            else:
                c_formatter = logging.Formatter(config.fmt, style=config.style)
            s_handler = logging.StreamHandler()
            s_handler.setLevel(config.console_level or config.level)
            s_handler.setFormatter(c_formatter)
            self._logger.addHandler(s_handler)

        if config.file_name is not None:
            f_formatter = logging.Formatter(config.fmt, style=config.style)
            f_handler = logging.FileHandler(config.file_name, mode='a')
            f_handler.setLevel(config.file_level or config.level)
            f_handler.setFormatter(f_formatter)
            self._logger.addHandler(f_handler)

        if not self._logger.handlers:
            self._logger.addHandler(logging.NullHandler())

        self._logger.propagate = False
        self._logger.setLevel(config.level)
        self._setup_was_called = True

    def _get_extra(self):
        return {
            "elapsed": self.time_getter(),
            "runId": self._run_id,
        }

    def debug(self, msg, *args, **kwargs):
        self._logger.debug(
            msg, *args, **kwargs,
            extra=self._get_extra(),
            stacklevel=2,  # skip this (PingLogger.xxx()) function
        )

    def info(self, msg, *args, **kwargs):
        self._logger.info(
            msg, *args, **kwargs,
            extra=self._get_extra(),
            stacklevel=2,
        )

    def warning(self, msg, *args, **kwargs):
        self._logger.warning(
            msg, *args, **kwargs,
            extra=self._get_extra(),
            stacklevel=2,
        )

    def error(self, msg, *args, **kwargs):
        self._logger.error(
            msg, *args, **kwargs,
            extra=self._get_extra(),
            stacklevel=2,
        )

    def critical(self, msg, *args, **kwargs):
        self._logger.critical(
            msg, *args, **kwargs,
            extra=self._get_extra(),
            stacklevel=2,
        )

    def exception(self, msg, *args, **kwargs):
        self._logger.exception(
            msg, *args, **kwargs,
            extra=self._get_extra(),
            stacklevel=2,
        )
