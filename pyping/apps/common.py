import logging

import click

from pyping.core import PingLogger, PingLoggerConfig
from pyping.transport import DEFAULT_TRANSPORT


class PingCommand(click.Command):
    """
    Команда click с поведением утилит ping: любая ошибка разбора
    аргументов (неизвестный флаг, значение вне диапазона, нет префикса)
    завершает программу с кодом 1.
    """
    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def usage_error(message: str, ctx: click.Context | None = None) -> click.UsageError:
    error = click.UsageError(message, ctx)
    error.exit_code = 1
    return error


def _print_usage(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help(), err=True)
    ctx.exit(1)


# Опция -h: вывести справку в stderr и завершиться с кодом 1
help_option = click.option(
    '-h', '--help', is_flag=True, expose_value=False, is_eager=True,
    callback=_print_usage, help='Вывести это сообщение и выйти',
)

# Встроенная опция --help у click завершает работу с кодом 0, отключаем ее
CONTEXT_SETTINGS = {'help_option_names': []}


_COMMON_OPTIONS = (
    click.option(
        '-t', '--transport', default=DEFAULT_TRANSPORT, show_default=True,
        envvar='PYPING_TRANSPORT',
        help='Транспорт: udp://host:port или local:?delay=...&loss=...'
    ),
    click.option(
        '-v', '--verbose', count=True,
        help='Журнал в консоль (-v: INFO, -vv: DEBUG)'
    ),
    click.option(
        '--log-file', default=None, envvar='PYPING_LOG_FILE',
        type=click.Path(dir_okay=False, writable=True),
        help='Записывать журнал в файл'
    ),
)


def common_options(fn):
    """Опции транспорта и журнала, общие для клиента и сервера."""
    for option in reversed(_COMMON_OPTIONS):
        fn = option(fn)
    return fn


def make_logger(app_name: str, verbose: int, log_file: str | None) -> PingLogger:
    """
    Логгер приложения. Предупреждения и ошибки пишутся в stderr всегда,
    с -v/-vv туда же идут INFO/DEBUG.
    """
    level = logging.DEBUG if verbose >= 2 else logging.INFO
    logger = PingLogger(app_name)
    logger.setup(PingLoggerConfig(
        level=level,
        use_console=True,
        console_level=level if verbose > 0 else logging.WARNING,
        file_name=log_file,
    ))
    return logger
