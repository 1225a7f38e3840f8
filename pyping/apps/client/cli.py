import click

from pyping.apps.common import CONTEXT_SETTINGS, PingCommand, common_options, \
    help_option, make_logger, usage_error
from pyping.apps.constants import DEFAULT_INTERVAL, PING_MIN_INTERVAL
from pyping.apps.server.model import PingServer
from pyping.apps.server.objects import Config as ServerConfig
from pyping.core import MalformedNameError, StopSignal
from pyping.transport import DigestSigner, LocalFace, TransportError, open_face
from .model import PingClient
from .objects import Config
from .runner import run_client


APP_NAME = 'ndnping'


@click.command(cls=PingCommand, context_settings=CONTEXT_SETTINGS)
@help_option
@click.argument('prefix')
@click.argument('extra', nargs=-1)
@click.option(
    '-i', '--interval', type=click.FloatRange(min=PING_MIN_INTERVAL),
    default=DEFAULT_INTERVAL, show_default=True,
    help=f'Интервал между запросами в секундах (минимум {PING_MIN_INTERVAL})'
)
@click.option(
    '-c', '--count', type=click.IntRange(min=1), default=None,
    help='Общее число запросов (по-умолчанию - без ограничения)'
)
@click.option(
    '-n', '--number', type=click.IntRange(min=0), default=None,
    help='Начальный номер, увеличивается на 1 после каждого запроса. '
         'Если не задан, номера случайные'
)
@common_options
@click.pass_context
def cli_run(ctx, prefix, extra, interval, count, number, transport, verbose,
            log_file):
    '''
    Пингует префикс PREFIX запросами с именами PREFIX/ping/<номер>.
    '''
    prog = ctx.info_name
    if extra:
        click.echo(f'{prog} warning: extra arguments ignored', err=True)

    config = Config(prefix=prefix, interval=interval, count=count,
                    number=number)
    logger = make_logger(APP_NAME, verbose, log_file)

    try:
        face = open_face(transport, logger=logger,
                         interest_lifetime=config.interest_lifetime)
    except ValueError as e:
        raise usage_error(str(e), ctx) from e

    try:
        client = PingClient(config, face, logger=logger)
    except MalformedNameError:
        click.echo(f'{prog}: bad ndn URI: {prefix}', err=True)
        ctx.exit(1)
    logger.set_time_getter(lambda: client.scheduler.now - client.stats.start)

    try:
        face.connect()
    except TransportError as e:
        click.echo(f'Could not connect to forwarder: {e}', err=True)
        ctx.exit(1)

    if isinstance(face, LocalFace):
        # Форвардер внутри процесса: запросы обслуживает встроенный сервер
        start_loopback_server(face, prefix)

    with StopSignal().installed() as stop:
        stats = run_client(client, stop)
    logger.info("client finished: %s", stats.exit_reason.name)


def start_loopback_server(face: LocalFace, prefix: str) -> PingServer:
    server_face = LocalFace(face.forwarder, logger=face.logger)
    server_face.connect()
    server = PingServer(ServerConfig(prefix=prefix, freshness=None),
                        server_face, DigestSigner(), logger=face.logger)
    server.start()
    return server


if __name__ == '__main__':
    cli_run()
