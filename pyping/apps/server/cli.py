import time

import click

from pyping.apps.common import CONTEXT_SETTINGS, PingCommand, common_options, \
    help_option, make_logger, usage_error
from pyping.apps.constants import DEFAULT_FRESHNESS
from pyping.core import MalformedNameError, StopSignal
from pyping.transport import DigestSigner, TransportError, open_face
from .daemon import daemonize
from .model import PingServer
from .objects import Config
from .runner import run_server


APP_NAME = 'ndnpingserver'


@click.command(cls=PingCommand, context_settings=CONTEXT_SETTINGS)
@help_option
@click.argument('prefix')
@click.argument('extra', nargs=-1)
@click.option(
    '-x', '--freshness', type=click.IntRange(min=1),
    default=DEFAULT_FRESHNESS, show_default=True,
    help='FreshnessSeconds в ответах'
)
@click.option(
    '-d', '--daemon', is_flag=True,
    help='Работать в фоне (отвязаться от терминала)'
)
@common_options
@click.pass_context
def cli_run(ctx, prefix, extra, freshness, daemon, transport, verbose,
            log_file):
    '''
    Сервер ping: отвечает на запросы с именами PREFIX/ping/<номер> и
    PREFIX/ping/<идентификатор>/<номер>.
    '''
    prog = ctx.info_name
    if extra:
        click.echo(f'{prog} warning: extra arguments ignored', err=True)

    config = Config(prefix=prefix, freshness=freshness, daemon=daemon)
    logger = make_logger(APP_NAME, verbose, log_file)
    t_start = time.monotonic()
    logger.set_time_getter(lambda: time.monotonic() - t_start)

    try:
        face = open_face(transport, listen=True, logger=logger)
    except ValueError as e:
        raise usage_error(str(e), ctx) from e

    try:
        server = PingServer(config, face, DigestSigner(), logger=logger)
    except MalformedNameError:
        click.echo(f'{prog}: bad ndn URI: {prefix}', err=True)
        ctx.exit(1)

    try:
        face.connect()
    except TransportError as e:
        click.echo(f'Could not connect to forwarder: {e}', err=True)
        ctx.exit(1)

    try:
        server.start()
    except TransportError as e:
        click.echo(f'Failed to register interest ({e})', err=True)
        face.destroy()
        ctx.exit(1)

    if config.daemon:
        daemonize()

    logger.info("serving %s", server.prefix)
    with StopSignal().installed() as stop:
        run_server(server, stop)


if __name__ == '__main__':
    cli_run()
