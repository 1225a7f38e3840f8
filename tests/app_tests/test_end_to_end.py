import re

from pyping.apps.client.model import PingClient
from pyping.apps.client.objects import Config
from pyping.apps.client.runner import run_client
from pyping.apps.server.runner import run_server
from pyping.core import ExitReason, Name, StopSignal
from pyping.transport import UpcallResult


def test_single_ping(face_factory, start_server):
    """
    Клиент с count=1, interval=0.5, number=7 против работающего сервера
    без FreshnessSeconds: одна строка про номер 7, затем статистика.
    """
    start_server(freshness=None)
    lines = []
    client = PingClient(Config(prefix='ndn:/test', count=1, interval=0.5,
                               number=7),
                        face_factory(), echo=lines.append)

    stats = run_client(client)

    assert stats.exit_reason == ExitReason.DRAINED
    assert len(lines) == 3
    assert lines[0] == 'NDNPING ndn:/test'
    match = re.fullmatch(
        r'content from ndn:/test: number = 7 +\trtt = (\d+\.\d{3}) ms',
        lines[1])
    assert match is not None
    assert float(match.group(1)) >= 0
    assert '\n1 Interests transmitted, 1 Data received' in lines[2]


def test_prefix_with_empty_component(face_factory, start_server):
    server = start_server(prefix='ndn:/test/...')
    lines = []
    client = PingClient(Config(prefix='ndn:/test/...', count=1, number=7),
                        face_factory(), echo=lines.append)

    stats = run_client(client)

    assert stats.exit_reason == ExitReason.DRAINED
    assert server.count == 1
    assert lines[1].startswith('content from ndn:/test/...: number = 7 ')
    assert '1 Interests transmitted, 1 Data received' in lines[2]


def test_server_ignores_invalid_interleaved_request(face_factory, start_server):
    server = start_server()
    replies = []

    def closure(kind, info):
        replies.append(kind.name)
        return UpcallResult.OK

    consumer = face_factory(interest_lifetime=1.0)
    for uri in ('ndn:/test/ping/1', 'ndn:/test/ping/a/b/c/1',
                'ndn:/test/ping/2'):
        consumer.express_interest(Name.from_uri(uri), closure)

    stop = StopSignal()
    stats = run_server(server, stop, max_steps=200)

    assert stats.exit_reason == ExitReason.STOPPED
    assert server.count == 2
    assert sorted(replies) == ['CONTENT', 'CONTENT', 'INTEREST_TIMED_OUT']
