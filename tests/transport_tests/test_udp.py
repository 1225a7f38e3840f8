import socket

import pytest

from pyping.apps.server.model import PingServer
from pyping.apps.server.objects import Config
from pyping.core import Name
from pyping.transport import DigestSigner, TransportError, UdpFace, \
    UpcallKind, UpcallResult, open_face


@pytest.fixture
def server_face():
    face = UdpFace('127.0.0.1', 0, listen=True)
    face.connect()
    yield face
    face.destroy()


@pytest.fixture
def client_face(server_face):
    port = server_face.sock.getsockname()[1]
    face = UdpFace('127.0.0.1', port, interest_lifetime=2.0)
    face.connect()
    yield face
    face.destroy()


def test_ping_over_udp(server_face, client_face):
    server = PingServer(Config(prefix='ndn:/udp', freshness=5),
                        server_face, DigestSigner())
    server.start()
    calls = []

    def closure(kind, info):
        calls.append((kind, info))
        return UpcallResult.OK

    name = Name.from_uri('ndn:/udp/ping/3')
    client_face.express_interest(name, closure)
    server_face.run(1000)
    client_face.run(1000)

    assert server.count == 1
    assert [kind for kind, _ in calls] == [UpcallKind.CONTENT]
    data = calls[0][1].data
    assert data.ndn_name == name
    assert data.content == b'ping ack'
    assert data.freshness == 5
    assert DigestSigner().verify(data)


def test_garbage_datagram_is_dropped(server_face):
    calls = []
    server_face.set_interest_filter(
        Name.from_uri('ndn:/'),
        lambda kind, info: calls.append(kind) or UpcallResult.OK)
    port = server_face.sock.getsockname()[1]
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.sendto(b'\x00garbage', ('127.0.0.1', port))
        server_face.run(1000)

    assert calls == []
    assert server_face._reply_to == {}


def test_same_interest_from_two_clients(server_face, client_face):
    port = server_face.sock.getsockname()[1]
    other_face = UdpFace('127.0.0.1', port, interest_lifetime=2.0)
    other_face.connect()
    requests = []

    def producer(kind, info):
        requests.append(info.interest)
        return UpcallResult.INTEREST_CONSUMED

    server_face.set_interest_filter(Name.from_uri('ndn:/udp'), producer)
    name = Name.from_uri('ndn:/udp/ping/1')
    kinds = []
    for face in (client_face, other_face):
        face.express_interest(name, lambda kind, info: kinds.append(kind)
                              or UpcallResult.OK)
        server_face.run(1000)

    # Второй такой же запрос ждет тот же ответ, обработчик вызван один раз
    assert len(requests) == 1
    server_face.put(DigestSigner().sign(name, b'ack', None))
    client_face.run(1000)
    other_face.run(1000)
    other_face.destroy()

    assert kinds == [UpcallKind.CONTENT, UpcallKind.CONTENT]
    assert server_face._reply_to == {}


def test_put_without_interest_fails(server_face):
    wire = DigestSigner().sign(Name.from_uri('ndn:/udp/ping/1'), b'ack', None)
    with pytest.raises(TransportError):
        server_face.put(wire)


def test_filter_needs_listening_face(client_face):
    with pytest.raises(TransportError):
        client_face.set_interest_filter(Name.from_uri('ndn:/udp'),
                                        lambda kind, info: UpcallResult.OK)


def test_bind_failure():
    # 192.0.2.0/24 (TEST-NET-1) не назначен локальным интерфейсам
    face = UdpFace('192.0.2.1', 6363, listen=True)
    with pytest.raises(TransportError):
        face.connect()


def test_open_face():
    face = open_face('udp://127.0.0.1:7000')
    assert isinstance(face, UdpFace)
    assert (face.host, face.port, face.listen) == ('127.0.0.1', 7000, False)
    assert open_face('udp://localhost').port == 6363

    with pytest.raises(ValueError):
        open_face('tcp://127.0.0.1:6363')
    with pytest.raises(ValueError):
        open_face('udp://')
