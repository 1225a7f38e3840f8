import pytest

from pyping.apps.server.model import PingServer
from pyping.apps.server.objects import Config as ServerConfig
from pyping.core import ManualClock, Scheduler
from pyping.transport import DigestSigner, LocalFace, LocalForwarder


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def forwarder(clock):
    return LocalForwarder(delay=0.005,
                          scheduler=Scheduler(clock=clock, sleep=clock.sleep))


@pytest.fixture
def face_factory(forwarder):
    def make_face(**kwargs):
        face = LocalFace(forwarder, **kwargs)
        face.connect()
        return face
    return make_face


@pytest.fixture
def start_server(face_factory):
    def start(prefix='ndn:/test', freshness=None):
        server = PingServer(ServerConfig(prefix=prefix, freshness=freshness),
                            face_factory(), DigestSigner())
        server.start()
        return server
    return start
