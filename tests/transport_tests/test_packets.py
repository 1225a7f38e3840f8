import pytest

from pyping.core import Name
from pyping.transport import Data, DigestSigner, Interest, PacketError, \
    decode_packet


def test_decode_interest():
    interest = Interest(name='ndnx:/a/b/ping/1', lifetime=2.0)
    packet = decode_packet(interest.to_wire())

    assert isinstance(packet, Interest)
    assert packet.name == 'ndn:/a/b/ping/1'
    assert packet.lifetime == 2.0
    assert packet.ndn_name == Name([b'a', b'b', b'ping', b'1'])


@pytest.mark.parametrize('raw', [
    b'', b'not json', b'{"type": "nack", "name": "ndn:/a"}',
    b'{"type": "interest", "name": "no-slash"}',
    b'{"type": "interest", "name": "ndn:/a", "lifetime": -1}',
])
def test_malformed_packets(raw):
    with pytest.raises(PacketError):
        decode_packet(raw)


def test_digest_signer():
    signer = DigestSigner()
    wire = signer.sign(Name.from_uri('ndn:/a/ping/7'), b'ping ack', 3)
    data = decode_packet(wire)

    assert isinstance(data, Data)
    assert data.name == 'ndn:/a/ping/7'
    assert data.content == b'ping ack'
    assert data.freshness == 3
    assert signer.verify(data)

    tampered = data.model_copy(update={'content': b'something else'})
    assert not signer.verify(tampered)


def test_freshness_omitted():
    wire = DigestSigner().sign(Name.from_uri('ndn:/a/ping/7'), b'ack', None)
    data = decode_packet(wire)
    assert data.freshness is None


def test_keyed_signer():
    name = Name.from_uri('ndn:/a/ping/7')
    data = decode_packet(DigestSigner(b'secret').sign(name, b'ack', None))

    assert DigestSigner(b'secret').verify(data)
    assert not DigestSigner(b'other').verify(data)
    assert not DigestSigner().verify(data)
