import pytest

from pyping.core import MalformedNameError, Name


@pytest.mark.parametrize('uri', [
    'ndn:/a/b/c', 'ndnx:/a/b/c', 'ccnx:/a/b/c', '/a/b/c', 'ndn:/a//b/c/',
    'ndn:/a/./b/c', 'ndn:/a/x/../b/c',
])
def test_parse_equivalent_uris(uri):
    assert Name.from_uri(uri) == Name([b'a', b'b', b'c'])


@pytest.mark.parametrize('uri', [
    'a/b', 'http://example.com/a', 'ndn:a/b', 'ndn:/a/%zz', 'ndn:/a/%4',
    'ndn:/..', '',
])
def test_malformed_uris(uri):
    with pytest.raises(MalformedNameError):
        Name.from_uri(uri)


def test_percent_escapes_round_trip():
    name = Name.from_uri('ndn:/hello%20world/%00%FF')
    assert name.components == (b'hello world', b'\x00\xff')
    assert name.to_uri() == 'ndn:/hello%20world/%00%FF'
    assert Name.from_uri(name.to_uri()) == name


def test_dot_components():
    name = Name.from_uri('ndn:/a/....')
    assert name.components == (b'a', b'.')
    assert name.to_uri() == 'ndn:/a/....'


def test_empty_component_round_trip():
    name = Name.from_uri('ndn:/a/.../b')
    assert name.components == (b'a', b'', b'b')
    assert name.to_uri() == 'ndn:/a/.../b'
    assert Name.from_uri(name.to_uri()) == name
    assert Name.from_uri(name.append(7).to_uri()).key() == name.append(7).key()


def test_append_and_prefix():
    prefix = Name.from_uri('ndn:/example').append('ping')
    name = prefix.append(42)

    assert len(name) == 3
    assert name[-1] == b'42'
    assert name[:2] == prefix
    assert prefix.is_prefix_of(name)
    assert not name.is_prefix_of(prefix)
    assert str(name) == 'ndn:/example/ping/42'


def test_keys_are_distinct():
    # Простая склейка компонент дала бы одинаковые ключи
    assert Name([b'ab', b'c']).key() != Name([b'a', b'bc']).key()
    assert Name.from_uri('/a/b').key() == Name.from_uri('ndnx:/a/b').key()
