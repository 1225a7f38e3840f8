import pytest

from pyping.core import ManualClock, PendingTable, PendingTableError


def test_add_lookup_remove():
    clock = ManualClock(10.0)
    table = PendingTable(clock=clock)

    table.add(b'key-1', 1)
    clock.advance(0.5)
    table.add(b'key-2', 2)

    assert table.size() == 2
    assert table.lookup(b'key-1').number == 1
    assert table.lookup(b'key-1').send_time == 10.0
    assert table.lookup(b'key-2').send_time == 10.5

    table.remove(b'key-1')
    assert table.size() == 1
    assert b'key-1' not in table


def test_duplicate_key_is_fatal():
    table = PendingTable()
    table.add(b'key', 1)
    with pytest.raises(PendingTableError):
        table.add(b'key', 2)
    assert table.lookup(b'key').number == 1


def test_missing_key_is_fatal():
    table = PendingTable()
    table.add(b'key', 1)
    table.remove(b'key')

    with pytest.raises(PendingTableError):
        table.lookup(b'key')
    with pytest.raises(PendingTableError):
        table.remove(b'key')
