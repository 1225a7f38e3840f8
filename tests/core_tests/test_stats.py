import math

import pytest

from pyping.core import ManualClock, Statistics


@pytest.fixture
def clock():
    return ManualClock(100.0)


def test_empty_statistics(clock):
    stats = Statistics(prefix='ndn:/empty', clock=clock)
    summary = stats.summary()

    assert summary.loss == 0
    assert summary.rtt_avg is None
    assert stats.report() == '\n--- ndn:/empty ndnping statistics ---'


def test_loss_and_rtt(clock):
    stats = Statistics(prefix='ndn:/test', clock=clock)
    for _ in range(4):
        stats.record_sent()
    for rtt in (10.0, 20.0, 30.0):
        stats.record_received(rtt)
    clock.advance(2.5)

    summary = stats.summary()
    assert summary.sent == 4
    assert summary.received == 3
    assert summary.loss == pytest.approx(25.0)
    assert summary.elapsed_ms == 2500
    assert summary.rtt_min == 10.0
    assert summary.rtt_max == 30.0
    assert summary.rtt_avg == pytest.approx(20.0)
    assert summary.rtt_mdev == pytest.approx(math.sqrt(200 / 3))
    assert summary.rtt_min <= summary.rtt_avg <= summary.rtt_max


def test_report_format(clock):
    stats = Statistics(prefix='ndn:/test', clock=clock)
    stats.record_sent()
    stats.record_sent()
    stats.record_received(1.5)
    clock.advance(1.0)

    lines = stats.report().split('\n')
    assert lines == [
        '',
        '--- ndn:/test ndnping statistics ---',
        '2 Interests transmitted, 1 Data received, 50.0% packet loss, '
        'time 1000 ms',
        'rtt min/avg/max/mdev = 1.500/1.500/1.500/0.000 ms',
    ]


def test_report_is_idempotent(clock):
    stats = Statistics(prefix='ndn:/test', clock=clock)
    stats.record_sent()
    stats.record_received(0.1)
    stats.record_received(0.1)
    stats.record_received(0.1)

    first = stats.report()
    assert stats.report() == first
    assert stats.received == 3
    summary = stats.summary()
    assert summary.rtt_min <= summary.rtt_avg <= summary.rtt_max


def test_no_responses_report(clock):
    stats = Statistics(prefix='ndn:/test', clock=clock)
    stats.record_sent()

    report = stats.report()
    assert '1 Interests transmitted, 0 Data received, 100.0% packet loss' in report
    assert 'rtt' not in report
