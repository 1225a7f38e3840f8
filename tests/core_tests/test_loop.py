import os
import signal

from pyping.core import ExitReason, StopSignal


def test_stop_signal_from_sigint():
    stop = StopSignal()
    previous = signal.getsignal(signal.SIGINT)
    with stop.installed(signals=(signal.SIGINT,)):
        os.kill(os.getpid(), signal.SIGINT)
    assert stop.is_set
    assert stop.reason == ExitReason.INTERRUPTED
    assert stop.message == 'SIGINT'
    assert signal.getsignal(signal.SIGINT) is previous


def test_first_stop_wins():
    stop = StopSignal()
    stop.stop('first')
    stop.stop('second', ExitReason.INTERRUPTED)
    assert stop.message == 'first'
    assert stop.reason == ExitReason.STOPPED
