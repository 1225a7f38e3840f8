import pytest

from pyping.core import ManualClock, Scheduler, SchedulingInPastError


# ============================================================================
# Модель Echo
# -----------
# Обработчик планирует сам себя через равные промежутки времени и считает
# вызовы, пока не наберет max_served.
# ============================================================================
def handle_timeout(scheduler: Scheduler, ctx: dict):
    ctx['served'].append(scheduler.now)
    if len(ctx['served']) < ctx['max_served']:
        scheduler.schedule(ctx['interval'], handle_timeout, args=(ctx,))


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock=clock, sleep=clock.sleep)


def test_run_fires_only_due_events(scheduler, clock):
    calls = []
    scheduler.schedule(1.0, lambda s, x: calls.append(x), args=('late',))
    scheduler.call(lambda s, x: calls.append(x), args=('now',))

    assert scheduler.run() == pytest.approx(1.0)
    assert calls == ['now']

    clock.advance(1.0)
    assert scheduler.run() is None
    assert calls == ['now', 'late']


def test_periodic_handler(scheduler):
    ctx = {'served': [], 'max_served': 5, 'interval': 0.5}
    scheduler.call(handle_timeout, args=(ctx,))

    while not scheduler.empty:
        scheduler.run()
        scheduler.wait(10.0)

    assert ctx['served'] == pytest.approx([0.0, 0.5, 1.0, 1.5, 2.0])


def test_wait_is_bounded_by_timeout(scheduler, clock):
    scheduler.schedule(5.0, lambda s: None)
    scheduler.wait(0.25)
    assert clock() == pytest.approx(0.25)

    scheduler.wait(100.0)
    assert clock() == pytest.approx(5.0)


def test_cancel(scheduler, clock):
    calls = []
    event_id = scheduler.schedule(1.0, lambda s: calls.append(1))

    assert scheduler.cancel(event_id) == 1
    assert scheduler.cancel(event_id) == 0

    clock.advance(2.0)
    scheduler.run()
    assert calls == []


def test_schedule_after_micros(scheduler, clock):
    calls = []
    scheduler.schedule_after_micros(250_000, lambda s: calls.append(s.now))
    clock.advance(0.2)
    scheduler.run()
    assert calls == []
    clock.advance(0.05)
    scheduler.run()
    assert calls == [pytest.approx(0.25)]


def test_scheduling_errors(scheduler):
    with pytest.raises(SchedulingInPastError):
        scheduler.schedule(-1, lambda s: None)
    with pytest.raises(TypeError):
        scheduler.schedule(1, None)
