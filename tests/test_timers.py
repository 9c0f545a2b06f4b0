from ftl_backend.slider import ManualScheduler, TimerHandle, ThreadingScheduler
import threading


def test_manual_scheduler_fires_in_deadline_order():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(2.0, lambda: fired.append('late'))
    scheduler.call_later(1.0, lambda: fired.append('early'))
    scheduler.advance(1.5)
    assert fired == ['early']
    assert scheduler.now == 1.5
    scheduler.advance(0.5)
    assert fired == ['early', 'late']
    assert scheduler.pending == 0


def test_cancelled_timer_never_fires():
    scheduler = ManualScheduler()
    fired = []
    handle = scheduler.call_later(1.0, lambda: fired.append(True))
    handle.cancel()
    scheduler.advance(5.0)
    assert fired == []
    assert handle.cancelled
    assert not handle.active


def test_cancel_after_fire_is_noop():
    scheduler = ManualScheduler()
    handle = scheduler.call_later(1.0, lambda: None)
    scheduler.advance(1.0)
    handle.cancel()
    assert not handle.cancelled
    assert not handle.active


def test_handle_runs_cancel_callback_once():
    calls = []
    handle = TimerHandle(lambda: calls.append(1))
    handle.cancel()
    handle.cancel()
    assert calls == [1]


def test_threading_scheduler_fires_and_cancels():
    scheduler = ThreadingScheduler()
    fired = threading.Event()
    scheduler.call_later(0.01, fired.set)
    assert fired.wait(2.0)

    never = threading.Event()
    handle = scheduler.call_later(0.2, never.set)
    handle.cancel()
    assert not never.wait(0.4)
