# ftl_backend/slider/timers.py
"""
One-shot cancellable timers.

A :class:`Scheduler` arms a callback with :meth:`Scheduler.call_later` and hands
back a :class:`TimerHandle`. Once :meth:`TimerHandle.cancel` returns, the
callback will not start.
"""
import heapq
import itertools
import threading


class TimerHandle:
    def __init__(self, cancel_fn=None):
        self._cancel_fn = cancel_fn
        self._cancelled = False
        self._fired = False

    @property
    def cancelled(self):
        return self._cancelled

    @property
    def active(self):
        """Armed and neither cancelled nor fired yet."""
        return not self._cancelled and not self._fired

    def cancel(self):
        if self._cancelled or self._fired:
            return
        self._cancelled = True
        if self._cancel_fn is not None:
            self._cancel_fn()


class Scheduler:
    def call_later(self, delay_seconds, callback):
        """Runs `callback()` once after `delay_seconds`; returns a TimerHandle."""
        raise NotImplementedError


class ThreadingScheduler(Scheduler):
    """Backs each timer with a daemon `threading.Timer`."""

    def call_later(self, delay_seconds, callback):
        handle = TimerHandle()

        def run():
            if handle.cancelled:
                return
            handle._fired = True
            callback()

        timer = threading.Timer(delay_seconds, run)
        timer.daemon = True
        handle._cancel_fn = timer.cancel
        timer.start()
        return handle


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler driven by :meth:`advance`. Time only moves when the
    caller says so, which makes timer behaviour testable without sleeping.
    """

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._sequence = itertools.count()

    def call_later(self, delay_seconds, callback):
        handle = TimerHandle()
        heapq.heappush(self._queue, (self.now + delay_seconds, next(self._sequence), handle, callback))
        return handle

    @property
    def pending(self):
        """Number of armed timers that have neither fired nor been cancelled."""
        return sum(1 for _, _, handle, _ in self._queue if handle.active)

    def advance(self, seconds):
        """Moves the clock forward, firing due timers in deadline order."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            deadline, _, handle, callback = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self.now = deadline
            handle._fired = True
            callback()
        self.now = target
