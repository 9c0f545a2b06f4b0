# ftl_backend/slider/carousel.py
"""
Image carousel state machine behind the home page hero slider.

The carousel advances on a recurring timer while it is playing and not
hovered. Every change to ``is_playing``, ``is_hovered``, the number of images
or the interval cancels the pending timer before arming a new one, so at most
one timer is ever pending. :meth:`Carousel.dispose` cancels it for good.
"""
import threading

from .timers import ThreadingScheduler

DEFAULT_INTERVAL_MS = 5000


class Carousel:
    def __init__(self, images, interval_ms=DEFAULT_INTERVAL_MS, scheduler=None, autoplay=True):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._lock = threading.RLock()
        self._scheduler = scheduler or ThreadingScheduler()
        self._images = list(images)
        self._interval_ms = interval_ms
        self._current_index = 0
        self._is_playing = autoplay
        self._is_hovered = False
        self._timer = None
        self._timer_token = None
        self._disposed = False
        self._listeners = []
        self._rearm()

    # --- State ---
    @property
    def images(self):
        return list(self._images)

    @property
    def slide_count(self):
        return len(self._images)

    @property
    def current_index(self):
        return self._current_index

    @property
    def current_image(self):
        if 0 <= self._current_index < len(self._images):
            return self._images[self._current_index]
        return None

    @property
    def is_playing(self):
        return self._is_playing

    @property
    def is_hovered(self):
        return self._is_hovered

    @property
    def interval_ms(self):
        return self._interval_ms

    @property
    def disposed(self):
        return self._disposed

    @property
    def timer_armed(self):
        return self._timer is not None and self._timer.active

    @property
    def progress_active(self):
        """Whether the progress bar runs: playing and not hovered."""
        return self._is_playing and not self._is_hovered

    @property
    def slide_counter(self):
        if not self._images:
            return "0 / 0"
        return f"{self._current_index + 1} / {len(self._images)}"

    def subscribe(self, listener):
        """Calls `listener(index, image)` after every index change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    # --- Navigation ---
    def go_to_slide(self, index):
        """Jumps to `index` as given; the caller is responsible for passing a valid index."""
        with self._lock:
            if not self._images:
                return
            self._set_index(index)

    def go_to_next(self):
        with self._lock:
            if not self._images:
                return
            self._set_index((self._current_index + 1) % len(self._images))

    def go_to_previous(self):
        with self._lock:
            if not self._images:
                return
            self._set_index((self._current_index - 1) % len(self._images))

    # --- Playback ---
    def toggle_play_pause(self):
        with self._lock:
            self._set_playing(not self._is_playing)

    def play(self):
        with self._lock:
            self._set_playing(True)

    def pause(self):
        with self._lock:
            self._set_playing(False)

    def hover_enter(self):
        with self._lock:
            self._set_hovered(True)

    def hover_leave(self):
        with self._lock:
            self._set_hovered(False)

    def set_images(self, images):
        with self._lock:
            images = list(images)
            count_changed = len(images) != len(self._images)
            self._images = images
            if self._current_index >= len(images):
                self._set_index(0)
            if count_changed:
                self._rearm()

    def set_interval(self, interval_ms):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        with self._lock:
            if interval_ms == self._interval_ms:
                return
            self._interval_ms = interval_ms
            self._rearm()

    def dispose(self):
        with self._lock:
            self._disposed = True
            self._cancel_timer()
            self._listeners.clear()

    # --- Internals ---
    def _set_index(self, index):
        if index == self._current_index:
            return
        self._current_index = index
        image = self.current_image
        for listener in list(self._listeners):
            listener(index, image)

    def _set_playing(self, is_playing):
        if is_playing == self._is_playing:
            return
        self._is_playing = is_playing
        self._rearm()

    def _set_hovered(self, is_hovered):
        if is_hovered == self._is_hovered:
            return
        self._is_hovered = is_hovered
        self._rearm()

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._timer_token = None

    def _rearm(self):
        self._cancel_timer()
        if self._disposed or not self._images or not self.progress_active:
            return
        token = object()
        self._timer_token = token
        self._timer = self._scheduler.call_later(self._interval_ms / 1000.0, lambda: self._on_tick(token))

    def _on_tick(self, token):
        with self._lock:
            # A timer that was replaced while its callback was waiting for the lock must not advance.
            if token is not self._timer_token or self._disposed:
                return
            try:
                if self.progress_active and self._images:
                    self._set_index((self._current_index + 1) % len(self._images))
            finally:
                # A failing listener must not stop autoplay.
                self._rearm()
