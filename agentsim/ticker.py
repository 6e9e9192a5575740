"""A periodic notifier that drives simulation ticks."""

from __future__ import annotations

import logging
import threading
from typing import Callable

log = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 100

Listener = Callable[[], None]


class Subject:
    """Calls its subscribers every ``interval`` milliseconds while running."""

    def __init__(self, interval: int = DEFAULT_INTERVAL_MS):
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._interval = DEFAULT_INTERVAL_MS
        self.interval = interval

    @property
    def interval(self) -> int:
        """Time between ticks in milliseconds."""
        return self._interval

    @interval.setter
    def interval(self, msec: int) -> None:
        msec = int(msec)
        if msec < 0:
            raise ValueError(f"interval must not be negative: {msec}")
        self._interval = msec
        log.debug("subject interval set to %d ms", msec)

    def subscribe(self, callback: Listener) -> Listener:
        """Register ``callback`` to be called on every tick; returns it unchanged."""
        with self._lock:
            self._listeners.append(callback)
        return callback

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def notify(self) -> None:
        """Call every subscriber once, in the order they subscribed."""
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            callback()

    def start(self, interval: int = 0) -> None:
        """Start ticking; a positive ``interval`` replaces the current one."""
        if interval > 0:
            self.interval = interval
        if self.is_running():
            return
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run, args=(stop_event,), name="subject-ticker", daemon=True
        )
        self._stop_event = stop_event
        self._thread = thread
        thread.start()
        log.debug("subject started with interval %d ms", self._interval)

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval / 1000):
            try:
                self.notify()
            except Exception:
                log.exception("tick listener failed")

    def stop(self) -> None:
        """Stop ticking; does nothing if not running."""
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        self._thread = None
        if thread is not threading.current_thread():
            thread.join()
        log.debug("subject stopped")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "Subject":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()