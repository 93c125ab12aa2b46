"""60 Hz timer thread for the delay and sound registers."""

from __future__ import annotations

import threading
import time
from typing import Callable

from pychip8.utils import debug_log

TIMER_FREQUENCY = 60


class TimerThread:
    """Calls ``tick`` at a fixed rate on a daemon thread until stopped."""

    def __init__(self, tick: Callable[[], None], frequency: float = TIMER_FREQUENCY) -> None:
        if frequency <= 0:
            raise ValueError("frequency must be positive")
        self._tick = tick
        self._period = 1.0 / frequency
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.tick_count = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name="chip8-timer", daemon=True)
        self._thread.start()
        debug_log("timer", "timer thread started period=%.4fs", self._period)

    def stop(self) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout=0.5)
        self._thread = None
        debug_log("timer", "timer thread stopped after %d ticks", self.tick_count)

    def _run_loop(self) -> None:
        deadline = time.monotonic()
        while not self._stop_event.is_set():
            self._tick()
            self.tick_count += 1
            deadline += self._period
            remaining = deadline - time.monotonic()
            if remaining > 0:
                self._stop_event.wait(remaining)
            else:
                # fell behind; resynchronise instead of bursting
                deadline = time.monotonic()
