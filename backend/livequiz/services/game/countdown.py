import threading
import time
from typing import Callable, Optional


def _spawn_thread(fn, *args):
    worker = threading.Thread(target=fn, args=args, daemon=True)
    worker.start()
    return worker


class Countdown:
    """Cancellable one-second ticker that signals expiry exactly once.

    Each ``start`` gets a new generation number. The worker re-checks its
    generation after every sleep, so a cancelled or superseded countdown
    stops before its next tick and never reaches expiry.

    ``spawn`` and ``sleep`` are injectable so the app can run workers as
    Socket.IO background tasks and tests can drive them by hand.
    """

    def __init__(
        self,
        spawn: Callable = _spawn_thread,
        sleep: Callable[[float], None] = time.sleep,
        interval: float = 1.0,
    ) -> None:
        self._spawn = spawn
        self._sleep = sleep
        self.interval = interval
        self._lock = threading.Lock()
        self._counter = 0
        self._active: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._active is not None

    def is_current(self, generation: int) -> bool:
        return self._active == generation

    def start(
        self,
        duration: int,
        on_tick: Callable[[int], None],
        on_expire: Callable[[], None],
    ) -> int:
        with self._lock:
            self._counter += 1
            generation = self._counter
            self._active = generation
        self._spawn(self._run, generation, int(duration), on_tick, on_expire)
        return generation

    def cancel(self) -> None:
        with self._lock:
            self._active = None

    def _run(self, generation, duration, on_tick, on_expire):
        remaining = max(0, duration)
        while remaining > 0:
            self._sleep(self.interval)
            if not self.is_current(generation):
                return
            remaining -= 1
            on_tick(remaining)
        if self._claim_expiry(generation):
            on_expire()

    def _claim_expiry(self, generation: int) -> bool:
        with self._lock:
            if self._active != generation:
                return False
            self._active = None
            return True
