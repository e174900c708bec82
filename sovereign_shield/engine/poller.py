"""Fixed-cadence polling loop."""

from __future__ import annotations

import logging
import threading

from .service import ShieldEngine

logger = logging.getLogger(__name__)


DEFAULT_INTERVAL_SECONDS = 5.0


class ShieldPoller:
    """Runs ``ShieldEngine.run_cycle`` every ``interval`` seconds until stopped.

    Cycles do not overlap within one poller. A cycle that raises is logged and
    the next one still runs.
    """

    def __init__(self, engine: ShieldEngine, interval: float = DEFAULT_INTERVAL_SECONDS):
        self.engine = engine
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.cycles = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run(self, max_cycles: int | None = None) -> None:
        """Poll in the calling thread."""
        while not self._stop.is_set():
            try:
                self.engine.run_cycle()
            except Exception:
                logger.exception("Evaluation cycle failed")
            self.cycles += 1
            if max_cycles is not None and self.cycles >= max_cycles:
                break
            if self._stop.wait(self.interval):
                break

    def start(self) -> threading.Thread:
        """Poll in a daemon thread."""
        if self.running:
            return self._thread
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="shield-poller", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
