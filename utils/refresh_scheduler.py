"""Periodic re-issue of the active filter query."""

import logging
import threading
import time as time_mod
from collections.abc import Callable
from typing import Any

from utils.config_utils import DEFAULT_REQUEST_INTERVAL_MS

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Fire ``action`` every ``interval_ms`` for the lifetime of the session.

    The scheduler only re-runs the action (normally
    ``FilterCascadeController.apply_filter``); it never repopulates the
    catalog, so corpora or topics that appear on the server later are not
    picked up by the timer alone.

    Two ways to drive it:

    - ``run_pending()`` from a cooperative loop, e.g. a Streamlit fragment
      with ``run_every``;
    - ``start()``/``stop()`` for a daemon thread.
    """

    def __init__(
        self,
        action: Callable[[], Any],
        interval_ms: int = DEFAULT_REQUEST_INTERVAL_MS,
        *,
        clock: Callable[[], float] = time_mod.monotonic,
    ) -> None:
        if int(interval_ms) <= 0:
            raise ValueError("interval_ms must be positive")
        self.action = action
        self.interval_ms = int(interval_ms)
        self._clock = clock
        self._next_due = clock() + self.interval_s
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.fire_count = 0

    @property
    def interval_s(self) -> float:
        return self.interval_ms / 1000.0

    def seconds_until_due(self) -> float:
        return max(0.0, self._next_due - self._clock())

    def due(self) -> bool:
        return self._clock() >= self._next_due

    def fire(self) -> bool:
        """Run the action now and schedule the next run one interval later.

        Returns the action's outcome; ``False`` when it raised.
        """
        self._next_due = self._clock() + self.interval_s
        self.fire_count += 1
        try:
            return bool(self.action())
        except Exception:
            logger.exception("Scheduled filter refresh failed")
            return False

    def run_pending(self) -> bool | None:
        """Fire when due; ``None`` when nothing ran, otherwise the outcome."""
        if not self.due():
            return None
        return self.fire()

    # ------------------------------------------------------------------
    # Background thread
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._next_due = self._clock() + self.interval_s
        self._thread = threading.Thread(target=self._loop, name="rre-refresh", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
        self._thread = None

    def _loop(self) -> None:
        while not self._stop.wait(self.seconds_until_due()):
            self.fire()
