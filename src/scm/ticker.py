"""Console ticker shown while diffs are generated."""

import threading

from common.logger import progress


class PeriodTicker:
    """Print a period every ``interval`` seconds on a background thread.

    Example:
        >>> with PeriodTicker():
        ...     generate_diffs()
    """

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="period-ticker", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Signal the ticker and wait for it to finish its current tick."""
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join()
        self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            progress(".", end="")
        progress("")

    def __enter__(self) -> "PeriodTicker":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
