import threading


class WakeSignal:
    """Single-slot coalescing wake-up for the worker.

    send() never blocks; sending while a wake is already pending is a
    no-op. wait() consumes the pending wake or gives up after the timeout.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._pending = False

    def send(self) -> None:
        with self._condition:
            if self._pending:
                return
            self._pending = True
            self._condition.notify()

    def wait(self, timeout: float) -> bool:
        """Block until a wake is consumed (True) or the timeout elapses (False)."""
        with self._condition:
            if not self._pending:
                self._condition.wait(timeout)
            if not self._pending:
                return False
            self._pending = False
            return True

    @property
    def is_pending(self) -> bool:
        with self._condition:
            return self._pending
