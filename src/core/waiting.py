"""Deadline-bounded waiting on a lock-guarded predicate.

Blocking cache reads park here with the cache lock released; mutators wake
every waiter after committing so each one can re-check its own predicate.
"""

from __future__ import annotations

import threading
import time
from typing import Callable


class WaitCoordinator:
    def __init__(self, lock: threading.Lock) -> None:
        self._cond = threading.Condition(lock)

    def notify_all(self) -> None:
        # Caller must hold the lock
        self._cond.notify_all()

    def wait_until(self, predicate: Callable[[], bool], timeout_ms: int) -> bool:
        """Wait until `predicate()` holds or `timeout_ms` elapses.

        Must be called with the lock held; the lock is held again on return.
        Wakes can be spurious or caused by unrelated mutations, so the
        predicate is re-checked after every one.
        """
        # Monotonic deadline so wall-clock changes cannot stretch a wait
        deadline = time.monotonic() + max(0, int(timeout_ms)) / 1000.0

        while not predicate():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            self._cond.wait(remaining)

        return True
