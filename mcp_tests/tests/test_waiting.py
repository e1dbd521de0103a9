import threading

import core.waiting as waiting_mod
from core.waiting import WaitCoordinator


class FakeCondition:
    """Records wait timeouts; each wait advances the fake clock by 30ms."""

    def __init__(self, t, on_wait=None):
        self._t = t
        self._on_wait = on_wait
        self.waits = []

    def wait(self, timeout):
        self.waits.append(timeout)
        if self._on_wait:
            self._on_wait()
        self._t["now"] += 0.03

    def notify_all(self):
        pass


def _coordinator(monkeypatch, on_wait=None):
    t = {"now": 0.0}
    monkeypatch.setattr(waiting_mod.time, "monotonic", lambda: t["now"])
    w = WaitCoordinator(threading.Lock())
    cond = FakeCondition(t, on_wait)
    w._cond = cond
    return w, cond


def test_wait_until_satisfied_predicate_returns_without_waiting(monkeypatch):
    w, cond = _coordinator(monkeypatch)

    assert w.wait_until(lambda: True, 1000) is True
    assert cond.waits == []


def test_wait_until_rechecks_after_each_wake(monkeypatch):
    state = {"wakes": 0}

    def on_wait():
        state["wakes"] += 1

    w, cond = _coordinator(monkeypatch, on_wait)

    # Satisfied only on the third wake
    assert w.wait_until(lambda: state["wakes"] >= 3, 1000) is True
    assert len(cond.waits) == 3


def test_wait_until_times_out_with_shrinking_waits(monkeypatch):
    w, cond = _coordinator(monkeypatch)

    assert w.wait_until(lambda: False, 100) is False
    assert cond.waits
    assert cond.waits[0] == 0.1
    assert all(b < a for a, b in zip(cond.waits, cond.waits[1:]))


def test_wait_until_zero_timeout_checks_once(monkeypatch):
    w, cond = _coordinator(monkeypatch)

    assert w.wait_until(lambda: False, 0) is False
    assert cond.waits == []


def test_notify_all_wakes_real_waiter():
    lock = threading.Lock()
    w = WaitCoordinator(lock)
    state = {"ready": False}
    result = {}

    def waiter():
        with lock:
            result["ok"] = w.wait_until(lambda: state["ready"], 2000)

    t = threading.Thread(target=waiter)
    t.start()

    with lock:
        state["ready"] = True
        w.notify_all()
    t.join(timeout=3)

    assert result["ok"] is True
