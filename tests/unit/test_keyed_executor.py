"""
Unit tests for KeyedSerialExecutor.
"""

import threading
import time

import pytest

from storefront.utils.keyed_executor import KeyedSerialExecutor


@pytest.fixture
def pool():
    executor = KeyedSerialExecutor(max_workers=4)
    yield executor
    executor.shutdown()


def test_same_key_runs_in_submission_order(pool):
    order = []

    def task(n):
        time.sleep(0.01 * (5 - n))
        order.append(n)
        return n

    futures = [pool.submit("p1", task, n) for n in range(5)]

    assert [f.result(timeout=5) for f in futures] == [0, 1, 2, 3, 4]
    assert order == [0, 1, 2, 3, 4]


def test_different_keys_do_not_block_each_other(pool):
    gate = threading.Event()
    blocked = pool.submit("p1", gate.wait, 5)

    other = pool.submit("p2", lambda: "done")

    assert other.result(timeout=5) == "done"
    assert not blocked.done()
    gate.set()
    assert blocked.result(timeout=5) is True


def test_exception_is_delivered_through_future_and_queue_continues(pool):
    def boom():
        raise RuntimeError("boom")

    failed = pool.submit("p1", boom)
    after = pool.submit("p1", lambda: 42)

    with pytest.raises(RuntimeError, match="boom"):
        failed.result(timeout=5)
    assert after.result(timeout=5) == 42


def test_queue_is_dropped_once_drained(pool):
    pool.submit("p1", lambda: None).result(timeout=5)

    deadline = time.monotonic() + 5
    while pool.pending_keys() and time.monotonic() < deadline:
        time.sleep(0.01)

    assert pool.pending_keys() == []


def test_barrier_waits_for_every_queued_key(pool):
    gate = threading.Event()
    order = []

    def slow(name):
        gate.wait(5)
        order.append(name)

    pool.submit("p1", slow, "p1")
    pool.submit("p2", slow, "p2")
    barrier = pool.submit_barrier("__all__", order.append, "clear")

    time.sleep(0.05)
    assert not barrier.done()
    gate.set()
    barrier.result(timeout=5)

    assert sorted(order[:2]) == ["p1", "p2"]
    assert order[2] == "clear"


def test_later_submits_wait_behind_barrier(pool):
    gate = threading.Event()
    order = []

    def slow_clear():
        gate.wait(5)
        order.append("clear")

    barrier = pool.submit_barrier("__all__", slow_clear)
    after = pool.submit("p1", order.append, "p1")
    other = pool.submit_barrier("__fetch__", order.append, "fetch")

    time.sleep(0.05)
    assert not after.done() and not other.done()
    gate.set()
    other.result(timeout=5)
    after.result(timeout=5)

    assert order == ["clear", "p1", "fetch"]
    assert barrier.done()


def test_failed_barrier_still_releases_followers(pool):
    def boom():
        raise RuntimeError("clear failed")

    barrier = pool.submit_barrier("__all__", boom)
    after = pool.submit("p1", lambda: "ran")

    assert after.result(timeout=5) == "ran"
    with pytest.raises(RuntimeError):
        barrier.result(timeout=5)
