# storefront/utils/keyed_executor.py
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, List

from storefront.utils.settings import RECONCILER_WORKERS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class KeyedSerialExecutor:
    """
    Pula watkow z kolejka per klucz.

    - submit(key): zadania z tym samym kluczem (np. productId) ida po kolei,
      w kolejnosci submit. Rozne klucze ida rownolegle.
    - submit_barrier(key): czeka na wszystko co juz jest w kolejkach,
      a wszystko zgloszone pozniej czeka na nia (clear, fetch calej listy).
    Zadanie trafia do puli dopiero jak jego poprzednicy sie skoncza,
    wiec nic nie blokuje watkow czekaniem.
    """

    def __init__(self, max_workers: int | None = None):
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers or RECONCILER_WORKERS,
            thread_name_prefix="reconciler",
        )
        self._lock = threading.Lock()
        # ostatnie zgloszone zadanie per klucz
        self._tails: Dict[str, Future] = {}
        self._barrier: Future | None = None

    def submit(self, key: str, fn: Callable[..., Any], *args, **kwargs) -> Future:
        future: Future = Future()
        with self._lock:
            deps = [self._tails.get(key), self._barrier]
            self._tails[key] = future
        self._schedule(key, future, [d for d in deps if d is not None], fn, args, kwargs)
        return future

    def submit_barrier(self, key: str, fn: Callable[..., Any], *args, **kwargs) -> Future:
        future: Future = Future()
        with self._lock:
            deps = list(self._tails.values())
            if self._barrier is not None:
                deps.append(self._barrier)
            self._tails[key] = future
            self._barrier = future
        self._schedule(key, future, deps, fn, args, kwargs)
        return future

    def pending_keys(self) -> list[str]:
        with self._lock:
            return list(self._tails)

    def _schedule(
        self,
        key: str,
        future: Future,
        deps: List[Future],
        fn: Callable[..., Any],
        args: tuple,
        kwargs: dict,
    ) -> None:
        if not deps:
            self._pool.submit(self._run, key, future, fn, args, kwargs)
            return

        remaining = [len(deps)]
        counter_lock = threading.Lock()

        def ready(_done: Future) -> None:
            with counter_lock:
                remaining[0] -= 1
                go = remaining[0] == 0
            if go:
                self._pool.submit(self._run, key, future, fn, args, kwargs)

        for dep in deps:
            dep.add_done_callback(ready)

    def _run(self, key: str, future: Future, fn, args, kwargs) -> None:
        try:
            if future.set_running_or_notify_cancel():
                try:
                    result = fn(*args, **kwargs)
                except Exception as e:
                    logger.error(f"Task for key {key} failed: {e}")
                    future.set_exception(e)
                else:
                    future.set_result(result)
        finally:
            with self._lock:
                if self._tails.get(key) is future:
                    del self._tails[key]
                if self._barrier is future:
                    self._barrier = None

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)
