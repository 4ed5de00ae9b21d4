"""Worker pools used by management clients to run blocking SDK calls."""

from __future__ import annotations

import asyncio
import itertools
import queue
import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Any

import structlog

log = structlog.get_logger()

DEFAULT_KEEP_ALIVE_SECONDS = 60.0

_pool_ids = itertools.count(1)


@dataclass
class _WorkItem:
    future: Future[Any]
    fn: Callable[..., Any]
    args: tuple[Any, ...]
    kwargs: dict[str, Any]

    def run(self) -> None:
        if not self.future.set_running_or_notify_cancel():
            return
        try:
            result = self.fn(*self.args, **self.kwargs)
        except BaseException as exc:
            self.future.set_exception(exc)
        else:
            self.future.set_result(result)


class CachedThreadPool(Executor):
    """Elastic thread pool: reuses idle workers, grows on demand, reclaims idle threads.

    A submitted task goes to an idle worker when one is waiting; otherwise a
    new worker thread is started, so the pool has no upper bound. A worker
    that stays idle for ``keep_alive`` seconds exits.
    """

    def __init__(
        self,
        keep_alive: float = DEFAULT_KEEP_ALIVE_SECONDS,
        thread_name_prefix: str | None = None,
    ) -> None:
        if keep_alive <= 0:
            msg = f"keep_alive must be positive, got {keep_alive!r}"
            raise ValueError(msg)
        self._keep_alive = keep_alive
        self._thread_name_prefix = thread_name_prefix or f"compute-mgmt-pool-{next(_pool_ids)}"
        self._work_queue: queue.Queue[_WorkItem | None] = queue.Queue()
        self._threads: set[threading.Thread] = set()
        # Workers waiting on the queue that no queued item has claimed yet.
        self._idle = 0
        self._shutdown = False
        self._lock = threading.Lock()
        self._thread_counter = itertools.count()

    @property
    def worker_count(self) -> int:
        with self._lock:
            return len(self._threads)

    @property
    def idle_count(self) -> int:
        with self._lock:
            return self._idle

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future[Any]:
        with self._lock:
            if self._shutdown:
                msg = "cannot schedule new futures after shutdown"
                raise RuntimeError(msg)
            future: Future[Any] = Future()
            self._work_queue.put(_WorkItem(future, fn, args, kwargs))
            if self._idle > 0:
                self._idle -= 1
            else:
                self._start_worker()
            return future

    def _start_worker(self) -> None:
        name = f"{self._thread_name_prefix}-{next(self._thread_counter)}"
        thread = threading.Thread(target=self._worker, name=name, daemon=True)
        self._threads.add(thread)
        thread.start()

    def _worker(self) -> None:
        try:
            while True:
                try:
                    item = self._work_queue.get(timeout=self._keep_alive)
                except queue.Empty:
                    with self._lock:
                        # A submit may have claimed this worker between the timeout and the lock.
                        if not self._work_queue.empty():
                            continue
                        self._idle -= 1
                        log.debug("pool_worker_reclaimed", thread=threading.current_thread().name)
                        return
                if item is None:
                    return
                item.run()
                del item
                with self._lock:
                    if self._shutdown:
                        return
                    self._idle += 1
        finally:
            with self._lock:
                self._threads.discard(threading.current_thread())

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        with self._lock:
            if self._shutdown:
                threads = set(self._threads)
            else:
                self._shutdown = True
                if cancel_futures:
                    while True:
                        try:
                            item = self._work_queue.get_nowait()
                        except queue.Empty:
                            break
                        if item is not None:
                            item.future.cancel()
                threads = set(self._threads)
                for _ in threads:
                    self._work_queue.put(None)
                self._idle = 0
        if wait:
            for thread in threads:
                if thread is not threading.current_thread():
                    thread.join()


class ExecutionContext:
    """An executor plus the knowledge of who is responsible for shutting it down."""

    def __init__(self, executor: Executor, *, owned: bool) -> None:
        self._executor = executor
        self._owned = owned

    @classmethod
    def elastic(cls, keep_alive: float = DEFAULT_KEEP_ALIVE_SECONDS) -> ExecutionContext:
        """Create a context backed by a new CachedThreadPool owned by the context."""
        return cls(CachedThreadPool(keep_alive=keep_alive), owned=True)

    @classmethod
    def shared(cls, executor: Executor) -> ExecutionContext:
        """Wrap a caller-supplied executor; the caller keeps shutdown responsibility."""
        return cls(executor, owned=False)

    @property
    def executor(self) -> Executor:
        return self._executor

    @property
    def owned(self) -> bool:
        return self._owned

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future[Any]:
        return self._executor.submit(fn, *args, **kwargs)

    async def run(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
        """Run a blocking callable on the pool and await its result."""
        return await asyncio.wrap_future(self._executor.submit(fn, *args, **kwargs))

    def shutdown(self, wait: bool = True) -> None:
        """Shut down the executor if this context owns it; otherwise leave it running."""
        if not self._owned:
            log.debug("shared_executor_left_running", executor=type(self._executor).__name__)
            return
        self._executor.shutdown(wait=wait)
