"""
Scoped task submission.

The engine never creates threads itself. It opens a Concurrency scope over
a caller-supplied executor, submits zero-argument tasks, and the scope exit
blocks until every task has finished:

    with Concurrency(executor) as c:
        c.execute(select_survivors)
        c.execute_all(pt.evaluate for pt in population)
    # all tasks done here; the first failure is re-raised

Any concurrent.futures.Executor works (ThreadPoolExecutor, ...). The
SerialExecutor runs tasks inline, which keeps runs reproducible.
"""

import contextvars
import threading
from concurrent.futures import Executor, Future
from typing import Any, Callable, Iterable, List, Optional


class SerialExecutor(Executor):
    """Executor that runs every task immediately in the calling thread."""

    def __init__(self):
        self._shutdown = False
        self._lock = threading.Lock()

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        with self._lock:
            if self._shutdown:
                raise RuntimeError("cannot schedule new futures after shutdown")

        future: Future = Future()
        if not future.set_running_or_notify_cancel():
            return future
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)
        return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        with self._lock:
            self._shutdown = True

    def __repr__(self) -> str:
        return "SerialExecutor()"


class Concurrency:
    """
    Fan tasks out to an executor and join them on scope exit.

    Tasks run inside a copy of the submitting thread's context, so the
    random_registry scope active at submission time also applies inside the
    task, whichever worker thread runs it.
    """

    def __init__(self, executor: Optional[Executor] = None):
        self._executor = executor if executor is not None else SerialExecutor()
        self._futures: List[Future] = []

    def __enter__(self) -> "Concurrency":
        self._futures = []
        return self

    def execute(self, task: Callable[[], Any]) -> Future:
        context = contextvars.copy_context()
        future = self._executor.submit(context.run, task)
        self._futures.append(future)
        return future

    def execute_all(self, tasks: Iterable[Callable[[], Any]]) -> List[Future]:
        return [self.execute(task) for task in tasks]

    def join(self) -> None:
        """Wait for every submitted task; re-raise the first failure."""
        futures, self._futures = self._futures, []
        error: Optional[BaseException] = None
        for future in futures:
            exc = future.exception()
            if exc is not None and error is None:
                error = exc
        if error is not None:
            raise error

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            # Still wait for running tasks, but keep the original exception
            for future in self._futures:
                future.exception()
            self._futures = []
            return False
        self.join()
        return False
