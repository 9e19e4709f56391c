"""
Tests for the random registry and the concurrency facade.
"""

import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from ga_core import random_registry
from ga_core.concurrency import Concurrency, SerialExecutor


class TestRandomRegistry(unittest.TestCase):
    """Test generator lookup, scoping and seeding."""

    def tearDown(self):
        random_registry.reset()

    def test_scope_overrides_and_restores(self):
        """Test that nested scopes restore the outer generator on exit."""
        outer = np.random.default_rng(1)
        inner = np.random.default_rng(2)

        with random_registry.scope(outer):
            self.assertIs(random_registry.get_random(), outer)
            with random_registry.scope(inner):
                self.assertIs(random_registry.get_random(), inner)
            self.assertIs(random_registry.get_random(), outer)

        self.assertIsNot(random_registry.get_random(), outer)

    def test_integer_seed_is_reproducible(self):
        with random_registry.scope(7):
            a = random_registry.get_random().random(5)
        with random_registry.scope(7):
            b = random_registry.get_random().random(5)
        np.testing.assert_array_equal(a, b)

    def test_set_random_and_reset(self):
        """Test the process-wide generator and falling back to the default."""
        rng = random_registry.set_random(3)
        self.assertIs(random_registry.get_random(), rng)

        random_registry.reset()
        self.assertIsNot(random_registry.get_random(), rng)

    def test_scope_beats_global(self):
        random_registry.set_random(3)
        scoped = np.random.default_rng(4)
        with random_registry.scope(scoped):
            self.assertIs(random_registry.get_random(), scoped)

    def test_invalid_random_rejected(self):
        with self.assertRaises(TypeError):
            random_registry.set_random("seed")

    def test_with_random(self):
        value = random_registry.with_random(5, lambda rng: rng.integers(1000))
        self.assertEqual(value, np.random.default_rng(5).integers(1000))

    def test_threads_get_their_own_default(self):
        """Test that unscoped threads do not share the default generator."""
        seen = []
        thread = threading.Thread(target=lambda: seen.append(random_registry.get_random()))
        thread.start()
        thread.join()

        self.assertIsNot(seen[0], random_registry.get_random())


class TestConcurrency(unittest.TestCase):
    """Test task fan-out and join semantics."""

    def test_serial_executor_runs_inline(self):
        executor = SerialExecutor()
        future = executor.submit(lambda x: x * 2, 21)
        self.assertTrue(future.done())
        self.assertEqual(future.result(), 42)

    def test_serial_executor_rejects_after_shutdown(self):
        executor = SerialExecutor()
        executor.shutdown()
        with self.assertRaises(RuntimeError):
            executor.submit(lambda: None)

    def test_all_tasks_done_on_exit(self):
        """Test that leaving the scope waits for every task."""
        results = []
        lock = threading.Lock()

        def task(i):
            with lock:
                results.append(i)

        with ThreadPoolExecutor(max_workers=4) as executor:
            with Concurrency(executor) as c:
                c.execute_all(lambda i=i: task(i) for i in range(50))
            self.assertEqual(sorted(results), list(range(50)))

    def test_task_failure_reraised(self):
        """Test that a failing task is re-raised at scope exit."""
        def fail():
            raise ValueError("task failed")

        with self.assertRaises(ValueError):
            with Concurrency(SerialExecutor()) as c:
                c.execute(lambda: None)
                c.execute(fail)

    def test_body_exception_wins(self):
        """Test that an exception from the scope body is not replaced."""
        def fail():
            raise ValueError("task failed")

        with self.assertRaises(KeyError):
            with Concurrency(SerialExecutor()) as c:
                c.execute(fail)
                raise KeyError("body failed")

    def test_random_scope_reaches_worker_threads(self):
        """Test that tasks see the scope active at submission time."""
        rng = np.random.default_rng(11)
        with ThreadPoolExecutor(max_workers=2) as executor:
            with random_registry.scope(rng):
                with Concurrency(executor) as c:
                    futures = c.execute_all(random_registry.get_random for _ in range(4))

        for future in futures:
            self.assertIs(future.result(), rng)


if __name__ == '__main__':
    unittest.main()
