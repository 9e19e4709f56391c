"""
Phase timers for the evolution loop.
"""

import time
from dataclasses import dataclass


class Timer:
    """
    Accumulating stopwatch.

    `time` is the total over every start/stop cycle, `interim_time` the
    duration of the most recent cycle.
    """

    def __init__(self, label: str = "Timer"):
        self.label = label
        self._start = 0.0
        self._running = False
        self._total = 0.0
        self._interim = 0.0

    def start(self) -> "Timer":
        self._start = time.perf_counter()
        self._running = True
        return self

    def stop(self) -> "Timer":
        if self._running:
            self._interim = time.perf_counter() - self._start
            self._total += self._interim
            self._running = False
        return self

    def reset(self) -> "Timer":
        self._running = False
        self._total = 0.0
        self._interim = 0.0
        return self

    @property
    def time(self) -> float:
        return self._total

    @property
    def interim_time(self) -> float:
        return self._interim

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.stop()
        return False

    def __repr__(self) -> str:
        return f"{self.label}: {self._total:.9f} s"


@dataclass(frozen=True)
class TimeStatistics:
    """Durations (seconds) of the engine phases."""

    execution: float = 0.0
    selection: float = 0.0
    alter: float = 0.0
    combine: float = 0.0
    evaluation: float = 0.0
    statistics: float = 0.0

    def __str__(self) -> str:
        return "\n".join([
            "+---------------------------------------------------------------------------+",
            "|  Time statistics                                                          |",
            "+---------------------------------------------------------------------------+",
            f"|             Select time: {self.selection:>40.9f} s |",
            f"|              Alter time: {self.alter:>40.9f} s |",
            f"|   Combine survivors and offspring time: {self.combine:>25.9f} s |",
            f"|           Evaluate time: {self.evaluation:>40.9f} s |",
            f"|          Statistic time: {self.statistics:>40.9f} s |",
            f"|         Execution time: {self.execution:>41.9f} s |",
            "+---------------------------------------------------------------------------+",
        ])
