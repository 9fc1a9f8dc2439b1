"""Wall-clock timing of repeated queries."""

from __future__ import annotations

import time
from dataclasses import dataclass

from probnet.inference.base import Inference


@dataclass(frozen=True)
class TimingResult:
    """Outcome of :func:`time_queries`."""

    query: str
    iterations: int
    total_ms: float
    answer: str

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.iterations


def time_queries(engine: Inference, query: str, iterations: int) -> TimingResult:
    """Ask *engine* the same *query* *iterations* times and time it.

    Args:
        engine: Any inference engine.
        query: Query in the engine grammar, e.g. ``"M=T | S=T, C=F"``.
        iterations: Number of repetitions (must be positive).

    Returns:
        A :class:`TimingResult` holding the last answer.
    """
    if iterations <= 0:
        raise ValueError(f"iterations must be positive, got {iterations}")

    answer = ""
    start = time.perf_counter()
    for _ in range(iterations):
        answer = engine.ask(query)
    total_ms = (time.perf_counter() - start) * 1000.0
    return TimingResult(query, iterations, total_ms, answer)
