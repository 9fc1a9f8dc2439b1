"""Timing utilities and benchmarks for ProbNet engines."""

from probnet.benchmarks.timing import TimingResult, time_queries

__all__ = ["TimingResult", "time_queries"]
