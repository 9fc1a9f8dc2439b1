"""Common interface of ProbNet inference engines."""

from __future__ import annotations

from abc import ABC, abstractmethod

from probnet.core.types import Condition, Event
from probnet.inference.query import parse_query
from probnet.networks.dag import BayesianNetwork


def format_probability(p: float) -> str:
    """Format *p* with exactly six digits after the decimal point."""
    return f"{p:.6f}"


class Inference(ABC):
    """Abstract base class for inference engines.

    Subclasses implement :meth:`probability`; :meth:`ask` parses a query
    string and formats the answer, e.g. ``"0.410000"``.
    """

    def __init__(self, network: BayesianNetwork) -> None:
        self.network = network

    @abstractmethod
    def probability(self, target: Event, evidence: Condition) -> float:
        """Return P(target | evidence)."""
        pass

    def ask(self, query: str) -> str:
        """Answer a query like ``"A = a1 | B = b2, C = c1"``."""
        target, evidence = parse_query(self.network, query)
        return format_probability(self.probability(target, evidence))
