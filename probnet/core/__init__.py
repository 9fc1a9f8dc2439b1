"""Core module for ProbNet.

This module contains the data model of a discrete Bayesian network:
variables with enumerated domains, events (single assignments) and
conditions (sorted sets of events) used to index probability tables.
"""

from .errors import QueryError, ValidationError
from .types import Condition, Event, Value, Variable, all_conditions

__all__ = [
    "Condition",
    "Event",
    "QueryError",
    "ValidationError",
    "Value",
    "Variable",
    "all_conditions",
]
