"""ProbNet: probabilistic inference over discrete Bayesian networks.

This package provides a discrete Bayesian network built from textual
node descriptions, exact inference by variable elimination and
approximate inference by Gibbs sampling.  Both engines answer queries
such as ``"Rain=T | Umbrella=T"`` through the same ``ask`` method.
"""

import logging

try:
    from probnet._version import version as __version__
except ImportError:
    __version__ = "0.1.0"

from .core.errors import QueryError, ValidationError
from .core.types import Condition, Event, Value, Variable
from .networks.dag import BayesianNetwork, BuildResult
from .inference import (
    GibbsSampler,
    Inference,
    VariableElimination,
    make_engine,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BayesianNetwork",
    "BuildResult",
    "Condition",
    "Event",
    "GibbsSampler",
    "Inference",
    "QueryError",
    "ValidationError",
    "Value",
    "Variable",
    "VariableElimination",
    "make_engine",
]
